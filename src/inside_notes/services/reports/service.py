from __future__ import annotations

import logging
from typing import Callable, Optional
from uuid import UUID

from src.inside_notes.domain.errors import CapabilityError
from src.inside_notes.domain.models.visit import Visit
from src.inside_notes.infra.storage.reports import ReportStorageBackend, report_storage_backend
from src.inside_notes.services.ai.backends import GenerativeTextBackend, get_generative_backend_from_env
from src.inside_notes.services.annotations.service import AnnotationService, annotation_service
from src.inside_notes.services.notifications.service import NotificationCenter, notification_center
from src.inside_notes.services.reports.notifier import ReportNotifier, get_report_notifier_from_env
from src.inside_notes.services.users.service import InMemoryUserService, user_service
from src.inside_notes.services.visits.service import VisitService, visit_service

logger = logging.getLogger(__name__)

MSG_REPORT_SENT = "Laudo gerado e enviado com sucesso!"
MSG_REPORT_FAILED = "Falha ao gerar o laudo. Verifique sua chave de API e tente novamente."


class ReportService:
    """Summarizes a visit's annotations into its final report ("laudo")."""

    def __init__(
        self,
        *,
        visits: Optional[VisitService] = None,
        annotations: Optional[AnnotationService] = None,
        users: Optional[InMemoryUserService] = None,
        storage: Optional[ReportStorageBackend] = None,
        notifications: Optional[NotificationCenter] = None,
        backend_factory: Callable[[], GenerativeTextBackend] = get_generative_backend_from_env,
        notifier_factory: Callable[[], ReportNotifier] = get_report_notifier_from_env,
    ) -> None:
        self._visits = visits or visit_service
        self._annotations = annotations or annotation_service
        self._users = users or user_service
        self._storage = storage or report_storage_backend
        self._notifications = notifications or notification_center
        self._backend_factory = backend_factory
        self._notifier_factory = notifier_factory

    async def generate(self, visit_id: UUID) -> Visit:
        """Generate, store and forward the report for a visit.

        The visit is only updated after the summary succeeds; on failure it is
        left untouched and a CapabilityError is raised.
        """

        visit = self._visits.get_visit(visit_id)
        annotations = self._annotations.list_for_visit(visit_id)
        technician = self._users.get_user(visit.user_id)
        technician_name = technician.name if technician else None

        try:
            summary = await self._backend_factory().summarize(visit, annotations, technician_name)
        except CapabilityError as exc:
            logger.warning("Report generation failed for visit %s: %s", visit_id, exc.message)
            self._notifications.error(MSG_REPORT_FAILED)
            raise CapabilityError(MSG_REPORT_FAILED, details={"visit_id": str(visit_id), "reason": exc.message}) from exc

        ref = self._storage.save_report(visit.id, summary)
        updated = self._visits.set_final_report(visit.id, ref)

        try:
            await self._notifier_factory().notify(updated, annotations, summary)
        except Exception:
            logger.exception("Report notifier failed for visit %s", visit_id)

        self._notifications.success(MSG_REPORT_SENT)
        return updated

    def read_report(self, visit_id: UUID) -> Optional[str]:
        visit = self._visits.get_visit(visit_id)
        if not visit.final_report_ref:
            return None
        return self._storage.read_report(visit.final_report_ref)


report_service = ReportService()
