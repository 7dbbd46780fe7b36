from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional
from uuid import UUID

from src.inside_notes.config import settings
from src.inside_notes.domain.errors import NotFoundError, ValidationError
from src.inside_notes.domain.models.annotation import AnnotationKind
from src.inside_notes.domain.models.prompt_template import PromptTemplate
from src.inside_notes.services.ai.backends import GenerativeTextBackend, get_generative_backend_from_env
from src.inside_notes.services.annotations.audio import AudioInput, stored_audio_input
from src.inside_notes.services.annotations.service import AnnotationService, annotation_service
from src.inside_notes.services.annotations.workflow import AnnotationWorkflow
from src.inside_notes.services.notifications.service import Notifier, notification_center
from src.inside_notes.services.templates.service import template_service
from src.inside_notes.services.visits.service import VisitService, visit_service

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Open annotation editors, keyed by workflow id.

    Editors the client stops touching for longer than the idle TTL are closed
    on the next ``open`` or ``get``, which releases any recording they hold.
    """

    def __init__(
        self,
        *,
        visits: Optional[VisitService] = None,
        annotations: Optional[AnnotationService] = None,
        templates: Optional[Callable[[], List[PromptTemplate]]] = None,
        backend_factory: Callable[[], GenerativeTextBackend] = get_generative_backend_from_env,
        audio_input: Optional[AudioInput] = None,
        notify: Optional[Notifier] = None,
        idle_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._visits = visits or visit_service
        self._annotations = annotations or annotation_service
        self._templates = templates or template_service.list_templates
        self._backend_factory = backend_factory
        self._audio_input = audio_input or stored_audio_input
        self._notify = notify or notification_center.publish
        self._idle_ttl = idle_ttl_seconds if idle_ttl_seconds is not None else settings.workflow_idle_ttl_seconds
        self._clock = clock
        self._workflows: Dict[UUID, AnnotationWorkflow] = {}
        self._last_used: Dict[UUID, float] = {}

    def open(
        self,
        *,
        visit_id: UUID,
        kind: AnnotationKind,
        annotation_id: Optional[UUID] = None,
    ) -> AnnotationWorkflow:
        self._evict_idle()
        visit = self._visits.get_visit(visit_id)
        existing = None
        if annotation_id is not None:
            existing = self._annotations.get_annotation(annotation_id)
            if existing.visit_id != visit.id:
                raise ValidationError(
                    "Annotation does not belong to this visit",
                    details={"annotation_id": str(annotation_id), "visit_id": str(visit_id)},
                )

        workflow = AnnotationWorkflow(
            visit_id=visit.id,
            kind=kind,
            existing=existing,
            backend=self._backend_factory(),
            templates=self._templates,
            annotations=self._annotations,
            audio_input=self._audio_input,
            notify=self._notify,
        )
        self._workflows[workflow.id] = workflow
        self._last_used[workflow.id] = self._clock()
        return workflow

    def get(self, workflow_id: UUID) -> AnnotationWorkflow:
        self._evict_idle()
        workflow = self._workflows.get(workflow_id)
        if workflow is None:
            raise NotFoundError("Workflow not found", details={"workflow_id": str(workflow_id)})
        self._last_used[workflow_id] = self._clock()
        return workflow

    def close(self, workflow_id: UUID) -> None:
        self.get(workflow_id)
        self._discard(workflow_id)

    def close_all(self) -> None:
        for workflow_id in list(self._workflows):
            self._discard(workflow_id)

    def _evict_idle(self) -> None:
        now = self._clock()
        stale = [wid for wid, used in self._last_used.items() if now - used >= self._idle_ttl]
        for workflow_id in stale:
            logger.info("Closing idle workflow %s", workflow_id)
            self._discard(workflow_id)

    def _discard(self, workflow_id: UUID) -> None:
        workflow = self._workflows.pop(workflow_id)
        self._last_used.pop(workflow_id, None)
        workflow.close()


workflow_registry = WorkflowRegistry()
