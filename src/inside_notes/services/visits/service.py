from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from src.inside_notes.domain.errors import ValidationError, VisitNotFoundError
from src.inside_notes.domain.models.visit import Visit, VisitStatus
from src.inside_notes.infra.db import inmemory as inmemory_repos
from src.inside_notes.infra.db.repositories import ClientRepository, VisitStore

# A visit is either started right away or scheduled for later.
INITIAL_STATUSES = {VisitStatus.OPEN, VisitStatus.SCHEDULED}


class VisitService:
    """Creates and tracks technical visits.

    Depends only on the VisitStore interface; the client repository is read
    once per creation to denormalize the client's name onto the visit.
    """

    def __init__(
        self,
        *,
        store: Optional[VisitStore] = None,
        client_repository: Optional[ClientRepository] = None,
    ) -> None:
        self._store = store or inmemory_repos.visit_store
        self._client_repository = client_repository

    @property
    def clients(self) -> ClientRepository:
        # Resolved lazily so the SQL swap done at startup is picked up.
        return self._client_repository or inmemory_repos.client_repository

    def create_visit(
        self,
        *,
        user_id: int,
        client_id: Optional[int],
        extra_description: Optional[str] = None,
        start_time: Optional[datetime] = None,
        status: VisitStatus = VisitStatus.OPEN,
    ) -> Visit:
        if client_id is None:
            raise ValidationError("Por favor, selecione um cliente.", details={"field": "client_id"})
        client = self.clients.get(client_id)
        if client is None:
            raise ValidationError("Cliente selecionado não existe.", details={"client_id": client_id})
        if status not in INITIAL_STATUSES:
            raise ValidationError(
                "Status inicial deve ser 'open' ou 'scheduled'.",
                details={"status": status.value},
            )

        now = datetime.now(timezone.utc)
        # Naive start times are taken as UTC so listings can order them.
        if start_time is not None and start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        visit = Visit(
            id=uuid4(),
            user_id=user_id,
            client_id=client.id,
            client_name=client.nome_fantasia,
            extra_description=extra_description,
            start_time=start_time or now,
            created_at=now,
            status=status,
        )
        return self._store.create(visit)

    def get_visit(self, visit_id: UUID) -> Visit:
        visit = self._store.get_by_id(visit_id)
        if visit is None:
            raise VisitNotFoundError(visit_id)
        return visit

    def list_visits(self, *, user_id: Optional[int] = None, status: Optional[VisitStatus] = None) -> List[Visit]:
        visits = [v for v in self._store.list_by_parent(user_id) if status is None or v.status == status]
        return sorted(visits, key=lambda v: v.start_time, reverse=True)

    def update_status(self, visit_id: UUID, status: VisitStatus) -> Visit:
        visit = self.get_visit(visit_id)
        updates: dict = {"status": status}
        if status == VisitStatus.COMPLETED and visit.end_time is None:
            updates["end_time"] = datetime.now(timezone.utc)
        return self._store.update(visit.model_copy(update=updates))

    def set_final_report(self, visit_id: UUID, report_ref: str) -> Visit:
        visit = self.get_visit(visit_id)
        return self._store.update(visit.model_copy(update={"final_report_ref": report_ref}))


visit_service = VisitService()
