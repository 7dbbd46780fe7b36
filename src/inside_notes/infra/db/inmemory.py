from __future__ import annotations

from itertools import count
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from src.inside_notes.domain.errors import AnnotationNotFoundError, VisitNotFoundError
from src.inside_notes.domain.models.annotation import Annotation
from src.inside_notes.domain.models.client import Client
from src.inside_notes.domain.models.visit import Visit
from src.inside_notes.infra.db.repositories import AnnotationStore, ClientRepository, VisitStore


class InMemoryClientRepository(ClientRepository):
    """Dict-backed clientes table used when no database is configured."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._rows: Dict[int, Client] = {}
        self._ids = count(1)

    def list(self, search: Optional[str] = None) -> List[Client]:
        rows: Iterable[Client] = self._rows.values()
        if search:
            needle = search.lower()
            rows = (c for c in rows if needle in c.nome_fantasia.lower())
        return sorted(rows, key=lambda c: c.nome_fantasia.lower())

    def get(self, client_id: int) -> Optional[Client]:
        return self._rows.get(client_id)

    def create(self, *, nome_fantasia: str, razao_social: Optional[str], cnpj: Optional[str]) -> Client:
        client = Client(id=next(self._ids), nome_fantasia=nome_fantasia, razao_social=razao_social, cnpj=cnpj)
        self._rows[client.id] = client
        return client

    def update(
        self,
        client_id: int,
        *,
        nome_fantasia: str,
        razao_social: Optional[str],
        cnpj: Optional[str],
    ) -> Optional[Client]:
        if client_id not in self._rows:
            return None
        client = Client(id=client_id, nome_fantasia=nome_fantasia, razao_social=razao_social, cnpj=cnpj)
        self._rows[client_id] = client
        return client

    def delete(self, client_id: int) -> bool:
        return self._rows.pop(client_id, None) is not None

    def ping(self) -> None:
        return None


class InMemoryVisitStore(VisitStore):
    def __init__(self) -> None:
        self._visits: Dict[UUID, Visit] = {}

    def create(self, visit: Visit) -> Visit:
        self._visits[visit.id] = visit
        return visit

    def update(self, visit: Visit) -> Visit:
        if visit.id not in self._visits:
            raise VisitNotFoundError(visit.id)
        self._visits[visit.id] = visit
        return visit

    def get_by_id(self, visit_id: UUID) -> Optional[Visit]:
        return self._visits.get(visit_id)

    def list_by_parent(self, user_id: Optional[int] = None) -> Iterable[Visit]:
        for visit in self._visits.values():
            if user_id is not None and visit.user_id != user_id:
                continue
            yield visit


class InMemoryAnnotationStore(AnnotationStore):
    def __init__(self) -> None:
        self._annotations: Dict[UUID, Annotation] = {}

    def create(self, annotation: Annotation) -> Annotation:
        self._annotations[annotation.id] = annotation
        return annotation

    def update(self, annotation: Annotation) -> Annotation:
        if annotation.id not in self._annotations:
            raise AnnotationNotFoundError(annotation.id)
        # Reassigning the key keeps the original insertion position.
        self._annotations[annotation.id] = annotation
        return annotation

    def get_by_id(self, annotation_id: UUID) -> Optional[Annotation]:
        return self._annotations.get(annotation_id)

    def list_by_parent(self, visit_id: UUID) -> Iterable[Annotation]:
        for annotation in self._annotations.values():
            if annotation.visit_id == visit_id:
                yield annotation


client_repository: ClientRepository = InMemoryClientRepository()
visit_store: VisitStore = InMemoryVisitStore()
annotation_store: AnnotationStore = InMemoryAnnotationStore()
