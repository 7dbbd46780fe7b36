from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.inside_notes.domain.models.annotation import Annotation
from src.inside_notes.domain.models.client import Client
from src.inside_notes.domain.models.visit import Visit


class ClientRepository(ABC):
    # Reported by the health check.
    backend_name = "unknown"

    @abstractmethod
    def list(self, search: Optional[str] = None) -> List[Client]:
        """Return clients ordered by nome_fantasia, optionally filtered by a
        case-insensitive substring of nome_fantasia."""

    @abstractmethod
    def get(self, client_id: int) -> Optional[Client]:
        raise NotImplementedError

    @abstractmethod
    def create(self, *, nome_fantasia: str, razao_social: Optional[str], cnpj: Optional[str]) -> Client:
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        client_id: int,
        *,
        nome_fantasia: str,
        razao_social: Optional[str],
        cnpj: Optional[str],
    ) -> Optional[Client]:
        """Return the updated client, or None when no row matched."""

    @abstractmethod
    def delete(self, client_id: int) -> bool:
        """Return True when a row was deleted."""

    @abstractmethod
    def ping(self) -> None:
        """Raise ConnectivityError when the backing store is unreachable."""


class VisitStore(ABC):
    @abstractmethod
    def create(self, visit: Visit) -> Visit:
        raise NotImplementedError

    @abstractmethod
    def update(self, visit: Visit) -> Visit:
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, visit_id: UUID) -> Optional[Visit]:
        raise NotImplementedError

    @abstractmethod
    def list_by_parent(self, user_id: Optional[int] = None) -> Iterable[Visit]:
        """Yield visits owned by ``user_id`` (all visits when None)."""


class AnnotationStore(ABC):
    @abstractmethod
    def create(self, annotation: Annotation) -> Annotation:
        raise NotImplementedError

    @abstractmethod
    def update(self, annotation: Annotation) -> Annotation:
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, annotation_id: UUID) -> Optional[Annotation]:
        raise NotImplementedError

    @abstractmethod
    def list_by_parent(self, visit_id: UUID) -> Iterable[Annotation]:
        """Yield annotations of a visit in creation order."""
