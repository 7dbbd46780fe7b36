from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID, uuid4

from src.inside_notes.domain.errors import AnnotationNotFoundError
from src.inside_notes.domain.models.annotation import Annotation, AnnotationKind
from src.inside_notes.infra.db import inmemory as inmemory_repos
from src.inside_notes.infra.db.repositories import AnnotationStore


class AnnotationService:
    def __init__(self, *, store: Optional[AnnotationStore] = None) -> None:
        self._store = store or inmemory_repos.annotation_store

    def list_for_visit(self, visit_id: UUID) -> List[Annotation]:
        return list(self._store.list_by_parent(visit_id))

    def get_annotation(self, annotation_id: UUID) -> Annotation:
        annotation = self._store.get_by_id(annotation_id)
        if annotation is None:
            raise AnnotationNotFoundError(annotation_id)
        return annotation

    def save(
        self,
        *,
        visit_id: UUID,
        kind: AnnotationKind,
        body: str,
        fragments: Sequence[str],
        is_draft: bool,
        annotation_id: Optional[UUID] = None,
    ) -> Annotation:
        """Create a new annotation or replace an existing one in a single write.

        Editing keeps the annotation's id and visit; the timestamp is refreshed
        on every save.
        """

        now = datetime.now(timezone.utc)
        if annotation_id is not None:
            existing = self.get_annotation(annotation_id)
            updated = existing.model_copy(
                update={
                    "kind": kind,
                    "body": body,
                    "fragments": list(fragments),
                    "is_draft": is_draft,
                    "timestamp": now,
                }
            )
            return self._store.update(updated)

        annotation = Annotation(
            id=uuid4(),
            visit_id=visit_id,
            kind=kind,
            body=body,
            timestamp=now,
            fragments=list(fragments),
            is_draft=is_draft,
        )
        return self._store.create(annotation)


annotation_service = AnnotationService()
