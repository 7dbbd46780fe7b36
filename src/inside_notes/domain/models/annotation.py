from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class AnnotationKind(str, Enum):
    DIAGNOSIS = "diagnosis"
    ACTION = "action"
    TEST = "test"
    OBSERVATION = "observation"


class Annotation(BaseModel):
    """A typed note attached to a visit.

    ``fragments`` is the raw capture history in insertion order; ``body`` is
    what is shown and persisted. For drafts ``body`` is the bullet join of the
    fragments, for final saves it is the (possibly hand-edited) AI rewrite.
    """

    id: UUID
    visit_id: UUID
    kind: AnnotationKind
    body: str
    timestamp: datetime
    fragments: List[str] = Field(default_factory=list)
    is_draft: bool = False
