from __future__ import annotations

from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.inside_notes.domain.models.annotation import Annotation, AnnotationKind


class WorkflowPhase(str, Enum):
    IDLE = "idle"
    CHOOSING_STYLE = "choosing_style"
    PROCESSING = "processing"
    REVIEWING = "reviewing"
    SAVED = "saved"


class AudioState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"


class WorkflowError(BaseModel):
    """Last recovered failure of a workflow action, paired with its message."""

    kind: str
    message: str


class WorkflowSnapshot(BaseModel):
    """Serializable view of an annotation workflow for API responses."""

    id: UUID
    visit_id: UUID
    kind: AnnotationKind
    annotation_id: Optional[UUID] = None
    phase: WorkflowPhase
    audio_state: AudioState
    fragments: List[str] = Field(default_factory=list)
    raw_text: Optional[str] = None
    rewritten_text: Optional[str] = None
    template_names: List[str] = Field(default_factory=list)
    error: Optional[WorkflowError] = None
    saved_annotation: Optional[Annotation] = None
