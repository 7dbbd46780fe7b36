from __future__ import annotations

import logging
from typing import Callable, List, Optional
from uuid import UUID, uuid4

from src.inside_notes.domain.errors import CapabilityError, ValidationError, WorkflowStateError
from src.inside_notes.domain.models.annotation import Annotation, AnnotationKind
from src.inside_notes.domain.models.notification import NotificationType
from src.inside_notes.domain.models.prompt_template import PromptTemplate
from src.inside_notes.domain.models.workflow import AudioState, WorkflowError, WorkflowPhase, WorkflowSnapshot
from src.inside_notes.services.ai.backends import GenerativeTextBackend
from src.inside_notes.services.annotations.audio import (
    DEFAULT_AUDIO_MIME_TYPE,
    AudioCapture,
    AudioInput,
    MicrophoneNotFoundError,
)
from src.inside_notes.services.annotations.service import AnnotationService
from src.inside_notes.services.notifications.service import Notifier, make_notification

logger = logging.getLogger(__name__)

BULLET = "- "
FRAGMENT_SEPARATOR = "\n\n"

MSG_NO_TEMPLATE = "Nenhum prompt de IA selecionado."
MSG_REWRITE_FAILED = "Falha ao refinar texto com IA."
MSG_NOTHING_TO_SAVE = "Nenhum fragmento para salvar."
MSG_SAVED_DRAFT = "Anotação salva como rascunho."
MSG_SAVED_FINAL = "Anotação salva como final."
MSG_NO_MICROPHONE = "Nenhum microfone encontrado."
MSG_MICROPHONE_DENIED = "Não foi possível acessar o microfone."
MSG_TRANSCRIBED = "Áudio transcrito e adicionado!"
MSG_TRANSCRIPTION_FAILED = "Falha ao transcrever o áudio."


def consolidate(fragments: List[str]) -> str:
    """Bullet-prefix every fragment and join them with a blank line, in order."""

    return FRAGMENT_SEPARATOR.join(BULLET + fragment for fragment in fragments)


class AnnotationWorkflow:
    """Capture, consolidation and review of one annotation.

    Fragment phases: idle -> (choosing_style) -> processing -> reviewing -> saved.
    Audio runs on its own state (idle/recording/transcribing) and is only
    allowed while the fragment phase is idle.

    Capability failures never raise out of an action: the workflow goes back
    to its prior stable state, records ``error`` and emits exactly one error
    notification. Invalid actions for the current state raise
    WorkflowStateError.
    """

    def __init__(
        self,
        *,
        visit_id: UUID,
        kind: AnnotationKind,
        backend: GenerativeTextBackend,
        templates: Callable[[], List[PromptTemplate]],
        annotations: AnnotationService,
        audio_input: AudioInput,
        notify: Notifier,
        existing: Optional[Annotation] = None,
        workflow_id: Optional[UUID] = None,
    ) -> None:
        self.id = workflow_id or uuid4()
        self.visit_id = visit_id
        self.kind = kind
        self._existing = existing
        self._backend = backend
        self._templates = templates
        self._annotations = annotations
        self._audio_input = audio_input
        self._notify = notify
        # Bumped on every reset so results of calls started before a reset
        # are discarded.
        self._epoch = 0
        self._capture: Optional[AudioCapture] = None
        self.reset()

    # State

    def reset(self) -> None:
        self._epoch += 1
        self._release_capture()
        self.fragments: List[str] = list(self._existing.fragments) if self._existing else []
        self.phase = WorkflowPhase.IDLE
        self.audio_state = AudioState.IDLE
        self.raw_text: Optional[str] = None
        self.rewritten_text: Optional[str] = None
        self.error: Optional[WorkflowError] = None
        self.saved_annotation: Optional[Annotation] = None

    def close(self) -> None:
        self.reset()
        self.fragments = []

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            id=self.id,
            visit_id=self.visit_id,
            kind=self.kind,
            annotation_id=self._existing.id if self._existing else None,
            phase=self.phase,
            audio_state=self.audio_state,
            fragments=list(self.fragments),
            raw_text=self.raw_text,
            rewritten_text=self.rewritten_text,
            template_names=[t.name for t in self._templates()],
            error=self.error,
            saved_annotation=self.saved_annotation,
        )

    def consolidated_text(self) -> str:
        return consolidate(self.fragments)

    def _require_phase(self, *phases: WorkflowPhase) -> None:
        if self.phase not in phases:
            raise WorkflowStateError(
                f"Action not allowed while workflow is {self.phase.value}",
                details={"phase": self.phase.value, "allowed": [p.value for p in phases]},
            )

    def _require_audio_idle(self) -> None:
        if self.audio_state != AudioState.IDLE:
            raise WorkflowStateError(
                f"Action not allowed while audio is {self.audio_state.value}",
                details={"audio_state": self.audio_state.value},
            )

    def _fail(self, kind: str, message: str) -> None:
        self.error = WorkflowError(kind=kind, message=message)
        self._notify(make_notification(NotificationType.ERROR, message))

    def _succeed(self, message: str) -> None:
        self._notify(make_notification(NotificationType.SUCCESS, message))

    # Fragments

    def add_fragment(self, text: str) -> None:
        self._require_phase(WorkflowPhase.IDLE)
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValidationError("Fragmento vazio.", details={"field": "text"})
        self.error = None
        self.fragments.append(cleaned)

    def delete_fragment(self, index: int) -> None:
        self._require_phase(WorkflowPhase.IDLE)
        if index < 0 or index >= len(self.fragments):
            raise ValidationError("Fragmento inexistente.", details={"index": index, "count": len(self.fragments)})
        self.error = None
        del self.fragments[index]

    # Consolidation

    async def finalize(self) -> None:
        self._require_phase(WorkflowPhase.IDLE)
        self._require_audio_idle()
        self.error = None
        if not self.fragments:
            return

        templates = self._templates()
        if not templates:
            self._fail("validation", MSG_NO_TEMPLATE)
            return
        if len(templates) > 1:
            self.phase = WorkflowPhase.CHOOSING_STYLE
            return
        await self._process(templates[0])

    async def choose_style(self, name: str) -> None:
        self._require_phase(WorkflowPhase.CHOOSING_STYLE)
        template = next((t for t in self._templates() if t.name == name), None)
        if template is None:
            raise ValidationError("Prompt de IA desconhecido.", details={"template_name": name})
        await self._process(template)

    def cancel_style(self) -> None:
        self._require_phase(WorkflowPhase.CHOOSING_STYLE)
        self.phase = WorkflowPhase.IDLE

    async def _process(self, template: PromptTemplate) -> None:
        epoch = self._epoch
        raw_text = self.consolidated_text()
        self.phase = WorkflowPhase.PROCESSING
        try:
            rewritten = await self._backend.rewrite(raw_text, template.content)
        except Exception as exc:
            if epoch != self._epoch:
                return
            logger.warning("Rewrite failed for workflow %s: %s", self.id, exc)
            self.phase = WorkflowPhase.IDLE
            self._fail("capability", MSG_REWRITE_FAILED)
            return
        if epoch != self._epoch:
            return
        self.raw_text = raw_text
        self.rewritten_text = rewritten
        self.phase = WorkflowPhase.REVIEWING

    def edit_review(self, text: str) -> None:
        self._require_phase(WorkflowPhase.REVIEWING)
        self.rewritten_text = text

    def back_to_editing(self) -> None:
        self._require_phase(WorkflowPhase.REVIEWING)
        self.raw_text = None
        self.rewritten_text = None
        self.error = None
        self.phase = WorkflowPhase.IDLE

    # Saving

    def save_final(self) -> Annotation:
        self._require_phase(WorkflowPhase.REVIEWING)
        annotation = self._annotations.save(
            visit_id=self.visit_id,
            kind=self.kind,
            body=self.rewritten_text or "",
            fragments=self.fragments,
            is_draft=False,
            annotation_id=self._existing.id if self._existing else None,
        )
        self._mark_saved(annotation)
        self._succeed(MSG_SAVED_FINAL)
        return annotation

    def save_draft(self) -> Optional[Annotation]:
        self._require_phase(WorkflowPhase.IDLE)
        self._require_audio_idle()
        self.error = None
        if not self.fragments:
            if self._existing is not None:
                self._fail("validation", MSG_NOTHING_TO_SAVE)
            return None
        annotation = self._annotations.save(
            visit_id=self.visit_id,
            kind=self.kind,
            body=self.consolidated_text(),
            fragments=self.fragments,
            is_draft=True,
            annotation_id=self._existing.id if self._existing else None,
        )
        self._mark_saved(annotation)
        self._succeed(MSG_SAVED_DRAFT)
        return annotation

    def _mark_saved(self, annotation: Annotation) -> None:
        fragments = list(self.fragments)
        self._existing = annotation
        self.reset()
        self.fragments = fragments
        self.phase = WorkflowPhase.SAVED
        self.saved_annotation = annotation

    # Audio

    async def start_recording(self, *, mime_type: str = DEFAULT_AUDIO_MIME_TYPE) -> None:
        self._require_phase(WorkflowPhase.IDLE)
        self._require_audio_idle()
        self.error = None
        epoch = self._epoch
        try:
            capture = await self._audio_input.acquire(mime_type=mime_type)
        except MicrophoneNotFoundError:
            logger.warning("No audio input device for workflow %s", self.id)
            self._fail("device_not_found", MSG_NO_MICROPHONE)
            return
        except Exception:
            logger.exception("Audio input acquisition failed for workflow %s", self.id)
            self._fail("device_access", MSG_MICROPHONE_DENIED)
            return
        if epoch != self._epoch:
            capture.release()
            return
        self._capture = capture
        self.audio_state = AudioState.RECORDING

    def append_audio(self, chunk: bytes) -> None:
        if self.audio_state != AudioState.RECORDING or self._capture is None:
            raise WorkflowStateError("Nenhuma gravação em andamento.", details={"audio_state": self.audio_state.value})
        self._capture.write(chunk)

    async def stop_recording(self) -> None:
        if self.audio_state != AudioState.RECORDING or self._capture is None:
            raise WorkflowStateError("Nenhuma gravação em andamento.", details={"audio_state": self.audio_state.value})
        epoch = self._epoch
        capture = self._capture
        self.error = None
        self.audio_state = AudioState.TRANSCRIBING
        try:
            audio = capture.finish()
            text = (await self._backend.transcribe(audio, capture.mime_type)).strip()
            if epoch != self._epoch:
                return
            if not text:
                raise CapabilityError("Transcrição retornou vazia.")
            self.fragments.append(text)
            self._succeed(MSG_TRANSCRIBED)
        except Exception as exc:
            if epoch == self._epoch:
                logger.warning("Transcription failed for workflow %s: %s", self.id, exc)
                self._fail("capability", MSG_TRANSCRIPTION_FAILED)
        finally:
            if epoch == self._epoch:
                self.audio_state = AudioState.IDLE
                self._capture = None
            capture.release()

    def _release_capture(self) -> None:
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
