from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from pydantic import BaseModel

from src.inside_notes.config import settings
from src.inside_notes.domain.models.annotation import AnnotationKind
from src.inside_notes.domain.models.workflow import WorkflowSnapshot
from src.inside_notes.security import get_api_key
from src.inside_notes.services.annotations.audio import DEFAULT_AUDIO_MIME_TYPE
from src.inside_notes.services.annotations.registry import workflow_registry
from src.inside_notes.services.audit.service import audit_service

router = APIRouter(
    prefix="/workflows",
    tags=["workflows"],
    dependencies=[Depends(get_api_key)],
)


class OpenWorkflowRequest(BaseModel):
    visit_id: UUID
    kind: AnnotationKind
    annotation_id: Optional[UUID] = None


class FragmentRequest(BaseModel):
    text: str


class StyleRequest(BaseModel):
    name: str


class ReviewRequest(BaseModel):
    text: str


class RecordingStartRequest(BaseModel):
    mime_type: str = DEFAULT_AUDIO_MIME_TYPE


@router.post("", response_model=WorkflowSnapshot, status_code=status.HTTP_201_CREATED)
async def open_workflow(payload: OpenWorkflowRequest) -> WorkflowSnapshot:
    workflow = workflow_registry.open(
        visit_id=payload.visit_id,
        kind=payload.kind,
        annotation_id=payload.annotation_id,
    )
    audit_service.log_event(
        action="open_annotation_workflow",
        resource_type="annotation_workflow",
        resource_id=str(workflow.id),
        extra={"visit_id": str(payload.visit_id), "editing": payload.annotation_id is not None},
    )
    return workflow.snapshot()


@router.get("/{workflow_id}", response_model=WorkflowSnapshot)
async def get_workflow(workflow_id: UUID) -> WorkflowSnapshot:
    return workflow_registry.get(workflow_id).snapshot()


@router.delete("/{workflow_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_workflow(workflow_id: UUID) -> Response:
    workflow_registry.close(workflow_id)
    audit_service.log_event(action="close_annotation_workflow", resource_type="annotation_workflow", resource_id=str(workflow_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{workflow_id}/fragments", response_model=WorkflowSnapshot)
async def add_fragment(workflow_id: UUID, payload: FragmentRequest) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    workflow.add_fragment(payload.text)
    audit_service.log_event(
        action="add_fragment",
        resource_type="annotation_workflow",
        resource_id=str(workflow_id),
        extra={"fragment_count": len(workflow.fragments)},
    )
    return workflow.snapshot()


@router.delete("/{workflow_id}/fragments/{index}", response_model=WorkflowSnapshot)
async def delete_fragment(workflow_id: UUID, index: int) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    workflow.delete_fragment(index)
    audit_service.log_event(
        action="delete_fragment",
        resource_type="annotation_workflow",
        resource_id=str(workflow_id),
        extra={"index": index, "fragment_count": len(workflow.fragments)},
    )
    return workflow.snapshot()


@router.post("/{workflow_id}/finalize", response_model=WorkflowSnapshot)
async def finalize(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    await workflow.finalize()
    audit_service.log_event(
        action="finalize_annotation",
        resource_type="annotation_workflow",
        resource_id=str(workflow_id),
        extra={"fragment_count": len(workflow.fragments), "phase": workflow.phase.value},
    )
    return workflow.snapshot()


@router.post("/{workflow_id}/style", response_model=WorkflowSnapshot)
async def choose_style(workflow_id: UUID, payload: StyleRequest) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    await workflow.choose_style(payload.name)
    audit_service.log_event(
        action="rewrite_annotation",
        resource_type="annotation_workflow",
        resource_id=str(workflow_id),
        extra={"template": payload.name, "phase": workflow.phase.value},
    )
    return workflow.snapshot()


@router.post("/{workflow_id}/style/cancel", response_model=WorkflowSnapshot)
async def cancel_style(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    workflow.cancel_style()
    return workflow.snapshot()


@router.put("/{workflow_id}/review", response_model=WorkflowSnapshot)
async def edit_review(workflow_id: UUID, payload: ReviewRequest) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    workflow.edit_review(payload.text)
    return workflow.snapshot()


@router.post("/{workflow_id}/back", response_model=WorkflowSnapshot)
async def back_to_editing(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    workflow.back_to_editing()
    return workflow.snapshot()


@router.post("/{workflow_id}/save", response_model=WorkflowSnapshot)
async def save_final(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    annotation = workflow.save_final()
    audit_service.log_event(
        action="save_annotation",
        resource_type="annotation",
        resource_id=str(annotation.id),
        extra={"visit_id": str(annotation.visit_id), "is_draft": False, "fragment_count": len(annotation.fragments)},
    )
    return workflow.snapshot()


@router.post("/{workflow_id}/draft", response_model=WorkflowSnapshot)
async def save_draft(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    annotation = workflow.save_draft()
    if annotation is not None:
        audit_service.log_event(
            action="save_annotation",
            resource_type="annotation",
            resource_id=str(annotation.id),
            extra={"visit_id": str(annotation.visit_id), "is_draft": True, "fragment_count": len(annotation.fragments)},
        )
    return workflow.snapshot()


@router.post("/{workflow_id}/recording/start", response_model=WorkflowSnapshot)
async def start_recording(workflow_id: UUID, payload: Optional[RecordingStartRequest] = None) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    mime_type = payload.mime_type if payload is not None else DEFAULT_AUDIO_MIME_TYPE
    await workflow.start_recording(mime_type=mime_type)
    return workflow.snapshot()


@router.post("/{workflow_id}/recording/chunks", response_model=WorkflowSnapshot)
async def upload_recording_chunk(workflow_id: UUID, file: UploadFile = File(...)) -> WorkflowSnapshot:
    """Append one uploaded chunk to the recording in progress."""

    workflow = workflow_registry.get(workflow_id)

    if file.content_type and not file.content_type.startswith(("audio/", "application/octet-stream")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type; expected audio/*.",
        )

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Uploaded chunk too large.",
        )

    workflow.append_audio(content)
    return workflow.snapshot()


@router.post("/{workflow_id}/recording/stop", response_model=WorkflowSnapshot)
async def stop_recording(workflow_id: UUID) -> WorkflowSnapshot:
    workflow = workflow_registry.get(workflow_id)
    fragments_before = len(workflow.fragments)
    await workflow.stop_recording()
    audit_service.log_event(
        action="transcribe_recording",
        resource_type="annotation_workflow",
        resource_id=str(workflow_id),
        extra={"fragment_added": len(workflow.fragments) > fragments_before},
    )
    return workflow.snapshot()
