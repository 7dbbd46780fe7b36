from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.inside_notes.domain.errors import NotFoundError
from src.inside_notes.domain.models.annotation import Annotation
from src.inside_notes.domain.models.user import User, UserRole
from src.inside_notes.domain.models.visit import Visit, VisitStatus
from src.inside_notes.security import get_api_key, get_current_user
from src.inside_notes.services.annotations.service import annotation_service
from src.inside_notes.services.audit.service import audit_service
from src.inside_notes.services.reports.service import report_service
from src.inside_notes.services.visits.service import visit_service

router = APIRouter(
    prefix="/visits",
    tags=["visits"],
    dependencies=[Depends(get_api_key)],
)


class VisitCreateRequest(BaseModel):
    client_id: Optional[int] = None
    extra_description: Optional[str] = None
    start_time: Optional[datetime] = None
    status: VisitStatus = VisitStatus.OPEN


class VisitStatusRequest(BaseModel):
    status: VisitStatus


class VisitReportResponse(BaseModel):
    visit_id: UUID
    report_ref: str
    report: str


@router.post("", response_model=Visit, status_code=status.HTTP_201_CREATED)
async def create_visit(payload: VisitCreateRequest, current_user: User = Depends(get_current_user)) -> Visit:
    visit = visit_service.create_visit(
        user_id=current_user.id,
        client_id=payload.client_id,
        extra_description=payload.extra_description,
        start_time=payload.start_time,
        status=payload.status,
    )
    audit_service.log_event(
        action="create_visit",
        resource_type="visit",
        resource_id=str(visit.id),
        extra={"user_id": current_user.id, "client_id": visit.client_id, "status": visit.status.value},
    )
    return visit


@router.get("", response_model=List[Visit])
async def list_visits(
    status_filter: Optional[VisitStatus] = Query(None, alias="status"),
    user_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
) -> List[Visit]:
    # Technicians only see their own visits; admins may filter by technician.
    if current_user.role != UserRole.ADMIN:
        user_id = current_user.id
    return visit_service.list_visits(user_id=user_id, status=status_filter)


@router.get("/{visit_id}", response_model=Visit)
async def get_visit(visit_id: UUID) -> Visit:
    return visit_service.get_visit(visit_id)


@router.patch("/{visit_id}/status", response_model=Visit)
async def update_visit_status(visit_id: UUID, payload: VisitStatusRequest) -> Visit:
    visit = visit_service.update_status(visit_id, payload.status)
    audit_service.log_event(
        action="update_visit_status",
        resource_type="visit",
        resource_id=str(visit_id),
        extra={"status": visit.status.value},
    )
    return visit


@router.get("/{visit_id}/annotations", response_model=List[Annotation])
async def list_visit_annotations(visit_id: UUID) -> List[Annotation]:
    visit_service.get_visit(visit_id)
    return annotation_service.list_for_visit(visit_id)


@router.post("/{visit_id}/report", response_model=Visit)
async def generate_visit_report(visit_id: UUID) -> Visit:
    """Summarize the visit's annotations into its report and forward it.

    A summarization failure is returned as 502 and leaves the visit unchanged.
    """

    visit = await report_service.generate(visit_id)
    audit_service.log_event(
        action="generate_report",
        resource_type="visit",
        resource_id=str(visit_id),
        extra={"annotation_count": len(annotation_service.list_for_visit(visit_id))},
    )
    return visit


@router.get("/{visit_id}/report", response_model=VisitReportResponse)
async def get_visit_report(visit_id: UUID) -> VisitReportResponse:
    report = report_service.read_report(visit_id)
    if report is None:
        raise NotFoundError("Report not found", details={"visit_id": str(visit_id)})
    visit = visit_service.get_visit(visit_id)
    return VisitReportResponse(visit_id=visit_id, report_ref=visit.final_report_ref or "", report=report)
