from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src.inside_notes.domain.models.prompt_template import PromptTemplate
from src.inside_notes.domain.models.user import User
from src.inside_notes.security import ensure_is_admin, get_api_key, get_current_user
from src.inside_notes.services.audit.service import audit_service
from src.inside_notes.services.templates.service import template_service


router = APIRouter(
    prefix="/templates",
    tags=["templates"],
    dependencies=[Depends(get_api_key)],
)


class TemplateRequest(BaseModel):
    name: str
    content: str


@router.get("", response_model=List[PromptTemplate])
async def list_templates() -> List[PromptTemplate]:
    return template_service.list_templates()


@router.post("", response_model=PromptTemplate, status_code=status.HTTP_201_CREATED)
async def create_template(payload: TemplateRequest, current_user: User = Depends(get_current_user)) -> PromptTemplate:
    ensure_is_admin(current_user)
    template = template_service.create_template(name=payload.name, content=payload.content)
    audit_service.log_event(action="create_prompt_template", resource_type="prompt_template", resource_id=template.name)
    return template


@router.put("/{index}", response_model=PromptTemplate)
async def update_template(
    index: int,
    payload: TemplateRequest,
    current_user: User = Depends(get_current_user),
) -> PromptTemplate:
    ensure_is_admin(current_user)
    template = template_service.update_template(index, name=payload.name, content=payload.content)
    audit_service.log_event(action="update_prompt_template", resource_type="prompt_template", resource_id=str(index))
    return template


@router.delete("/{index}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(index: int, current_user: User = Depends(get_current_user)) -> Response:
    ensure_is_admin(current_user)
    template_service.delete_template(index)
    audit_service.log_event(action="delete_prompt_template", resource_type="prompt_template", resource_id=str(index))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
