from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr

from src.inside_notes.domain.models.user import User, UserRole
from src.inside_notes.security import ensure_is_admin, get_api_key, get_current_user
from src.inside_notes.services.audit.service import audit_service
from src.inside_notes.services.users.service import user_service

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_api_key)],
)


class UserRequest(BaseModel):
    name: str
    email: EmailStr
    role: UserRole = UserRole.STANDARD
    department: Optional[str] = None


@router.get("", response_model=List[User])
async def list_users() -> List[User]:
    return user_service.list_users()


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserRequest, current_user: User = Depends(get_current_user)) -> User:
    ensure_is_admin(current_user)
    user = user_service.create_user(
        name=payload.name,
        email=payload.email,
        role=payload.role,
        department=payload.department,
    )
    audit_service.log_event(
        action="create_user",
        resource_type="user",
        resource_id=str(user.id),
        extra={"by_user_id": current_user.id, "role": user.role.value},
    )
    return user


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: int,
    payload: UserRequest,
    current_user: User = Depends(get_current_user),
) -> User:
    ensure_is_admin(current_user)
    user = user_service.update_user(
        user_id,
        name=payload.name,
        email=payload.email,
        role=payload.role,
        department=payload.department,
    )
    audit_service.log_event(
        action="update_user",
        resource_type="user",
        resource_id=str(user_id),
        extra={"by_user_id": current_user.id, "role": user.role.value},
    )
    return user
