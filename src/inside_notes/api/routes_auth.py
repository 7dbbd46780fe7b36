from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from src.inside_notes.domain.models.user import User
from src.inside_notes.security import get_api_key
from src.inside_notes.services.audit.service import audit_service
from src.inside_notes.services.session.service import session_manager
from src.inside_notes.services.users.service import user_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(get_api_key)],
)


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login", response_model=User)
async def login(payload: LoginRequest) -> User:
    """Mock login. There is no credential check beyond picking admin vs. technician."""

    user = session_manager.login(user_service.authenticate(payload.email, payload.password))
    audit_service.log_event(
        action="login",
        resource_type="session",
        resource_id=str(user.id),
        extra={"role": user.role.value},
    )
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout() -> Response:
    session_manager.logout()
    audit_service.log_event(action="logout", resource_type="session")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=User)
async def me() -> User:
    user = session_manager.current_user
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in.")
    return user
