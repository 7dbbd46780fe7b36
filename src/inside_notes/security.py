from __future__ import annotations

import hashlib
from contextvars import ContextVar
from typing import List, Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from src.inside_notes.config import settings
from src.inside_notes.domain.errors import PermissionDeniedError
from src.inside_notes.domain.models.user import User, UserRole
from src.inside_notes.services.session.service import session_manager
from src.inside_notes.services.users.service import user_service

# API key is expected in this header when ENABLE_API_AUTH is true.
_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Stable, non-raw identifier for the current caller (a hashed API key), used
# by the audit logger.
_current_subject: ContextVar[Optional[str]] = ContextVar("current_subject", default=None)


def get_current_subject() -> Optional[str]:
    """Return the current subject identifier, if any.

    Set by ``get_api_key`` when API authentication is enabled. The value is
    hash-derived, never the raw secret.
    """

    return _current_subject.get()


def _parse_api_keys() -> List[str]:
    if not settings.api_keys:
        return []
    return [key.strip() for key in settings.api_keys.split(",") if key.strip()]


async def get_api_key(api_key: Optional[str] = Security(_api_key_header)) -> str:
    """FastAPI dependency for simple API-key based authentication.

    - If ENABLE_API_AUTH is false (default for development/tests), this is a
      no-op and always succeeds.
    - If ENABLE_API_AUTH is true, a valid API key must be supplied in the
      X-API-Key header and match the configured API_KEYS list.
    """

    if not settings.enable_api_auth:
        _current_subject.set(None)
        return ""

    allowed_keys = _parse_api_keys()
    if not allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API authentication is enabled but no API keys are configured.",
        )

    if not api_key or api_key not in allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )

    subject_id = "api-key:" + hashlib.sha256(api_key.encode("utf-8")).hexdigest()[:16]
    _current_subject.set(subject_id)

    return api_key


async def get_current_user(api_key: str = Depends(get_api_key)) -> User:
    """Resolve the operator for this request from the session slot.

    With API auth disabled and nobody logged in, the seeded admin is used so
    local development works without a login step.
    """

    user = session_manager.current_user
    if user is not None:
        return user

    if not settings.enable_api_auth:
        return user_service.default_admin()

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in.")


def ensure_is_admin(user: User) -> None:
    """Raise PermissionDeniedError unless the user is an administrator."""

    if user.role != UserRole.ADMIN:
        raise PermissionDeniedError(
            "Not authorized to manage this resource",
            details={"user_id": user.id, "role": user.role.value},
        )
