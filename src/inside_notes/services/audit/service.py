from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.inside_notes.services.session.service import SessionManager, session_manager

logger = logging.getLogger("audit")


@dataclass
class AuditEvent:
    """One line of the operator trail.

    Records who touched which visit, annotation, client or prompt, never the
    note bodies, report text or recorded audio themselves.
    """

    action: str
    resource_type: str
    resource_id: Optional[str] = None
    operator_id: Optional[int] = None
    api_subject: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class AuditService:
    """Writes operator actions to the ``audit`` logger as one JSON object per line."""

    def __init__(self, session: Optional[SessionManager] = None) -> None:
        self._session = session or session_manager

    def log_event(
        self,
        *,
        action: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        subject: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        """Record ``action`` (e.g. "finalize_annotation") on a resource.

        The operator is the logged-in session user; ``subject`` defaults to
        the hashed API key of the current request.
        """

        if subject is None:
            from src.inside_notes.security import get_current_subject

            subject = get_current_subject()
        operator = self._session.current_user

        event = AuditEvent(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            operator_id=operator.id if operator is not None else None,
            api_subject=subject,
            extra=extra or {},
        )
        # Anything in extra that JSON cannot encode (UUIDs, enums) is logged as text.
        logger.info(json.dumps(asdict(event), default=str, ensure_ascii=False))
        return event


audit_service = AuditService()
