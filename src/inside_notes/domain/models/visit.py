from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class VisitStatus(str, Enum):
    SCHEDULED = "scheduled"
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Visit(BaseModel):
    """A technical visit ("visita técnica") at a client site.

    ``client_name`` is denormalized from the client at creation time so the
    visit still reads correctly if the client is later renamed or removed.
    ``final_report_ref`` is only ever written by report generation.
    """

    id: UUID
    user_id: int
    client_id: int
    client_name: str
    extra_description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    created_at: datetime
    status: VisitStatus = VisitStatus.OPEN
    final_report_ref: Optional[str] = None
