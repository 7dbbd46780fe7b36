from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    id: UUID
    type: NotificationType
    message: str
    created_at: datetime
