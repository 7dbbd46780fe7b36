from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr


class UserRole(str, Enum):
    ADMIN = "admin"
    STANDARD = "standard"


class User(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    department: Optional[str] = None
