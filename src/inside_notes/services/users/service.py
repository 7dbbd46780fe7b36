from __future__ import annotations

from itertools import count
from typing import Dict, List, Optional

from src.inside_notes.domain.errors import NotFoundError
from src.inside_notes.domain.models.user import User, UserRole

ADMIN_EMAIL = "admin@inside.com.br"
# Mock login: only this pair signs in as the admin.
ADMIN_PASSWORD = "Admin123456"


class InMemoryUserService:
    """Small in-memory technician directory seeded with demo accounts.

    Users are not persisted by the backend yet; this store stands in until a
    users table exists.
    """

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._ids = count(1)
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        self.create_user(name="Admin Teste", email=ADMIN_EMAIL, role=UserRole.ADMIN, department="Administração")
        self.create_user(
            name="Ronaldo Costa",
            email="ronaldo.costa@inside.com.br",
            role=UserRole.STANDARD,
            department="Técnico",
        )
        self.create_user(
            name="Jane Doe",
            email="jane.doe@inside.com.br",
            role=UserRole.STANDARD,
            department="Suporte N1",
        )

    def list_users(self) -> List[User]:
        return list(self._users.values())

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        lowered = email.lower()
        for user in self._users.values():
            if user.email.lower() == lowered:
                return user
        return None

    def authenticate(self, email: str, password: str) -> User:
        """Mock sign-in. Never rejects: unknown credentials get the standard technician."""

        if email.strip().lower() == ADMIN_EMAIL and password == ADMIN_PASSWORD:
            return self.default_admin()
        return self.default_technician()

    def default_admin(self) -> User:
        return self._first_with_role(UserRole.ADMIN)

    def default_technician(self) -> User:
        return self._first_with_role(UserRole.STANDARD)

    def _first_with_role(self, role: UserRole) -> User:
        for user in self._users.values():
            if user.role == role:
                return user
        return next(iter(self._users.values()))

    def create_user(
        self,
        *,
        name: str,
        email: str,
        role: UserRole,
        department: Optional[str] = None,
    ) -> User:
        user = User(id=next(self._ids), name=name, email=email, role=role, department=department)
        self._users[user.id] = user
        return user

    def update_user(
        self,
        user_id: int,
        *,
        name: str,
        email: str,
        role: UserRole,
        department: Optional[str] = None,
    ) -> User:
        if user_id not in self._users:
            raise NotFoundError("User not found", details={"user_id": user_id})
        user = User(id=user_id, name=name, email=email, role=role, department=department)
        self._users[user_id] = user
        return user


user_service = InMemoryUserService()
