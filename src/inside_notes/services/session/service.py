from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from src.inside_notes.config import settings
from src.inside_notes.domain.models.user import User

logger = logging.getLogger(__name__)

# Fixed key of the persisted "current user" slot.
SESSION_KEY = "inside-notes-user"


class SessionStore(ABC):
    @abstractmethod
    def load(self) -> Optional[User]:
        """Return the stored user, or None when the slot is empty.

        Raises ValueError when the slot holds data that cannot be decoded.
        """

    @abstractmethod
    def save(self, user: User) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self, raw: Optional[str] = None) -> None:
        self._raw = raw

    def load(self) -> Optional[User]:
        if self._raw is None:
            return None
        return _decode_user(self._raw)

    def save(self, user: User) -> None:
        self._raw = user.model_dump_json()

    def clear(self) -> None:
        self._raw = None


class JsonFileSessionStore(SessionStore):
    """Keeps the serialized current user under SESSION_KEY in a JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or settings.session_file

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Session file does not contain a JSON object")
        return data

    def load(self) -> Optional[User]:
        raw = self._read_all().get(SESSION_KEY)
        if raw is None:
            return None
        return _decode_user(raw)

    def save(self, user: User) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            data = self._read_all()
        except ValueError:
            data = {}
        data[SESSION_KEY] = user.model_dump_json()
        self._path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        try:
            data = self._read_all()
        except ValueError:
            data = {}
        data.pop(SESSION_KEY, None)
        if data:
            self._path.write_text(json.dumps(data), encoding="utf-8")
        elif self._path.exists():
            self._path.unlink()


def _decode_user(raw: str) -> User:
    try:
        return User.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise ValueError("Stored session user could not be decoded") from exc


class SessionManager:
    """Owns the current session user for the lifetime of the process.

    The user is loaded once by ``init`` and only written back through the
    store by ``login``/``logout``.
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    def init(self) -> Optional[User]:
        try:
            self._user = self._store.load()
        except ValueError:
            logger.warning("Discarding unreadable session slot %s", SESSION_KEY)
            self._store.clear()
            self._user = None
        return self._user

    def login(self, user: User) -> User:
        self._store.save(user)
        self._user = user
        return user

    def logout(self) -> None:
        self._store.clear()
        self._user = None

    def teardown(self) -> None:
        self._user = None


session_manager = SessionManager(JsonFileSessionStore())
