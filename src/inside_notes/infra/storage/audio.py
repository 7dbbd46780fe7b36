from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from src.inside_notes.config import settings

logger = logging.getLogger(__name__)


class AudioStorageBackend(ABC):
    @abstractmethod
    def create_file(self, *, name: str) -> str:
        """Create an empty audio file and return its reference."""

    @abstractmethod
    def append_file(self, dest: str, chunk: bytes) -> None:
        """Append bytes to an existing audio file reference."""

    @abstractmethod
    def read_file(self, dest: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def delete_file(self, dest: str) -> None:
        """Best-effort deletion of a previously created file."""


class LocalAudioStorageBackend(AudioStorageBackend):
    def __init__(self, base: Path | None = None) -> None:
        self._base: Path = base or settings.audio_upload_dir

    def create_file(self, *, name: str) -> str:
        self._base.mkdir(parents=True, exist_ok=True)
        dest_path = self._base / name
        dest_path.write_bytes(b"")
        return str(dest_path)

    def append_file(self, dest: str, chunk: bytes) -> None:
        with Path(dest).open("ab") as f:
            f.write(chunk)

    def read_file(self, dest: str) -> bytes:
        return Path(dest).read_bytes()

    def delete_file(self, dest: str) -> None:
        path = Path(dest)
        if path.exists():
            try:
                path.unlink()
            except OSError:
                logger.warning("Could not delete audio buffer %s", dest)


audio_storage_backend: AudioStorageBackend = LocalAudioStorageBackend()
