from __future__ import annotations

from typing import Optional, Protocol
from uuid import uuid4

from src.inside_notes.infra.storage.audio import AudioStorageBackend, audio_storage_backend

DEFAULT_AUDIO_MIME_TYPE = "audio/webm"


class MicrophoneNotFoundError(Exception):
    """No audio input device is available."""


class AudioCapture(Protocol):
    """One acquired recording. Must be released exactly once."""

    mime_type: str

    def write(self, chunk: bytes) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def finish(self) -> bytes:  # pragma: no cover - interface
        """Return everything recorded so far as a single blob."""
        raise NotImplementedError

    def release(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class AudioInput(Protocol):
    async def acquire(self, *, mime_type: str = DEFAULT_AUDIO_MIME_TYPE) -> AudioCapture:  # pragma: no cover - interface
        """Acquire the input device.

        Raises MicrophoneNotFoundError when there is no device; any other
        exception means access was denied or failed.
        """
        raise NotImplementedError


class StoredAudioCapture:
    """Recording whose chunks are uploaded by the client and buffered on disk."""

    def __init__(self, storage: AudioStorageBackend, ref: str, mime_type: str) -> None:
        self._storage = storage
        self._ref: Optional[str] = ref
        self.mime_type = mime_type

    @property
    def released(self) -> bool:
        return self._ref is None

    def write(self, chunk: bytes) -> None:
        if self._ref is None:
            raise RuntimeError("Audio capture already released")
        self._storage.append_file(self._ref, chunk)

    def finish(self) -> bytes:
        if self._ref is None:
            raise RuntimeError("Audio capture already released")
        return self._storage.read_file(self._ref)

    def release(self) -> None:
        if self._ref is None:
            return
        ref, self._ref = self._ref, None
        self._storage.delete_file(ref)


class StoredAudioInput:
    """AudioInput for the HTTP API: the "device" is an upload buffer.

    Buffer creation failures (e.g. an unwritable upload directory) surface as
    access errors.
    """

    def __init__(self, storage: Optional[AudioStorageBackend] = None) -> None:
        self._storage = storage or audio_storage_backend

    async def acquire(self, *, mime_type: str = DEFAULT_AUDIO_MIME_TYPE) -> StoredAudioCapture:
        ref = self._storage.create_file(name=f"{uuid4()}.rec")
        return StoredAudioCapture(self._storage, ref, mime_type)


stored_audio_input = StoredAudioInput()
