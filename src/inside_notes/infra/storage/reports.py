from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from uuid import UUID

from src.inside_notes.config import settings


class ReportStorageBackend(ABC):
    @abstractmethod
    def save_report(self, visit_id: UUID, content: str) -> str:
        """Persist a report and return a reference that can be read back."""

    @abstractmethod
    def read_report(self, ref: str) -> Optional[str]:
        raise NotImplementedError


class LocalReportStorageBackend(ReportStorageBackend):
    """Stores one text file per visit; regenerating overwrites it."""

    def __init__(self, base: Path | None = None) -> None:
        self._base: Path = base or settings.report_dir

    def save_report(self, visit_id: UUID, content: str) -> str:
        self._base.mkdir(parents=True, exist_ok=True)
        dest_path = self._base / f"laudo-{visit_id}.txt"
        dest_path.write_text(content, encoding="utf-8")
        return str(dest_path)

    def read_report(self, ref: str) -> Optional[str]:
        path = Path(ref)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")


report_storage_backend: ReportStorageBackend = LocalReportStorageBackend()
