from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from src.inside_notes.config import settings
from src.inside_notes.domain.models.annotation import Annotation
from src.inside_notes.domain.models.visit import Visit

logger = logging.getLogger(__name__)


def build_report_payload(visit: Visit, annotations: Sequence[Annotation], summary: str) -> Dict[str, Any]:
    return {
        "visit": visit.model_dump(mode="json"),
        "annotations": [a.model_dump(mode="json") for a in annotations],
        "summary": summary,
    }


class ReportNotifier(Protocol):
    """Downstream automation hook called once a report has been stored."""

    async def notify(
        self, visit: Visit, annotations: Sequence[Annotation], summary: str
    ) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class LoggingReportNotifier:
    async def notify(self, visit: Visit, annotations: Sequence[Annotation], summary: str) -> None:
        logger.info(
            "Report ready for visit %s (%d annotations, %d chars); no webhook configured",
            visit.id,
            len(annotations),
            len(summary),
        )


class WebhookReportNotifier:
    """POSTs the visit, its annotations and the summary as JSON."""

    def __init__(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout if timeout is not None else settings.webhook_timeout_seconds
        self._transport = transport

    async def notify(self, visit: Visit, annotations: Sequence[Annotation], summary: str) -> None:
        payload = build_report_payload(visit, annotations, summary)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(self._url, json=payload)
            response.raise_for_status()
        logger.info("Report webhook delivered for visit %s (status %s)", visit.id, response.status_code)


def get_report_notifier_from_env() -> ReportNotifier:
    if settings.report_webhook_url:
        return WebhookReportNotifier(settings.report_webhook_url)
    return LoggingReportNotifier()
