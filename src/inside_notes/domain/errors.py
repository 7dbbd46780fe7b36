"""
Domain error types surfaced by services and mapped to HTTP responses in main.py.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    error_code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """A required field is missing or invalid. Raised before any network call."""

    error_code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    error_code = "NOT_FOUND"


class ConnectivityError(DomainError):
    """A backing store or remote service could not be reached."""

    error_code = "CONNECTIVITY_ERROR"


class CapabilityError(DomainError):
    """A generative-text call (rewrite, transcribe, summarize) failed.

    Also raised when the provider credential is missing.
    """

    error_code = "CAPABILITY_ERROR"


class WorkflowStateError(DomainError):
    """The requested action is not valid in the workflow's current state."""

    error_code = "INVALID_WORKFLOW_STATE"


class PermissionDeniedError(DomainError):
    error_code = "FORBIDDEN"


class ClientNotFoundError(NotFoundError):
    def __init__(self, client_id: int) -> None:
        super().__init__("Cliente not found", details={"client_id": client_id})


class VisitNotFoundError(NotFoundError):
    def __init__(self, visit_id: Any) -> None:
        super().__init__(f"Visit not found ({visit_id})", details={"visit_id": str(visit_id)})


class AnnotationNotFoundError(NotFoundError):
    def __init__(self, annotation_id: Any) -> None:
        super().__init__(
            f"Annotation not found ({annotation_id})",
            details={"annotation_id": str(annotation_id)},
        )
