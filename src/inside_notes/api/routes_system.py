from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.inside_notes.api.deps import get_client_repository
from src.inside_notes.domain.errors import ConnectivityError
from src.inside_notes.infra.db.repositories import ClientRepository
from src.inside_notes.services.ai.backends import get_generative_backend_from_env

router = APIRouter(prefix="", tags=["system"])


@router.get("/health")
async def health_check_api(clients: ClientRepository = Depends(get_client_repository)):
    """Liveness plus database reachability.

    Returns 503 with ``{"status": "error", ...}`` when the clientes store
    cannot be reached.
    """

    try:
        clients.ping()
    except ConnectivityError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "message": exc.message, "error": exc.details.get("error", "Unknown DB error")},
        )
    return {
        "status": "ok",
        "message": "Backend is running and database connection is successful.",
        "database": clients.backend_name,
    }


@router.get("/system/ai/health")
async def ai_health() -> dict:
    """Check that the configured generative backend accepts its credential."""

    backend = get_generative_backend_from_env()
    ok = await backend.ping()
    return {"status": "ok" if ok else "error", "backend": type(backend).__name__}
