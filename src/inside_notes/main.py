import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.inside_notes.api.routes_auth import router as auth_router
from src.inside_notes.api.routes_clients import router as clients_router
from src.inside_notes.api.routes_notifications import router as notifications_router
from src.inside_notes.api.routes_system import router as system_router
from src.inside_notes.api.routes_templates import router as templates_router
from src.inside_notes.api.routes_users import router as users_router
from src.inside_notes.api.routes_visits import router as visits_router
from src.inside_notes.api.routes_workflows import router as workflows_router
from src.inside_notes.config import settings
from src.inside_notes.domain.errors import (
    CapabilityError,
    ConnectivityError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    WorkflowStateError,
)
from src.inside_notes.infra.db.bootstrap import init_sql_repositories
from src.inside_notes.services.annotations.registry import workflow_registry
from src.inside_notes.services.session.service import session_manager

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Inside Notes API")


@app.on_event("startup")
async def on_startup() -> None:
    """Application startup hook.

    Installs the SQL clientes repository when USE_SQL_REPOS and DATABASE_URL
    are set (otherwise the in-memory one stays active) and restores the
    persisted session user.
    """

    init_sql_repositories()
    session_manager.init()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    workflow_registry.close_all()
    session_manager.teardown()


# CORS configuration: permissive by default for development. Tighten via
# CORS_ALLOW_ORIGINS in production deployments.
allow_origins = [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()] or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    WorkflowStateError: status.HTTP_409_CONFLICT,
    CapabilityError: status.HTTP_502_BAD_GATEWAY,
    ConnectivityError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DomainError: status.HTTP_400_BAD_REQUEST,
}


def _error_handler(status_code: int):
    async def handler(request: Request, exc: DomainError) -> JSONResponse:
        if status_code >= 500:
            logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.error_code, "detail": exc.message, "details": exc.details},
        )

    return handler


for _error_class, _status_code in _ERROR_STATUS.items():
    app.add_exception_handler(_error_class, _error_handler(_status_code))


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    """Basic liveness probe for the API root."""
    return {"status": "ok"}


app.include_router(system_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(clients_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(templates_router, prefix="/api")
app.include_router(visits_router, prefix="/api")
app.include_router(workflows_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
