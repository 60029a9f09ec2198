"""
FastAPI server: POST /getUserProfiles resolves a lobby, GET /health.

Services (cache store, task pool, orchestrator) are created once in the lifespan
and read through the get_orchestrator dependency. Errors are returned as
{"error": "..."}: 400 for a malformed batch, 500 for infrastructure failures.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_lobbyrisk import __version__
from backend_lobbyrisk.agent_worker.orchestrator import INVALID_BATCH_MESSAGE, AggregationOrchestrator
from backend_lobbyrisk.config.settings import Settings, get_settings
from backend_lobbyrisk.core.exceptions import InvalidRequest, ServiceUnavailable
from backend_lobbyrisk.lobbyrisk_logging import configure_structlog, get_logger
from backend_lobbyrisk.services import create_services

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Failed to fetch user profiles"


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class ProfilesRequest(BaseModel):
    """POST /getUserProfiles body: ordered list of profile identities."""

    usernames: list[str] = Field(..., description="Steam profile ids to evaluate (non-empty)")


class ProfilesResponse(BaseModel):
    """POST /getUserProfiles response: per-identity risk plus lobby aggregate."""

    profiles: dict[str, float] = Field(..., description="Risk score (0-100) per resolved identity")
    lobbyRisk: float = Field(..., description="Exponential-mean lobby risk; 100 when nothing resolved")


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_orchestrator(request: Request) -> AggregationOrchestrator:
    """Dependency: process-scoped orchestrator created in the lifespan."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise ServiceUnavailable("services not initialized")
    return services.orchestrator


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create services on startup; close the cache store on shutdown."""
    settings: Settings = app.state.settings
    app.state.services = await create_services(settings)
    try:
        yield
    finally:
        services = app.state.services
        app.state.services = None
        await services.close()


# -----------------------------------------------------------------------------
# App factory and routes
# -----------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_structlog(settings.log_level, settings.log_format)
    app = FastAPI(
        title="Backend LobbyRisk API",
        description="Cache-first risk scoring for Steam profiles and lobby risk aggregation.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = None
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": INVALID_BATCH_MESSAGE})

    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ServiceUnavailable)
    async def service_unavailable_handler(request: Request, exc: ServiceUnavailable) -> JSONResponse:
        logger.error("services_unavailable", error=str(exc))
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    @app.post("/getUserProfiles", response_model=ProfilesResponse)
    async def get_user_profiles(
        body: ProfilesRequest,
        orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    ) -> Any:
        """
        Score every identity (cache first, fetch on miss) and aggregate the lobby risk.

        Identities whose fetch failed are omitted from profiles.
        """
        try:
            result = await orchestrator.resolve_batch(body.usernames)
        except InvalidRequest:
            raise
        except Exception as e:
            logger.exception("get_user_profiles_failed", error=str(e))
            return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})
        return result.to_dict()

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app


app = create_app()
