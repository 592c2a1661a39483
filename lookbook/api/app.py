"""FastAPI application for lookbook.

The API is the server side of the web client: it proxies item photos to the
suggestion model and exposes health probes. Items, auth and storage are
handled by the managed platform the client talks to directly.

Example:
    uvicorn lookbook.api.app:app --reload
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lookbook import __version__
from lookbook.api.dependencies import AppState, get_app_state
from lookbook.api.routes import health_router, suggest_router
from lookbook.api.routes.suggest import MISSING_FIELDS_DETAIL
from lookbook.core.health import HealthCheckFunc, HealthChecker, ServiceCheck, ServiceStatus
from lookbook.core.logging import get_logger

logger = get_logger(__name__)

APP_VERSION = os.getenv("APP_VERSION", __version__)

# Headers the web client sends along with its platform session
ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def parse_cors_origins(value: str) -> list[str]:
    """Split a comma separated CORS_ORIGINS value; "*" allows any origin."""
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """400 for an incomplete /suggest body; FastAPI's 422 everywhere else."""
    if request.url.path == "/suggest":
        logger.warning("suggest_invalid_request", errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"detail": MISSING_FIELDS_DETAIL})
    return await request_validation_exception_handler(request, exc)


def groq_check(app_state: AppState) -> HealthCheckFunc:
    """Health check reporting whether suggestions can be served."""

    async def check() -> ServiceCheck:
        if not app_state.is_initialized:
            status, message = ServiceStatus.UNHEALTHY, "App state not initialized"
        elif app_state.suggestion_provider is None:
            status, message = ServiceStatus.DEGRADED, "GROQ_API_KEY not configured"
        else:
            status, message = ServiceStatus.HEALTHY, "API key configured"
        return ServiceCheck(name="groq", status=status, message=message)

    return check


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_state = get_app_state()
    await app_state.initialize(
        groq_api_key=os.getenv("GROQ_API_KEY"),
        groq_model=os.getenv("GROQ_MODEL"),
    )

    checker = HealthChecker(version=APP_VERSION)
    checker.add_check("groq", groq_check(app_state))
    app.state.health_checker = checker
    logger.info("api_started", version=APP_VERSION, checks=checker.names)

    try:
        yield
    finally:
        await app_state.shutdown()
        logger.info("api_stopped")


def create_app(
    title: str = "lookbook API",
    description: str = "Photo-to-listing suggestions for the lookbook rack",
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.
        cors_origins: Allowed origins; defaults to CORS_ORIGINS, then "*".
    """
    app = FastAPI(
        title=title,
        description=description,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    if cors_origins is None:
        cors_origins = parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))

    # Credentials only with an explicit origin list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=cors_origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=ALLOWED_HEADERS,
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.include_router(health_router)
    app.include_router(suggest_router)

    logger.debug("app_configured", title=title, cors_origins=cors_origins)
    return app


app = create_app()
