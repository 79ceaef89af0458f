"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calories_daily.api.routes import router
from calories_daily.app_logging import configure_logging
from calories_daily.containers import AppContainer
from calories_daily.domain.errors import (
    AuthenticationError,
    AuthRequiredError,
    CaloriesDailyError,
    FoodIndexError,
    RemoteUnavailableError,
    StaleDayError,
    ValidationError,
)

_STATUS_CODES: dict[type[CaloriesDailyError], int] = {
    ValidationError: 422,
    FoodIndexError: 404,
    StaleDayError: 409,
    AuthRequiredError: 401,
    AuthenticationError: 401,
    RemoteUnavailableError: 503,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.auth_service.startup()
        except Exception:
            logger.exception("Failed to apply the restored session")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(router)

    @app.exception_handler(CaloriesDailyError)
    async def handle_app_error(
        request: Request, exc: CaloriesDailyError
    ) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        body: dict[str, object] = {"error": exc.code, "message": str(exc)}
        if isinstance(exc, RemoteUnavailableError):
            body["saved_locally"] = exc.saved_locally
        return JSONResponse(status_code=status_code, content=body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: CaloriesDailyError) -> int:
    """Return the HTTP status for an application error."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
