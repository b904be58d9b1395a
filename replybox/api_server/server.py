"""
FastAPI server — the ReplyBox sync API.

create_app() takes an already-built service container; the lifespan hook runs
activation (tables plus secure token) before the first request is served.
Domain errors become {"code", "message", "status"} JSON bodies.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from replybox import __version__
from replybox.api_server.middleware import install_request_logging
from replybox.api_server.routes import API_PREFIX, COMMENTS_PATH, router
from replybox.api_server.services import ReplyBoxServices
from replybox.core.exceptions import AuthenticationFailure, ReplyBoxError
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)


def _error(status: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"code": code, "message": message, "status": status},
    )


def create_app(services: ReplyBoxServices) -> FastAPI:
    """Build the ASGI app around the given service container."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services.activate()
        logger.info("api_started", database=services.db.engine.url.get_backend_name())
        yield
        services.db.dispose()
        logger.info("api_stopped")

    app = FastAPI(
        title="ReplyBox Sync API",
        description="Token-authenticated comment sync endpoints for the hosted ReplyBox service.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services
    app.include_router(router)
    install_request_logging(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness check: API is up."""
        return {"status": "ok"}

    @app.exception_handler(ReplyBoxError)
    def replybox_error_handler(request: Request, exc: ReplyBoxError) -> JSONResponse:
        if exc.status >= 500:
            logger.error("request_error", path=request.url.path, code=exc.code, error=exc.message)
        else:
            logger.info("request_rejected", path=request.url.path, code=exc.code, status=exc.status)
        return JSONResponse(status_code=exc.status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # A body that could not be parsed carries no usable token; only a query
        # token can authenticate such a request
        if request.url.path == API_PREFIX + COMMENTS_PATH and not services.tokens.authenticate(
            request.query_params.get("token")
        ):
            failure = AuthenticationFailure()
            logger.info("request_rejected", path=request.url.path, code=failure.code, status=failure.status)
            return JSONResponse(status_code=failure.status, content=failure.to_dict())
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        message = "Invalid parameter(s): " + ", ".join(fields) if fields else "Invalid request"
        return _error(400, "rest_invalid_param", message)

    @app.exception_handler(StarletteHTTPException)
    def http_exception_handler(request: Any, exc: StarletteHTTPException) -> JSONResponse:
        """Consistent JSON error response for HTTPException."""
        code = "rest_no_route" if exc.status_code == 404 else "rest_error"
        return _error(exc.status_code, code, str(exc.detail))

    return app
