"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Routes:
- /conversations  inbox, timelines, mark-read, direct sends
- /inquiries      inquiry threads
- /ws/conversations/{key}  realtime
- /health, /metrics
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from community_messaging import __version__
from community_messaging.config.logging_config import bind_correlation_id
from community_messaging.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
    RecordStoreError,
    SendFailedError,
)
from community_messaging.observability.metrics import MetricsErrorType, increment_error
from community_messaging.presentation.api import (
    conversations_router,
    inquiries_router,
    metrics_router,
    realtime_router,
)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        # Set in contextvars (propagates to async tasks and logging)
        correlation_id = bind_correlation_id(request.headers.get("X-Correlation-ID"))

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": detail})


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: Dishka container; the production container (Prisma + Redis)
            is created when omitted

    Returns:
        FastAPI application instance
    """
    if container is None:
        from community_messaging.setup.ioc.container import create_container

        container = create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Community messaging API started")
        yield
        # Disconnects Prisma, closes Redis, cancels feed readers
        await container.close()
        logger.info("Community messaging API stopped, DI container closed")

    app = FastAPI(
        title="Community Messaging API",
        description="Conversation timelines, inquiry threads and realtime delivery",
        version=__version__,
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container, app)

    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==================== ERROR MAPPING ====================

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(AccessDeniedError)
    async def access_denied_handler(request: Request, exc: AccessDeniedError):
        return _error(status.HTTP_403_FORBIDDEN, str(exc))

    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError):
        content = {"error": exc.message}
        if exc.field:
            content["field"] = exc.field
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)

    @app.exception_handler(RecordStoreError)
    async def record_store_handler(request: Request, exc: RecordStoreError):
        if isinstance(exc, SendFailedError):
            increment_error(MetricsErrorType.SEND_FAILED)
        else:
            increment_error(MetricsErrorType.STORE_FAILED)
        logger.error(f"[{request.method} {request.url.path}] {type(exc).__name__}: {exc}")
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {errors}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "Validation error", "details": jsonable_encoder(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # ==================== ROUTES ====================

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(conversations_router)
    app.include_router(inquiries_router)
    app.include_router(realtime_router)
    app.include_router(metrics_router)

    return app

