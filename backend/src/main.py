"""ONDC Stage Validator - Main FastAPI Application

Exposes the /on_select conformance validator over HTTP, together with
health and metrics endpoints.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from config import get_settings
from infrastructure.cache import RedisTransactionStore
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router
from api.v1.validation.router import router as validation_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Startup: connect the shared transaction store
    - Shutdown: close the store connection
    """
    logger.info("Stage validator starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    app.state.transaction_store = RedisTransactionStore.from_url(
        settings.REDIS_URL,
        default_ttl=settings.TTL_IN_SECONDS,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
    )

    yield

    logger.info("Stage validator shutting down...")
    await app.state.transaction_store.close()


app = FastAPI(
    title="ONDC Stage Validator",
    description="Conformance checks for ONDC retail transaction stages",
    version="0.1.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions.

    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


app.include_router(validation_router, prefix="/api/v1")
app.include_router(observability_router)
