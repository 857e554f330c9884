"""
FastAPI Application Setup

Main entry point for the QuoteMatch API application.

Responsibility:
    - FastAPI app initialization
    - Router registration (matching, quotes)
    - CORS middleware configuration
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.api.routers import matching, quotes
from src.api.schemas.common import ErrorResponse
from src.domain.shared.exceptions import (
    DomainException,
    MatchNotFoundError,
    PersistenceError,
    QuoteNotFoundError,
)
from src.infrastructure.persistence.redis.connection import close_connections

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: Health status (always "ok" if endpoint responds)
        version: API version
        timestamp: Unix timestamp of health check
    """

    status: str = "ok"
    version: str = API_VERSION
    timestamp: float


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Log every request with method, path, status code and duration.

    Logging Format:
        INFO: "Incoming request: POST /api/matching/find"
        INFO: "Request completed: POST /api/matching/find - 200 - 0.012s"
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )
    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def _error_code(exc: Exception) -> str:
    """
    Examples:
        >>> _error_code(QuoteNotFoundError(1))
        'QUOTE_NOT_FOUND'
    """
    name = exc.__class__.__name__.removesuffix("Error")
    return "".join(
        f"_{char}" if char.isupper() and index else char
        for index, char in enumerate(name)
    ).upper()


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Convert DomainException subclasses into ErrorResponse payloads.

    Mapping:
        - QuoteNotFoundError, MatchNotFoundError -> 404 Not Found
        - PersistenceError -> 503 Service Unavailable
        - Other DomainException -> 400 Bad Request
    """
    details = {"exception_type": exc.__class__.__name__}
    if isinstance(exc, QuoteNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        details["quote_id"] = exc.quote_id
    elif isinstance(exc, MatchNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        details["source_quote_id"] = exc.source_quote_id
        details["matched_quote_id"] = exc.matched_quote_id
    elif isinstance(exc, PersistenceError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        if exc.operation:
            details["operation"] = exc.operation
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    error_response = ErrorResponse(
        code=_error_code(exc),
        message=str(exc),
        details=details,
    )

    logger.warning(
        f"Domain exception: {exc.__class__.__name__} - {exc} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(status_code=status_code, content=error_response.model_dump())


async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all: 500 Internal Server Error with full traceback in the log."""
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc), "type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {exc} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


# ============================================================================
# APP FACTORY
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_connections()


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Configuration:
        - CORS: Allow all origins (development mode)
        - Routers: /api/matching, /api/quotes
        - Health: GET /health

    Usage:
        >>> app = create_app()
        >>> # uvicorn src.api.main:app --reload
    """
    app = FastAPI(
        title="QuoteMatch API",
        version=API_VERSION,
        description=(
            "Historical freight quote matching and price suggestion. "
            "Find similar past quotes and reuse their agreed prices."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(matching.router, prefix="/api")
    app.include_router(quotes.router, prefix="/api")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        tags=["health"],
    )
    async def health_check() -> HealthCheckResponse:
        return HealthCheckResponse(timestamp=time.time())

    logger.info("FastAPI application created successfully")
    logger.info("Registered routers: /api/matching, /api/quotes")

    return app


# Usage: uvicorn src.api.main:app --reload
app = create_app()
