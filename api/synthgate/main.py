"""
SynthSEO Gate - request admission for the publishing API.

FastAPI application that rate limits and authenticates calls from the
SynthSEO publishing service before they reach content handlers.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from synthgate import __version__
from synthgate.config import settings, validate_security_settings
from synthgate.database import AsyncSessionLocal, init_db
from synthgate.errors import AdmissionRejected, GateUnavailableError, PayloadRejected
from synthgate.logging_setup import configure_logging
from synthgate.middleware.rate_limit import limiter
from synthgate.routers.admin import router as admin_router
from synthgate.routers.status import router as status_router
from synthgate.schemas.errors import ErrorData, ErrorResponse
from synthgate.services.options import ApiKeyStore

# Import models to register them with Base.metadata
from synthgate.models import RateLimitWindow, RequestAuditLog, SiteOption  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    validate_security_settings()
    await init_db()
    async with AsyncSessionLocal() as session:
        if await ApiKeyStore.for_session(session).ensure_key():
            logger.info("api_key_generated")
    yield


app = FastAPI(
    title="SynthSEO Gate",
    description="Rate limiting and authentication for the SynthSEO publishing API",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter state
app.state.limiter = limiter

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH"],
    allow_headers=["*"],
)

# Include routers
app.include_router(status_router)
app.include_router(admin_router)


# --- Middleware ---


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception Handlers ---


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Render the shared error body."""
    body = ErrorResponse(
        code=code,
        message=message,
        data=ErrorData(status=status_code, details=details),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(AdmissionRejected)
async def admission_rejected_handler(request: Request, exc: AdmissionRejected) -> JSONResponse:
    """Render gate rejections (429 throttled, 401 unauthenticated)."""
    decision = exc.decision
    return error_response(request, decision.http_status, decision.code, decision.message)


@app.exception_handler(GateUnavailableError)
async def gate_unavailable_handler(request: Request, exc: GateUnavailableError) -> JSONResponse:
    """Stores are down: refuse the request rather than admit it unchecked."""
    return error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "gate_unavailable",
        "Authentication service temporarily unavailable",
    )


@app.exception_handler(PayloadRejected)
async def payload_rejected_handler(request: Request, exc: PayloadRejected) -> JSONResponse:
    return error_response(request, exc.status_code, exc.code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def admin_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "rate_limit_exceeded",
        f"Rate limit exceeded: {exc.detail}",
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Flatten ``{"code", "message"}`` details into the shared error body."""
    detail = exc.detail
    if isinstance(detail, dict) and "code" in detail:
        return error_response(
            request, exc.status_code, detail["code"], detail.get("message", "")
        )
    return error_response(request, exc.status_code, "http_error", str(detail))


def _sanitize_error_detail(error: dict[str, Any]) -> dict[str, Any]:
    """Sanitize Pydantic error detail to be JSON-serializable."""
    sanitized = {}
    for key, value in error.items():
        if key == "ctx":
            # Context may contain non-serializable objects like ValueError
            sanitized[key] = {k: str(v) for k, v in value.items()} if isinstance(value, dict) else str(value)
        elif key == "loc":
            sanitized[key] = [str(loc) for loc in value]
        else:
            sanitized[key] = value
    return sanitized


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with the shared error body."""
    errors = [_sanitize_error_detail(e) for e in exc.errors()]
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "Validation error")
        message = f"{field}: {msg}" if field else msg
    else:
        message = "Validation error"

    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        message,
        details=errors,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with the shared error body."""
    logger.exception("unhandled_error")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# --- Health Check ---


@app.get("/api/v1/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the API is running. Not behind the gate.
    """
    return {"status": "healthy"}
