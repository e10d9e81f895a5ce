"""
Proof Service - Main Application
================================

FastAPI application exposing proof lookups, bindings and proof chains.

Version: 0.1.0
"""

import uuid
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.proof.routes import proofs
from shared.config import settings
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse
from shared.proof import ProofClientError, get_proof_client


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="proof",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "proof_service_starting",
        environment=settings.environment.value,
        port=settings.port,
    )

    try:
        client = get_proof_client()
        logger.info("proof_client_ready", mode=client.mode.value)
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    logger.info("proof_service_shutting_down")


app = FastAPI(
    title="ProofBind Proof Service",
    description="Identity proof lookups, bindings and proof chains",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id to every log line of the request."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    clear_context()
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and the proof API.
    """
    components: dict[str, dict[str, Any]] = {}

    try:
        proof_health = await get_proof_client().health()
        components["proof_api"] = {
            "status": "healthy",
            "hello": proof_health.hello,
            "platforms": proof_health.platforms,
        }
    except ProofClientError as e:
        logger.warning("proof_api_unhealthy", error=e.message)
        components["proof_api"] = {"status": "unhealthy", "error": e.message}

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="proof",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "ProofBind Proof Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    proofs.router,
    prefix="/api/v1/proofs",
    tags=["Proofs"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(ProofClientError)
async def proof_client_exception_handler(
    request: Request, exc: ProofClientError
) -> JSONResponse:
    """Map proof client rejections to their status codes."""
    logger.warning(
        "proof_client_error",
        status_code=exc.status_code,
        error=exc.message,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    body = ErrorResponse(
        error=exc.message,
        error_code=type(exc).__name__,
        details={"status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json"),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.proof.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
