"""
Pilot Tracker API - Main FastAPI Application
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Any

import psutil
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pilot_tracker.api import (
    get_current_user,
    programs_router,
    rpc_router,
    sessions_router,
    sites_router,
)
from pilot_tracker.config import get_settings
from pilot_tracker.database import check_db_connection
from pilot_tracker.models.user import User

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.
    """
    # Startup
    logger.info("Starting Pilot Tracker API...")
    logger.info(f"Environment: debug={settings.debug}")

    if await check_db_connection():
        logger.info("Database connection verified")
    else:
        logger.warning("Database connection failed - service may not work correctly")

    yield

    # Shutdown
    logger.info("Shutting down Pilot Tracker API...")


app = FastAPI(
    title=settings.app_name,
    description="Pilot program, site and submission tracking",
    version=API_VERSION,
    lifespan=lifespan,
)

# =============================================================================
# CORS Middleware (must be added early, before routes)
# =============================================================================
# Allowed origins are configured via the CORS_ORIGINS env var.

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# =============================================================================
# Exception Handlers (with CORS headers for cross-origin error responses)
# =============================================================================


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers based on request origin."""
    origin = request.headers.get("origin", "")
    if origin in settings.cors_origins:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, PATCH",
            "Access-Control-Allow-Headers": "*",
        }
    return {}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent JSON response and CORS headers."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
        },
        headers=_get_cors_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with CORS headers."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "status_code": 500,
        },
        headers=_get_cors_headers(request),
    )


# =============================================================================
# Health Check Endpoints
# =============================================================================


@app.get("/health", tags=["Health"])
async def health() -> dict[str, str]:
    """
    Basic liveness check endpoint.

    Returns 200 OK if the service is running.
    """
    return {"status": "ok"}


@app.get("/health/ready", tags=["Health"])
async def health_ready() -> dict[str, Any]:
    """
    Readiness check that verifies database connectivity.

    Returns 503 if the database is not accessible.
    """
    if not await check_db_connection():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )

    return {
        "status": "ready",
        "database": "connected",
    }


@app.get("/health/live", tags=["Health"])
async def health_live() -> dict[str, Any]:
    """
    Detailed health for monitoring dashboards.

    Always returns 200; degraded dependencies are reported in ``checks``.
    """
    health_status: dict[str, Any] = {
        "status": "ok",
        "version": API_VERSION,
        "checks": {},
    }

    db_healthy = await check_db_connection()
    health_status["checks"]["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "message": "Connection successful" if db_healthy else "Connection failed",
    }
    if not db_healthy:
        health_status["status"] = "degraded"

    try:
        process = psutil.Process(os.getpid())
        memory_info = process.memory_info()
        health_status["checks"]["resources"] = {
            "status": "healthy",
            "memory_mb": round(memory_info.rss / 1024 / 1024, 2),
            "cpu_percent": process.cpu_percent(),
        }
    except psutil.Error:
        health_status["checks"]["resources"] = {
            "status": "unknown",
            "message": "Could not retrieve resource info",
        }

    return health_status


# =============================================================================
# API Info
# =============================================================================


@app.get("/", tags=["Info"])
async def root() -> dict[str, str]:
    """API root - returns basic info."""
    return {
        "name": settings.app_name,
        "version": API_VERSION,
        "docs": "/docs",
    }


# =============================================================================
# API Routes
# =============================================================================

app.include_router(rpc_router)
app.include_router(sites_router)
app.include_router(programs_router)
app.include_router(sessions_router)


@app.get("/api/me", tags=["Auth"])
async def get_me(user: User = Depends(get_current_user)) -> dict:
    """
    Get the current authenticated user's information.

    This is a protected endpoint that requires a valid JWT token.
    """
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "company_id": str(user.company_id) if user.company_id else None,
        "is_company_admin": user.is_company_admin,
    }
