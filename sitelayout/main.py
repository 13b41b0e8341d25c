"""
Solar Site Layouts API - Main FastAPI Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitelayout import __version__
from sitelayout.api import layouts_router, sites_router
from sitelayout.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.
    """
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: debug={settings.debug}")
    
    yield
    
    logger.info(f"Shutting down {settings.app_name}...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Solar PV site layout: KML/KMZ ingestion, frame placement and render export",
    version=__version__,
    lifespan=lifespan,
)

# =============================================================================
# CORS Middleware (must be added early, before routes)
# =============================================================================
# Allowed origins are configured in sitelayout/config.py via CORS_ORIGINS env var.

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
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
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
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
# Health Check / Info
# =============================================================================


@app.get("/health", tags=["Health"])
async def health() -> dict[str, str]:
    """
    Basic liveness check endpoint.
    
    Returns 200 OK if the service is running.
    """
    return {"status": "ok"}


@app.get("/", tags=["Info"])
async def root() -> dict[str, str]:
    """API root - returns basic info."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }


# =============================================================================
# API Routes
# =============================================================================

app.include_router(sites_router)
app.include_router(layouts_router)
