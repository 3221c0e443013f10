"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from forge.config import settings
from forge.middleware.error_handler import ErrorHandlerMiddleware
from forge.middleware.request_logger import RequestLoggerMiddleware
from forge.api.v1.routers import farms, geometry, site_evaluations

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Storage backend: {settings.storage_backend}, map provider: {settings.map_provider}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute "
                f"({'enabled' if settings.rate_limit_enabled else 'disabled'})")

    yield

    # Shutdown
    from forge.infrastructure.elevation_client import close_elevation_client
    logger.info("Shutting down application...")
    await close_elevation_client()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Site Evaluation API for farm infrastructure sales

    Sales teams draw land boundaries, record site evaluations and generate
    infrastructure proposals from them.

    ## Features

    - **Boundary Geometry**: Area and perimeter of map-drawn polygons on a
      spherical Earth or in the local UTM projection
    - **Cost Estimation**: Server-side cost estimates for Polyhouse, Shade Net
      and Open Field installations from a fixed per-acre rate table
    - **Site Evaluations**: Owner-scoped draft/submitted lifecycle with cost
      recomputed whenever area or infrastructure changes
    - **Proposals**: PDF proposals for submitted evaluations
    - **Slope Estimation**: Terrain elevation lookup with automatic retries
    - **Rate Limiting**: Protects the API from abuse

    Every request identifies its caller with the `X-User-Id` header.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(farms.router, prefix="/api/v1")
app.include_router(site_evaluations.router, prefix="/api/v1")
app.include_router(geometry.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("forge.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
