"""Main FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from rfheatmap.core.config import settings
from rfheatmap.core.logging import configure_logging
from rfheatmap.api.deps import get_mount_resolver, get_pattern_loader, log_pattern_diagnostics
from rfheatmap.api.v1 import propagation as propagation_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    log_pattern_diagnostics(get_pattern_loader(), get_mount_resolver())
    yield
    # Shutdown
    logger.info("Shutting down application")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title=settings.APP_NAME,
        description="Estimate WiFi signal strength heatmaps from access points, walls and buildings",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    application.include_router(
        propagation_routes.router,
        prefix="/api/v1/propagation",
        tags=["propagation"]
    )

    @application.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    @application.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION
        }

    return application


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rfheatmap.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
