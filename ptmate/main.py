"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Tests build isolated apps against an in-memory database

For local development:
    uvicorn ptmate.main:app --reload

For production:
    gunicorn ptmate.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import register_exception_handlers
from .api.routes import assessments, auth, clients, dashboard, health, measurements, photos, sessions
from .config.settings import Settings, get_settings
from .infrastructure.database import DatabaseConfig, create_database
from .infrastructure.storage import StorageClient, StorageConfig, create_storage_client

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def build_storage_client(settings: Settings) -> Optional[StorageClient]:
    """Mock storage, real R2, or None (placeholder paths) depending on settings."""
    if settings.r2_mock_mode:
        return create_storage_client(mock_mode=True)
    if not settings.r2_configured:
        return create_storage_client(config=None)
    return create_storage_client(
        config=StorageConfig(
            access_key_id=settings.r2_access_key_id,
            secret_access_key=settings.r2_secret_access_key,
            bucket_name=settings.r2_bucket_name,
            endpoint_url=settings.r2_endpoint,
            public_url=settings.r2_public_url,
        )
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup refuses to continue with incomplete configuration, then makes
    sure the schema exists. Shutdown releases pooled connections.
    """
    # Startup
    settings: Settings = app.state.settings

    logger.info(
        "PT Mate API starting",
        extra={
            "version": settings.api_version,
            "environment": settings.environment,
            "mock_mode": {"r2": settings.r2_mock_mode},
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
        raise RuntimeError(
            f"Missing required configuration: {', '.join(missing_fields)}"
        )

    if settings.is_development and not settings.jwt_secret:
        logger.warning("JWT_SECRET not set; using the development signing key")

    app.state.database.create_schema()

    yield

    # Shutdown
    app.state.database.dispose()
    logger.info("PT Mate API shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Pass settings to
    override the environment (tests use an in-memory database).
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Practice management for personal trainers.

        ## Features

        - Manage clients and their session packages
        - Schedule sessions and track attendance
        - Record body measurements and fitness assessments
        - Keep progress photos
        - Dashboard and calendar views

        ## Authentication

        Register or log in to get a token, then send it with every request
        as `Authorization: Bearer <token>`.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Shared resources, created once per application
    app.state.settings = settings
    app.state.database = create_database(
        DatabaseConfig(url=settings.database_url, echo=settings.database_echo)
    )
    app.state.storage = build_storage_client(settings)

    # CORS middleware
    # Configure allowed origins via CORS_ORIGINS environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    prefix = settings.api_prefix

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"])
    app.include_router(clients.router, prefix=f"{prefix}/clients", tags=["Clients"])
    app.include_router(sessions.router, prefix=f"{prefix}/sessions", tags=["Sessions"])
    app.include_router(measurements.router, prefix=prefix, tags=["Measurements"])
    app.include_router(assessments.router, prefix=prefix, tags=["Assessments"])
    app.include_router(photos.router, prefix=prefix, tags=["Photos"])
    app.include_router(dashboard.router, prefix=prefix, tags=["Dashboard"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "PT Mate API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "ptmate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
