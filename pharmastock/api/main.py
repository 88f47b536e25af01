"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from pharmastock.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from pharmastock.api.middleware.error_handler import setup_exception_handlers
from pharmastock.api.routes import (
    audit_logs_router,
    health_router,
    medicines_router,
    sales_router,
)
from pharmastock.config import configure_logging, get_logger, get_settings
from pharmastock.infrastructure.storage.sqlite import close_pool, get_pool
from pharmastock.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate the schema and open the pool on startup; close the pool on shutdown."""
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
        db_path=str(settings.storage.db_path),
    )

    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("database_init_failed", failed_versions=failed)
        raise RuntimeError(f"Migrations failed: {', '.join(failed)}")
    await get_pool()

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    await close_pool()

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the app: middleware, error handlers, routers and the media mount."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Pharmacy inventory: catalog, store/dispenser stock, sales and audit trail",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(medicines_router)
    app.include_router(sales_router)
    app.include_router(audit_logs_router)

    # Uploaded medicine images
    image_dir = settings.storage.image_dir
    image_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.api.media_url, StaticFiles(directory=str(image_dir)), name="media")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "pharmastock.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
