import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from wewinbid.api.v1.router import api_v1_router
from wewinbid.config import settings
from wewinbid.core.errors import register_exception_handlers
from wewinbid.core.logging import setup_logging
from wewinbid.utils import ensure_directory_exists

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        description="API for the WeWinBid tender management platform.",
        version=settings.APP_VERSION,
    )

    # --- MIDDLEWARE ---
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- EVENT HANDLERS (STARTUP/SHUTDOWN) ---
    @app.on_event("startup")
    async def startup_event():
        setup_logging()
        logger.info("--- Application Startup ---")
        ensure_directory_exists(settings.UPLOAD_BASE_DIR)

        # Schema is managed by Alembic; create_all is only for local SQLite setups
        if settings.AUTO_CREATE_TABLES:
            from wewinbid.db.database import create_db_and_tables
            create_db_and_tables()

        if settings.JOBS_INTERVAL_MINUTES > 0:
            from wewinbid.modules.jobs.services.jobs import start_job_thread
            start_job_thread()

        logger.info("--- Startup Complete ---")

    @app.on_event("shutdown")
    async def shutdown_event():
        from wewinbid.modules.jobs.services.jobs import stop_job_thread
        stop_job_thread()
        logger.info("--- Application Shutdown ---")

    app.include_router(api_v1_router, prefix="/api/v1")

    return app


app = create_app()
