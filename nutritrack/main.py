import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nutritrack.api.router import api_router
from nutritrack.core.app_logging import configure_logging
from nutritrack.core.config import Settings, settings
from nutritrack.core.database import init_database, probe_stored_routines
from nutritrack.core.db import Database
from nutritrack.core.errors import register_exception_handlers
from nutritrack.core.seed_catalog import seed_catalog

logger = logging.getLogger(__name__)

SERVICE_NAME = "NutriTrack API"


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database.from_settings(app_settings)
        app.state.database = database
        try:
            await init_database(database, app_settings)
            app.state.stored_routines = await probe_stored_routines(database)

            if app_settings.SEED_CATALOG:
                async with database.session() as session:
                    await seed_catalog(session)

            logger.info("%s %s started", SERVICE_NAME, app_settings.APP_VERSION)
            yield
        finally:
            await database.dispose()
            logger.info("Database connections closed")

    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(title=SERVICE_NAME, version=app_settings.APP_VERSION, lifespan=lifespan)
    app.state.started_at = time.monotonic()
    app.state.stored_routines = frozenset()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "service": SERVICE_NAME,
            "version": app_settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to {SERVICE_NAME}",
            "version": app_settings.APP_VERSION,
            "endpoints": {
                "auth": "/api/auth",
                "users": "/api/users",
                "meals": "/api/meals",
                "workouts": "/api/workouts",
                "goals": "/api/goals",
                "health": "/health",
                "docs": "/docs",
            },
        }

    return app


app = create_app()
