import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import Optional

from app.api.routes import actors, directors, health, movies
from app.api.errors import data_error_handler
from app.core.config import Settings, load_settings
from app.core.exceptions import DataError
from storage.database import create_schema, open_engine
from storage.repository import Models

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = open_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
        )
        if settings.create_schema:
            create_schema(engine)

        app.state.settings = settings
        app.state.engine = engine
        app.state.models = Models(engine, query_timeout=settings.query_timeout_seconds)
        logger.info("Starting %s server (version %s)", settings.environment, settings.version)
        yield
        engine.dispose()

    app = FastAPI(
        title="Movies API",
        version=settings.version,
        lifespan=lifespan,
    )

    app.include_router(health.router, prefix="/v1", tags=["health"])
    app.include_router(movies.router, prefix="/v1/movies", tags=["movies"])
    app.include_router(actors.router, prefix="/v1/actors", tags=["actors"])
    app.include_router(directors.router, prefix="/v1/directors", tags=["directors"])
    app.add_exception_handler(DataError, data_error_handler)

    return app


app = create_app()
