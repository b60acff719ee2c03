import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from storage.dialects import dialect_for
from storage.schema import metadata

logger = logging.getLogger(__name__)


def open_engine(url, pool_size=25, pool_timeout=30, echo=False):
    """
    Create the engine (and its connection pool) for *url*.

    An in-memory SQLite database lives inside a single connection, so it is
    shared through a StaticPool instead of a connection per thread.
    """
    url = make_url(url)
    kwargs = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_size=pool_size, pool_timeout=pool_timeout, pool_pre_ping=True)

    engine = create_engine(url, **kwargs)
    dialect_for(engine).install(engine)

    logger.info("Opened %s engine for %s", engine.dialect.name, url.render_as_string(hide_password=True))
    return engine


def create_schema(engine):
    metadata.create_all(engine)
    logger.info("Schema ready: %s", ", ".join(sorted(metadata.tables)))


def ping(engine):
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
