"""
Engine specific pieces of the list query.

PostgreSQL does full-text matching and array containment natively. SQLite
gets two registered SQL functions that do the same job in Python, which keeps
the query shape identical on both engines: only the two predicates and the
way a statement is cancelled differ.
"""
import json
import logging
import threading
from contextlib import contextmanager

from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError

from storage.tokenizer import matches

logger = logging.getLogger(__name__)

# SQLSTATE raised by PostgreSQL when statement_timeout fires
QUERY_CANCELED = "57014"


class Dialect:
    name = "generic"

    def text_match(self, column: str, param: str) -> str:
        raise NotImplementedError

    def tags_contain(self, column: str, param: str) -> str:
        raise NotImplementedError

    def tags_empty(self, param: str) -> str:
        raise NotImplementedError

    def install(self, engine) -> None:
        pass

    @contextmanager
    def statement_timeout(self, conn, seconds: float):
        yield

    def is_timeout(self, exc: Exception) -> bool:
        return False


class PostgresDialect(Dialect):
    name = "postgresql"

    def text_match(self, column, param):
        return f"to_tsvector('simple', {column}) @@ plainto_tsquery('simple', :{param})"

    def tags_contain(self, column, param):
        return f"{column} @> CAST(:{param} AS text[])"

    def tags_empty(self, param):
        return f"CAST(:{param} AS text[]) = '{{}}'"

    @contextmanager
    def statement_timeout(self, conn, seconds):
        # SET LOCAL only lasts until the surrounding transaction ends, so the
        # pooled connection goes back without the setting
        millis = int(seconds * 1000)
        conn.execute(text(f"SET LOCAL statement_timeout = {millis}"))
        yield

    def is_timeout(self, exc):
        orig = getattr(exc, "orig", None)
        return getattr(orig, "sqlstate", None) == QUERY_CANCELED


class SQLiteDialect(Dialect):
    name = "sqlite"

    def text_match(self, column, param):
        return f"ts_match({column}, :{param})"

    def tags_contain(self, column, param):
        return f"array_contains({column}, :{param})"

    def tags_empty(self, param):
        return f":{param} = '[]'"

    def install(self, engine):
        event.listen(engine, "connect", register_functions)

    @contextmanager
    def statement_timeout(self, conn, seconds):
        dbapi_conn = conn.connection.driver_connection
        timer = threading.Timer(seconds, dbapi_conn.interrupt)
        timer.daemon = True
        timer.start()
        try:
            yield
        finally:
            timer.cancel()

    def is_timeout(self, exc):
        return isinstance(exc, OperationalError) and "interrupted" in str(exc.orig)


def _ts_match(document, query):
    return int(matches(document or "", query or ""))

def _array_contains(column_json, tags_json):
    column = json.loads(column_json) if column_json else []
    tags = json.loads(tags_json) if tags_json else []
    return int(set(tags).issubset(column))

def register_functions(dbapi_conn, connection_record):
    dbapi_conn.create_function("ts_match", 2, _ts_match, deterministic=True)
    dbapi_conn.create_function("array_contains", 2, _array_contains, deterministic=True)


DIALECTS = {
    "postgresql": PostgresDialect(),
    "sqlite": SQLiteDialect(),
}

def dialect_for(engine) -> Dialect:
    name = engine.dialect.name
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(f"Unsupported database engine: {name}") from None
