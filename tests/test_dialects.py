import sqlite3

import pytest
from sqlalchemy.exc import OperationalError

from storage.dialects import (
    PostgresDialect,
    SQLiteDialect,
    _array_contains,
    _ts_match,
    dialect_for,
)


class FakeEngineDialect:
    def __init__(self, name):
        self.name = name

class FakeEngine:
    def __init__(self, name):
        self.dialect = FakeEngineDialect(name)


class FakeQueryCanceled(Exception):
    sqlstate = "57014"


# --------------------------
# dialect lookup
# --------------------------

def test_dialect_for_known_engines():
    assert isinstance(dialect_for(FakeEngine("postgresql")), PostgresDialect)
    assert isinstance(dialect_for(FakeEngine("sqlite")), SQLiteDialect)

def test_dialect_for_unknown_engine():
    with pytest.raises(ValueError):
        dialect_for(FakeEngine("mysql"))

# --------------------------
# SQLite functions
# --------------------------

def test_ts_match():
    assert _ts_match("The Matrix Reloaded", "matrix") == 1
    assert _ts_match("Dune", "matrix") == 0
    assert _ts_match(None, "matrix") == 0

def test_array_contains():
    assert _array_contains('["sci-fi", "drama"]', '["drama"]') == 1
    assert _array_contains('["sci-fi", "drama"]', '["drama", "sci-fi"]') == 1
    assert _array_contains('["sci-fi"]', '["drama"]') == 0
    assert _array_contains('["sci-fi"]', '[]') == 1
    assert _array_contains(None, '["drama"]') == 0

def test_array_contains_is_case_sensitive():
    # same as text[] @> on PostgreSQL
    assert _array_contains('["Drama"]', '["drama"]') == 0

# --------------------------
# timeout detection
# --------------------------

def test_sqlite_timeout_detection():
    interrupted = OperationalError("SELECT 1", {}, sqlite3.OperationalError("interrupted"))
    locked = OperationalError("SELECT 1", {}, sqlite3.OperationalError("database is locked"))

    assert SQLiteDialect().is_timeout(interrupted)
    assert not SQLiteDialect().is_timeout(locked)

def test_postgres_timeout_detection():
    canceled = OperationalError("SELECT 1", {}, FakeQueryCanceled("canceling statement due to statement timeout"))
    other = OperationalError("SELECT 1", {}, Exception("connection refused"))

    assert PostgresDialect().is_timeout(canceled)
    assert not PostgresDialect().is_timeout(other)
