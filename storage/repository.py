import logging
from contextlib import contextmanager

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    EditConflictError,
    QueryTimeoutError,
    RecordNotFoundError,
    StorageError,
)
from storage.dialects import dialect_for
from storage.filters import calculate_metadata
from storage.mapper import map_row
from storage.query import build_list_query, to_statement
from storage.schema import ACTORS, DIRECTORS, MOVIES

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 3.0


class Repository:
    """
    Get/Insert/Update/Delete/List for one entity type over a shared engine.

    The engine (and so the connection pool) is passed in; the repository
    keeps no other state between calls.
    """

    def __init__(self, engine, entity, dialect=None, query_timeout=DEFAULT_QUERY_TIMEOUT):
        self.engine = engine
        self.entity = entity
        self.table = entity.table
        self.dialect = dialect or dialect_for(engine)
        self.query_timeout = query_timeout

    @contextmanager
    def _translate_errors(self, action, **context):
        try:
            yield
        except SQLAlchemyError as e:
            details = {"entity": self.entity.name, "action": action, **context}
            if self.dialect.is_timeout(e):
                logger.warning("Query timed out after %ss: %s", self.query_timeout, details)
                raise QueryTimeoutError(details=details) from e
            logger.error("DB error during %s on %s %s: %s", action, self.entity.name, context, e, exc_info=True)
            raise StorageError(details=details) from e

    def _values(self, record):
        return {c: getattr(record, c) for c in self.entity.writable}

    def _has_version(self):
        return "version" in self.entity.columns

    def insert(self, record):
        table = self.table
        returning = [table.c.id, table.c.created_at]
        if self._has_version():
            returning.append(table.c.version)

        stmt = insert(table).values(**self._values(record)).returning(*returning)

        with self._translate_errors("insert"):
            with self.engine.begin() as conn:
                row = conn.execute(stmt).one()

        record.id = row.id
        record.created_at = row.created_at
        if self._has_version():
            record.version = row.version

        logger.debug("Inserted %s id=%s", self.entity.name, record.id)
        return record

    def get(self, id):
        if id < 1:
            raise RecordNotFoundError(details={"id": id})

        stmt = select(*self.table.columns).where(self.table.c.id == id)

        with self._translate_errors("get", id=id):
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()

        if row is None:
            raise RecordNotFoundError(details={"id": id})

        return map_row(self.entity, row)

    def get_by_field(self, field, value):
        """
        First record (lowest id) whose scalar column *field* equals *value*.
        """
        if field not in self.entity.writable or field in self.entity.array_columns:
            raise ValueError(f"{self.entity.name} cannot be looked up by {field!r}")

        column = self.table.c[field]
        stmt = select(*self.table.columns).where(column == value).order_by(self.table.c.id).limit(1)

        with self._translate_errors("get_by_field", field=field):
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()

        if row is None:
            raise RecordNotFoundError(details={field: value})

        return map_row(self.entity, row)

    def update(self, record):
        """
        Write *record* back. For a versioned entity the statement only
        matches while the stored version still equals record.version; the
        check and the write are one statement, so no other writer can slip
        in between them.
        """
        if record.id is None or record.id < 1:
            raise RecordNotFoundError(details={"id": record.id})

        table = self.table
        stmt = update(table).where(table.c.id == record.id).values(**self._values(record))

        if self._has_version():
            stmt = stmt.values(version=table.c.version + 1).returning(table.c.version)
        if self.entity.versioned:
            stmt = stmt.where(table.c.version == record.version)

        with self._translate_errors("update", id=record.id):
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                if self._has_version():
                    row = result.first()
                    matched = row is not None
                else:
                    matched = result.rowcount > 0

        if not matched:
            if self.entity.versioned:
                logger.warning(
                    "Edit conflict on %s id=%s expected version=%s",
                    self.entity.name, record.id, record.version
                )
                raise EditConflictError(details={"id": record.id, "version": record.version})
            raise RecordNotFoundError(details={"id": record.id})

        if self._has_version():
            record.version = row.version

        return record

    def delete(self, id):
        if id < 1:
            raise RecordNotFoundError(details={"id": id})

        stmt = delete(self.table).where(self.table.c.id == id)

        with self._translate_errors("delete", id=id):
            with self.engine.begin() as conn:
                rows_affected = conn.execute(stmt).rowcount

        if rows_affected == 0:
            raise RecordNotFoundError(details={"id": id})

    def list(self, text_query, tags, filters):
        """
        One page of records matching the text query and tags, plus the
        pagination metadata. No match is an empty page, not an error.
        """
        sql, params = build_list_query(self.entity, text_query, tags, filters, self.dialect)
        stmt = to_statement(self.entity, sql)

        with self._translate_errors("list", filters=repr(filters)):
            with self.engine.begin() as conn:
                with self.dialect.statement_timeout(conn, self.query_timeout):
                    rows = conn.execute(stmt, params).all()

        total_records = rows[0][0] if rows else 0
        records = [map_row(self.entity, tuple(row)[1:]) for row in rows]

        return records, calculate_metadata(total_records, filters.page, filters.page_size)


class Models:
    def __init__(self, engine, dialect=None, query_timeout=DEFAULT_QUERY_TIMEOUT):
        dialect = dialect or dialect_for(engine)
        self.movies = Repository(engine, MOVIES, dialect, query_timeout)
        self.actors = Repository(engine, ACTORS, dialect, query_timeout)
        self.directors = Repository(engine, DIRECTORS, dialect, query_timeout)
