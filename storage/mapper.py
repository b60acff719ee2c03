import json
import logging
from datetime import datetime

from app.core.exceptions import MappingError

logger = logging.getLogger(__name__)


def decode_array(value):
    """
    Array columns come back as a list from PostgreSQL and as JSON text from
    SQLite when the result is not typed.
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise MappingError(f"array column is not valid JSON: {e}") from e
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise MappingError(f"expected an array of strings, got {value!r}")
    return list(value)


def _check_type(column, value, expected):
    if expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif expected is datetime:
        ok = isinstance(value, datetime)
    else:
        ok = isinstance(value, expected)

    if not ok:
        raise MappingError(
            f"column {column!r} expected {expected.__name__}, got {type(value).__name__}",
            details={"column": column},
        )


def map_row(entity, row):
    """
    Turn one positional result row into the entity's record. The row must
    carry exactly the entity's columns in table order.
    """
    values = tuple(row)
    if len(values) != len(entity.columns):
        logger.error(
            "Schema drift on %s: expected %d columns, got %d",
            entity.name, len(entity.columns), len(values)
        )
        raise MappingError(
            f"expected {len(entity.columns)} columns, got {len(values)}",
            details={"entity": entity.name},
        )

    data = {}
    try:
        for column, value in zip(entity.columns, values):
            if column in entity.array_columns:
                value = decode_array(value)
            elif value is None:
                if column not in entity.nullable:
                    raise MappingError(f"column {column!r} is unexpectedly NULL", details={"column": column})
            else:
                _check_type(column, value, entity.column_types[column])
            data[column] = value
    except MappingError:
        logger.error("Schema drift on %s: row %r does not match", entity.name, values)
        raise

    try:
        return entity.record_cls.from_dict(data)
    except ValueError as e:
        logger.error("Schema drift on %s: %s", entity.name, e)
        raise MappingError(str(e), details={"entity": entity.name}) from e


def map_rows(entity, rows):
    return [map_row(entity, row) for row in rows]
