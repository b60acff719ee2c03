from sqlalchemy import Integer, bindparam, column, text

from app.core.exceptions import FilterValidationError
from storage.dialects import PostgresDialect

TOTAL_COLUMN = "total_records"


def build_list_query(entity, text_query, tags, filters, dialect=None):
    """
    Build the search query for one page of *entity* rows.

    Returns (sql, params). Everything the client sent travels in params;
    the sort column and direction are the only values placed in the SQL text
    and both come out of the validated Filters.
    """
    dialect = dialect or PostgresDialect()

    sort_column = filters.sort_column()
    if sort_column not in entity.columns:
        raise FilterValidationError("unsafe sort key", details={"sort": filters.sort})
    sort_direction = filters.sort_direction()

    text_clause = dialect.text_match(entity.text_field, "text_query")
    tags_clause = dialect.tags_contain(entity.tag_field, "tags")

    sql = f"""
SELECT count(*) OVER() AS {TOTAL_COLUMN}, {", ".join(entity.columns)}
FROM {entity.table.name}
WHERE ({text_clause} OR :text_query = '')
AND ({tags_clause} OR {dialect.tags_empty("tags")})
ORDER BY {sort_column} {sort_direction}, id ASC
LIMIT :limit OFFSET :offset"""

    params = {
        "text_query": text_query or "",
        "tags": list(tags or []),
        "limit": filters.limit(),
        "offset": filters.offset(),
    }

    return sql, params


def to_statement(entity, sql):
    """
    Wrap the SQL text so the tags parameter and the result columns are typed
    like the table, which lets the engine encode and decode array values.
    """
    tag_type = entity.table.c[entity.tag_field].type
    result_columns = [column(TOTAL_COLUMN, Integer)]
    result_columns += [column(c.name, c.type) for c in entity.table.columns]

    return (
        text(sql)
        .bindparams(bindparam("tags", type_=tag_type))
        .columns(*result_columns)
    )
