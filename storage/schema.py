from sqlalchemy import (
    ARRAY,
    JSON,
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    func,
    literal_column,
    text,
)

from models.records import Actor, Director, Movie
from storage.filters import build_safelist

metadata = MetaData()

# text[] on PostgreSQL, a JSON encoded list on SQLite
StringArray = ARRAY(Text).with_variant(JSON(), "sqlite")

# SQLite only auto-increments an INTEGER PRIMARY KEY
RecordId = BigInteger().with_variant(Integer(), "sqlite")


def _common_columns():
    return [
        Column("id", RecordId, primary_key=True, autoincrement=True),
        Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    ]

def _version_column():
    return Column("version", Integer, nullable=False, server_default=text("1"))


movies = Table(
    "movies",
    metadata,
    *_common_columns(),
    Column("title", Text, nullable=False),
    Column("year", Integer, nullable=False),
    Column("runtime", Integer, nullable=False),
    Column("genres", StringArray, nullable=False),
    _version_column(),
)

actors = Table(
    "actor",
    metadata,
    *_common_columns(),
    Column("fullname", Text, nullable=False),
    Column("year", Integer, nullable=False),
    Column("films", StringArray, nullable=False),
    Column("girlfriend", Text, nullable=True),
    _version_column(),
)

directors = Table(
    "directors",
    metadata,
    *_common_columns(),
    Column("name", Text, nullable=False),
    Column("surname", Text, nullable=False),
    Column("awards", StringArray, nullable=False),
    _version_column(),
)

SIMPLE = literal_column("'simple'")

for _table, _text_field, _tag_field in (
    (movies, "title", "genres"),
    (actors, "fullname", "films"),
    (directors, "name", "awards"),
):
    Index(
        f"{_table.name}_{_text_field}_idx",
        func.to_tsvector(SIMPLE, _table.c[_text_field]),
        postgresql_using="gin",
    ).ddl_if(dialect="postgresql")
    Index(
        f"{_table.name}_{_tag_field}_idx",
        _table.c[_tag_field],
        postgresql_using="gin",
    ).ddl_if(dialect="postgresql")


class EntityDef:
    """
    Everything the generic repository needs to know about one entity type.

    versioned switches the optimistic concurrency check on updates: when set,
    an update only applies if the stored version still equals the one the
    caller read.
    """

    def __init__(self, name, table, record_cls, text_field, tag_field, sortable, versioned=True):
        self.name = name
        self.table = table
        self.record_cls = record_cls
        self.text_field = text_field
        self.tag_field = tag_field
        self.sort_safelist = build_safelist(sortable)
        self.versioned = versioned

        self.columns = [c.name for c in table.columns]
        self.column_types = {c.name: c.type.python_type for c in table.columns}
        self.nullable = {c.name for c in table.columns if c.nullable}
        self.array_columns = {name for name, t in self.column_types.items() if t is list}

        # columns the caller may write; the rest belong to storage
        self.writable = [c for c in self.columns if c not in ("id", "created_at", "version")]

        missing = {"id", text_field, tag_field, *sortable} - set(self.columns)
        if missing:
            raise ValueError(f"{name}: unknown columns {sorted(missing)}")
        if versioned and "version" not in self.columns:
            raise ValueError(f"{name}: a versioned entity needs a version column")

    def __repr__(self):
        return f"EntityDef({self.name!r})"


MOVIES = EntityDef(
    "movie",
    movies,
    Movie,
    text_field="title",
    tag_field="genres",
    sortable=["id", "title", "year", "runtime"],
)

ACTORS = EntityDef(
    "actor",
    actors,
    Actor,
    text_field="fullname",
    tag_field="films",
    sortable=["id", "fullname", "year"],
)

DIRECTORS = EntityDef(
    "director",
    directors,
    Director,
    text_field="name",
    tag_field="awards",
    sortable=["id", "name", "surname"],
)
