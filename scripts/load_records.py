#!/usr/bin/env python3
import argparse
import logging
import sys

from app.core.config import load_settings
from ingestion.ingest import load_into, load_json_file, save_jsonl
from storage.database import create_schema, open_engine
from storage.filters import MAX_PAGE_SIZE, Filters
from storage.repository import Models

ENTITIES = ("movies", "actors", "directors")


def _export(repository, path: str) -> int:
    def all_records():
        page = 1
        while True:
            filters = Filters.validate(page, MAX_PAGE_SIZE, "id", repository.entity.sort_safelist)
            records, metadata = repository.list("", [], filters)
            yield from records
            if not metadata or page >= metadata["last_page"]:
                return
            page += 1

    return save_jsonl(all_records(), path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load or export movies, actors and directors.")
    parser.add_argument("command", choices=("load", "export"))
    parser.add_argument("entity", choices=ENTITIES)
    parser.add_argument("path", help="JSON array or JSONL file")
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    parser.add_argument("--strict", action="store_true", help="Stop at the first invalid record")
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=settings.log_level)

    engine = open_engine(args.database_url or settings.database_url)
    try:
        create_schema(engine)
        repository = getattr(Models(engine, query_timeout=settings.query_timeout_seconds), args.entity)

        if args.command == "load":
            count = load_into(repository, load_json_file(args.path), continue_on_error=not args.strict)
            print(f"Loaded {count} {args.entity} from {args.path}")
        else:
            count = _export(repository, args.path)
            print(f"Exported {count} {args.entity} to {args.path}")
    finally:
        engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
