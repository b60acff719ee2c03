import logging
from typing import Optional, Iterable, List
import json
import tempfile
import os

from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# storage owned fields are never taken from the input file
IGNORED_FIELDS = ("id", "created_at", "version")

def ingest_one(raw: dict, record_cls):
    if not isinstance(raw, dict):
        return None

    data = {k: v for k, v in raw.items() if k not in IGNORED_FIELDS}
    try:
        record = record_cls(**data)
    except (TypeError, ValueError) as e:
        logger.warning("Skipping %s %s: %s", record_cls.__name__, raw.get("title") or raw.get("name") or "<unnamed>", e)
        return None

    return record

def ingest_many(raw_list: Iterable[dict], record_cls, continue_on_error=True) -> List:
    results = []
    ok_count = 0
    skipped_count = 0

    for raw in raw_list:
        result = ingest_one(raw, record_cls)

        if result is None:
            if not continue_on_error:
                raise ValueError("Invalid record found during batch ingestion")
            skipped_count += 1
            continue

        ok_count += 1
        results.append(result)

    logger.info("OK=%s SKIP=%s", ok_count, skipped_count)

    return results

def load_into(repository, raw_list: Iterable[dict], continue_on_error=True) -> int:
    """
    Validate every raw dict as the repository's record type and insert the
    valid ones. Returns the number of inserted records.
    """
    records = ingest_many(raw_list, repository.entity.record_cls, continue_on_error)

    inserted = 0
    for record in records:
        try:
            repository.insert(record)
        except StorageError:
            if not continue_on_error:
                raise
            logger.warning("Insert failed for %r, skipping", record)
            continue
        inserted += 1

    logger.info("Inserted %d %s records", inserted, repository.entity.name)
    return inserted

# placeholder for an entry that could not be decoded
_UNREADABLE = object()

def _read_entries(f):
    """
    Yield (label, value) for every entry of a JSON array or JSON Lines file.
    Lines that are not valid JSON come back as _UNREADABLE.
    """
    first_char = f.read(1)
    f.seek(0)

    if first_char == "[":
        data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("Expected a JSON array at top-level")
        for position, item in enumerate(data, start=1):
            yield f"Item {position}", item
        return

    for lineno, line in enumerate(f, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Skipping invalid JSON line %d: %s", lineno, e)
            value = _UNREADABLE
        yield f"Line {lineno}", value

def load_json_file(path):
    """
    Yield the objects stored in *path*, either a JSON array or one object per
    line. Entries that are not objects are skipped; the totals are logged
    once the file has been read to the end.
    """
    loaded = 0
    skipped = 0

    with open(path, "r", encoding="utf-8") as f:
        for label, value in _read_entries(f):
            if isinstance(value, dict):
                loaded += 1
                yield value
                continue

            skipped += 1
            if value is not _UNREADABLE:
                logger.warning("%s is not an object, skipping", label)

    logger.info("Read %d objects from %s, skipped %d", loaded, path, skipped)

def save_jsonl(records: Iterable, path: str):
    """
    Write records (or plain dicts) one JSON object per line. The file is
    written to a temp file next to *path* and moved into place at the end.
    """
    dir_name = os.path.dirname(path) or "."
    tmp_fd, tmp_path = tempfile.mkstemp(dir=dir_name, prefix=".tmp_export_", text=True)

    count = 0
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            for record in records:
                doc = record if isinstance(record, dict) else record.to_dict()
                f.write(json.dumps(doc, ensure_ascii=False, default=str) + "\n")
                count += 1
        os.replace(tmp_path, path)
    except BaseException:
        os.remove(tmp_path)
        raise

    logger.info("Saved %d records to %s", count, path)
    return count
