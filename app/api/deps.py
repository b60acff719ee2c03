from typing import List, Optional
from fastapi import Request
from app.core.exceptions import EditConflictError, FilterValidationError, RecordNotFoundError
from storage.repository import Models

def get_models(request: Request) -> Models:
    return request.app.state.models

def read_id(raw: str) -> int:
    """
    Path ids must be positive integers; anything else is reported the same
    way as an id that does not exist.
    """
    try:
        id = int(raw)
    except ValueError:
        raise RecordNotFoundError(details={"id": raw}) from None

    if id < 1:
        raise RecordNotFoundError(details={"id": raw})
    return id

def read_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise FilterValidationError(f"{name} must be an integer value", details={name: raw}) from None

def read_csv(raw: str) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]

def check_expected_version(record, expected_version: Optional[int]) -> None:
    # the client read an older copy than the one we just loaded
    if expected_version is not None and expected_version != record.version:
        raise EditConflictError(details={"id": record.id, "version": expected_version})
