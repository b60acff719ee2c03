import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from app.models.api_response import APIResponse, APIError
from app.core.exceptions import (
    DataError,
    EditConflictError,
    FilterValidationError,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = [
    (FilterValidationError, 400),
    (RecordNotFoundError, 404),
    (EditConflictError, 409),
]

def status_code_for(exc: DataError) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    # StorageError, QueryTimeoutError, MappingError
    return 500

async def data_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, DataError)

    status_code = status_code_for(exc)
    details = exc.details

    if status_code >= 500:
        logger.error(
            "%s %s failed with %s: %s",
            request.method, request.url.path, exc.code, exc,
            exc_info=exc
        )
        details = None

    return JSONResponse(
        status_code=status_code,
        content=APIResponse(
            status="error",
            error=APIError(
                code=exc.code,
                message=exc.message,
                details=details
            )
        ).model_dump()
    )
