import logging
from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError
from app.models.api_response import APIResponse
from storage.database import ping

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/healthcheck", response_model=APIResponse)
def healthcheck(request: Request):
    settings = request.app.state.settings

    try:
        ping(request.app.state.engine)
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning("Database ping failed: %s", e)
        database = "unavailable"

    return APIResponse(
        status="ok",
        data={
            "status": "available",
            "environment": settings.environment,
            "version": settings.version,
            "database": database,
        }
    )
