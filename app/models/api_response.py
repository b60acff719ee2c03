from pydantic import BaseModel
from typing import Any, Generic, TypeVar, Optional

T = TypeVar('T')

class APIError(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None

class Meta(BaseModel):
    current_page: Optional[int] = None
    page_size: Optional[int] = None
    first_page: Optional[int] = None
    last_page: Optional[int] = None
    total_records: Optional[int] = None
    took_ms: Optional[float] = None

class APIResponse(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    meta: Optional[Meta] = None
    error: Optional[APIError] = None
