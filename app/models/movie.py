from pydantic import BaseModel, Field
from typing import List, Optional
from app.models.fields import NonBlank, Title, Year

class MovieIn(BaseModel):
    title: Title
    year: Year
    runtime: int = Field(..., gt=0, description="Runtime in minutes")
    genres: List[NonBlank] = Field(..., min_length=1, max_length=5)

class MoviePatch(BaseModel):
    title: Optional[Title] = None
    year: Optional[Year] = None
    runtime: Optional[int] = Field(default=None, gt=0)
    genres: Optional[List[NonBlank]] = Field(default=None, min_length=1, max_length=5)

class MovieOut(BaseModel):
    id: int
    title: str
    year: int
    runtime: int
    genres: List[str]
    version: int
