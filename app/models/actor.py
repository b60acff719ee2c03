from pydantic import BaseModel, Field
from typing import List, Optional
from app.models.fields import Name, Year

class ActorIn(BaseModel):
    fullname: Name
    year: Year = Field(..., description="Year of birth")
    films: List[str] = Field(default_factory=list)
    girlfriend: Optional[str] = Field(default=None, max_length=200)

class ActorPatch(BaseModel):
    fullname: Optional[Name] = None
    year: Optional[Year] = None
    films: Optional[List[str]] = None
    girlfriend: Optional[str] = Field(default=None, max_length=200)

class ActorOut(BaseModel):
    id: int
    fullname: str
    year: int
    films: List[str]
    girlfriend: Optional[str] = None
    version: int
