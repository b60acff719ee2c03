from pydantic import BaseModel, Field
from typing import List, Optional
from app.models.fields import Name

class DirectorIn(BaseModel):
    name: Name
    surname: Name
    awards: List[str] = Field(default_factory=list)

class DirectorPatch(BaseModel):
    name: Optional[Name] = None
    surname: Optional[Name] = None
    awards: Optional[List[str]] = None

class DirectorOut(BaseModel):
    id: int
    name: str
    surname: str
    awards: List[str]
    version: int
