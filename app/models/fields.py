import datetime
from typing import Annotated
from pydantic import AfterValidator, Field

MIN_YEAR = 1888

def max_year() -> int:
    return datetime.date.today().year + 1

def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value

def _not_after_next_year(value: int) -> int:
    limit = max_year()
    if value > limit:
        raise ValueError(f"must be <= {limit}")
    return value

NonBlank = Annotated[str, AfterValidator(_not_blank)]

Title = Annotated[str, Field(max_length=500), AfterValidator(_not_blank)]

Name = Annotated[str, Field(max_length=200), AfterValidator(_not_blank)]

Year = Annotated[int, Field(ge=MIN_YEAR), AfterValidator(_not_after_next_year)]
