from typing import Iterable, Sequence

from app.core.exceptions import FilterValidationError

MAX_PAGE_SIZE = 100
# keeps (page - 1) * page_size inside a signed 64-bit OFFSET
MAX_PAGE = 10_000_000
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
DEFAULT_SORT = "id"


def build_safelist(columns: Iterable[str]) -> tuple[str, ...]:
    """
    Return every sortable column in both its ascending ("title") and
    descending ("-title") form.
    """
    columns = list(columns)
    return tuple(columns) + tuple(f"-{c}" for c in columns)


class Filters:
    """
    Paging and sorting parameters for a list query.

    Use Filters.validate() to build one from client input; the sort column is
    the only client value that ever ends up inside the SQL text, so it is
    checked against the safelist again before it is handed out.
    """

    def __init__(self, page: int, page_size: int, sort: str, sort_safelist: Sequence[str]):
        self.page = page
        self.page_size = page_size
        self.sort = sort
        self.sort_safelist = tuple(sort_safelist)

    @classmethod
    def validate(cls, page, page_size, sort: str, sort_safelist: Sequence[str]) -> "Filters":
        if not _is_int(page) or page < 1:
            raise FilterValidationError("page must be > 0", details={"page": page})

        if page > MAX_PAGE:
            raise FilterValidationError(f"page must be <= {MAX_PAGE}", details={"page": page})

        if not _is_int(page_size) or page_size < 1:
            raise FilterValidationError("page_size must be > 0", details={"page_size": page_size})

        if page_size > MAX_PAGE_SIZE:
            raise FilterValidationError(
                f"page_size must be <= {MAX_PAGE_SIZE}",
                details={"page_size": page_size}
            )

        if sort not in sort_safelist:
            raise FilterValidationError("unsafe sort key", details={"sort": sort})

        return cls(page, page_size, sort, sort_safelist)

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def sort_column(self) -> str:
        if self.sort not in self.sort_safelist:
            raise FilterValidationError("unsafe sort key", details={"sort": self.sort})
        return self.sort[1:] if self.sort.startswith("-") else self.sort

    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"

    def __repr__(self):
        return (
            f"Filters(page={self.page}, page_size={self.page_size}, "
            f"sort={self.sort!r})"
        )


def _is_int(value) -> bool:
    # bool is an int subclass, but True is not a page number
    return isinstance(value, int) and not isinstance(value, bool)


def calculate_metadata(total_records: int, page: int, page_size: int) -> dict:
    if total_records == 0:
        return {}

    return {
        "current_page": page,
        "page_size": page_size,
        "first_page": 1,
        "last_page": (total_records + page_size - 1) // page_size,
        "total_records": total_records,
    }
