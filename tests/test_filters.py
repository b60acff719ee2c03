import pytest
from app.core.exceptions import FilterValidationError
from storage.filters import MAX_PAGE, MAX_PAGE_SIZE, Filters, build_safelist, calculate_metadata

SAFELIST = build_safelist(["id", "title", "year", "runtime"])

# --------------------------
# safelist
# --------------------------

def test_build_safelist_has_both_directions():
    assert SAFELIST == ("id", "title", "year", "runtime", "-id", "-title", "-year", "-runtime")

# --------------------------
# limit / offset
# --------------------------

@pytest.mark.parametrize("page, page_size", [(1, 1), (1, 20), (3, 20), (7, 13), (10_000, MAX_PAGE_SIZE)])
def test_limit_and_offset(page, page_size):
    filters = Filters.validate(page, page_size, "id", SAFELIST)

    assert filters.limit() == page_size
    assert filters.offset() == (page - 1) * page_size

# --------------------------
# sort column / direction
# --------------------------

def test_ascending_sort():
    filters = Filters.validate(1, 20, "title", SAFELIST)
    assert filters.sort_column() == "title"
    assert filters.sort_direction() == "ASC"

def test_descending_sort():
    filters = Filters.validate(1, 20, "-year", SAFELIST)
    assert filters.sort_column() == "year"
    assert filters.sort_direction() == "DESC"

# --------------------------
# rejected input
# --------------------------

@pytest.mark.parametrize("page", [0, -1, "1", 1.5, True, None])
def test_invalid_page(page):
    with pytest.raises(FilterValidationError) as exc:
        Filters.validate(page, 20, "id", SAFELIST)
    assert exc.value.message == "page must be > 0"

@pytest.mark.parametrize("page_size", [0, -5, "20", None])
def test_invalid_page_size(page_size):
    with pytest.raises(FilterValidationError) as exc:
        Filters.validate(1, page_size, "id", SAFELIST)
    assert exc.value.message == "page_size must be > 0"

def test_page_size_over_maximum():
    with pytest.raises(FilterValidationError) as exc:
        Filters.validate(1, MAX_PAGE_SIZE + 1, "id", SAFELIST)
    assert exc.value.message == f"page_size must be <= {MAX_PAGE_SIZE}"

@pytest.mark.parametrize("page", [MAX_PAGE + 1, 10**19])
def test_page_over_maximum(page):
    with pytest.raises(FilterValidationError) as exc:
        Filters.validate(page, MAX_PAGE_SIZE, "id", SAFELIST)
    assert exc.value.message == "page must be <= 10000000"

def test_last_allowed_page_offset_fits_bigint():
    filters = Filters.validate(MAX_PAGE, MAX_PAGE_SIZE, "id", SAFELIST)
    assert filters.offset() < 2**63

@pytest.mark.parametrize("sort", [
    "Title",
    "--title",
    "genres",
    " title",
    "title; DROP TABLE movies",
    "",
])
def test_unsafe_sort_key(sort):
    with pytest.raises(FilterValidationError) as exc:
        Filters.validate(1, 20, sort, SAFELIST)
    assert exc.value.message == "unsafe sort key"
    assert exc.value.code == "VALIDATION_ERROR"

def test_sort_column_rechecks_safelist():
    # built without validate(), the sort key still never reaches the SQL text
    filters = Filters(1, 20, "id; DELETE FROM movies", SAFELIST)

    with pytest.raises(FilterValidationError):
        filters.sort_column()

# --------------------------
# metadata
# --------------------------

def test_metadata_empty_when_no_records():
    assert calculate_metadata(0, 1, 20) == {}

def test_metadata_last_page_rounds_up():
    assert calculate_metadata(41, 2, 20) == {
        "current_page": 2,
        "page_size": 20,
        "first_page": 1,
        "last_page": 3,
        "total_records": 41,
    }
