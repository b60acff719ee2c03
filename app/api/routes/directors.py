from time import perf_counter
from typing import List, Optional
from fastapi import APIRouter, Header, Query, Request, Response
from app.api.deps import check_expected_version, get_models, read_csv, read_id, read_int
from app.models.api_response import APIResponse, Meta
from app.models.director import DirectorIn, DirectorOut, DirectorPatch
from models.records import Director
from storage.filters import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, DEFAULT_SORT, Filters

router = APIRouter()

def _out(director: Director) -> DirectorOut:
    return DirectorOut.model_validate(director.to_dict())

@router.post("", status_code=201, response_model=APIResponse[DirectorOut])
def create_director(request: Request, response: Response, body: DirectorIn):
    director = get_models(request).directors.insert(Director(**body.model_dump()))

    response.headers["Location"] = f"/v1/directors/{director.id}"
    return APIResponse(status="ok", data=_out(director))

@router.get("", response_model=APIResponse[List[DirectorOut]])
def list_directors(
    request: Request,
    name: str = Query(""),
    awards: str = Query("", description="Comma separated awards, all must match"),
    page: str = Query(str(DEFAULT_PAGE)),
    page_size: str = Query(str(DEFAULT_PAGE_SIZE)),
    sort: str = Query(DEFAULT_SORT),
):
    models = get_models(request)
    filters = Filters.validate(
        read_int("page", page),
        read_int("page_size", page_size),
        sort,
        models.directors.entity.sort_safelist,
    )

    start_time = perf_counter()
    directors, metadata = models.directors.list(name, read_csv(awards), filters)
    took_ms = (perf_counter() - start_time) * 1000

    return APIResponse(
        status="ok",
        data=[_out(d) for d in directors],
        meta=Meta(**metadata, took_ms=round(took_ms, 2))
    )

@router.get("/{id}", response_model=APIResponse[DirectorOut])
def show_director(request: Request, id: str):
    director = get_models(request).directors.get(read_id(id))
    return APIResponse(status="ok", data=_out(director))

@router.patch("/{id}", response_model=APIResponse[DirectorOut])
def update_director(
    request: Request,
    id: str,
    body: DirectorPatch,
    expected_version: Optional[int] = Header(default=None, alias="X-Expected-Version"),
):
    models = get_models(request)

    director = models.directors.get(read_id(id))
    check_expected_version(director, expected_version)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    director = Director.from_dict({**director.to_dict(), **changes})

    director = models.directors.update(director)
    return APIResponse(status="ok", data=_out(director))

@router.delete("/{id}", response_model=APIResponse)
def delete_director(request: Request, id: str):
    get_models(request).directors.delete(read_id(id))
    return APIResponse(status="ok", data={"message": "director successfully deleted"})
