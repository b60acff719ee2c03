from time import perf_counter
from typing import List, Optional
from fastapi import APIRouter, Header, Query, Request, Response
from app.api.deps import check_expected_version, get_models, read_csv, read_id, read_int
from app.models.api_response import APIResponse, Meta
from app.models.movie import MovieIn, MovieOut, MoviePatch
from models.records import Movie
from storage.filters import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, DEFAULT_SORT, Filters

router = APIRouter()

def _out(movie: Movie) -> MovieOut:
    return MovieOut.model_validate(movie.to_dict())

@router.post("", status_code=201, response_model=APIResponse[MovieOut])
def create_movie(request: Request, response: Response, body: MovieIn):
    models = get_models(request)

    movie = models.movies.insert(Movie(**body.model_dump()))

    response.headers["Location"] = f"/v1/movies/{movie.id}"
    return APIResponse(status="ok", data=_out(movie))

@router.get("", response_model=APIResponse[List[MovieOut]])
def list_movies(
    request: Request,
    title: str = Query(""),
    genres: str = Query("", description="Comma separated genres, all must match"),
    page: str = Query(str(DEFAULT_PAGE)),
    page_size: str = Query(str(DEFAULT_PAGE_SIZE)),
    sort: str = Query(DEFAULT_SORT),
):
    models = get_models(request)
    filters = Filters.validate(
        read_int("page", page),
        read_int("page_size", page_size),
        sort,
        models.movies.entity.sort_safelist,
    )

    start_time = perf_counter()
    movies, metadata = models.movies.list(title, read_csv(genres), filters)
    took_ms = (perf_counter() - start_time) * 1000

    return APIResponse(
        status="ok",
        data=[_out(m) for m in movies],
        meta=Meta(**metadata, took_ms=round(took_ms, 2))
    )

@router.get("/{id}", response_model=APIResponse[MovieOut])
def show_movie(request: Request, id: str):
    movie = get_models(request).movies.get(read_id(id))
    return APIResponse(status="ok", data=_out(movie))

@router.patch("/{id}", response_model=APIResponse[MovieOut])
def update_movie(
    request: Request,
    id: str,
    body: MoviePatch,
    expected_version: Optional[int] = Header(default=None, alias="X-Expected-Version"),
):
    models = get_models(request)

    movie = models.movies.get(read_id(id))
    check_expected_version(movie, expected_version)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    movie = Movie.from_dict({**movie.to_dict(), **changes})

    movie = models.movies.update(movie)
    return APIResponse(status="ok", data=_out(movie))

@router.delete("/{id}", response_model=APIResponse)
def delete_movie(request: Request, id: str):
    get_models(request).movies.delete(read_id(id))
    return APIResponse(status="ok", data={"message": "movie successfully deleted"})
