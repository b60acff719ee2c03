from time import perf_counter
from typing import List, Optional
from fastapi import APIRouter, Header, Query, Request, Response
from app.api.deps import check_expected_version, get_models, read_csv, read_id, read_int
from app.models.api_response import APIResponse, Meta
from app.models.actor import ActorIn, ActorOut, ActorPatch
from models.records import Actor
from storage.filters import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, DEFAULT_SORT, Filters

router = APIRouter()

def _out(actor: Actor) -> ActorOut:
    return ActorOut.model_validate(actor.to_dict())

@router.post("", status_code=201, response_model=APIResponse[ActorOut])
def create_actor(request: Request, response: Response, body: ActorIn):
    actor = get_models(request).actors.insert(Actor(**body.model_dump()))

    response.headers["Location"] = f"/v1/actors/{actor.id}"
    return APIResponse(status="ok", data=_out(actor))

@router.get("", response_model=APIResponse[List[ActorOut]])
def list_actors(
    request: Request,
    fullname: str = Query(""),
    films: str = Query("", description="Comma separated film titles, all must match"),
    page: str = Query(str(DEFAULT_PAGE)),
    page_size: str = Query(str(DEFAULT_PAGE_SIZE)),
    sort: str = Query(DEFAULT_SORT),
):
    models = get_models(request)
    filters = Filters.validate(
        read_int("page", page),
        read_int("page_size", page_size),
        sort,
        models.actors.entity.sort_safelist,
    )

    start_time = perf_counter()
    actors, metadata = models.actors.list(fullname, read_csv(films), filters)
    took_ms = (perf_counter() - start_time) * 1000

    return APIResponse(
        status="ok",
        data=[_out(a) for a in actors],
        meta=Meta(**metadata, took_ms=round(took_ms, 2))
    )

@router.get("/{id}", response_model=APIResponse[ActorOut])
def show_actor(request: Request, id: str):
    actor = get_models(request).actors.get(read_id(id))
    return APIResponse(status="ok", data=_out(actor))

@router.patch("/{id}", response_model=APIResponse[ActorOut])
def update_actor(
    request: Request,
    id: str,
    body: ActorPatch,
    expected_version: Optional[int] = Header(default=None, alias="X-Expected-Version"),
):
    models = get_models(request)

    actor = models.actors.get(read_id(id))
    check_expected_version(actor, expected_version)

    # girlfriend may be cleared with an explicit null
    changes = body.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "girlfriend"}
    actor = Actor.from_dict({**actor.to_dict(), **changes})

    actor = models.actors.update(actor)
    return APIResponse(status="ok", data=_out(actor))

@router.delete("/{id}", response_model=APIResponse)
def delete_actor(request: Request, id: str):
    get_models(request).actors.delete(read_id(id))
    return APIResponse(status="ok", data={"message": "actor successfully deleted"})
