"""Routes for shared setlists and their collaborators."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from setlist_share.adapters.clock import SystemClock
from setlist_share.adapters.events import InMemoryEventBus
from setlist_share.adapters.sqlite_db import SQLiteUnitOfWorkFactory
from setlist_share.api.deps import (
    get_clock,
    get_current_user_id,
    get_event_bus,
    get_optional_user_id,
    get_setlist_service,
    get_uow_factory,
)
from setlist_share.api.schemas import (
    CollaboratorRequest,
    SetlistCreateRequest,
    SetlistResponse,
    SetlistSongModel,
    SetlistUpdateRequest,
)
from setlist_share.components.collab import (
    GrantAccessInput,
    RevokeAccessInput,
    run_grant,
    run_revoke,
)
from setlist_share.components.membership import OrderedItemInput
from setlist_share.components.setlists import (
    CreateSetlistInput,
    DeleteSetlistInput,
    GetSetlistInput,
    ListSetlistsInput,
    SetlistService,
    UpdateSetlistInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)

router = APIRouter()


def _items_from_request(songs: list[SetlistSongModel]) -> list[OrderedItemInput]:
    # `position` is ignored: array order is the order.
    return [OrderedItemInput(song_id=s.song_id, notes=s.notes or "") for s in songs]


@router.get("", response_model=list[SetlistResponse])
def list_setlists(
    user_id: UUID = Depends(get_current_user_id),
    service: SetlistService = Depends(get_setlist_service),
) -> list[SetlistResponse]:
    """List setlists owned by or shared with the current user."""
    aggregates = run_list(ListSetlistsInput(actor_id=user_id), service)
    return [SetlistResponse.from_aggregate(a) for a in aggregates]


@router.get("/{setlist_id}", response_model=SetlistResponse)
def get_setlist(
    setlist_id: UUID,
    user_id: UUID | None = Depends(get_optional_user_id),
    service: SetlistService = Depends(get_setlist_service),
) -> SetlistResponse:
    """Get a setlist. Public setlists are readable without a grant."""
    aggregate = run_get(GetSetlistInput(actor_id=user_id, setlist_id=setlist_id), service)
    return SetlistResponse.from_aggregate(aggregate)


@router.post("", response_model=SetlistResponse, status_code=status.HTTP_201_CREATED)
def create_setlist(
    req: SetlistCreateRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: SetlistService = Depends(get_setlist_service),
) -> SetlistResponse:
    """Create a setlist owned by the current user."""
    inp = CreateSetlistInput(
        owner_user_id=user_id,
        title=req.title,
        description=req.description,
        visibility=req.visibility,
        songs=_items_from_request(req.songs),
    )
    return SetlistResponse.from_aggregate(run_create(inp, service))


@router.put("/{setlist_id}", response_model=SetlistResponse)
def update_setlist(
    setlist_id: UUID,
    req: SetlistUpdateRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: SetlistService = Depends(get_setlist_service),
) -> SetlistResponse:
    """Update fields and/or replace the song order."""
    updates: dict[str, Any] = req.model_dump(exclude_unset=True)
    if "songs" in updates:
        updates["songs"] = _items_from_request(req.songs or [])

    inp = UpdateSetlistInput(actor_id=user_id, setlist_id=setlist_id, updates=updates)
    return SetlistResponse.from_aggregate(run_update(inp, service))


@router.delete("/{setlist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_setlist(
    setlist_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: SetlistService = Depends(get_setlist_service),
) -> Response:
    run_delete(DeleteSetlistInput(actor_id=user_id, setlist_id=setlist_id), service)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{setlist_id}/collaborators", status_code=status.HTTP_204_NO_CONTENT)
def upsert_collaborator(
    setlist_id: UUID,
    req: CollaboratorRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow_factory: SQLiteUnitOfWorkFactory = Depends(get_uow_factory),
    clock: SystemClock = Depends(get_clock),
    events: InMemoryEventBus = Depends(get_event_bus),
) -> Response:
    """Add a collaborator or change their level."""
    inp = GrantAccessInput(
        actor_id=user_id,
        setlist_id=setlist_id,
        target_user_id=req.user_id,
        level=req.level,
    )
    run_grant(inp, uow_factory, clock, events)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{setlist_id}/collaborators/{target_user_id}", status_code=status.HTTP_204_NO_CONTENT
)
def remove_collaborator(
    setlist_id: UUID,
    target_user_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow_factory: SQLiteUnitOfWorkFactory = Depends(get_uow_factory),
    clock: SystemClock = Depends(get_clock),
    events: InMemoryEventBus = Depends(get_event_bus),
) -> Response:
    inp = RevokeAccessInput(actor_id=user_id, setlist_id=setlist_id, target_user_id=target_user_id)
    run_revoke(inp, uow_factory, clock, events)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
