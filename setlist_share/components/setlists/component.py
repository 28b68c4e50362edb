"""
Setlists component - Shared setlist use cases.

Shell Layer - maps component inputs onto the service.
"""

from __future__ import annotations

from ._impl import SetlistService
from .models import (
    CreateSetlistInput,
    DeleteSetlistInput,
    GetSetlistInput,
    ListSetlistsInput,
    SetlistAggregate,
    UpdateSetlistInput,
)


def run_create(inp: CreateSetlistInput, service: SetlistService) -> SetlistAggregate:
    return service.create(inp)


def run_get(inp: GetSetlistInput, service: SetlistService) -> SetlistAggregate:
    return service.view(inp.actor_id, inp.setlist_id)


def run_list(inp: ListSetlistsInput, service: SetlistService) -> list[SetlistAggregate]:
    return service.list_for_user(inp.actor_id)


def run_update(inp: UpdateSetlistInput, service: SetlistService) -> SetlistAggregate:
    return service.update(inp)


def run_delete(inp: DeleteSetlistInput, service: SetlistService) -> None:
    service.delete(inp.actor_id, inp.setlist_id)
