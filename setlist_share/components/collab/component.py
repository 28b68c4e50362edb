"""
Collab component - Grant management entry points.

Each entry point runs in exactly one unit of work and publishes its domain
event only after the commit succeeded.
"""

from __future__ import annotations

from uuid import UUID

from setlist_share.components.access import resolver_for
from setlist_share.core.ports.db import UnitOfWorkFactory, UnitOfWorkPort
from setlist_share.core.ports.events import DomainEvent, EventPublisherPort, EventType

from ._impl import GrantStore
from .models import (
    CollabOutput,
    Collaborator,
    GrantAccessInput,
    ListCollaboratorsInput,
    RevokeAccessInput,
)
from .ports import TimePort


def store_for(uow: UnitOfWorkPort, time: TimePort) -> GrantStore:
    return GrantStore(grants=uow.grants, users=uow.users, resolver=resolver_for(uow), time=time)


def _affected(*user_ids: UUID | None) -> tuple[UUID, ...]:
    return tuple(dict.fromkeys(u for u in user_ids if u is not None))


def run_grant(
    inp: GrantAccessInput,
    uow_factory: UnitOfWorkFactory,
    time: TimePort,
    events: EventPublisherPort,
) -> CollabOutput:
    with uow_factory(write=True) as uow:
        grant = store_for(uow, time).upsert_grant(
            inp.actor_id, inp.setlist_id, inp.target_user_id, inp.level
        )
        setlist = uow.setlists.get_by_id(inp.setlist_id)
        uow.commit()

    events.publish(
        DomainEvent(
            type=EventType.GRANT_UPSERTED,
            setlist_id=inp.setlist_id,
            user_ids=_affected(
                inp.target_user_id, setlist.owner_user_id if setlist else None, inp.actor_id
            ),
            occurred_at=time.now_utc(),
            payload={"user_id": str(inp.target_user_id), "level": grant.level},
        )
    )
    return CollabOutput(grant=grant)


def run_revoke(
    inp: RevokeAccessInput,
    uow_factory: UnitOfWorkFactory,
    time: TimePort,
    events: EventPublisherPort,
) -> CollabOutput:
    with uow_factory(write=True) as uow:
        removed = store_for(uow, time).remove_grant(
            inp.actor_id, inp.setlist_id, inp.target_user_id
        )
        setlist = uow.setlists.get_by_id(inp.setlist_id)
        uow.commit()

    if removed:
        events.publish(
            DomainEvent(
                type=EventType.GRANT_REMOVED,
                setlist_id=inp.setlist_id,
                user_ids=_affected(
                    inp.target_user_id, setlist.owner_user_id if setlist else None, inp.actor_id
                ),
                occurred_at=time.now_utc(),
                payload={"user_id": str(inp.target_user_id)},
            )
        )
    return CollabOutput(removed=removed)


def run_list(
    inp: ListCollaboratorsInput,
    uow_factory: UnitOfWorkFactory,
    time: TimePort,
) -> list[Collaborator]:
    with uow_factory() as uow:
        resolver_for(uow).require(inp.actor_id, inp.setlist_id, "view")
        return store_for(uow, time).list_collaborators(inp.setlist_id)
