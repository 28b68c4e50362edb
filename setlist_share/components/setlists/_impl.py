"""
SetlistService - use cases over a shared setlist.

Orchestrates the access resolver, the grant store and the membership
manager. Every use case opens exactly one unit of work; the service, not the
repositories, decides when it commits. Domain events go out after the commit.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID, uuid4

from setlist_share.components.access import resolver_for
from setlist_share.components.collab import store_for
from setlist_share.components.membership import (
    MembershipLimits,
    OrderedItemInput,
    manager_for,
)
from setlist_share.core.ports.db import UnitOfWorkFactory, UnitOfWorkPort
from setlist_share.core.ports.events import DomainEvent, EventPublisherPort, EventType
from setlist_share.core.ports.time import TimePort
from setlist_share.domain.entities import Setlist
from setlist_share.domain.errors import FieldError, ValidationError
from setlist_share.rules.models import SetlistRules

from .models import (
    UPDATABLE_FIELDS,
    CreateSetlistInput,
    SetlistAggregate,
    UpdateSetlistInput,
)

logger = logging.getLogger(__name__)

VISIBILITY_VALUES = ("private", "public")

# --- Validation Functions ---


def validate_setlist_fields(
    rules: SetlistRules,
    title: Any = None,
    description: Any = None,
    visibility: Any = None,
    *,
    check_title: bool = True,
    check_visibility: bool = True,
) -> list[FieldError]:
    """Validate the scalar fields of a setlist."""
    errors: list[FieldError] = []

    if check_title:
        if not isinstance(title, str) or not title.strip():
            errors.append(
                FieldError(code="title_required", message="Setlist title is required", field="title")
            )
        elif len(title) > rules.title_max_length:
            errors.append(
                FieldError(
                    code="title_too_long",
                    message=f"Title must be {rules.title_max_length} characters or less",
                    field="title",
                )
            )

    if description is not None:
        if not isinstance(description, str):
            errors.append(
                FieldError(
                    code="description_invalid",
                    message="Description must be text",
                    field="description",
                )
            )
        elif len(description) > rules.description_max_length:
            errors.append(
                FieldError(
                    code="description_too_long",
                    message=(
                        f"Description must be {rules.description_max_length} characters or less"
                    ),
                    field="description",
                )
            )

    if check_visibility and visibility not in VISIBILITY_VALUES:
        errors.append(
            FieldError(
                code="visibility_invalid",
                message="Visibility must be 'private' or 'public'",
                field="visibility",
            )
        )

    return errors


def _affected(*user_ids: UUID | None) -> tuple[UUID, ...]:
    return tuple(dict.fromkeys(u for u in user_ids if u is not None))


# --- Setlist Service ---


class SetlistService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        time: TimePort,
        events: EventPublisherPort,
        rules: SetlistRules | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._time = time
        self._events = events
        self._rules = rules or SetlistRules()

    @property
    def limits(self) -> MembershipLimits:
        return MembershipLimits(
            max_songs=self._rules.max_songs,
            notes_max_length=self._rules.notes_max_length,
        )

    # --- Queries ---

    def list_for_user(self, user_id: UUID) -> list[SetlistAggregate]:
        """Setlists the user owns or holds a grant on, newest first."""
        with self._uow_factory() as uow:
            setlists = uow.setlists.list_visible_to(user_id)
            return [self._hydrate(uow, s) for s in setlists]

    def view(self, user_id: UUID | None, setlist_id: UUID) -> SetlistAggregate:
        with self._uow_factory() as uow:
            setlist = resolver_for(uow).require(user_id, setlist_id, "view")
            return self._hydrate(uow, setlist)

    # --- Mutations ---

    def create(self, inp: CreateSetlistInput) -> SetlistAggregate:
        errors = validate_setlist_fields(
            self._rules, inp.title, inp.description, inp.visibility
        )
        if errors:
            raise ValidationError(errors)

        now = self._time.now_utc()
        setlist = Setlist(
            id=uuid4(),
            owner_user_id=inp.owner_user_id,
            title=inp.title.strip(),
            description=inp.description,
            visibility=inp.visibility,
            created_at=now,
            updated_at=now,
        )

        with self._uow_factory(write=True) as uow:
            if not uow.users.exists(inp.owner_user_id):
                raise ValidationError.single(
                    "owner_not_found", f"User {inp.owner_user_id} does not exist", field="owner"
                )
            uow.setlists.insert(setlist)
            manager_for(uow, self.limits).replace_all(setlist.id, inp.songs)
            aggregate = self._hydrate(uow, setlist)
            uow.commit()

        logger.info("Created setlist %s for owner %s", setlist.id, inp.owner_user_id)
        self._events.publish(
            DomainEvent(
                type=EventType.SETLIST_CREATED,
                setlist_id=setlist.id,
                user_ids=(inp.owner_user_id,),
                occurred_at=now,
                payload={"song_ids": [str(i) for i in aggregate.song_ids]},
            )
        )
        return aggregate

    def update(self, inp: UpdateSetlistInput) -> SetlistAggregate:
        updates = dict(inp.updates)
        unknown = sorted(set(updates) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                [
                    FieldError(code="unknown_field", message=f"Cannot update '{k}'", field=k)
                    for k in unknown
                ]
            )

        errors = validate_setlist_fields(
            self._rules,
            updates.get("title"),
            updates.get("description"),
            updates.get("visibility"),
            check_title="title" in updates,
            check_visibility="visibility" in updates,
        )
        if errors:
            raise ValidationError(errors)

        songs: Sequence[OrderedItemInput] | None = None
        if "songs" in updates:
            songs = updates["songs"] or []

        now = self._time.now_utc()
        with self._uow_factory(write=True) as uow:
            current = resolver_for(uow).require(inp.actor_id, inp.setlist_id, "edit")

            changes: dict[str, Any] = {"updated_at": now}
            if "title" in updates:
                changes["title"] = updates["title"].strip()
            if "description" in updates:
                changes["description"] = updates["description"]
            if "visibility" in updates:
                changes["visibility"] = updates["visibility"]

            setlist = current.model_copy(update=changes)
            uow.setlists.update(setlist)

            if songs is not None:
                manager_for(uow, self.limits).replace_all(setlist.id, songs)

            aggregate = self._hydrate(uow, setlist)
            uow.commit()

        logger.info(
            "Updated setlist %s by %s (fields: %s)",
            inp.setlist_id,
            inp.actor_id,
            ", ".join(sorted(updates)) or "none",
        )
        self._events.publish(
            DomainEvent(
                type=EventType.SETLIST_UPDATED,
                setlist_id=inp.setlist_id,
                user_ids=_affected(
                    aggregate.setlist.owner_user_id,
                    *(c.user.id for c in aggregate.collaborators),
                ),
                occurred_at=now,
                payload={
                    "fields": sorted(updates),
                    "song_ids": [str(i) for i in aggregate.song_ids],
                },
            )
        )
        return aggregate

    def delete(self, actor_id: UUID, setlist_id: UUID) -> None:
        with self._uow_factory(write=True) as uow:
            setlist = resolver_for(uow).require(actor_id, setlist_id, "admin")
            grants = uow.grants.list_by_setlist(setlist_id)
            uow.setlists.delete(setlist_id)
            uow.commit()

        logger.info("Deleted setlist %s by %s", setlist_id, actor_id)
        self._events.publish(
            DomainEvent(
                type=EventType.SETLIST_DELETED,
                setlist_id=setlist_id,
                user_ids=_affected(setlist.owner_user_id, *(g.user_id for g in grants)),
                occurred_at=self._time.now_utc(),
            )
        )

    # --- Hydration ---

    def _hydrate(self, uow: UnitOfWorkPort, setlist: Setlist) -> SetlistAggregate:
        return SetlistAggregate(
            setlist=setlist,
            owner=uow.users.get_by_id(setlist.owner_user_id),
            collaborators=store_for(uow, self._time).list_collaborators(setlist.id),
            songs=manager_for(uow, self.limits).get_ordered(setlist.id),
        )
