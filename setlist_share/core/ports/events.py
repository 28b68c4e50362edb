"""
Domain event interface.

Events are handed to the publisher after a mutation commits. Delivery to the
real-time broadcaster happens elsewhere and is never awaited by the mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol
from uuid import UUID


class EventType(str, Enum):
    SETLIST_CREATED = "setlist.created"
    SETLIST_UPDATED = "setlist.updated"
    SETLIST_DELETED = "setlist.deleted"
    GRANT_UPSERTED = "grant.upserted"
    GRANT_REMOVED = "grant.removed"


@dataclass(frozen=True)
class DomainEvent:
    type: EventType
    setlist_id: UUID
    user_ids: tuple[UUID, ...]
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)


class EventPublisherPort(Protocol):
    def publish(self, event: DomainEvent) -> None:
        """Hand off an event. Must not raise into the caller."""
        ...
