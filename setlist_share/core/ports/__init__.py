# setlist-share - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from setlist_share.core.ports.db import (
    GrantRepoPort,
    SetlistRepoPort,
    SetlistSongRepoPort,
    SongCatalogPort,
    UnitOfWorkFactory,
    UnitOfWorkPort,
    UserRepoPort,
)
from setlist_share.core.ports.events import DomainEvent, EventPublisherPort, EventType
from setlist_share.core.ports.time import TimePort

__all__ = [
    # Database
    "GrantRepoPort",
    "SetlistRepoPort",
    "SetlistSongRepoPort",
    "SongCatalogPort",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
    "UserRepoPort",
    # Events
    "DomainEvent",
    "EventPublisherPort",
    "EventType",
    # Time
    "TimePort",
]
