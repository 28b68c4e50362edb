"""
Membership component - Positioned, uniquely-membered song lists with
atomic full-replace semantics.
"""

from ._impl import OrderedMembershipManager, build_entries, validate_ordered_items
from .component import manager_for, run_get_ordered, run_replace_all
from .models import MembershipLimits, OrderedItemInput, OrderedSong
from .ports import SetlistSongRepoPort, SongCatalogPort

__all__ = [
    # Entry points
    "run_get_ordered",
    "run_replace_all",
    "manager_for",
    # Models
    "MembershipLimits",
    "OrderedItemInput",
    "OrderedSong",
    # Service
    "OrderedMembershipManager",
    "build_entries",
    "validate_ordered_items",
    # Ports
    "SetlistSongRepoPort",
    "SongCatalogPort",
]
