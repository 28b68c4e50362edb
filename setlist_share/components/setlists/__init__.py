"""
Setlists component - Create, view, update and delete shared setlists.
"""

from ._impl import SetlistService, validate_setlist_fields
from .component import (
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from .models import (
    CreateSetlistInput,
    DeleteSetlistInput,
    GetSetlistInput,
    ListSetlistsInput,
    SetlistAggregate,
    UpdateSetlistInput,
)

__all__ = [
    # Entry points
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    "run_update",
    # Input models
    "CreateSetlistInput",
    "DeleteSetlistInput",
    "GetSetlistInput",
    "ListSetlistsInput",
    "UpdateSetlistInput",
    # Output models
    "SetlistAggregate",
    # Service
    "SetlistService",
    "validate_setlist_fields",
]
