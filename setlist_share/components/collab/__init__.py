"""
Collab component - Collaboration management for setlist sharing.

Manages collaboration grants on setlists, allowing admins to grant and
revoke access to other users at a level (view, edit, admin).
"""

from ._impl import GrantStore
from .component import (
    run_grant,
    run_list,
    run_revoke,
    store_for,
)
from .models import (
    CollabOutput,
    Collaborator,
    GrantAccessInput,
    ListCollaboratorsInput,
    RevokeAccessInput,
)
from .ports import GrantRepoPort, TimePort, UserRepoPort

__all__ = [
    # Entry points
    "run_grant",
    "run_list",
    "run_revoke",
    "store_for",
    # Input models
    "GrantAccessInput",
    "ListCollaboratorsInput",
    "RevokeAccessInput",
    # Output models
    "CollabOutput",
    "Collaborator",
    # Service
    "GrantStore",
    # Ports
    "GrantRepoPort",
    "TimePort",
    "UserRepoPort",
]
