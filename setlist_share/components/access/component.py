"""
Access component - Authorization resolution.

Shell Layer - wires the resolver to a unit of work.
"""

from __future__ import annotations

from setlist_share.core.ports.db import UnitOfWorkPort

from ._impl import AccessResolver
from .models import AccessDecision, ResolveInput


def resolver_for(uow: UnitOfWorkPort) -> AccessResolver:
    return AccessResolver(setlists=uow.setlists, grants=uow.grants)


def run_resolve(inp: ResolveInput, uow: UnitOfWorkPort) -> AccessDecision:
    return resolver_for(uow).resolve(inp.user_id, inp.setlist_id, inp.required)
