"""
Access component - Effective permission resolution for setlists.

Precedence: owner, then explicit grant, then public read-only fallback.
"""

from ._impl import AccessResolver
from .component import resolver_for, run_resolve
from .models import AccessDecision, ResolveInput
from .ports import GrantReaderPort, SetlistReaderPort

__all__ = [
    # Entry points
    "run_resolve",
    "resolver_for",
    # Models
    "ResolveInput",
    "AccessDecision",
    # Service
    "AccessResolver",
    # Ports
    "GrantReaderPort",
    "SetlistReaderPort",
]
