from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
