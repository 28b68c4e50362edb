"""
Error taxonomy for the setlist engine.

Everything raised below the setlist service is one of these four categories;
the API layer renders each category with a fixed status code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single validation failure."""

    code: str
    message: str
    field: str | None = None


class SetlistError(Exception):
    """Base class for engine errors."""


class ValidationError(SetlistError):
    """Malformed input. Not retryable."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        messages = [e.message for e in errors]
        super().__init__("; ".join(messages))

    @classmethod
    def single(cls, code: str, message: str, field: str | None = None) -> ValidationError:
        return cls([FieldError(code=code, message=message, field=field)])


class AccessDenied(SetlistError):
    """
    The resolver denied the request.

    Also raised when the setlist does not exist, so callers cannot test for
    private setlists.
    """

    def __init__(self, message: str = "Setlist not found or access denied") -> None:
        super().__init__(message)


class ConflictError(SetlistError):
    """A concurrent writer won a storage-level race. The caller may retry."""


class StorageUnavailable(SetlistError):
    """The transaction could not be opened or committed."""
