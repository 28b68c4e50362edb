"""
Boundary mapping from engine errors to HTTP responses.

AccessDenied renders exactly like a missing setlist so callers cannot
confirm that a private setlist exists. Malformed request bodies render like
engine validation failures: 400 with a list of field errors.
"""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from setlist_share.domain.errors import (
    AccessDenied,
    ConflictError,
    FieldError,
    StorageUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Setlist not found or you do not have permission to access it"

# pydantic error type -> field error code
_REQUEST_ERROR_CODES = {
    "missing": "field_required",
    "literal_error": "invalid_choice",
    "uuid_parsing": "invalid_id",
    "uuid_type": "invalid_id",
}


def _field_path(loc: Sequence[Any]) -> str | None:
    """("body", "songs", 0, "song_id") -> "songs[0].song_id"."""
    parts = list(loc[1:]) if loc and loc[0] in ("body", "query", "path") else list(loc)
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or None


def request_field_errors(exc: RequestValidationError) -> list[FieldError]:
    return [
        FieldError(
            code=_REQUEST_ERROR_CODES.get(err.get("type", ""), "invalid_value"),
            message=err.get("msg", "Invalid value"),
            field=_field_path(err.get("loc", ())),
        )
        for err in exc.errors()
    ]


def _validation_response(detail: str, errors: list[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": detail,
            "errors": [{"code": e.code, "message": e.message, "field": e.field} for e in errors],
        },
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _validation_response(str(exc), exc.errors)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = request_field_errors(exc)
    logger.info(
        "Rejected request body on %s %s: %s",
        request.method,
        request.url.path,
        ", ".join(f"{e.field}={e.code}" for e in errors),
    )
    return _validation_response("; ".join(e.message for e in errors), errors)


async def handle_access_denied(request: Request, exc: AccessDenied) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": NOT_FOUND_DETAIL, "errors": []},
    )


async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
    logger.warning("Conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "errors": []},
    )


async def handle_storage_unavailable(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable", "errors": []},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, handle_request_validation_error  # type: ignore[arg-type]
    )
    app.add_exception_handler(AccessDenied, handle_access_denied)  # type: ignore[arg-type]
    app.add_exception_handler(ConflictError, handle_conflict)  # type: ignore[arg-type]
    app.add_exception_handler(
        StorageUnavailable, handle_storage_unavailable  # type: ignore[arg-type]
    )
