import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from setlist_share.adapters.clock import SystemClock
from setlist_share.adapters.events import InMemoryEventBus
from setlist_share.adapters.sqlite_db import SQLiteUnitOfWorkFactory, SQLiteUserRepo
from setlist_share.api.auth_utils import authenticate
from setlist_share.components.setlists import SetlistService
from setlist_share.rules.loader import load_rules
from setlist_share.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("SETLIST_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "setlists.db")
        self.rules_path = Path(
            os.environ.get("SETLIST_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Storage ---
def get_uow_factory(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> SQLiteUnitOfWorkFactory:
    return SQLiteUnitOfWorkFactory(
        settings.db_path, busy_timeout=rules.storage.busy_timeout_seconds
    )


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# Event bus: hand-off point for the real-time broadcaster. Holds subscribers,
# not domain state.
_event_bus_instance: InMemoryEventBus | None = None


def get_event_bus() -> InMemoryEventBus:
    """Get event bus singleton."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = InMemoryEventBus(keep_history=False)
    return _event_bus_instance


# --- Component Services ---
def get_setlist_service(
    uow_factory: SQLiteUnitOfWorkFactory = Depends(get_uow_factory),
    clock: SystemClock = Depends(get_clock),
    events: InMemoryEventBus = Depends(get_event_bus),
    rules: Rules = Depends(get_rules),
) -> SetlistService:
    return SetlistService(uow_factory=uow_factory, time=clock, events=events, rules=rules.setlists)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def _extract_token(request: Request, token: str | None) -> str | None:
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        return cookie_token.split(" ", 1)[1]
    return token


def _resolve_user_id(token: str, user_repo: SQLiteUserRepo) -> UUID:
    user_id = authenticate(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user_repo.exists(user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user_id


async def get_current_user_id(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> UUID:
    token = _extract_token(request, token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _resolve_user_id(token, user_repo)


async def get_optional_user_id(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> UUID | None:
    """Anonymous callers get None (public setlists only); a bad token is still 401."""
    token = _extract_token(request, token)
    if not token:
        return None
    return _resolve_user_id(token, user_repo)
