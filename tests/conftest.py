from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

import pytest

from setlist_share.adapters.clock import FrozenClock
from setlist_share.adapters.events import InMemoryEventBus
from setlist_share.adapters.sqlite.migrator import SQLiteMigrator
from setlist_share.adapters.sqlite_db import (
    SQLiteSongCatalog,
    SQLiteUnitOfWorkFactory,
    SQLiteUserRepo,
)
from setlist_share.components.setlists import SetlistService
from setlist_share.domain.entities import Song, User
from setlist_share.rules.models import SetlistRules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"


@pytest.fixture
def db_path(tmp_path):
    """
    A migrated, file-backed SQLite database (file-backed so that several
    connections, and threads, see the same data).
    """
    path = str(tmp_path / "setlists.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def uow_factory(db_path):
    return SQLiteUnitOfWorkFactory(db_path, busy_timeout=5.0)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def events():
    return InMemoryEventBus()


@pytest.fixture
def setlist_rules():
    return SetlistRules()


@pytest.fixture
def service(uow_factory, clock, events, setlist_rules):
    return SetlistService(uow_factory=uow_factory, time=clock, events=events, rules=setlist_rules)


@pytest.fixture
def user_repo(db_path):
    return SQLiteUserRepo(db_path)


@pytest.fixture
def song_catalog(db_path):
    return SQLiteSongCatalog(db_path)


@pytest.fixture
def make_user(user_repo) -> Callable[..., User]:
    def _make(name: str = "User") -> User:
        return user_repo.save(User(id=uuid4(), email=f"{uuid4().hex[:8]}@example.com", name=name))

    return _make


@pytest.fixture
def make_song(song_catalog) -> Callable[..., Song]:
    def _make(title: str = "Song", duration_seconds: int | None = 180) -> Song:
        return song_catalog.save(
            Song(id=uuid4(), title=title, artist="The Band", duration_seconds=duration_seconds)
        )

    return _make
