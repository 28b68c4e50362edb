"""End-to-end runs of the management CLI against a temp data directory."""

import sys
from pathlib import Path
from uuid import UUID

import pytest

from setlist_share.adapters.sqlite_db import SQLiteSongCatalog, SQLiteUserRepo
from setlist_share.api.auth_utils import authenticate
from setlist_share.app_shell import cli

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent.parent / "migrations"


@pytest.fixture
def env(tmp_path, monkeypatch):
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text(
        "project:\n  slug: cli-test\n  rules_version: '1'\n"
        f"storage:\n  migrations_dir: {MIGRATIONS_DIR}\n"
    )
    data_dir = tmp_path / "data"
    monkeypatch.setenv("SETLIST_DATA_DIR", str(data_dir))
    monkeypatch.setenv("SETLIST_RULES_PATH", str(rules_path))
    return data_dir / "setlists.db"


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["setlist-share", *argv])
    cli.main()


def test_migrate_add_user_and_token(env, monkeypatch, capsys):
    _run(monkeypatch, "migrate")
    assert "Applied 1 migration(s)." in capsys.readouterr().out

    _run(monkeypatch, "add-user", "ana@example.com", "--name", "Ana")
    user = SQLiteUserRepo(str(env)).get_by_email("ana@example.com")
    assert user is not None
    assert user.name == "Ana"

    capsys.readouterr()
    _run(monkeypatch, "token", "ana@example.com")
    token = capsys.readouterr().out.strip()
    assert authenticate(token) == user.id


def test_add_song(env, monkeypatch, capsys):
    _run(monkeypatch, "migrate")
    _run(monkeypatch, "add-song", "Wonderwall", "--artist", "Oasis", "--tempo", "87",
         "--duration", "258")

    out = capsys.readouterr().out
    song_id = out.strip().splitlines()[-1].split(": ")[1]
    song = SQLiteSongCatalog(str(env)).get_by_id(UUID(song_id))
    assert song.title == "Wonderwall"
    assert song.duration_seconds == 258


def test_duplicate_user_exits(env, monkeypatch):
    _run(monkeypatch, "migrate")
    _run(monkeypatch, "add-user", "ana@example.com", "--name", "Ana")
    with pytest.raises(SystemExit):
        _run(monkeypatch, "add-user", "ana@example.com", "--name", "Ana")


def test_token_for_unknown_user_exits(env, monkeypatch):
    _run(monkeypatch, "migrate")
    with pytest.raises(SystemExit):
        _run(monkeypatch, "token", "nobody@example.com")
