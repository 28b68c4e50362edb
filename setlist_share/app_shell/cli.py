import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path

from setlist_share.adapters.sqlite.migrator import SQLiteMigrator
from setlist_share.adapters.sqlite_db import SQLiteSongCatalog, SQLiteUserRepo
from setlist_share.api.auth_utils import create_access_token
from setlist_share.api.deps import Settings
from setlist_share.app_shell.config import configure_logging
from setlist_share.domain.entities import Song, User
from setlist_share.rules.loader import load_rules
from setlist_share.rules.models import Rules

logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    return load_rules(settings.rules_path)


def handle_migrate(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, str(Path(rules.storage.migrations_dir)))
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_add_user(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    repo = SQLiteUserRepo(settings.db_path)
    if repo.get_by_email(args.email):
        logger.error("User %s already exists.", args.email)
        sys.exit(1)
    user = repo.save(User(email=args.email, name=args.name))
    print(f"User created: {user.id}")


def handle_add_song(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    song = SQLiteSongCatalog(settings.db_path).save(
        Song(
            title=args.title,
            artist=args.artist,
            key=args.key,
            tempo=args.tempo,
            duration_seconds=args.duration,
        )
    )
    print(f"Song created: {song.id}")


def handle_token(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    user = SQLiteUserRepo(settings.db_path).get_by_email(args.email)
    if not user:
        logger.error("User %s not found.", args.email)
        sys.exit(1)
    token = create_access_token(
        {"sub": str(user.id)},
        expires_delta=timedelta(minutes=rules.auth.access_token_ttl_minutes),
    )
    print(token)


def main() -> None:
    parser = argparse.ArgumentParser(description="Setlist Share CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # add-user
    user_parser = subparsers.add_parser("add-user", help="Register a user")
    user_parser.add_argument("email")
    user_parser.add_argument("--name", required=True)

    # add-song
    song_parser = subparsers.add_parser("add-song", help="Add a song to the catalog")
    song_parser.add_argument("title")
    song_parser.add_argument("--artist", required=True)
    song_parser.add_argument("--key")
    song_parser.add_argument("--tempo", type=int)
    song_parser.add_argument("--duration", type=int, help="Duration in seconds")

    # token
    token_parser = subparsers.add_parser("token", help="Issue an access token for a user")
    token_parser.add_argument("email")

    args = parser.parse_args()

    settings = Settings()
    rules = get_rules(settings)
    configure_logging(rules.ops.log_level)

    handlers = {
        "migrate": handle_migrate,
        "add-user": handle_add_user,
        "add-song": handle_add_song,
        "token": handle_token,
    }
    handlers[args.command](settings, rules, args)


if __name__ == "__main__":
    main()
