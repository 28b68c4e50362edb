import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from setlist_share.adapters.sqlite.migrator import SQLiteMigrator
from setlist_share.api.deps import get_event_bus, get_settings
from setlist_share.api.errors import register_error_handlers
from setlist_share.app_shell.config import configure_logging, validate_ops_rules
from setlist_share.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        configure_logging(rules.ops.log_level)
        validate_ops_rules(rules)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        print(f"CRITICAL: Rules load failed: {e}", file=sys.stderr)
        sys.exit(1)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrations_dir = settings.base_dir / rules.storage.migrations_dir
    SQLiteMigrator(settings.db_path, str(migrations_dir)).run_migrations()

    events = get_event_bus()
    events.start()

    yield

    events.stop()


app = FastAPI(
    title="Setlist Share API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_error_handlers(app)

# --- Routers ---
from setlist_share.api.routes import setlists  # noqa: E402

app.include_router(setlists.router, prefix="/api/setlists", tags=["Setlists"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
