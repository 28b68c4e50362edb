import logging
import os

from setlist_share.rules.models import Rules

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.

    Raises RuntimeError naming every missing environment variable.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    if os.environ.get("SETLIST_SECRET_KEY") is None:
        logging.getLogger(__name__).warning(
            "SETLIST_SECRET_KEY is not set; using the development signing key"
        )
