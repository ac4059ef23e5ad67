"""``.env`` loading via python-dotenv."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("snippetbox.cli")

DEFAULT_ENV = "development"


def load_env(directory: str | Path = ".") -> Path | None:
    """Load ``.env.<SNIPPETBOX_ENV>`` from *directory*, falling back to ``.env``.

    ``SNIPPETBOX_ENV`` defaults to ``development``. Variables already set
    in the process environment are not overridden. Returns the file that
    was loaded, or ``None`` (with a warning) when neither exists.
    """
    env_name = os.environ.get("SNIPPETBOX_ENV") or DEFAULT_ENV
    base = Path(directory)
    for candidate in (base / f".env.{env_name}", base / ".env"):
        if candidate.is_file():
            load_dotenv(candidate, override=False)
            return candidate
    logger.warning("no .env file found env=%s dir=%s", env_name, base)
    return None
