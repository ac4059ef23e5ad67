"""snippetbox CLI: load the environment, check the app, serve it.

Entry point registered as ``snippetbox`` in ``pyproject.toml``::

    [project.scripts]
    snippetbox = "snippetbox.cli:main"
"""

import argparse

from snippetbox.cli._env import load_env
from snippetbox.cli._logging import configure_logging
from snippetbox.cli._run import run_server
from snippetbox.config import AppConfig

__all__ = ["configure_logging", "load_env", "main"]


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``snippetbox`` command."""
    # .env files feed the flag defaults, so they load before parsing
    env_file = load_env()
    config = AppConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="snippetbox",
        description="snippetbox: paste and share text snippets.",
    )
    parser.add_argument(
        "--addr",
        default=config.addr,
        help="HTTP network address (default: %(default)s)",
    )
    parser.add_argument(
        "--dsn",
        default=config.dsn,
        help="Database URL (default: %(default)s)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=config.debug,
        help="Log at DEBUG level and echo SQL",
    )
    args = parser.parse_args(argv)

    run_server(args, config, env_file=env_file)
