"""Start-up checks and serving for the ``snippetbox`` command."""

import argparse
import dataclasses
import logging
from pathlib import Path

import anyio

from snippetbox.app import App
from snippetbox.cli._logging import configure_logging
from snippetbox.config import AppConfig, parse_addr
from snippetbox.data import Database
from snippetbox.errors import SnippetboxError
from snippetbox.web import create_app

logger = logging.getLogger("snippetbox.cli")


async def check_app(app: App) -> None:
    """Connect, migrate and build the template cache, then disconnect.

    Raises whatever the first failing step raises.
    """
    await app.startup()
    await app.shutdown()


def build_app(args: argparse.Namespace, config: AppConfig) -> App:
    """Apply command-line flags over *config* and assemble the app."""
    host, port = parse_addr(args.addr)
    config = dataclasses.replace(
        config,
        host=host,
        port=port,
        dsn=args.dsn,
        debug=args.debug,
        log_level="debug" if args.debug else config.log_level,
    )
    db = Database(config.dsn, echo=config.debug, logger=logging.getLogger("snippetbox.data"))
    return create_app(config, db=db)


def run_server(
    args: argparse.Namespace,
    config: AppConfig,
    *,
    env_file: Path | None = None,
) -> None:
    """Check the app, then serve it until interrupted.

    Exits with status 1 if the address is invalid or any start-up check
    fails, before the listener is opened.
    """
    try:
        app = build_app(args, config)
    except SnippetboxError as exc:
        configure_logging(config.log_level)
        logger.error("invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    configure_logging(app.config.log_level)
    if env_file is not None:
        logger.info("loaded environment file=%s", env_file)

    try:
        anyio.run(check_app, app)
    except Exception as exc:
        logger.error("startup failed: %s", exc, exc_info=exc)
        raise SystemExit(1) from exc

    app.run()
