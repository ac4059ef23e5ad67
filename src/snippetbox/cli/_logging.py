"""Process-wide log configuration for the CLI."""

import logging
import sys

LOG_FORMAT = "time=%(asctime)s level=%(levelname)s msg=%(message)s"


def configure_logging(
    level: int | str = logging.INFO,
    logger: logging.Logger | None = None,
) -> logging.Handler:
    """Install one stdout handler on *logger* (the root logger by default).

    Any handlers already on the logger are replaced, so calling this
    twice does not duplicate output.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    target = logger or logging.getLogger()
    for existing in list(target.handlers):
        target.removeHandler(existing)
    target.addHandler(handler)
    target.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
