"""Serving: runs the app under uvicorn.

Uvicorn drives the ASGI lifespan protocol, so the database connects and
migrates before the first request and disconnects on shutdown.
"""

from typing import Any


def run_server(
    app: Any,
    host: str,
    port: int,
    *,
    log_level: str = "info",
) -> None:
    """Start a uvicorn server with the given ASGI app.

    ``log_config=None`` leaves logging to the app's own configuration
    instead of installing uvicorn's default handlers.

    Args:
        app: ASGI callable (snippetbox App instance).
        host: Bind host address.
        port: Bind port number.
        log_level: uvicorn log level name.
    """
    import uvicorn

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
        log_config=None,
        lifespan="on",
        server_header=False,
    )
