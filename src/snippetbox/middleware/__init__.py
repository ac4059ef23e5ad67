"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware, in the order the app installs them:
    Recovery -- Turn any downstream exception into a 500 with Connection: close
    RequestLogger -- Log every inbound request at INFO
    CommonHeaders -- Server identification and security headers
"""

from snippetbox.middleware.headers import CommonHeaders, CommonHeadersConfig
from snippetbox.middleware.protocol import Middleware, Next, compose
from snippetbox.middleware.recovery import Recovery, spawn_guarded
from snippetbox.middleware.request_log import RequestLogger

__all__ = [
    "CommonHeaders",
    "CommonHeadersConfig",
    "Middleware",
    "Next",
    "Recovery",
    "RequestLogger",
    "compose",
    "spawn_guarded",
]
