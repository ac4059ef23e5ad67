"""Failure recovery for requests and background tasks.

``Recovery`` is the outermost middleware: any exception raised further
down the chain, including inside other middleware, becomes a logged
500 with ``Connection: close``. The server keeps serving.

Recovery only sees exceptions in the task handling the request. Work
started with ``asyncio.create_task`` runs in its own task and must be
started with ``spawn_guarded`` to get the same treatment.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from snippetbox.errors import AbnormalTermination
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Next
from snippetbox.server.errors import server_error

_default_logger = logging.getLogger("snippetbox.server")

# Strong references keep guarded tasks alive until they finish
_background_tasks: set[asyncio.Task[None]] = set()


class Recovery:
    """Convert any downstream exception into a 500 response.

    ``asyncio.CancelledError`` and other ``BaseException`` subclasses
    are not intercepted.
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _default_logger

    async def __call__(self, request: Request, next: Next) -> Response:
        try:
            return await next(request)
        except Exception as exc:
            wrapped = AbnormalTermination(exc)
            wrapped.__cause__ = exc
            response = server_error(request, wrapped, logger=self._logger)
            # Headers committed by inner layers before the failure still apply
            response = response.with_default_headers(request.response_headers)
            return response.with_header("Connection", "close")


def spawn_guarded(
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    logger: logging.Logger | None = None,
) -> asyncio.Task[None]:
    """Run ``func(*args)`` as a background task with its own guard.

    An exception in the task is logged at ERROR with its traceback and
    goes no further. Must be called from a running event loop.
    """
    log = logger or _default_logger

    async def guarded() -> None:
        try:
            await func(*args)
        except Exception as exc:
            log.error(
                "background task %s failed: %s",
                getattr(func, "__qualname__", repr(func)),
                exc,
                exc_info=exc,
            )

    task = asyncio.get_running_loop().create_task(guarded())
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
