"""The middleware contract.

A middleware takes the request and the rest of the chain::

    async def mw(request: Request, next: Next) -> Response: ...

Work before ``await next(request)`` happens on the way in, work after
it on the way out. Returning without calling ``next`` answers the
request right there. Plain functions and objects with an async
``__call__`` both qualify; nothing has to be subclassed.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from snippetbox.http.request import Request
from snippetbox.http.response import Response

# Everything downstream of a middleware, as a single callable
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Shape shared by every middleware.

    For example, a header stamped on the way out::

        class Stamp:
            async def __call__(self, request: Request, next: Next) -> Response:
                response = await next(request)
                return response.with_header("X-Served-By", "snippetbox")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


def _link(layer: Middleware, downstream: Next) -> Next:
    async def call(request: Request) -> Response:
        return await layer(request, downstream)

    return call


def compose(middleware: tuple[Middleware, ...], handler: Next) -> Next:
    """Wrap *handler* so that ``middleware[0]`` runs first and the handler last."""
    chain = handler
    for layer in reversed(middleware):
        chain = _link(layer, chain)
    return chain
