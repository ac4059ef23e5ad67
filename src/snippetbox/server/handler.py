"""Per-request pipeline: ASGI scope in, ASGI messages out.

This is the one place raw ASGI meets snippetbox types. Everything
between ``Request.from_asgi`` and ``send_response`` works on values.
"""

import logging

from snippetbox._internal.asgi import Receive, Scope, Send
from snippetbox._internal.invoke import invoke
from snippetbox.errors import HTTPError
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Middleware, Next, compose
from snippetbox.routing.router import Router
from snippetbox.server.errors import client_error, server_error
from snippetbox.server.sender import send_response


def _as_response(result: object, handler: object) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return Response(body=result)
    msg = f"Handler {handler!r} returned {type(result).__name__}, not Response"
    raise TypeError(msg)


def make_dispatcher(router: Router, logger: logging.Logger) -> Next:
    """The innermost link of the chain: route, call the handler, normalize.

    ``HTTPError`` from routing or from the handler becomes a plain-text
    error response here, so every middleware sees it as a response.
    """

    async def dispatch(request: Request) -> Response:
        try:
            match = router.match(request.method, request.raw_path)
            handler = match.route.handler
            result = await invoke(handler, request.with_path_params(match.path_params))
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.url, exc.detail)
            return client_error(exc.status, headers=exc.headers)
        return _as_response(result, handler)

    return dispatch


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Middleware, ...],
    logger: logging.Logger,
) -> None:
    """Answer one ``http`` scope through *middleware* and *router*."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    pipeline = compose(middleware, make_dispatcher(router, logger))
    try:
        response = await pipeline(request)
    except Exception as exc:
        # Reached only when no Recovery middleware is installed
        response = server_error(request, exc, logger=logger).with_default_headers(request.response_headers)
    await send_response(response, send, method=request.method)
