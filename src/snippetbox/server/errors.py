"""Error responses for snippetbox requests.

Two disjoint policies, and every error body in the app comes from one
of them:

- ``server_error``: unexpected failure. Logged at ERROR with the request
  line, traceback and call stack; the client sees a fixed 500 body.
- ``client_error``: expected failure. The client sees the standard
  reason phrase for the status; nothing is logged at ERROR.
"""

import logging
from http import HTTPStatus

from snippetbox.http.request import Request
from snippetbox.http.response import Response

logger = logging.getLogger("snippetbox.server")

SERVER_ERROR_BODY = HTTPStatus.INTERNAL_SERVER_ERROR.phrase


def server_error(
    request: Request,
    exc: BaseException,
    *,
    logger: logging.Logger = logger,
) -> Response:
    """Log *exc* with the triggering request and return a generic 500."""
    logger.error(
        "%s method=%s uri=%s",
        exc,
        request.method,
        request.url,
        exc_info=(type(exc), exc, exc.__traceback__),
        stack_info=True,
    )
    return Response(body=SERVER_ERROR_BODY, status=500, content_type="text/plain; charset=utf-8")


def client_error(
    status: int,
    *,
    headers: tuple[tuple[str, str], ...] = (),
) -> Response:
    """Return *status* with its standard reason phrase as the body."""
    response = Response(
        body=HTTPStatus(status).phrase,
        status=status,
        content_type="text/plain; charset=utf-8",
    )
    for name, value in headers:
        response = response.with_header(name, value)
    return response


def not_found() -> Response:
    """Shorthand for ``client_error(404)``."""
    return client_error(404)
