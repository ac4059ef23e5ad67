"""Access logging middleware."""

import logging

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Next


class RequestLogger:
    """Log every inbound request at INFO before it is handled.

    The record carries the remote address, protocol, method and full
    request URI::

        time=... level=INFO msg="received request" ip=127.0.0.1:51234 proto=HTTP/1.1 method=GET uri=/snippet/view/1
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("snippetbox.server")

    async def __call__(self, request: Request, next: Next) -> Response:
        self._logger.info(
            "received request ip=%s proto=%s method=%s uri=%s",
            request.remote_addr,
            request.protocol,
            request.method,
            request.url,
            extra={
                "ip": request.remote_addr,
                "proto": request.protocol,
                "method": request.method,
                "uri": request.url,
            },
        )
        return await next(request)
