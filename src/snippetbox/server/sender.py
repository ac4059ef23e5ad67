"""Write a finished Response to the ASGI ``send`` channel.

The response is only sent once it is complete, so a rendering failure
can never leave a half-written status line behind.
"""

from snippetbox._internal.asgi import Send
from snippetbox.http.response import Response

# Statuses that never carry a message body
_NO_BODY = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Send *response* as one ``start`` and one ``body`` message.

    1xx, 204 and 304 responses go out without a body. A ``HEAD``
    response drops the body but keeps the ``Content-Length`` a ``GET``
    would have sent.
    """
    status = response.status
    body = b"" if status < 200 or status in _NO_BODY else response.body_bytes
    headers = _encode_headers(response, len(body))

    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": b"" if method == "HEAD" else body})
