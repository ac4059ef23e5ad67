"""Outbound responses.

A Response is a value: every ``with_*`` call returns a new one. The
sender turns the finished value into ASGI messages, so any layer can
still add headers on the way out.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and a complete body.

    Usage::

        Response("<p>saved</p>").with_status(201).with_header("X-Id", "7")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_default_headers(self, headers: Iterable[tuple[str, str]]) -> Response:
        """Add each of *headers* whose name the response does not carry yet.

        Headers already set downstream win over the defaults.
        """
        present = {name.lower() for name, _ in self.headers}
        missing = tuple((name, value) for name, value in headers if name.lower() not in present)
        return replace(self, headers=(*self.headers, *missing)) if missing else self

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """Last value added for *name*, compared case-insensitively."""
        wanted = name.lower()
        matches = [value for key, value in self.headers if key.lower() == wanted]
        return matches[-1] if matches else None

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


def redirect(url: str, status: int = 303) -> Response:
    """Redirect to *url*. 303 makes the browser follow up with a GET."""
    return Response(status=status).with_header("Location", url)
