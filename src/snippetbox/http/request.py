"""The inbound request as handlers and middleware see it.

Metadata is fixed when the request arrives; the body is pulled from
the ASGI ``receive`` channel on first use and cached, so several layers
can read it.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from snippetbox._internal.asgi import Receive, Scope
from snippetbox.http.headers import Headers
from snippetbox.http.query import QueryParams

if TYPE_CHECKING:
    from snippetbox.http.forms import FormData


@dataclass(frozen=True, slots=True)
class Request:
    """A single HTTP request.

    ``path`` is decoded, ``raw_path`` is the path exactly as it appeared
    on the request line. Routing uses ``raw_path`` so an escaped ``%2F``
    never splits a segment.
    """

    method: str
    path: str
    raw_path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    client: tuple[str, int] | None
    _receive: Receive
    # Shared between copies made by with_path_params
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        path = scope["path"]
        raw = scope.get("raw_path")
        # Some servers include the query string in raw_path
        raw_path = raw.decode("latin-1").partition("?")[0] if raw else quote(path)
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=path,
            raw_path=raw_path,
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            client=(client[0], client[1]) if client else None,
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request URI as sent: escaped path plus query string."""
        if self.query.raw:
            return f"{self.raw_path}?{self.query.raw}"
        return self.raw_path

    @property
    def protocol(self) -> str:
        return f"HTTP/{self.http_version}"

    @property
    def remote_addr(self) -> str:
        """``host:port`` of the peer, ``-`` when the server gave none."""
        if self.client is None:
            return "-"
        return "{}:{}".format(*self.client)

    def with_path_params(self, params: dict[str, str]) -> Request:
        return replace(self, path_params=params)

    @property
    def response_headers(self) -> tuple[tuple[str, str], ...]:
        """Headers an outer layer committed to before delegating.

        Whatever response leaves the chain, including one built by
        Recovery after a failure, starts from these.
        """
        return self._cache.get("response_headers", ())

    def add_response_headers(self, headers: Iterable[tuple[str, str]]) -> None:
        self._cache["response_headers"] = (*self.response_headers, *headers)

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Yield body chunks straight from the ASGI channel (uncached)."""
        more = True
        while more:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            more = message.get("more_body", False)

    async def body(self) -> bytes:
        cached = self._cache.get("body")
        if cached is None:
            cached = self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return cached

    async def form(self) -> FormData:
        """Parse the body as an urlencoded form.

        A missing ``Content-Type`` is treated as urlencoded. Anything
        else raises ``ClientInputError``.
        """
        cached = self._cache.get("form")
        if cached is None:
            from snippetbox.http.forms import URLENCODED, parse_form_data

            cached = self._cache["form"] = parse_form_data(
                await self.body(), self.content_type or URLENCODED
            )
        return cached
