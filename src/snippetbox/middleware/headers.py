"""Common response headers: server identification and security headers.

The header set is committed on the request before delegating, so every
response gets it: handler output, router errors, and the 500 Recovery
builds after a failure further down. A header the handler already set
keeps the handler's value.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class CommonHeadersConfig:
    """Headers applied to every response.

    ``None`` disables a header. ``extra`` adds arbitrary headers after
    the standard set.
    """

    server: str | None = "Go"
    content_security_policy: str | None = (
        "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com"
    )
    referrer_policy: str | None = "origin-when-cross-origin"
    x_content_type_options: str | None = "nosniff"
    x_frame_options: str | None = "deny"
    x_xss_protection: str | None = "0"
    extra: Mapping[str, str] | None = None

    def items(self) -> list[tuple[str, str]]:
        pairs = [
            ("Content-Security-Policy", self.content_security_policy),
            ("Referrer-Policy", self.referrer_policy),
            ("X-Content-Type-Options", self.x_content_type_options),
            ("X-Frame-Options", self.x_frame_options),
            ("X-XSS-Protection", self.x_xss_protection),
            ("Server", self.server),
        ]
        result = [(name, value) for name, value in pairs if value is not None]
        if self.extra:
            result.extend(self.extra.items())
        return result


class CommonHeaders:
    """Add the configured headers to every response that lacks them.

    Usage::

        from snippetbox.middleware import CommonHeaders

        app.add_middleware(CommonHeaders())

    Or with custom config::

        app.add_middleware(CommonHeaders(CommonHeadersConfig(server="snippetbox")))
    """

    __slots__ = ("_headers",)

    def __init__(self, config: CommonHeadersConfig | None = None) -> None:
        self._headers = tuple((config or CommonHeadersConfig()).items())

    async def __call__(self, request: Request, next: Next) -> Response:
        request.add_response_headers(self._headers)
        response = await next(request)
        return response.with_default_headers(self._headers)
