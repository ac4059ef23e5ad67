"""Exceptions raised and caught across the request pipeline.

Routing, the app, handlers and middleware all use these types; the data
layer's errors (``snippetbox.data.errors``) share the same base.
"""

from http import HTTPStatus


class SnippetboxError(Exception):
    """Base for all snippetbox-specific errors."""


class ConfigurationError(SnippetboxError):
    """The app cannot start as configured.

    Conflicting routes, a template that fails to compile, a missing base
    layout. Raised while the app compiles, before anything is served.
    """


class AbnormalTermination(SnippetboxError):
    """An unexpected exception caught by the recovery middleware.

    The original stays reachable as ``original`` and ``__cause__`` so
    the server-error path logs it with the request that triggered it.
    """

    def __init__(self, original: BaseException) -> None:
        super().__init__(f"{type(original).__name__}: {original}")
        self.original = original


class HTTPError(SnippetboxError):
    """A failure with a fixed HTTP status.

    Dispatch turns it into a ``client_error`` response. ``detail`` goes
    to the debug log only; the body is always the status phrase.
    """

    def __init__(
        self,
        status: int,
        detail: str = "",
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(status, detail)
        self.status = status
        self.detail = detail
        self.headers = headers

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing is routed at the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(404, detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the path is routed, but not for this method.

    ``Allow`` lists the methods that are.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(405, detail or f"Allowed methods: {allow}", (("Allow", allow),))
        self.allowed = allowed


class ClientInputError(HTTPError):
    """The client sent something unusable: a malformed form, a bad parameter.

    Always 4xx and never logged above debug.
    """

    def __init__(self, status: int = 400, detail: str = "") -> None:
        if not 400 <= status < 500:
            msg = f"ClientInputError requires a 4xx status, got {status}"
            raise ValueError(msg)
        super().__init__(status, detail or HTTPStatus(status).phrase)
