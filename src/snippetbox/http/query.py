"""Query string parameters."""

from urllib.parse import parse_qs

from snippetbox.http.multidict import MultiDict


class QueryParams(MultiDict):
    """Parsed query string. Keeps the undecoded form for access logs."""

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string.decode("latin-1")
        super().__init__(parse_qs(self._raw, keep_blank_values=True))

    @property
    def raw(self) -> str:
        return self._raw
