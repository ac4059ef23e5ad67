"""Case-insensitive request headers, decoded once from the ASGI scope."""

from snippetbox.http.multidict import MultiDict


class Headers(MultiDict):
    """Request headers keyed by lower-cased name.

    Repeated headers keep every value, in the order the client sent them.
    """

    __slots__ = ()

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        lists: dict[str, list[str]] = {}
        for name, value in raw:
            lists.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        super().__init__(lists)

    def _key(self, key: str) -> str:
        return key.lower()
