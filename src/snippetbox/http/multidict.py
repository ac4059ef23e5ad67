"""Read-only multi-value mapping shared by headers, query and form data."""

from collections.abc import Iterator, Mapping


class MultiDict(Mapping[str, str]):
    """A mapping where each key may carry several values.

    Indexing returns the first value; ``get_list`` returns all of them
    in arrival order.
    """

    __slots__ = ("_lists",)

    def __init__(self, lists: dict[str, list[str]] | None = None) -> None:
        self._lists: dict[str, list[str]] = lists or {}

    def _key(self, key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        values = self._lists.get(self._key(key))
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self._lists.get(self._key(key)))

    def __iter__(self) -> Iterator[str]:
        return iter(self._lists)

    def __len__(self) -> int:
        return len(self._lists)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._lists.get(self._key(key), ()))
