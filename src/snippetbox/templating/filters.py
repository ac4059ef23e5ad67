"""Built-in snippetbox template filters.

Registered automatically on the Jinja2 environment built by
``build_template_cache``.
"""

from datetime import UTC, datetime
from typing import Any


def human_date(value: datetime | None) -> str:
    """Format a timestamp in UTC as ``02 Jan 2006 at 15:04``.

    Example:
        {{ snippet.created | human_date }}  → "17 Mar 2024 at 10:15"

    Returns an empty string for ``None`` so optional timestamps can be
    piped through without a guard.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%d %b %Y at %H:%M")


# All built-in filters, registered automatically on every environment.
BUILTIN_FILTERS: dict[str, Any] = {
    "human_date": human_date,
}
