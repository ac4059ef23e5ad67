"""Built-in validation rules for snippetbox forms.

Each validator is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

Parameterized validators are factory functions that return a validator.
Any callable matching ``(str) -> str | None`` works with ``validate()``.
"""

from collections.abc import Callable
from typing import TypeAlias

# Type alias for a validator function
Validator: TypeAlias = Callable[[str], str | None]


def required(value: str) -> str | None:
    """Field must be present and not blank."""
    if not value or not value.strip():
        return "This field cannot be blank"
    return None


def max_length(n: int) -> Validator:
    """String must be at most *n* characters (code points, not bytes)."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return f"This field cannot be more than {n} characters long"
        return None

    return check


def _join_choices(choices: tuple[str, ...]) -> str:
    if len(choices) == 1:
        return choices[0]
    return f"{', '.join(choices[:-1])} or {choices[-1]}"


def one_of(*choices: str) -> Validator:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)
    message = f"This field must equal {_join_choices(choices)}"

    def check(value: str) -> str | None:
        if value not in allowed:
            return message
        return None

    return check
