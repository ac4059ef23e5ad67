"""Shared type aliases used across snippetbox modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: receives the Request (with path params bound) and
# returns a Response, sync or async
Handler: TypeAlias = Callable[..., Any]
