"""Value types shared by the route parser and the router."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``/``-separated piece of a route pattern.

    Static:    ``/snippet``        (is_param=False)
    Param:     ``/{id}``           (is_param=True, param_name="id")
    Typed:     ``/{id:int}``       (is_param=True, param_name="id", param_type="int")
    Remainder: ``/{filepath:path}`` or ``/{filepath...}`` (param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"

    @property
    def is_remainder(self) -> bool:
        return self.is_param and self.param_type == "path"


@dataclass(frozen=True, slots=True)
class Route:
    """A handler bound to a path pattern and, optionally, a method set.

    ``methods=None`` means the route is not method-qualified and matches
    every method. A route registered for ``GET`` also answers ``HEAD``.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] | None = None
    name: str | None = None

    @property
    def allowed_methods(self) -> frozenset[str] | None:
        """Methods this route answers, with ``HEAD`` implied by ``GET``."""
        if self.methods is None:
            return None
        if "GET" in self.methods:
            return self.methods | {"HEAD"}
        return self.methods

    def accepts(self, method: str) -> bool:
        allowed = self.allowed_methods
        return allowed is None or method in allowed


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """The route chosen for a request and the parameters it captured."""

    route: Route
    path_params: dict[str, str]
