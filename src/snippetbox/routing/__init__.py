"""Routing: compiled route table with most-specific-pattern matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app compiles. Compilation rejects duplicate
and ambiguous patterns so the choice at request time is always unique.
"""

from snippetbox.routing.route import PathSegment, Route, RouteMatch
from snippetbox.routing.router import Router, parse_path

__all__ = ["PathSegment", "Route", "RouteMatch", "Router", "parse_path"]
