"""Route table: a segment trie plus a precomputed precedence relation.

Routes are added during setup. ``compile()`` ranks every overlapping
pair once and freezes the table. Matching walks every trie edge
a path can take, so all candidate routes are found, then the most
specific one that accepts the method wins.
"""

import re
from urllib.parse import unquote

from snippetbox.errors import ConfigurationError, MethodNotAllowed, NotFound
from snippetbox.routing.params import CONVERTERS, param_regex, path_overlap, path_subset
from snippetbox.routing.route import PathSegment, Route, RouteMatch

# {name}, {name:converter} or {name...}
_PLACEHOLDER = re.compile(r"\{(?P<name>[^{}:]*?)(?:(?P<dots>\.\.\.)|:(?P<converter>[^{}]*))?\}")


def _parse_segment(part: str, path: str) -> PathSegment:
    found = _PLACEHOLDER.fullmatch(part)
    if found is None:
        return PathSegment(value=part)
    name = found["name"]
    converter = "path" if found["dots"] else found["converter"] or "str"
    if not name.isidentifier():
        msg = f"Invalid parameter name {name!r} in {path!r}"
        raise ConfigurationError(msg)
    if converter not in CONVERTERS:
        msg = f"Unknown converter {converter!r} in {path!r}"
        raise ConfigurationError(msg)
    return PathSegment(value=part, is_param=True, param_name=name, param_type=converter)


def parse_path(path: str) -> list[PathSegment]:
    """Split a route pattern into segments.

    ::

        "/snippet"              -> [PathSegment("snippet")]
        "/snippet/view/{id}"    -> [..., PathSegment("{id}", is_param=True, param_name="id")]
        "/files/{p:path}"       -> [..., PathSegment("{p:path}", is_param=True, param_type="path")]
        "/files/{p...}"         -> same as ``{p:path}``

    Raises ``ConfigurationError`` for an unknown converter, a repeated
    parameter name, or a remainder anywhere but last.
    """
    segments = [_parse_segment(part, path) for part in path.split("/") if part]
    names = [s.param_name for s in segments if s.is_param]
    for name in names:
        if names.count(name) > 1:
            msg = f"Duplicate parameter {name!r} in {path!r}"
            raise ConfigurationError(msg)
    if any(s.is_remainder for s in segments[:-1]):
        msg = f"Remainder parameter must be the last segment in {path!r}"
        raise ConfigurationError(msg)
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during registration only."""

    __slots__ = ("catch_all", "children", "param_children", "routes")

    def __init__(self) -> None:
        # Static segment children: "snippet" -> node
        self.children: dict[str, _TrieNode] = {}
        # Parameter children keyed by converter; names live on the route
        self.param_children: dict[str, _TrieNode] = {}
        # Indexes of routes whose remainder starts at this node
        self.catch_all: list[int] = []
        # Indexes of routes that end at this node
        self.routes: list[int] = []


class Router:
    """Maps a method and raw path to exactly one route.

    Usage::

        router = Router()
        router.add(Route("/snippet/view/{id}", view, frozenset({"GET"})))
        router.add(Route("/snippet/create", create, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/snippet/view/42")
    """

    __slots__ = ("_beats", "_compiled", "_root", "_routes", "_segments")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._routes: list[Route] = []
        self._segments: list[list[PathSegment]] = []
        # (i, j) present when route i takes precedence over route j
        self._beats: frozenset[tuple[int, int]] = frozenset()

    def add(self, route: Route) -> None:
        """Register *route*. Only allowed before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        index = len(self._routes)
        self._routes.append(route)
        self._segments.append(segments)

        node = self._root
        for seg in segments:
            if seg.is_remainder:
                node.catch_all.append(index)
                return
            if seg.is_param:
                node = node.param_children.setdefault(seg.param_type, _TrieNode())
            else:
                node = node.children.setdefault(seg.value, _TrieNode())
        node.routes.append(index)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, oldest first."""
        return list(self._routes)

    def compile(self) -> None:
        """Check every pair of routes and freeze the router.

        Raises ``ConfigurationError`` when two routes can match the same
        request and neither takes precedence over the other.
        """
        beats: set[tuple[int, int]] = set()
        for i in range(len(self._routes)):
            for j in range(i + 1, len(self._routes)):
                winner = self._rank(i, j)
                if winner is not None:
                    beats.add(winner)
        self._beats = frozenset(beats)
        self._compiled = True

    def _rank(self, i: int, j: int) -> tuple[int, int] | None:
        """Return ``(winner, loser)`` for an overlapping pair, else ``None``."""
        a, b = self._routes[i], self._routes[j]
        a_methods, b_methods = a.allowed_methods, b.allowed_methods
        if a_methods is not None and b_methods is not None and not a_methods & b_methods:
            return None

        a_segs, b_segs = self._segments[i], self._segments[j]
        if not path_overlap(a_segs, b_segs):
            return None

        a_in_b = path_subset(a_segs, b_segs)
        b_in_a = path_subset(b_segs, a_segs)
        if a_in_b and not b_in_a:
            return (i, j)
        if b_in_a and not a_in_b:
            return (j, i)
        if a_in_b and b_in_a:
            # Same path pattern: a method qualifier breaks the tie
            if a.methods is not None and b.methods is None:
                return (i, j)
            if b.methods is not None and a.methods is None:
                return (j, i)
            msg = f"Duplicate route: {a.path!r} and {b.path!r} match the same requests"
            raise ConfigurationError(msg)

        msg = (
            f"Ambiguous routes: {a.path!r} and {b.path!r} both match some request "
            "and neither is more specific"
        )
        raise ConfigurationError(msg)

    def match(self, method: str, path: str) -> RouteMatch:
        """Pick the route for *method* and *path*.

        *path* is the raw (still percent-encoded) request path; captured
        values are decoded per segment.

        Raises ``NotFound`` when no pattern matches the path, and
        ``MethodNotAllowed`` (with the union of allowed methods) when
        patterns match but none accepts *method*.
        """
        raw_parts = [p for p in path.strip("/").split("/") if p]
        parts = [unquote(p) for p in raw_parts]

        candidates: list[tuple[int, list[str]]] = []
        self._collect(self._root, raw_parts, parts, 0, [], candidates)
        if not candidates:
            raise NotFound(f"No route matches {method} {path!r}")

        accepting = [c for c in candidates if self._routes[c[0]].accepts(method)]
        if not accepting:
            allowed: set[str] = set()
            for index, _ in candidates:
                allowed |= self._routes[index].allowed_methods or frozenset()
            raise MethodNotAllowed(frozenset(allowed))

        best_index, best_values = accepting[0]
        for index, values in accepting[1:]:
            if (index, best_index) in self._beats:
                best_index, best_values = index, values

        route = self._routes[best_index]
        names = [s.param_name or "" for s in self._segments[best_index] if s.is_param]
        return RouteMatch(route=route, path_params=dict(zip(names, best_values, strict=True)))

    def _collect(
        self,
        node: _TrieNode,
        raw_parts: list[str],
        parts: list[str],
        index: int,
        values: list[str],
        out: list[tuple[int, list[str]]],
    ) -> None:
        """Recursively gather every route whose pattern matches the path."""
        if node.catch_all and index < len(parts):
            remainder = unquote("/".join(raw_parts[index:]))
            out.extend((route_index, [*values, remainder]) for route_index in node.catch_all)

        if index == len(parts):
            out.extend((route_index, values) for route_index in node.routes)
            return

        part = parts[index]
        child = node.children.get(part)
        if child is not None:
            self._collect(child, raw_parts, parts, index + 1, values, out)

        for param_type, param_node in node.param_children.items():
            if param_regex(param_type).fullmatch(part):
                self._collect(param_node, raw_parts, parts, index + 1, [*values, part], out)
