"""Path parameter converters and the relations between route patterns.

``path_subset`` and ``path_overlap`` are what the router uses to decide
which of two overlapping patterns is more specific.
"""

import re

from snippetbox.routing.route import PathSegment

# Pattern each converter matches against one decoded segment, which may
# hold an escaped "/" or newline
CONVERTERS: dict[str, str] = {
    "str": r".+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}

# Converter -> the converters whose every value it also accepts
_NARROWER_THAN: dict[str, frozenset[str]] = {
    "str": frozenset({"str", "int", "float"}),
    "float": frozenset({"float", "int"}),
    "int": frozenset({"int"}),
}

_COMPILED: dict[str, re.Pattern[str]] = {
    name: re.compile(pattern, re.DOTALL) for name, pattern in CONVERTERS.items()
}


def param_regex(param_type: str) -> re.Pattern[str]:
    """Return the compiled pattern for *param_type*."""
    return _COMPILED[param_type]


def _segment_subset(a: PathSegment, b: PathSegment) -> bool:
    """True when every value matched by *a* is also matched by *b*."""
    if not b.is_param:
        return not a.is_param and a.value == b.value
    if not a.is_param:
        return param_regex(b.param_type).fullmatch(a.value) is not None
    return a.param_type in _NARROWER_THAN[b.param_type]


def _segment_overlap(a: PathSegment, b: PathSegment) -> bool:
    """True when some value is matched by both *a* and *b*."""
    if a.is_param and b.is_param:
        # every converter accepts "1"
        return True
    if a.is_param:
        return param_regex(a.param_type).fullmatch(b.value) is not None
    if b.is_param:
        return param_regex(b.param_type).fullmatch(a.value) is not None
    return a.value == b.value


def path_subset(a: list[PathSegment], b: list[PathSegment]) -> bool:
    """True when every request path matched by *a* is matched by *b*.

    A remainder segment matches one or more trailing path segments.
    """
    i = 0
    while True:
        if i < len(b) and b[i].is_remainder:
            return i < len(a)
        if i == len(a) or i == len(b):
            return i == len(a) == len(b)
        if a[i].is_remainder:
            return False
        if not _segment_subset(a[i], b[i]):
            return False
        i += 1


def path_overlap(a: list[PathSegment], b: list[PathSegment]) -> bool:
    """True when at least one request path is matched by both *a* and *b*."""
    i = 0
    while True:
        if i < len(a) and a[i].is_remainder:
            return i < len(b)
        if i < len(b) and b[i].is_remainder:
            return i < len(a)
        if i == len(a) or i == len(b):
            return i == len(a) == len(b)
        if not _segment_overlap(a[i], b[i]):
            return False
        i += 1
