"""Row-to-dataclass mapping with type coercion.

Converts raw database rows (dicts) into typed frozen dataclasses.
Uses dataclass field introspection, no metaclass magic, no descriptors.

Type coercion handles the mismatch between database drivers (SQLite
returns strings for timestamps and some numeric columns) and Python
dataclass annotations.

NULL handling is explicit: a ``None`` value is accepted only by a field
annotated ``X | None``. A NULL aimed at any other field raises
``TypeError`` instead of being turned into a zero value.
"""

import dataclasses
import types
import typing
from datetime import UTC, datetime
from typing import Any, TypeVar, get_args, get_origin

T = TypeVar("T")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        # SQLite stores "YYYY-MM-DD HH:MM:SS" text from datetime('now')
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# Scalar types we know how to coerce from database driver values.
_COERCIBLE: dict[type, Any] = {
    int: int,
    float: float,
    bool: lambda v: bool(int(v)) if isinstance(v, str) else bool(v),
    str: str,
    datetime: _to_datetime,
}


@dataclasses.dataclass(frozen=True, slots=True)
class _FieldPlan:
    target: type | None
    nullable: bool


def _build_coercion_map(cls: type) -> dict[str, _FieldPlan]:
    """Build a ``{field_name: _FieldPlan}`` map for *cls*.

    ``target`` is ``None`` for fields that don't need coercion (complex
    types, generics, etc.).
    """
    hints = typing.get_type_hints(cls)
    result: dict[str, _FieldPlan] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        nullable = annotation is Any
        # Unwrap Optional (X | None): coerce to the non-None branch
        if get_origin(annotation) in (types.UnionType, typing.Union):
            args = get_args(annotation)
            nullable = type(None) in args
            rest = [a for a in args if a is not type(None)]
            annotation = rest[0] if len(rest) == 1 else None
        target = annotation if annotation in _COERCIBLE else None
        result[f.name] = _FieldPlan(target=target, nullable=nullable)
    return result


def _coerce(cls: type, name: str, value: Any, plan: _FieldPlan) -> Any:
    """Coerce a single value to the field's target type, if needed."""
    if value is None:
        if not plan.nullable:
            msg = f"{cls.__name__}.{name} is not optional but the column is NULL"
            raise TypeError(msg)
        return None
    target = plan.target
    if target is None:
        return value
    if target is datetime:
        return _to_datetime(value)
    if isinstance(value, target):
        return value
    return _COERCIBLE[target](value)


def _check_dataclass(cls: type) -> None:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass; snippetbox.data maps rows to dataclasses"
        raise TypeError(msg)


def _build(cls: type[T], plans: dict[str, _FieldPlan], row: dict[str, Any]) -> T:
    values = {k: _coerce(cls, k, v, plans[k]) for k, v in row.items() if k in plans}
    return cls(**values)


def map_row(cls: type[T], row: dict[str, Any]) -> T:
    """Map a dict-like row to a frozen dataclass instance.

    Only passes keys that match dataclass fields. Extra columns are
    ignored (SELECT * is fine even if the dataclass has fewer fields).

    Raises ``TypeError`` if required fields are missing from the row or a
    NULL lands in a non-optional field.
    """
    _check_dataclass(cls)
    return _build(cls, _build_coercion_map(cls), row)


def map_rows(cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    """Map a list of dict-like rows to frozen dataclass instances."""
    _check_dataclass(cls)
    plans = _build_coercion_map(cls)
    return [_build(cls, plans, row) for row in rows]
