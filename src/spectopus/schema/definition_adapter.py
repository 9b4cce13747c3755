"""Read-only adapter over definition-tree schema values.

Definition-tree schemas expose their structure through an internal ``_def``
record whose layout is not a published contract. This module is the only
place that knows that layout; the converter asks it for tags, children,
checks and defaults and never touches ``_def`` itself. ``_def`` may be a
mapping or an attribute object, and lazily evaluated members (``shape``,
``defaultValue``) may be callables or plain values.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final

__all__ = [
    "MISSING",
    "check_field",
    "checks_of",
    "default_of",
    "definition_of",
    "description_of",
    "field",
    "is_definition_tree",
    "length_bound",
    "members_of",
    "shape_of",
    "type_tag",
]


class _Missing:
    """Sentinel for values the definition does not carry."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


def _get(record: object, key: str) -> object:
    if record is None:
        return MISSING
    if isinstance(record, Mapping):
        return record.get(key, MISSING)
    return getattr(record, key, MISSING)


def is_definition_tree(value: object) -> bool:
    """Return True when ``value`` looks like a definition-tree schema.

    Such values carry a ``_def`` record and a callable ``parse`` member.
    """
    if isinstance(value, (str, Mapping)):
        return False
    return getattr(value, "_def", None) is not None and callable(getattr(value, "parse", None))


def definition_of(value: object) -> object:
    """Return the ``_def`` record of ``value``, or None."""
    return getattr(value, "_def", None)


def field(value: object, name: str) -> object:
    """Return member ``name`` of the definition of ``value`` or :data:`MISSING`."""
    return _get(definition_of(value), name)


def type_tag(value: object) -> str:
    """Return the type tag of ``value`` (empty string when absent)."""
    tag = field(value, "typeName")
    return tag if isinstance(tag, str) else ""


def description_of(value: object) -> str | None:
    """Return the attached description, if any."""
    description = field(value, "description")
    return description if isinstance(description, str) and description else None


def shape_of(value: object) -> Mapping[str, object]:
    """Return the declared fields of an object schema."""
    shape = field(value, "shape")
    if callable(shape):
        shape = shape()
    return shape if isinstance(shape, Mapping) else {}


def default_of(value: object) -> object:
    """Return the default carried by a default-of wrapper or :data:`MISSING`."""
    default = field(value, "defaultValue")
    if callable(default):
        return default()
    return default


def members_of(value: object, name: str) -> list[object]:
    """Return the list-valued member ``name`` (options, items, checks)."""
    members = field(value, name)
    if isinstance(members, Sequence) and not isinstance(members, (str, bytes)):
        return list(members)
    return []


def checks_of(value: object) -> list[object]:
    """Return the ordered list of named checks of a string or number schema."""
    return members_of(value, "checks")


def check_field(check: object, name: str) -> object:
    """Return member ``name`` of a check record or :data:`MISSING`."""
    return _get(check, name)


def length_bound(value: object, name: str) -> int | None:
    """Return ``_def.<name>.value`` for array length constraints."""
    bound = _get(field(value, name), "value")
    if isinstance(bound, int) and not isinstance(bound, bool):
        return bound
    return None
