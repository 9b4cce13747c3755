"""Presence, nullability, default and read-only modifiers.

Both dialects express the same four modifiers with different encodings:
the definition tree nests single-child wrapper nodes, the description object
carries flags. The converters translate their encoding into a
:class:`Modifiers` record and apply it here so that the folding rules live
in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final, cast

if TYPE_CHECKING:
    from collections.abc import Mapping

    from spectopus.schema.model import SchemaNode
    from spectopus.schema.options import ConversionOptions

__all__ = [
    "NULL_NODE",
    "Modifiers",
    "apply_modifiers",
    "fold_null_allowance",
    "make_nullable",
]

NULL_NODE: Final[Mapping[str, str]] = {"type": "null"}

_UNSET: Final = object()


@dataclass(frozen=True, slots=True)
class Modifiers:
    """Modifier set accumulated while unwrapping wrapper nodes.

    Attributes
    ----------
    optional : bool
        The value may be absent (optional-of or default-of wrapper).
    nullable : bool
        ``null`` is an accepted value.
    read_only : bool
        The value is read-only.
    default : object
        Default value, or the private unset sentinel.
    """

    optional: bool = False
    nullable: bool = False
    read_only: bool = False
    default: object = _UNSET

    @property
    def has_default(self) -> bool:
        """Return True when a default value was recorded."""
        return self.default is not _UNSET

    def mark_optional(self) -> Modifiers:
        """Return a copy marked optional."""
        return replace(self, optional=True)

    def mark_nullable(self) -> Modifiers:
        """Return a copy marked nullable."""
        return replace(self, nullable=True)

    def mark_read_only(self) -> Modifiers:
        """Return a copy marked read-only."""
        return replace(self, read_only=True)

    def with_default(self, value: object) -> Modifiers:
        """Return a copy carrying ``value`` as default.

        The outermost default wins; inner defaults found later while
        unwrapping do not replace it.
        """
        if self.has_default:
            return self
        return replace(self, default=value)


def make_nullable(node: SchemaNode) -> SchemaNode:
    """Return ``node`` widened to also accept ``null``.

    Parameters
    ----------
    node : SchemaNode
        Converted node.

    Returns
    -------
    SchemaNode
        A node whose scalar ``type`` became ``[type, "null"]``, whose type
        list gained ``"null"``, or ``{"anyOf": [node, {"type": "null"}]}``
        when there is no type to widen.

    Examples
    --------
    >>> make_nullable({"type": "string", "minLength": 1})
    {'type': ['string', 'null'], 'minLength': 1}
    >>> make_nullable({"anyOf": [{"type": "string"}, {"type": "number"}]})
    {'anyOf': [{'anyOf': [{'type': 'string'}, {'type': 'number'}]}, {'type': 'null'}]}
    """
    node_type = node.get("type")
    if isinstance(node_type, str):
        widened: dict[str, object] = dict(node)
        widened["type"] = [node_type, "null"] if node_type != "null" else "null"
        return cast("SchemaNode", widened)
    if isinstance(node_type, list):
        widened = dict(node)
        widened["type"] = node_type if "null" in node_type else [*node_type, "null"]
        return cast("SchemaNode", widened)
    return cast("SchemaNode", {"anyOf": [node, dict(NULL_NODE)]})


def fold_null_allowance(fields: SchemaNode, metadata: Mapping[str, object]) -> SchemaNode:
    """Widen a description-object node whose allow-list contains ``null``.

    Same as :func:`make_nullable`, except that when both the type-specific
    ``fields`` and the collected ``metadata`` are empty the empty node is
    returned as is instead of the vacuous ``{"anyOf": [{}, {"type": "null"}]}``.

    Examples
    --------
    >>> fold_null_allowance({}, {})
    {}
    >>> fold_null_allowance({}, {"description": "anything"})
    {'anyOf': [{}, {'type': 'null'}]}
    """
    if not fields and not metadata:
        return {}
    return make_nullable(fields)


def apply_modifiers(
    node: SchemaNode,
    modifiers: Modifiers,
    options: ConversionOptions,
) -> SchemaNode:
    """Overlay ``modifiers`` onto a converted inner node.

    ``optional`` has no effect on the node itself; it is consumed by the
    enclosing object when deriving ``required``.

    Parameters
    ----------
    node : SchemaNode
        Converted inner node.
    modifiers : Modifiers
        Modifiers collected from the wrappers around it.
    options : ConversionOptions
        Conversion options (``include_defaults``).

    Returns
    -------
    SchemaNode
        A new node.
    """
    result: dict[str, object] = dict(make_nullable(node) if modifiers.nullable else node)
    if modifiers.has_default and options.include_defaults:
        result["default"] = modifiers.default
    if modifiers.read_only:
        result["readOnly"] = True
    return cast("SchemaNode", result)
