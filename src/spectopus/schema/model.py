"""Canonical schema node model.

Every conversion produces a tree of plain ``dict`` nodes compatible with JSON
Schema 2020-12 / OpenAPI 3.1. The TypedDicts below document the recognised
keys; at runtime nodes are ordinary dictionaries owned by the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final, Literal, TypedDict, cast

__all__ = [
    "METADATA_KEYS",
    "ReferenceNode",
    "SchemaNode",
    "SchemaOrRef",
    "SchemaType",
    "is_reference",
    "overlay",
    "reference",
]

type SchemaType = Literal["string", "number", "integer", "boolean", "object", "array", "null"]

SchemaNode = TypedDict(
    "SchemaNode",
    {
        "type": "SchemaType | list[SchemaType]",
        "allOf": "list[SchemaOrRef]",
        "anyOf": "list[SchemaOrRef]",
        "oneOf": "list[SchemaOrRef]",
        "not": "SchemaOrRef",
        "properties": "dict[str, SchemaOrRef]",
        "required": "list[str]",
        "additionalProperties": "bool | SchemaOrRef",
        "items": "SchemaOrRef | bool",
        "prefixItems": "list[SchemaOrRef]",
        "minItems": int,
        "maxItems": int,
        "uniqueItems": bool,
        "minLength": int,
        "maxLength": int,
        "pattern": str,
        "format": str,
        "contentEncoding": str,
        "minimum": float,
        "maximum": float,
        "exclusiveMinimum": float,
        "exclusiveMaximum": float,
        "multipleOf": float,
        "enum": "list[object]",
        "const": object,
        "description": str,
        "default": object,
        "readOnly": bool,
    },
    total=False,
)

ReferenceNode = TypedDict("ReferenceNode", {"$ref": str})

type SchemaOrRef = SchemaNode | ReferenceNode

METADATA_KEYS: Final[tuple[str, ...]] = ("description", "default")


def reference(path: str) -> ReferenceNode:
    """Return a ``$ref`` node pointing at ``path``."""
    return {"$ref": path}


def is_reference(node: object) -> bool:
    """Return True when ``node`` is a ``$ref`` node."""
    return isinstance(node, Mapping) and "$ref" in node


def overlay(metadata: Mapping[str, object], fields: Mapping[str, object]) -> SchemaNode:
    """Merge type-specific ``fields`` into a copy of ``metadata``.

    Metadata keys already collected for the current node (``description``,
    ``default``) are kept even when ``fields`` carries the same key from an
    unwrapped inner schema; every other key of ``fields`` is copied over.

    Parameters
    ----------
    metadata : Mapping[str, object]
        Metadata gathered at the current level.
    fields : Mapping[str, object]
        Type-specific fields computed for the node.

    Returns
    -------
    SchemaNode
        A new node; neither argument is modified.

    Examples
    --------
    >>> overlay({"description": "outer"}, {"type": "string", "description": "inner"})
    {'description': 'outer', 'type': 'string'}
    """
    merged: dict[str, object] = dict(metadata)
    for key, value in fields.items():
        if key in METADATA_KEYS and key in merged:
            continue
        merged[key] = value
    return cast("SchemaNode", merged)

