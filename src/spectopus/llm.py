"""Reshape canonical schema nodes for tool-calling manifests."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

__all__ = [
    "TOOL_SCHEMA_FIELDS",
    "clean_schema",
    "tool_parameters",
]

# fields tool-calling providers accept on a parameter schema
TOOL_SCHEMA_FIELDS: Final[tuple[str, ...]] = (
    "type",
    "format",
    "description",
    "enum",
    "const",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "minLength",
    "maxLength",
    "pattern",
    "default",
    "items",
    "properties",
    "required",
    "additionalProperties",
    "allOf",
    "anyOf",
    "oneOf",
    "not",
    "$ref",
    "minItems",
    "maxItems",
    "uniqueItems",
)


def clean_schema(node: Mapping[str, object]) -> dict[str, object]:
    """Return a copy of ``node`` restricted to :data:`TOOL_SCHEMA_FIELDS`.

    Only the top level is filtered; nested schemas are copied as they are.

    Examples
    --------
    >>> clean_schema({"type": "string", "readOnly": True, "contentEncoding": "base64"})
    {'type': 'string'}
    """
    return {key: copy.deepcopy(node[key]) for key in TOOL_SCHEMA_FIELDS if key in node}


def tool_parameters(
    properties: Mapping[str, Mapping[str, object]],
    required: Iterable[str] = (),
    *,
    strict: bool = False,
) -> dict[str, object]:
    """Assemble the object schema describing a tool's parameters.

    Parameters
    ----------
    properties : Mapping[str, Mapping[str, object]]
        Parameter name to converted schema node (or ``$ref`` node).
    required : Iterable[str], optional
        Names of required parameters.
    strict : bool, optional
        Strict structured-output mode: every parameter becomes required and
        unknown parameters are rejected. Defaults to False.

    Returns
    -------
    dict[str, object]
        ``{"type": "object", "properties": ..., "required": ...}``.
    """
    cleaned = {name: clean_schema(schema) for name, schema in properties.items()}
    parameters: dict[str, object] = {"type": "object", "properties": cleaned}
    names = list(cleaned) if strict else [name for name in required if name in cleaned]
    if names:
        parameters["required"] = names
    if strict:
        parameters["additionalProperties"] = False
    return parameters
