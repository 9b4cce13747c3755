"""Description-object schemas to canonical schema nodes.

Description-object schemas publish a stable, flat ``describe()`` output::

    {"type": "string", "flags": {...}, "rules": [{"name": ..., "args": {...}}],
     "keys": {...}, "items": [...], "ordered": [...], "matches": [...], "allow": [...]}

Presence, defaults and descriptions live in ``flags``; nullability and enums
are expressed through the ``allow`` list.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, cast

from spectopus.schema.depth import depth_guarded
from spectopus.schema.model import overlay
from spectopus.schema.modifiers import fold_null_allowance
from spectopus.schema.options import resolve_options
from spectopus.schema.tables import (
    DESCRIPTION_NUMBER_BOUNDS,
    DESCRIPTION_STRING_ENCODINGS,
    DESCRIPTION_STRING_FORMATS,
    DESCRIPTION_STRING_PATTERNS,
    ip_format,
    pattern_source,
)
from spectopus_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from spectopus.schema.model import SchemaNode
    from spectopus.schema.options import ConversionOptions

    type Handler = Callable[[Mapping[str, object], ConversionOptions, int], SchemaNode]

__all__ = [
    "DescriptionType",
    "convert_described",
    "convert_description",
    "is_described",
]

logger = get_logger(__name__)


class DescriptionType(StrEnum):
    """Values of the ``type`` member of a description object."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ALTERNATIVES = "alternatives"
    DATE = "date"
    BINARY = "binary"
    ANY = "any"


def is_described(value: object) -> bool:
    """Return True when ``value`` exposes a callable ``describe`` member."""
    if isinstance(value, (str, Mapping)):
        return False
    return callable(getattr(value, "describe", None))


def _mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: object) -> list[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return []


def _flags(description: Mapping[str, object]) -> Mapping[str, object]:
    return _mapping(description.get("flags"))


def _rules(description: Mapping[str, object]) -> list[tuple[object, Mapping[str, object]]]:
    """Return ``(name, args)`` pairs of the rule list in declaration order."""
    rules: list[tuple[object, Mapping[str, object]]] = []
    for rule in _sequence(description.get("rules")):
        record = _mapping(rule)
        rules.append((record.get("name"), _mapping(record.get("args"))))
    return rules


def _limit(args: Mapping[str, object], name: str = "limit") -> int | float | None:
    value = args.get(name)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def _metadata(flags: Mapping[str, object], options: ConversionOptions) -> dict[str, object]:
    metadata: dict[str, object] = {}
    description = flags.get("description")
    if options.include_descriptions and isinstance(description, str) and description:
        metadata["description"] = description
    if options.include_defaults and "default" in flags:
        metadata["default"] = flags["default"]
    return metadata


@depth_guarded
def _convert(description: object, options: ConversionOptions, depth: int) -> SchemaNode:
    if not isinstance(description, Mapping):
        logger.log_degraded(
            "Description is not a mapping; emitting permissive schema",
            operation="convert",
            dialect="description",
            value_type=type(description).__name__,
        )
        return {}

    flags = _flags(description)
    metadata = _metadata(flags, options)
    allow = _sequence(description.get("allow"))

    if flags.get("only") and allow:
        return overlay(metadata, {"enum": allow})

    fields = _convert_type(description, options, depth)
    if any(item is None for item in allow):
        fields = fold_null_allowance(fields, metadata)
    return overlay(metadata, fields)


def _convert_type(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    kind = description.get("type")
    handler = _HANDLERS.get(kind) if isinstance(kind, str) else None
    if handler is None:
        logger.log_degraded(
            "Unsupported description type; emitting permissive schema",
            operation="convert",
            dialect="description",
            type_tag=kind if isinstance(kind, str) else None,
        )
        return {}
    return handler(description, options, depth)


def _convert_string(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    del options, depth
    node: dict[str, object] = {"type": "string"}
    for name, args in _rules(description):
        limit = _limit(args)
        if name == "min" and limit is not None:
            node["minLength"] = limit
        elif name == "max" and limit is not None:
            node["maxLength"] = limit
        elif name == "length" and limit is not None:
            node["minLength"] = limit
            node["maxLength"] = limit
        elif name == "ip":
            version = ip_format(args.get("version"))
            if version is not None:
                node["format"] = version
        elif name in ("pattern", "regex"):
            source = pattern_source(args.get("regex"))
            if source is not None:
                node["pattern"] = source
        elif isinstance(name, str) and name in DESCRIPTION_STRING_FORMATS:
            node["format"] = DESCRIPTION_STRING_FORMATS[name]
        elif isinstance(name, str) and name in DESCRIPTION_STRING_PATTERNS:
            node["pattern"] = DESCRIPTION_STRING_PATTERNS[name]
        elif isinstance(name, str) and name in DESCRIPTION_STRING_ENCODINGS:
            node["contentEncoding"] = DESCRIPTION_STRING_ENCODINGS[name]
        # creditCard, case, trim, truncate, normalize, replace: no canonical field
    return cast("SchemaNode", node)


def _convert_number(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    del options, depth
    is_integer = False
    bounds: dict[str, object] = {}
    for name, args in _rules(description):
        if name == "integer":
            is_integer = True
        elif isinstance(name, str) and name in DESCRIPTION_NUMBER_BOUNDS:
            key, argument = DESCRIPTION_NUMBER_BOUNDS[name]
            value = _limit(args, argument)
            if value is not None:
                bounds[key] = value
    return cast("SchemaNode", {"type": "integer" if is_integer else "number", **bounds})


def _pattern_value(description: Mapping[str, object]) -> object:
    """Return the value schema of the first pattern-based catch-all, if any."""
    for name, args in _rules(description):
        if name == "pattern":
            value = args.get("value")
            return value if value else None
    for entry in _sequence(description.get("patterns")):
        value = _mapping(entry).get("rule")
        if value:
            return value
    return None


def _convert_object(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    node: dict[str, object] = {"type": "object"}
    properties: dict[str, SchemaNode] = {}
    required: list[str] = []
    for key, key_description in _mapping(description.get("keys")).items():
        properties[key] = _convert(key_description, options, depth + 1)
        # absent presence means optional
        if _flags(_mapping(key_description)).get("presence") == "required":
            required.append(key)

    if properties:
        node["properties"] = properties
    if required:
        node["required"] = required

    flags = _flags(description)
    allow_unknown = flags.get("allowUnknown", flags.get("unknown"))
    if allow_unknown is False:
        node["additionalProperties"] = False

    value = _pattern_value(description)
    if value is not None:
        node["additionalProperties"] = _convert(value, options, depth + 1)
    return cast("SchemaNode", node)


def _convert_array(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    node: dict[str, object] = {"type": "array"}

    ordered = _sequence(description.get("ordered"))
    if ordered:
        node["prefixItems"] = [_convert(slot, options, depth + 1) for slot in ordered]
        node["items"] = False
        node["minItems"] = len(ordered)
        node["maxItems"] = len(ordered)
        return cast("SchemaNode", node)

    items = _sequence(description.get("items"))
    if len(items) == 1:
        node["items"] = _convert(items[0], options, depth + 1)
    elif items:
        node["items"] = {"anyOf": [_convert(item, options, depth + 1) for item in items]}

    for name, args in _rules(description):
        limit = _limit(args)
        if name == "min" and limit is not None:
            node["minItems"] = limit
        elif name == "max" and limit is not None:
            node["maxItems"] = limit
        elif name == "length" and limit is not None:
            node["minItems"] = limit
            node["maxItems"] = limit
        elif name == "unique":
            node["uniqueItems"] = True
    return cast("SchemaNode", node)


def _convert_alternatives(
    description: Mapping[str, object], options: ConversionOptions, depth: int
) -> SchemaNode:
    branches: list[SchemaNode] = []
    dropped = 0
    for match in _sequence(description.get("matches")):
        schema = _mapping(match).get("schema")
        if schema:
            branches.append(_convert(schema, options, depth + 1))
        else:
            dropped += 1
    if dropped:
        logger.log_degraded(
            "Dropped conditional alternatives",
            operation="convert",
            dialect="description",
            dropped=dropped,
        )

    if not branches:
        return {}
    if len(branches) == 1:
        return branches[0]
    return {"anyOf": branches}


def _fixed(node: Mapping[str, object]) -> Handler:
    template = dict(node)

    def handler(
        description: Mapping[str, object], options: ConversionOptions, depth: int
    ) -> SchemaNode:
        del description, options, depth
        return cast("SchemaNode", dict(template))

    return handler


_HANDLERS: Final[Mapping[str, Handler]] = MappingProxyType(
    {
        DescriptionType.STRING: _convert_string,
        DescriptionType.NUMBER: _convert_number,
        DescriptionType.BOOLEAN: _fixed({"type": "boolean"}),
        DescriptionType.OBJECT: _convert_object,
        DescriptionType.ARRAY: _convert_array,
        DescriptionType.ALTERNATIVES: _convert_alternatives,
        DescriptionType.DATE: _fixed({"type": "string", "format": "date-time"}),
        DescriptionType.BINARY: _fixed({"type": "string", "contentEncoding": "base64"}),
        DescriptionType.ANY: _fixed({}),
    }
)


def convert_description(
    description: Mapping[str, object],
    options: ConversionOptions | Mapping[str, object] | None = None,
    depth: int = 0,
) -> SchemaNode:
    """Convert a raw ``describe()`` output to a canonical schema node.

    Parameters
    ----------
    description : Mapping[str, object]
        Description object.
    options : ConversionOptions | Mapping[str, object] | None, optional
        Conversion options. Defaults to :class:`ConversionOptions` defaults.
    depth : int, optional
        Starting depth. Defaults to 0.

    Returns
    -------
    SchemaNode
        Freshly allocated node tree; unknown types degrade to ``{}``.

    Raises
    ------
    ConfigurationError
        If ``options`` is invalid.

    Examples
    --------
    >>> convert_description({"type": "string", "rules": [{"name": "email"}]})
    {'type': 'string', 'format': 'email'}
    """
    return _convert(description, resolve_options(options), depth)


def convert_described(
    schema: object,
    options: ConversionOptions | Mapping[str, object] | None = None,
) -> SchemaNode:
    """Call ``schema.describe()`` and convert the result."""
    return convert_description(schema.describe(), options)  # type: ignore[attr-defined]
