"""Definition-tree schemas to canonical schema nodes.

Definition-tree schemas describe themselves through a tagged ``_def`` record
(``typeName`` plus tag-specific members). Presence, nullability, defaults and
read-only-ness are expressed by single-child wrapper nodes around the schema
they modify. Conversion peels those wrappers in one loop, converts the
innermost schema by tag, and folds the collected modifiers back on.

Examples
--------
>>> from spectopus.schema.definition_tree import convert_definition_tree
>>> convert_definition_tree(user_schema)  # doctest: +SKIP
{'type': 'object', 'properties': {...}, 'required': ['id']}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, cast

from spectopus.schema.definition_adapter import (
    MISSING,
    check_field,
    checks_of,
    default_of,
    description_of,
    field,
    length_bound,
    members_of,
    shape_of,
    type_tag,
)
from spectopus.schema.depth import depth_guarded
from spectopus.schema.model import overlay
from spectopus.schema.modifiers import Modifiers, apply_modifiers
from spectopus.schema.options import resolve_options
from spectopus.schema.tables import (
    DEFINITION_STRING_ENCODINGS,
    DEFINITION_STRING_FORMATS,
    escape_pattern,
    pattern_source,
)
from spectopus_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from spectopus.schema.model import SchemaNode
    from spectopus.schema.options import ConversionOptions

    type Handler = Callable[[object, ConversionOptions, int], SchemaNode]

__all__ = [
    "MAX_WRAPPER_LAYERS",
    "DefinitionTag",
    "Unwrapped",
    "convert_definition_tree",
    "unwrap",
]

logger = get_logger(__name__)

# bound on peeled wrapper layers; a self-referencing chain degrades to {}
MAX_WRAPPER_LAYERS: Final[int] = 64


class DefinitionTag(StrEnum):
    """Type tags recognised in ``_def.typeName``."""

    STRING = "ZodString"
    NUMBER = "ZodNumber"
    BIGINT = "ZodBigInt"
    BOOLEAN = "ZodBoolean"
    NULL = "ZodNull"
    UNDEFINED = "ZodUndefined"
    LITERAL = "ZodLiteral"
    ENUM = "ZodEnum"
    NATIVE_ENUM = "ZodNativeEnum"
    OBJECT = "ZodObject"
    ARRAY = "ZodArray"
    TUPLE = "ZodTuple"
    UNION = "ZodUnion"
    DISCRIMINATED_UNION = "ZodDiscriminatedUnion"
    INTERSECTION = "ZodIntersection"
    RECORD = "ZodRecord"
    MAP = "ZodMap"
    SET = "ZodSet"
    FUNCTION = "ZodFunction"
    LAZY = "ZodLazy"
    PROMISE = "ZodPromise"
    UNKNOWN = "ZodUnknown"
    ANY = "ZodAny"
    NEVER = "ZodNever"
    VOID = "ZodVoid"
    DATE = "ZodDate"
    SYMBOL = "ZodSymbol"
    # wrappers
    OPTIONAL = "ZodOptional"
    NULLABLE = "ZodNullable"
    DEFAULT = "ZodDefault"
    CATCH = "ZodCatch"
    BRANDED = "ZodBranded"
    READONLY = "ZodReadonly"
    PIPELINE = "ZodPipeline"
    EFFECTS = "ZodEffects"


# wrapper tag -> ``_def`` member holding the wrapped schema
_WRAPPED_MEMBER: Final[Mapping[str, str]] = MappingProxyType(
    {
        DefinitionTag.OPTIONAL: "innerType",
        DefinitionTag.NULLABLE: "innerType",
        DefinitionTag.DEFAULT: "innerType",
        DefinitionTag.CATCH: "innerType",
        DefinitionTag.READONLY: "innerType",
        DefinitionTag.BRANDED: "type",
        DefinitionTag.PIPELINE: "in",
        DefinitionTag.EFFECTS: "schema",
    }
)


@dataclass(frozen=True, slots=True)
class Unwrapped:
    """Result of peeling every wrapper off a definition-tree schema.

    Attributes
    ----------
    schema : object
        Innermost non-wrapper schema, or None when a wrapper had no child.
    modifiers : Modifiers
        Presence, nullability, default and read-only flags collected on the way.
    description : str | None
        Outermost description found on a wrapper.
    """

    schema: object
    modifiers: Modifiers
    description: str | None = None


def unwrap(value: object, options: ConversionOptions) -> Unwrapped:
    """Peel wrapper nodes off ``value``, accumulating their modifiers.

    Parameters
    ----------
    value : object
        Definition-tree schema, possibly wrapped.
    options : ConversionOptions
        Conversion options.

    Returns
    -------
    Unwrapped
        The innermost schema with the collected modifiers.
    """
    modifiers = Modifiers()
    description: str | None = None
    current: object = value
    layers = 0
    while (tag := type_tag(current)) in _WRAPPED_MEMBER:
        if description is None and options.include_descriptions:
            description = description_of(current)
        if tag == DefinitionTag.OPTIONAL:
            modifiers = modifiers.mark_optional()
        elif tag == DefinitionTag.NULLABLE:
            modifiers = modifiers.mark_nullable()
        elif tag == DefinitionTag.DEFAULT:
            modifiers = modifiers.mark_optional()
            default = default_of(current)
            if default is not MISSING:
                modifiers = modifiers.with_default(default)
        elif tag == DefinitionTag.READONLY:
            modifiers = modifiers.mark_read_only()

        inner = field(current, _WRAPPED_MEMBER[tag])
        layers += 1
        if inner is MISSING or inner is None or layers > MAX_WRAPPER_LAYERS:
            logger.log_degraded(
                "Wrapper chain could not be unwrapped; emitting permissive schema",
                operation="unwrap",
                dialect="definition_tree",
                type_tag=tag,
                layers=layers,
            )
            return Unwrapped(schema=None, modifiers=modifiers, description=description)
        current = inner
    return Unwrapped(schema=current, modifiers=modifiers, description=description)


@depth_guarded
def _convert(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    unwrapped = unwrap(value, options)
    description = unwrapped.description
    if description is None and options.include_descriptions:
        description = description_of(unwrapped.schema)
    metadata = {"description": description} if description else {}

    fields = _convert_base(unwrapped.schema, options, depth)
    return overlay(metadata, apply_modifiers(fields, unwrapped.modifiers, options))


def _convert_base(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    tag = type_tag(value)
    handler = _HANDLERS.get(tag)
    if handler is None:
        logger.log_degraded(
            "Unsupported definition-tree type; emitting permissive schema",
            operation="convert",
            dialect="definition_tree",
            type_tag=tag or None,
        )
        return {}
    return handler(value, options, depth)


def _constant(node: Mapping[str, object]) -> Handler:
    frozen = dict(node)

    def handler(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
        del value, options, depth
        copied = {
            key: dict(item) if isinstance(item, dict) else item for key, item in frozen.items()
        }
        return cast("SchemaNode", copied)

    return handler


def _length(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _number(value: object) -> int | float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def _convert_string(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    del options, depth
    node: dict[str, object] = {"type": "string"}
    for check in checks_of(value):
        kind = check_field(check, "kind")
        argument = check_field(check, "value")
        if kind == "min" and (limit := _length(argument)) is not None:
            node["minLength"] = limit
        elif kind == "max" and (limit := _length(argument)) is not None:
            node["maxLength"] = limit
        elif kind == "length" and (limit := _length(argument)) is not None:
            node["minLength"] = limit
            node["maxLength"] = limit
        elif kind == "regex":
            source = pattern_source(check_field(check, "regex"))
            if source is not None:
                node["pattern"] = source
        elif kind == "startsWith" and isinstance(argument, str):
            node["pattern"] = f"^{escape_pattern(argument)}"
        elif kind == "endsWith" and isinstance(argument, str):
            node["pattern"] = f"{escape_pattern(argument)}$"
        elif kind == "includes" and isinstance(argument, str):
            node["pattern"] = escape_pattern(argument)
        elif isinstance(kind, str) and kind in DEFINITION_STRING_FORMATS:
            node["format"] = DEFINITION_STRING_FORMATS[kind]
        elif isinstance(kind, str) and kind in DEFINITION_STRING_ENCODINGS:
            node["contentEncoding"] = DEFINITION_STRING_ENCODINGS[kind]
        # cuid, cuid2, ulid, ip, emoji, toLowerCase, toUpperCase, trim: no canonical field
    return cast("SchemaNode", node)


def _convert_number(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    del options, depth
    is_integer = False
    bounds: dict[str, object] = {}
    for check in checks_of(value):
        kind = check_field(check, "kind")
        argument = _number(check_field(check, "value"))
        exclusive = check_field(check, "inclusive") is False
        if kind == "int":
            is_integer = True
        elif kind == "min" and argument is not None:
            bounds["exclusiveMinimum" if exclusive else "minimum"] = argument
        elif kind == "max" and argument is not None:
            bounds["exclusiveMaximum" if exclusive else "maximum"] = argument
        elif kind == "multipleOf" and argument is not None:
            bounds["multipleOf"] = argument
    return cast("SchemaNode", {"type": "integer" if is_integer else "number", **bounds})


def _convert_literal(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    del options, depth
    literal = field(value, "value")
    if literal is MISSING:
        return {}
    return {"const": literal}


def _convert_enum(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    del options, depth
    return {"type": "string", "enum": members_of(value, "values")}


def _convert_native_enum(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    del options, depth
    source = field(value, "values")
    if isinstance(source, type) and issubclass(source, Enum):
        candidates = [member.value for member in source]
    elif isinstance(source, Mapping):
        candidates = list(source.values())
    else:
        candidates = members_of(value, "values")
    strings = [item for item in candidates if isinstance(item, str)]
    numbers = [
        item for item in candidates if isinstance(item, (int, float)) and not isinstance(item, bool)
    ]
    # numeric enums also map names back to values; prefer the string side
    return {"enum": strings or numbers}


def _convert_field(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    """Convert an object field.

    A field declared through a default-of wrapper takes the wrapper's default
    only when the schema it wraps carries none of its own.
    """
    node = _convert(value, options, depth)
    if "default" in node and type_tag(value) == DefinitionTag.DEFAULT:
        inner = unwrap(field(value, "innerType"), options).modifiers
        if inner.has_default:
            node["default"] = inner.default
    return node


def _convert_object(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    node: dict[str, object] = {"type": "object"}
    properties: dict[str, SchemaNode] = {}
    required: list[str] = []
    for name, field_schema in shape_of(value).items():
        properties[name] = _convert_field(field_schema, options, depth + 1)
        if not unwrap(field_schema, options).modifiers.optional:
            required.append(name)

    if properties:
        node["properties"] = properties
    if required:
        node["required"] = required

    unknown_keys = field(value, "unknownKeys")
    if unknown_keys == "strict":
        node["additionalProperties"] = False
    elif unknown_keys == "passthrough":
        node["additionalProperties"] = True

    catchall = field(value, "catchall")
    if (
        catchall is not MISSING
        and catchall is not None
        and type_tag(catchall) != DefinitionTag.NEVER
    ):
        node["additionalProperties"] = _convert(catchall, options, depth + 1)
    return cast("SchemaNode", node)


def _convert_array(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    node: dict[str, object] = {"type": "array"}
    element = field(value, "type")
    if element is not MISSING and element is not None:
        node["items"] = _convert(element, options, depth + 1)

    exact = length_bound(value, "exactLength")
    if exact is not None:
        node["minItems"] = exact
        node["maxItems"] = exact
    else:
        minimum = length_bound(value, "minLength")
        maximum = length_bound(value, "maxLength")
        if minimum is not None:
            node["minItems"] = minimum
        if maximum is not None:
            node["maxItems"] = maximum
    return cast("SchemaNode", node)


def _convert_tuple(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    slots = members_of(value, "items")
    rest = field(value, "rest")
    node: dict[str, object] = {
        "type": "array",
        "prefixItems": [_convert(slot, options, depth + 1) for slot in slots],
        "minItems": len(slots),
    }
    if rest is not MISSING and rest is not None:
        node["items"] = _convert(rest, options, depth + 1)
    else:
        node["items"] = False
        node["maxItems"] = len(slots)
    return cast("SchemaNode", node)


def _convert_union(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    branches = [_convert(option, options, depth + 1) for option in members_of(value, "options")]
    return {"anyOf": branches}


def _convert_intersection(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    return {
        "allOf": [
            _convert(field(value, "left"), options, depth + 1),
            _convert(field(value, "right"), options, depth + 1),
        ]
    }


def _convert_record(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    element = field(value, "valueType")
    if element is MISSING or element is None:
        return {"type": "object", "additionalProperties": True}
    return {"type": "object", "additionalProperties": _convert(element, options, depth + 1)}


def _convert_set(value: object, options: ConversionOptions, depth: int) -> SchemaNode:
    node: dict[str, object] = {"type": "array", "uniqueItems": True}
    element = field(value, "valueType")
    if element is not MISSING and element is not None:
        node["items"] = _convert(element, options, depth + 1)
    return cast("SchemaNode", node)


_PERMISSIVE = _constant({})
_NEVER = _constant({"not": {}})

_HANDLERS: Final[Mapping[str, Handler]] = MappingProxyType(
    {
        DefinitionTag.STRING: _convert_string,
        DefinitionTag.NUMBER: _convert_number,
        DefinitionTag.BIGINT: _constant({"type": "integer", "format": "int64"}),
        DefinitionTag.BOOLEAN: _constant({"type": "boolean"}),
        DefinitionTag.NULL: _constant({"type": "null"}),
        DefinitionTag.UNDEFINED: _NEVER,
        DefinitionTag.LITERAL: _convert_literal,
        DefinitionTag.ENUM: _convert_enum,
        DefinitionTag.NATIVE_ENUM: _convert_native_enum,
        DefinitionTag.OBJECT: _convert_object,
        DefinitionTag.ARRAY: _convert_array,
        DefinitionTag.TUPLE: _convert_tuple,
        DefinitionTag.UNION: _convert_union,
        DefinitionTag.DISCRIMINATED_UNION: _convert_union,
        DefinitionTag.INTERSECTION: _convert_intersection,
        DefinitionTag.RECORD: _convert_record,
        DefinitionTag.MAP: _constant({"type": "object"}),
        DefinitionTag.SET: _convert_set,
        DefinitionTag.FUNCTION: _PERMISSIVE,
        DefinitionTag.LAZY: _PERMISSIVE,
        DefinitionTag.PROMISE: _PERMISSIVE,
        DefinitionTag.UNKNOWN: _PERMISSIVE,
        DefinitionTag.ANY: _PERMISSIVE,
        DefinitionTag.NEVER: _NEVER,
        DefinitionTag.VOID: _constant({"type": "null"}),
        DefinitionTag.DATE: _constant({"type": "string", "format": "date-time"}),
        DefinitionTag.SYMBOL: _constant({"type": "string"}),
    }
)


def convert_definition_tree(
    schema: object,
    options: ConversionOptions | Mapping[str, object] | None = None,
    depth: int = 0,
) -> SchemaNode:
    """Convert a definition-tree schema to a canonical schema node.

    Parameters
    ----------
    schema : object
        Definition-tree schema (an object exposing ``_def``).
    options : ConversionOptions | Mapping[str, object] | None, optional
        Conversion options. Defaults to :class:`ConversionOptions` defaults.
    depth : int, optional
        Starting depth. Defaults to 0.

    Returns
    -------
    SchemaNode
        Freshly allocated node tree. Unsupported constructs degrade to ``{}``;
        this function does not raise for well-formed schemas.

    Raises
    ------
    ConfigurationError
        If ``options`` is invalid.
    """
    return _convert(schema, resolve_options(options), depth)
