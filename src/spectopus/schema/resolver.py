"""Entry point classifying schema-like values and dispatching conversion.

Callers that know which dialect they hold should wrap the value in
:class:`DefinitionTreeInput` or :class:`DescribedInput`; bare values are
classified by the members they expose.

Examples
--------
>>> from spectopus.schema.resolver import convert
>>> convert("#/components/schemas/User")
{'$ref': '#/components/schemas/User'}
>>> convert({"type": "string"})
{'type': 'string'}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spectopus.schema.definition_adapter import is_definition_tree
from spectopus.schema.definition_tree import convert_definition_tree
from spectopus.schema.description import convert_described, convert_description, is_described
from spectopus.schema.model import reference
from spectopus.schema.options import resolve_options
from spectopus_common.logging import get_logger, with_fields

if TYPE_CHECKING:
    from spectopus.schema.model import SchemaOrRef
    from spectopus.schema.options import ConversionOptions

__all__ = [
    "DefinitionTreeInput",
    "DescribedInput",
    "SchemaInput",
    "convert",
    "resolve_schema_input",
]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DefinitionTreeInput:
    """A definition-tree schema, tagged by the caller."""

    schema: object


@dataclass(frozen=True, slots=True)
class DescribedInput:
    """A description-object schema, tagged by the caller.

    ``schema`` is either an object with a ``describe()`` method or the raw
    description mapping it returns.
    """

    schema: object


type SchemaInput = str | DefinitionTreeInput | DescribedInput | Mapping[str, object] | object


def convert(
    schema_like: SchemaInput,
    options: ConversionOptions | Mapping[str, object] | None = None,
) -> SchemaOrRef | object:
    """Convert a schema-like value to a canonical node or a reference.

    Parameters
    ----------
    schema_like : SchemaInput
        A reference path string, a tagged input, a definition-tree schema,
        a description-object schema, or an already canonical node.
    options : ConversionOptions | Mapping[str, object] | None, optional
        Conversion options; ignored for references and pass-through values.

    Returns
    -------
    SchemaOrRef | object
        ``{"$ref": schema_like}`` for strings, a freshly converted node for
        either dialect, and ``schema_like`` itself otherwise.

    Raises
    ------
    ConfigurationError
        If ``options`` is invalid.
    """
    resolved = resolve_options(options)
    if isinstance(schema_like, str):
        return reference(schema_like)

    if isinstance(schema_like, DefinitionTreeInput):
        dialect, schema = "definition_tree", schema_like.schema
    elif isinstance(schema_like, DescribedInput):
        dialect, schema = "description", schema_like.schema
    elif is_definition_tree(schema_like):
        dialect, schema = "definition_tree", schema_like
    elif is_described(schema_like):
        dialect, schema = "description", schema_like
    else:
        return schema_like

    with with_fields(logger, operation="convert", dialect=dialect) as log:
        log.debug("Converting schema", extra={"max_depth": resolved.max_depth})
        if dialect == "definition_tree":
            return convert_definition_tree(schema, resolved)
        if isinstance(schema, Mapping):
            return convert_description(schema, resolved)
        return convert_described(schema, resolved)


resolve_schema_input = convert
