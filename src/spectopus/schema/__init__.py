"""Schema conversion engine.

Converts definition-tree and description-object validation schemas into
canonical JSON Schema 2020-12 nodes suitable for interface-description
documents.
"""

from __future__ import annotations

from spectopus.schema.definition_tree import DefinitionTag, convert_definition_tree, unwrap
from spectopus.schema.description import (
    DescriptionType,
    convert_described,
    convert_description,
)
from spectopus.schema.model import ReferenceNode, SchemaNode, SchemaOrRef, reference
from spectopus.schema.options import ConversionOptions, resolve_options
from spectopus.schema.resolver import (
    DefinitionTreeInput,
    DescribedInput,
    SchemaInput,
    convert,
    resolve_schema_input,
)

__all__ = [
    "ConversionOptions",
    "DefinitionTag",
    "DefinitionTreeInput",
    "DescribedInput",
    "DescriptionType",
    "ReferenceNode",
    "SchemaInput",
    "SchemaNode",
    "SchemaOrRef",
    "convert",
    "convert_definition_tree",
    "convert_described",
    "convert_description",
    "reference",
    "resolve_options",
    "resolve_schema_input",
    "unwrap",
]
