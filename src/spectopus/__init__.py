"""spectopus: interface-description schemas from validation schemas."""

from __future__ import annotations

from spectopus import llm, schema, validate
from spectopus.schema import ConversionOptions, convert

__all__ = [
    "ConversionOptions",
    "convert",
    "llm",
    "schema",
    "validate",
]
