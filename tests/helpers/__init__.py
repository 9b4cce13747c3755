"""Shared test helpers for spectopus.

Helpers here have no runtime side effects; dialect builders produce plain
objects shaped like the two supported schema libraries.
"""

from __future__ import annotations

from tests.helpers.dialects import DefinitionSchema, DescribedSchema, definition, description
from tests.helpers.immutability import assert_frozen_attribute, assert_frozen_attributes

__all__ = [
    "DefinitionSchema",
    "DescribedSchema",
    "assert_frozen_attribute",
    "assert_frozen_attributes",
    "definition",
    "description",
]
