"""Shared infrastructure for spectopus.

Structured logging, the typed error hierarchy, Problem Details rendering, the
jsonschema facade and runtime settings used by the conversion engine.
"""

from __future__ import annotations

from spectopus_common import (
    errors,
    jsonschema_utils,
    logging,
    problem_details,
    settings,
    types,
)

__all__ = [
    "errors",
    "jsonschema_utils",
    "logging",
    "problem_details",
    "settings",
    "types",
]
