"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from spectopus_common.errors import SpectopusError, ErrorCode
>>> try:
...     raise SpectopusError("Operation failed")
... except SpectopusError as e:
...     details = e.to_problem_details(instance="urn:spectopus:convert")
...     assert details["type"] == "https://spectopus.dev/problems/runtime-error"
"""

from __future__ import annotations

from spectopus_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from spectopus_common.errors.exceptions import (
    ConfigurationError,
    DocumentValidationError,
    SchemaValidationError,
    SpectopusError,
    SpectopusErrorConfig,
)

__all__ = [
    "BASE_TYPE_URI",
    "ConfigurationError",
    "DocumentValidationError",
    "ErrorCode",
    "SchemaValidationError",
    "SpectopusError",
    "SpectopusErrorConfig",
    "get_type_uri",
]
