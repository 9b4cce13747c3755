"""Error code registry and type URIs for Problem Details.

Codes and URIs are stable across releases so that consumers can match on them.

Examples
--------
>>> from spectopus_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.CONFIGURATION_ERROR)
'https://spectopus.dev/problems/configuration-error'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]


BASE_TYPE_URI: Final[str] = "https://spectopus.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for spectopus exceptions.

    Attributes
    ----------
    CONFIGURATION_ERROR
        Conversion options or settings are invalid.
    RUNTIME_ERROR
        Unclassified runtime failure.
    SCHEMA_VALIDATION_ERROR
        A produced schema node does not satisfy the JSON Schema meta-schema.
    DOCUMENT_VALIDATION_ERROR
        An assembled interface-description document is structurally invalid.
    """

    # Configuration & Runtime
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"

    # Schemas & Documents
    SCHEMA_VALIDATION_ERROR = "schema-validation-error"
    DOCUMENT_VALIDATION_ERROR = "document-validation-error"

    def __str__(self) -> str:
        """Return the code value as a string."""
        return self.value


def get_type_uri(code: ErrorCode) -> str:
    """Get the RFC 9457 type URI for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI.
    """
    return f"{BASE_TYPE_URI}/{code.value}"
