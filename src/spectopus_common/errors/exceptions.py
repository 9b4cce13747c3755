"""Typed exception hierarchy with Problem Details support.

All spectopus exceptions inherit from SpectopusError, which carries a stable
error code, an HTTP status hint, a log level and a context mapping, and can
render itself as an RFC 9457 Problem Details payload.

Examples
--------
>>> from spectopus_common.errors import ConfigurationError, ErrorCode
>>> try:
...     raise ConfigurationError("max_depth must be >= 0")
... except ConfigurationError as e:
...     assert e.code == ErrorCode.CONFIGURATION_ERROR
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from spectopus_common.errors.codes import ErrorCode, get_type_uri
from spectopus_common.problem_details import build_problem_details

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from spectopus_common.problem_details import ProblemDetails
    from spectopus_common.types import JsonValue

__all__ = [
    "ConfigurationError",
    "DocumentValidationError",
    "SchemaValidationError",
    "SpectopusError",
    "SpectopusErrorConfig",
]


@dataclass(slots=True)
class SpectopusErrorConfig:
    """Configuration options used when instantiating :class:`SpectopusError`."""

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    http_status: int = 500
    log_level: int = logging.ERROR
    cause: Exception | None = None
    context: Mapping[str, object] | None = None


class SpectopusError(Exception):
    """Base exception for all spectopus errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    config : SpectopusErrorConfig | None, optional
        Structured configuration (code, http_status, log_level, cause,
        context). Defaults to a runtime error with status 500.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    http_status : int
        HTTP status code for Problem Details responses.
    log_level : int
        Logging level for error logging.
    context : dict[str, object]
        Additional context for error details.

    Examples
    --------
    >>> error = SpectopusError("Operation failed")
    >>> error.to_problem_details()["status"]
    500
    """

    def __init__(self, message: str, *, config: SpectopusErrorConfig | None = None) -> None:
        resolved = config or SpectopusErrorConfig()
        super().__init__(message)
        self.message = message
        self.code = resolved.code
        self.http_status = resolved.http_status
        self.log_level = resolved.log_level
        self.context: dict[str, object] = dict(resolved.context) if resolved.context else {}
        if resolved.cause is not None:
            self.__cause__ = resolved.cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert to an RFC 9457 Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the specific occurrence. Defaults to None.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Payload with type, title, status, detail, instance, code and
            the error context as extensions.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.http_status,
            detail=self.message,
            instance=instance or "urn:spectopus:error",
            code=self.code.value,
            extensions=cast("Mapping[str, JsonValue] | None", self.context or None),
        )

    def __str__(self) -> str:
        """Return ``ClassName[code]: message`` plus the cause type, if any."""
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class ConfigurationError(SpectopusError):
    """Error raised when conversion options or settings are invalid.

    Examples
    --------
    >>> error = ConfigurationError.with_details(field="max_depth", issue="Must be >= 0")
    >>> error.context["field"]
    'max_depth'
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=SpectopusErrorConfig(
                code=ErrorCode.CONFIGURATION_ERROR,
                http_status=500,
                log_level=logging.CRITICAL,
                cause=cause,
                context=context,
            ),
        )

    @classmethod
    def with_details(
        cls,
        *,
        field: str,
        issue: str,
        hint: str | None = None,
    ) -> ConfigurationError:
        """Create a ConfigurationError with structured validation details.

        Parameters
        ----------
        field : str
            Name of the configuration field that failed validation.
        issue : str
            Description of the validation issue.
        hint : str | None, optional
            Optional hint for resolving the issue. Defaults to ``None``.

        Returns
        -------
        ConfigurationError
            New instance with details captured in context.
        """
        details: dict[str, object] = {"field": field, "issue": issue}
        if hint is not None:
            details["hint"] = hint
        message = f"Configuration validation failed for field '{field}': {issue}"
        return cls(message, context=details)


class SchemaValidationError(SpectopusError):
    """Error raised when a schema node fails meta-schema validation."""

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[str] | None = None,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        combined_context: dict[str, object] = dict(context or {})
        if errors:
            combined_context.setdefault("validation_errors", list(errors))
        super().__init__(
            message,
            config=SpectopusErrorConfig(
                code=ErrorCode.SCHEMA_VALIDATION_ERROR,
                http_status=422,
                cause=cause,
                context=combined_context,
            ),
        )


class DocumentValidationError(SpectopusError):
    """Error raised by :func:`spectopus.validate.assert_valid_document`.

    Parameters
    ----------
    message : str
        Human-readable summary listing every structural error.
    errors : Sequence[Mapping[str, str]] | None, optional
        ``{"path": ..., "message": ...}`` entries. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[Mapping[str, str]] | None = None,
    ) -> None:
        context: dict[str, object] = {}
        if errors:
            context["errors"] = [dict(error) for error in errors]
        super().__init__(
            message,
            config=SpectopusErrorConfig(
                code=ErrorCode.DOCUMENT_VALIDATION_ERROR,
                http_status=422,
                log_level=logging.WARNING,
                context=context,
            ),
        )
