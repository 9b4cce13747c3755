"""Structured logging helpers with correlation IDs.

This module provides a LoggerAdapter that injects structured fields
(correlation_id, operation, status, dialect, depth) into every record and
module-level loggers with a NullHandler so that library code stays silent
until an application configures logging.

Examples
--------
>>> from spectopus_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.debug("Converted schema", extra={"operation": "convert", "dialect": "description"})
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import AbstractContextManager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType

    from spectopus_common.types import JsonValue

__all__ = [
    "JsonFormatter",
    "LogContextExtra",
    "LoggerAdapter",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "setup_logging",
    "with_fields",
]

STRUCTURED_FIELDS: tuple[str, ...] = (
    "correlation_id",
    "operation",
    "status",
    "dialect",
    "depth",
)

# Standard LogRecord attributes never copied into the JSON payload
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


@dataclass(frozen=True, slots=True)
class LogContextExtra:
    """Immutable logging context with optional structured fields.

    Attributes
    ----------
    correlation_id : str | None
        Caller-supplied identifier tying related log records together.
    operation : str | None
        Name of the operation being logged (e.g. ``"convert"``).
    status : str | None
        Operation status (``"success"``, ``"degraded"``, ``"error"``).
    dialect : str | None
        Schema dialect being converted (``"definition_tree"`` or ``"description"``).

    Examples
    --------
    >>> ctx = LogContextExtra(operation="convert")
    >>> ctx.with_status("success").status
    'success'
    >>> ctx.status is None
    True
    """

    correlation_id: str | None = None
    operation: str | None = None
    status: str | None = None
    dialect: str | None = None

    def with_operation(self, operation: str) -> Self:
        """Return copy with updated operation."""
        return replace(self, operation=operation)

    def with_status(self, status: str) -> Self:
        """Return copy with updated status."""
        return replace(self, status=status)

    def to_dict(self) -> dict[str, object]:
        """Convert to dict, excluding None values for logging.

        Returns
        -------
        dict[str, object]
            Mapping of the populated fields.
        """
        candidates = {
            "correlation_id": self.correlation_id,
            "operation": self.operation,
            "status": self.status,
            "dialect": self.dialect,
        }
        return {key: value for key, value in candidates.items() if value is not None}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as one JSON object per line with timestamp, level,
    logger name, message and every structured field present on the record.
    The correlation id falls back to the value stored in context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` as a JSON string.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, JsonValue] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for field in STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value

        if "correlation_id" not in data:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                data["correlation_id"] = ctx_correlation_id

        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_RECORD_KEYS
                and key not in data
                and not key.startswith("_")
                and value is not None
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that injects structured context fields.

    Fields bound at construction (a :class:`LogContextExtra` or a plain
    mapping) are merged under the per-call ``extra`` dict; per-call values
    win. ``operation`` and ``status`` are always present on the record.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.info("Schema converted", extra={"operation": "convert"})
    """

    def process(
        self, msg: object, kwargs: MutableMapping[str, Any]
    ) -> tuple[object, MutableMapping[str, Any]]:
        """Merge bound fields and context into the call's ``extra`` dict.

        Parameters
        ----------
        msg : object
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments of the logging call.

        Returns
        -------
        tuple[object, MutableMapping[str, Any]]
            The message and the kwargs with an enriched ``extra`` mapping.
        """
        extra = dict(kwargs.get("extra") or {})
        bound: Mapping[str, object]
        if isinstance(self.extra, LogContextExtra):
            bound = self.extra.to_dict()
        else:
            bound = self.extra or {}
        for key, value in bound.items():
            extra.setdefault(key, value)

        if "correlation_id" not in extra:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                extra["correlation_id"] = ctx_correlation_id

        extra.setdefault("operation", "unknown")
        extra.setdefault("status", "success")
        kwargs["extra"] = extra
        return msg, kwargs

    def log_degraded(self, message: str, *, operation: str, **fields: object) -> None:
        """Log a best-effort fallback at DEBUG level.

        Conversions never fail; when a construct cannot be represented the
        engine records what it dropped with ``status="degraded"``.

        Parameters
        ----------
        message : str
            Description of the fallback.
        operation : str
            Operation name.
        **fields : object
            Additional structured fields.
        """
        extra: dict[str, object] = {"operation": operation, "status": "degraded"}
        extra.update(fields)
        self.debug(message, extra=extra)


def get_logger(name: str) -> LoggerAdapter:
    """Get a logger adapter with structured logging support.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__`` of the calling module).

    Returns
    -------
    LoggerAdapter
        Adapter injecting structured fields into each record.
    """
    logger = logging.getLogger(name)

    # Libraries never configure handlers of their own
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return LoggerAdapter(logger, {})


def setup_logging(level: int | str | None = None) -> None:
    """Configure the root logger with :class:`JsonFormatter` on stdout.

    Parameters
    ----------
    level : int | str | None, optional
        Logging level threshold. Defaults to ``SchemaSettings.log_level``
        (``SPECTOPUS_SCHEMA_LOG_LEVEL``, ``"INFO"`` when unset).

    Raises
    ------
    ConfigurationError
        If ``level`` is omitted and the environment settings are invalid.

    Examples
    --------
    >>> import logging
    >>> setup_logging(level=logging.DEBUG)
    """
    if level is None:
        # settings imports this module
        from spectopus_common.settings import load_settings

        level = load_settings().log_level
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation id for the current context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    """Return the correlation id of the current context, if any."""
    return _correlation_id.get()


class _WithFieldsContext(AbstractContextManager[LoggerAdapter]):
    """Context manager implementation for :func:`with_fields`."""

    def __init__(
        self, logger: logging.Logger | LoggerAdapter, fields: Mapping[str, object]
    ) -> None:
        self._logger = logger
        self._fields = dict(fields)
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> LoggerAdapter:
        base_logger = (
            self._logger.logger if isinstance(self._logger, LoggerAdapter) else self._logger
        )
        correlation_id = self._fields.get("correlation_id")
        if isinstance(correlation_id, str):
            self._token = _correlation_id.set(correlation_id)
        return LoggerAdapter(base_logger, dict(self._fields))

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
            self._token = None
        del exc_type, exc_value, exc_tb


def with_fields(
    logger: logging.Logger | LoggerAdapter,
    **fields: object,
) -> AbstractContextManager[LoggerAdapter]:
    """Bind structured fields to every record logged inside the block.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Base logger to wrap (may already be an adapter).
    **fields : object
        Structured fields to inject. A string ``correlation_id`` is also
        stored in context for the duration of the block.

    Returns
    -------
    AbstractContextManager[LoggerAdapter]
        Context manager yielding the bound adapter.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> with with_fields(logger, correlation_id="doc-7", operation="convert") as log:
    ...     log.info("Converting request body")
    """
    return _WithFieldsContext(logger, fields)
