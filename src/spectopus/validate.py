"""Structural checks for assembled interface-description documents.

These checks look at the shape of a finished OpenAPI 3.1 document (version,
info block, paths, operations, component names). They do not validate
individual schema nodes; see :func:`spectopus_common.jsonschema_utils.check_schema_node`
for that.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Final

from spectopus_common.errors import DocumentValidationError
from spectopus_common.logging import get_logger

__all__ = [
    "COMPONENT_SECTIONS",
    "HTTP_METHODS",
    "ValidationIssue",
    "ValidationResult",
    "assert_valid_document",
    "validate_document",
]

logger = get_logger(__name__)

HTTP_METHODS: Final[tuple[str, ...]] = (
    "get",
    "put",
    "post",
    "delete",
    "options",
    "head",
    "patch",
    "trace",
)

COMPONENT_SECTIONS: Final[tuple[str, ...]] = (
    "schemas",
    "responses",
    "parameters",
    "requestBodies",
    "headers",
    "securitySchemes",
)

_COMPONENT_NAME: Final = re.compile(r"^[a-zA-Z0-9._-]+$")


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found in a document.

    Attributes
    ----------
    path : str
        Dotted location of the problem (``$`` for the document itself).
    message : str
        Human-readable description.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"[{self.path}] {self.message}"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of :func:`validate_document`."""

    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def valid(self) -> bool:
        """Return True when no errors were found; warnings do not count."""
        return not self.errors


@dataclass(slots=True)
class _Collector:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def error(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path, message))

    def warn(self, path: str, message: str) -> None:
        self.warnings.append(ValidationIssue(path, message))

    def result(self) -> ValidationResult:
        return ValidationResult(errors=tuple(self.errors), warnings=tuple(self.warnings))


def validate_document(doc: object) -> ValidationResult:
    """Check an OpenAPI 3.1 document for structural problems.

    Never raises; every problem is reported as a :class:`ValidationIssue`.

    Parameters
    ----------
    doc : object
        Candidate document, normally a mapping.

    Returns
    -------
    ValidationResult
        Errors and warnings in discovery order.

    Examples
    --------
    >>> result = validate_document({"openapi": "3.0.3", "info": {"title": "t", "version": "1"}})
    >>> [str(issue) for issue in result.errors]
    ['[openapi] openapi version must be 3.1.x, got: 3.0.3']
    """
    collector = _Collector()
    if not isinstance(doc, Mapping):
        collector.error("$", "Document must be an object")
        return collector.result()

    _check_version(doc.get("openapi"), collector)
    _check_info(doc.get("info"), collector)

    paths = doc.get("paths")
    if paths:
        if not isinstance(paths, Mapping):
            collector.error("paths", "paths must be an object")
        else:
            for path, path_item in paths.items():
                _check_path_item(str(path), path_item, collector)

    components = doc.get("components")
    if isinstance(components, Mapping):
        _check_components(components, collector)

    if not doc.get("servers"):
        collector.warn(
            "servers",
            "No servers defined. API consumers may not know where to send requests.",
        )

    result = collector.result()
    logger.debug(
        "Validated document",
        extra={
            "operation": "validate_document",
            "status": "success" if result.valid else "error",
            "error_count": len(result.errors),
            "warning_count": len(result.warnings),
        },
    )
    return result


def _check_version(version: object, collector: _Collector) -> None:
    if not version:
        collector.error("openapi", "Missing required field: openapi")
    elif not isinstance(version, str) or not version.startswith("3.1."):
        collector.error("openapi", f"openapi version must be 3.1.x, got: {version}")


def _check_info(info: object, collector: _Collector) -> None:
    if not info:
        collector.error("info", "Missing required field: info")
        return
    if isinstance(info, Mapping):
        if not info.get("title"):
            collector.error("info.title", "Missing required field: info.title")
        if not info.get("version"):
            collector.error("info.version", "Missing required field: info.version")


def _check_path_item(path: str, item: object, collector: _Collector) -> None:
    if not path.startswith("/"):
        collector.error(f"paths.{path}", f"Path must start with '/': {path}")
    if not isinstance(item, Mapping):
        return

    has_operation = False
    for method in HTTP_METHODS:
        operation = item.get(method)
        if operation:
            has_operation = True
            _check_operation(path, method, operation, collector)

    if not has_operation and not item.get("$ref"):
        collector.warn(f"paths.{path}", f"Path item has no operations defined: {path}")


def _check_operation(path: str, method: str, operation: object, collector: _Collector) -> None:
    location = f"paths.{path}.{method}"
    record = operation if isinstance(operation, Mapping) else {}
    if not record.get("responses"):
        collector.error(
            f"{location}.responses",
            f"Operation {method.upper()} {path} has no responses defined",
        )
    operation_id = record.get("operationId")
    if operation_id and not isinstance(operation_id, str):
        collector.error(f"{location}.operationId", "operationId must be a string")


def _check_components(components: Mapping[str, object], collector: _Collector) -> None:
    for section in COMPONENT_SECTIONS:
        entries = components.get(section)
        if not isinstance(entries, Mapping):
            continue
        for name in entries:
            if not _COMPONENT_NAME.match(str(name)):
                collector.error(
                    f"components.{section}.{name}",
                    f"Component name contains invalid characters: {name}",
                )


def assert_valid_document(doc: object) -> None:
    """Raise when :func:`validate_document` reports errors.

    Parameters
    ----------
    doc : object
        Candidate document.

    Raises
    ------
    DocumentValidationError
        If the document has at least one structural error. The message lists
        every error as ``[path] message``; ``context["errors"]`` carries them
        as ``{"path", "message"}`` records.
    """
    result = validate_document(doc)
    if result.valid:
        return
    lines = "\n".join(f"  - {issue}" for issue in result.errors)
    raise DocumentValidationError(
        f"Invalid OpenAPI 3.1 document:\n{lines}",
        errors=[asdict(issue) for issue in result.errors],
    )
