"""Typed facades for jsonschema usage across the codebase.

This module centralizes imports from :mod:`jsonschema` so that static type
checkers see concrete types instead of ``Any``, and adds the one check the
conversion engine needs: validating a produced node against the Draft 2020-12
meta-schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, cast

from jsonschema.exceptions import SchemaError as _SchemaError
from jsonschema.exceptions import ValidationError as _ValidationError
from jsonschema.validators import Draft202012Validator as _Draft202012Validator

from spectopus_common.errors import SchemaValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

__all__ = [
    "Draft202012Validator",
    "Draft202012ValidatorProtocol",
    "SchemaError",
    "ValidationError",
    "ValidationErrorProtocol",
    "check_schema_node",
    "schema_node_errors",
]


class ValidationErrorProtocol(Protocol):
    """Typed view over ``jsonschema.exceptions.ValidationError`` instances."""

    message: str
    absolute_path: Sequence[object]
    path: Sequence[object]


class Draft202012ValidatorProtocol(Protocol):
    """Typed facade for :class:`jsonschema.validators.Draft202012Validator`."""

    META_SCHEMA: Mapping[str, object]

    def __init__(self, schema: Mapping[str, object], *args: object, **kwargs: object) -> None: ...

    @classmethod
    def check_schema(cls, schema: Mapping[str, object]) -> None:
        """Validate that ``schema`` conforms to the Draft 2020-12 meta-schema."""
        ...

    def iter_errors(self, instance: object) -> Iterable[ValidationErrorProtocol]:
        """Yield validation errors for ``instance`` without raising."""
        ...


Draft202012Validator = cast("type[Draft202012ValidatorProtocol]", _Draft202012Validator)
SchemaError = cast("type[Exception]", _SchemaError)
ValidationError = cast("type[Exception]", _ValidationError)


def _format_path(path: Sequence[object]) -> str:
    return "$" + "".join(f"[{part!r}]" for part in path)


def schema_node_errors(node: Mapping[str, object]) -> list[str]:
    """Return meta-schema violations of ``node`` as ``path: message`` strings.

    Parameters
    ----------
    node : Mapping[str, object]
        Canonical schema node produced by the conversion engine.

    Returns
    -------
    list[str]
        Sorted violation messages; empty when the node is a valid schema.
    """
    meta_validator = Draft202012Validator(Draft202012Validator.META_SCHEMA)
    messages = [
        f"{_format_path(list(error.absolute_path))}: {error.message}"
        for error in meta_validator.iter_errors(node)
    ]
    return sorted(messages)


def check_schema_node(node: Mapping[str, object]) -> None:
    """Validate ``node`` against the Draft 2020-12 meta-schema.

    Parameters
    ----------
    node : Mapping[str, object]
        Canonical schema node produced by the conversion engine.

    Raises
    ------
    SchemaValidationError
        If the node is not a valid Draft 2020-12 schema.

    Examples
    --------
    >>> check_schema_node({"type": ["string", "null"], "minLength": 1})
    """
    errors = schema_node_errors(node)
    if errors:
        msg = f"Schema node is not a valid JSON Schema 2020-12 document ({len(errors)} errors)"
        raise SchemaValidationError(msg, errors=errors)
