"""Shared pytest fixtures.

This module provides:
- Environment isolation for ``SPECTOPUS_SCHEMA_*`` settings
- Default and custom conversion options
- Debug log capture grouped by structured ``operation`` field
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, cast

import pytest

from spectopus.schema.options import ConversionOptions

if TYPE_CHECKING:
    from collections.abc import Callable

    from _pytest.logging import LogCaptureFixture

__all__ = [
    "default_options",
    "isolated_settings_env",
    "records_by_operation",
]


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``SPECTOPUS_SCHEMA_*`` variables so settings tests start clean."""
    for name in list(os.environ):
        if name.startswith("SPECTOPUS_SCHEMA_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def default_options() -> ConversionOptions:
    """Return conversion options with every default."""
    return ConversionOptions()


@pytest.fixture
def records_by_operation(
    caplog: LogCaptureFixture,
) -> Callable[[], dict[str, list[logging.LogRecord]]]:
    """Capture ``spectopus`` DEBUG records grouped by operation name.

    Returns
    -------
    Callable[[], dict[str, list[logging.LogRecord]]]
        Call after exercising the code under test to get operation to records.
    """
    caplog.set_level(logging.DEBUG, logger="spectopus")

    def collect() -> dict[str, list[logging.LogRecord]]:
        grouped: dict[str, list[logging.LogRecord]] = {}
        for record in caplog.records:
            record_dict = cast("dict[str, object]", record.__dict__)
            operation = record_dict.get("operation", "unknown")
            key = operation if isinstance(operation, str) else "unknown"
            grouped.setdefault(key, []).append(record)
        return grouped

    return collect
