"""Recursion depth guard shared by both converters.

Every descent into a nested sub-schema adds one to ``depth``. Once ``depth``
exceeds ``options.max_depth`` the converter returns a fresh permissive node
without looking at its input, which bounds the work done on cyclic or
pathologically deep schemas.
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING

from spectopus_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from spectopus.schema.model import SchemaNode
    from spectopus.schema.options import ConversionOptions

__all__ = [
    "depth_exceeded",
    "depth_guarded",
]

logger = get_logger(__name__)


def depth_exceeded(options: ConversionOptions, depth: int) -> bool:
    """Return True when ``depth`` is past ``options.max_depth``."""
    return depth > options.max_depth


def depth_guarded[T](
    convert: Callable[[T, ConversionOptions, int], SchemaNode],
) -> Callable[[T, ConversionOptions, int], SchemaNode]:
    """Wrap a recursive converter with the depth check.

    Parameters
    ----------
    convert : Callable[[T, ConversionOptions, int], SchemaNode]
        Converter taking ``(value, options, depth)``.

    Returns
    -------
    Callable[[T, ConversionOptions, int], SchemaNode]
        Converter returning ``{}`` once ``depth > options.max_depth``.
    """

    @wraps(convert)
    def guarded(value: T, options: ConversionOptions, depth: int) -> SchemaNode:
        if depth_exceeded(options, depth):
            logger.log_degraded(
                "Maximum schema depth exceeded; emitting permissive schema",
                operation="depth_guard",
                depth=depth,
                max_depth=options.max_depth,
            )
            return {}
        return convert(value, options, depth)

    return guarded
