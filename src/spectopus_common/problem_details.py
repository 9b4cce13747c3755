"""RFC 9457 Problem Details helpers.

Examples
--------
>>> from spectopus_common.problem_details import build_problem_details, render_problem
>>> problem = build_problem_details(
...     problem_type="https://spectopus.dev/problems/configuration-error",
...     title="ConfigurationError",
...     status=500,
...     detail="max_depth must be >= 0",
...     instance="urn:spectopus:options",
... )
>>> assert "configuration-error" in render_problem(problem)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypedDict, cast

if TYPE_CHECKING:
    from collections.abc import Mapping

    from spectopus_common.types import JsonValue

__all__ = [
    "ProblemDetails",
    "build_problem_details",
    "render_problem",
]


class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


def build_problem_details(
    problem_type: str,
    title: str,
    status: int,
    detail: str,
    instance: str,
    *,
    code: str | None = None,
    extensions: Mapping[str, JsonValue] | None = None,
) -> ProblemDetails:
    """Build an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem class.
    title : str
        Short, human-readable summary.
    status : int
        HTTP status code.
    detail : str
        Explanation specific to this occurrence.
    instance : str
        URI identifying the occurrence.
    code : str | None, optional
        Stable error code. Defaults to None.
    extensions : Mapping[str, JsonValue] | None, optional
        Additional members. Defaults to None.

    Returns
    -------
    ProblemDetails
        The payload.

    Raises
    ------
    ValueError
        If ``status`` is not a valid HTTP error status.
    """
    if not 400 <= status <= 599:
        msg = f"Problem Details status must be in 400-599, got {status}"
        raise ValueError(msg)
    payload: dict[str, object] = {
        "type": problem_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if code is not None:
        payload["code"] = code
    if extensions:
        payload["extensions"] = dict(extensions)
    return cast("ProblemDetails", payload)


def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Render Problem Details as a minified JSON string."""
    return json.dumps(problem, default=str, ensure_ascii=False)
