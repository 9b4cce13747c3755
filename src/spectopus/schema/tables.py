"""Static lookup tables mapping dialect rule names to canonical fields."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

__all__ = [
    "DEFINITION_STRING_ENCODINGS",
    "DEFINITION_STRING_FORMATS",
    "DESCRIPTION_NUMBER_BOUNDS",
    "DESCRIPTION_STRING_ENCODINGS",
    "DESCRIPTION_STRING_FORMATS",
    "DESCRIPTION_STRING_PATTERNS",
    "escape_pattern",
    "ip_format",
    "pattern_source",
    "strip_pattern_delimiters",
]

# Dialect A (definition tree) string checks
DEFINITION_STRING_FORMATS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "email": "email",
        "url": "uri",
        "uuid": "uuid",
        "datetime": "date-time",
        "date": "date",
        "time": "time",
        "duration": "duration",
    }
)

DEFINITION_STRING_ENCODINGS: Final[Mapping[str, str]] = MappingProxyType({"base64": "base64"})

# Dialect B (description object) string rules
DESCRIPTION_STRING_FORMATS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "email": "email",
        "uri": "uri",
        "guid": "uuid",
        "uuid": "uuid",
        "isoDate": "date-time",
        "isoDuration": "duration",
        "hostname": "hostname",
    }
)

DESCRIPTION_STRING_PATTERNS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "alphanum": "^[a-zA-Z0-9]*$",
        "token": "^[a-zA-Z0-9_]*$",
        "hex": "^[a-fA-F0-9]*$",
        "dataUri": "^data:.*;base64,",
    }
)

DESCRIPTION_STRING_ENCODINGS: Final[Mapping[str, str]] = MappingProxyType({"base64": "base64"})

# rule name -> (canonical key, argument name)
DESCRIPTION_NUMBER_BOUNDS: Final[Mapping[str, tuple[str, str]]] = MappingProxyType(
    {
        "min": ("minimum", "limit"),
        "max": ("maximum", "limit"),
        "greater": ("exclusiveMinimum", "limit"),
        "less": ("exclusiveMaximum", "limit"),
        "multiple": ("multipleOf", "base"),
    }
)

_REGEX_METACHARACTERS = re.compile(r"[.*+?^${}()|\[\]\\]")
_DELIMITED_PATTERN = re.compile(r"^/(.*)/[dgimsuvy]*$", re.DOTALL)


def escape_pattern(text: str) -> str:
    """Backslash-escape regex metacharacters in ``text``.

    Examples
    --------
    >>> escape_pattern("v1.0")
    'v1\\\\.0'
    """
    return _REGEX_METACHARACTERS.sub(lambda match: "\\" + match.group(0), text)


def strip_pattern_delimiters(value: str) -> str:
    """Turn a serialized ``/pattern/flags`` regex into its bare pattern.

    Strings without delimiters are returned unchanged.

    Examples
    --------
    >>> strip_pattern_delimiters("/^[a-z]+$/i")
    '^[a-z]+$'
    >>> strip_pattern_delimiters("^[a-z]+$")
    '^[a-z]+$'
    """
    match = _DELIMITED_PATTERN.match(value)
    return match.group(1) if match else value


def pattern_source(value: object) -> str | None:
    """Return the pattern text of a compiled regex, a regex-like object or a string.

    Objects exposing a ``source`` string (JavaScript-style regex values) are
    accepted alongside :class:`re.Pattern`; serialized ``/pattern/flags``
    strings are de-quoted. Anything else yields None.
    """
    if isinstance(value, re.Pattern):
        return value.pattern if isinstance(value.pattern, str) else None
    if isinstance(value, str):
        return strip_pattern_delimiters(value)
    source = getattr(value, "source", None)
    return source if isinstance(source, str) else None


def ip_format(versions: object) -> str | None:
    """Return ``ipv4``/``ipv6`` when exactly one IP version is requested."""
    if isinstance(versions, str):
        requested = {versions}
    elif isinstance(versions, (list, tuple, set, frozenset)):
        requested = {str(version) for version in versions}
    else:
        return None
    has_v4 = "ipv4" in requested
    has_v6 = "ipv6" in requested
    if has_v4 and not has_v6:
        return "ipv4"
    if has_v6 and not has_v4:
        return "ipv6"
    return None
