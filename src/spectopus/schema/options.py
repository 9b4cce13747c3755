"""Per-call conversion options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Final, Self

from spectopus_common.errors import ConfigurationError

if TYPE_CHECKING:
    from spectopus_common.settings import SchemaSettings

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ConversionOptions",
    "resolve_options",
]

DEFAULT_MAX_DEPTH: Final[int] = 20

# camelCase spellings accepted from option mappings
_OPTION_ALIASES: Final[Mapping[str, str]] = {
    "includeDescriptions": "include_descriptions",
    "includeDefaults": "include_defaults",
    "maxDepth": "max_depth",
}


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """Immutable options shared by both converters.

    Attributes
    ----------
    include_descriptions : bool
        Copy description metadata into converted nodes. Defaults to True.
    include_defaults : bool
        Copy default values into converted nodes. Defaults to True.
    max_depth : int
        Nesting depth past which sub-schemas convert to ``{}``. Defaults to 20.

    Examples
    --------
    >>> ConversionOptions(max_depth=3).with_overrides(include_defaults=False)
    ConversionOptions(include_descriptions=True, include_defaults=False, max_depth=3)
    """

    include_descriptions: bool = True
    include_defaults: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        for name in ("include_descriptions", "include_defaults"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError.with_details(field=name, issue="Must be a bool")
        # bool is an int subclass but never a meaningful depth
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigurationError.with_details(field="max_depth", issue="Must be an int")
        if self.max_depth < 0:
            raise ConfigurationError.with_details(
                field="max_depth",
                issue="Must be >= 0",
                hint="Use 0 to convert only the top-level schema",
            )

    @classmethod
    def from_settings(cls, settings: SchemaSettings) -> Self:
        """Build options from :class:`~spectopus_common.settings.SchemaSettings`."""
        return cls(
            include_descriptions=settings.include_descriptions,
            include_defaults=settings.include_defaults,
            max_depth=settings.max_depth,
        )

    def with_overrides(self, **overrides: object) -> Self:
        """Return a copy with ``overrides`` applied (camelCase names accepted)."""
        return replace(self, **_normalise(overrides))  # type: ignore[arg-type]


def _normalise(values: Mapping[str, object]) -> dict[str, object]:
    known = {field.name for field in fields(ConversionOptions)}
    normalised: dict[str, object] = {}
    for key, value in values.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            raise ConfigurationError.with_details(field=key, issue="Unknown conversion option")
        if value is not None:
            normalised[name] = value
    return normalised


def resolve_options(
    options: ConversionOptions | Mapping[str, object] | None = None,
    **overrides: object,
) -> ConversionOptions:
    """Coerce ``options`` into a :class:`ConversionOptions` instance.

    Parameters
    ----------
    options : ConversionOptions | Mapping[str, object] | None, optional
        Existing options, a mapping of option names (snake_case or the
        camelCase spellings ``includeDescriptions``, ``includeDefaults``,
        ``maxDepth``), or None for the defaults.
    **overrides : object
        Individual option values applied last. ``None`` values are ignored.

    Returns
    -------
    ConversionOptions
        Validated options.

    Raises
    ------
    ConfigurationError
        If an option name is unknown or a value is invalid.
    """
    if options is None:
        base = ConversionOptions()
    elif isinstance(options, ConversionOptions):
        base = options
    else:
        base = ConversionOptions(**_normalise(options))  # type: ignore[arg-type]
    if overrides:
        return base.with_overrides(**overrides)
    return base
