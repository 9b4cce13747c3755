"""Runtime settings for the schema conversion engine.

Settings are read from ``SPECTOPUS_SCHEMA_*`` environment variables with
pydantic-settings and fail fast with :class:`ConfigurationError`.

Examples
--------
>>> from spectopus_common.settings import load_settings
>>> settings = load_settings()
>>> settings.max_depth
20
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from spectopus_common.errors import ConfigurationError
from spectopus_common.logging import get_logger

__all__ = [
    "SchemaSettings",
    "load_settings",
]

logger = get_logger(__name__)


class SchemaSettings(BaseSettings):
    """Defaults for schema conversion (``SPECTOPUS_SCHEMA_*`` namespace)."""

    model_config = SettingsConfigDict(env_prefix="SPECTOPUS_SCHEMA_", extra="forbid")

    include_descriptions: bool = Field(
        default=True, description="Copy description metadata into converted nodes"
    )
    include_defaults: bool = Field(
        default=True, description="Copy default values into converted nodes"
    )
    max_depth: int = Field(
        default=20, ge=0, description="Nesting depth past which sub-schemas become {}"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Level setup_logging uses when called without one"
    )


def load_settings(**overrides: object) -> SchemaSettings:
    """Load :class:`SchemaSettings` from the environment.

    Parameters
    ----------
    **overrides : object
        Explicit values taking precedence over the environment.

    Returns
    -------
    SchemaSettings
        Validated settings.

    Raises
    ------
    ConfigurationError
        If any value fails validation.
    """
    try:
        settings = SchemaSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        msg = f"Invalid schema settings: {', '.join(fields)}"
        logger.error(msg, extra={"operation": "load_settings", "status": "error"})
        raise ConfigurationError(msg, cause=exc, context={"fields": fields}) from exc
    logger.debug(
        "Loaded schema settings",
        extra={"operation": "load_settings", "max_depth": settings.max_depth},
    )
    return settings
