"""
Settings for the catalog service.

Defaults live on the ``Settings`` model. ``load_settings()`` overlays
values taken from ``CATALOG_*`` environment variables so that the data
file location and logging can be changed without touching code.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError, field_validator
from typing_extensions import Literal

from .exceptions import ConfigurationError

ENV_PREFIX = "CATALOG_"

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    data_file: Path = Path("data") / "products.json"
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LEVELS)}")
        return level


def load_from_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect settings overrides from ``CATALOG_*`` environment variables."""
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for field in Settings.model_fields:
        value = env.get(ENV_PREFIX + field.upper())
        if value:
            overrides[field] = value
    return overrides


def load_settings(environ: Optional[Dict[str, str]] = None, **overrides: Any) -> Settings:
    """Build ``Settings`` from the environment plus explicit keyword overrides.

    Keyword overrides win over environment variables.
    """
    values = load_from_env(environ)
    values.update(overrides)
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid catalog settings: {e}") from e
