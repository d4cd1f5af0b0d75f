"""Custom exceptions for the craft catalog."""

from pathlib import Path
from typing import Union


class CatalogError(Exception):
    """Base exception for all catalog errors."""


class ConfigurationError(CatalogError):
    """Raised when the settings or environment are invalid."""


class PersistenceError(CatalogError):
    """Raised when the backing file cannot be read or written."""

    def __init__(self, path: Union[str, Path], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class CatalogDecodeError(PersistenceError):
    """Raised when the backing file exists but is not a valid catalog document."""
