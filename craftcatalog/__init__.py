"""Craft catalog: a JSON-file backed product catalogue with a small REST API."""

from .catalog import CatalogStore  # noqa: F401
