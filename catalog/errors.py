"""
catalog/errors.py

Exceptions raised by the catalog readers.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog read failures."""


class TableNotFoundError(CatalogError):
    """Raised when a requested table file does not exist."""


class TableParseError(CatalogError):
    """Raised when a table stream fails while being read."""


class PathOutsideRootError(TableNotFoundError):
    """Raised when a requested path resolves outside the data root."""
