"""Custom exception hierarchy for docsift.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations


class DocsiftError(Exception):
    """Base class for all docsift exceptions."""


class ConfigError(DocsiftError):
    """Raised when configuration loading or validation fails."""


class IndexLoadError(DocsiftError):
    """Raised when the search index artifact cannot be fetched or decoded."""


class SearchError(DocsiftError):
    """Raised for search query issues."""


class SearchNotReadyError(SearchError):
    """Raised when a query is issued before the index finished loading."""
