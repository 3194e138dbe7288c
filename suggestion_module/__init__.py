"""
Suggestion Module - fuzzy drug-name autocomplete over a fixed catalog.
"""

from .catalog import CatalogEntry, CatalogSource, JsonCatalogLoader, SuggestionResult
from .engine import CatalogSnapshot, SuggestionEngine, suggest
from .exceptions import CatalogUnavailable, InvalidQuery, SuggestionError, SuggestionUnavailable
from .interface import configure, get_catalog_status, get_suggestions, reload_catalog

__all__ = [
    "CatalogEntry",
    "CatalogSnapshot",
    "CatalogSource",
    "CatalogUnavailable",
    "InvalidQuery",
    "JsonCatalogLoader",
    "SuggestionEngine",
    "SuggestionError",
    "SuggestionResult",
    "SuggestionUnavailable",
    "configure",
    "get_catalog_status",
    "get_suggestions",
    "reload_catalog",
    "suggest",
]

__version__ = "1.0.0"
