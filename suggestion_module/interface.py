"""
Public Interface for Suggestion Module
Clean entry point for integration with the request boundary.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .engine import SuggestionEngine


# Global engine instance (singleton; holds the catalog snapshot for the process)
_engine: Optional[SuggestionEngine] = None


def _get_engine() -> SuggestionEngine:
    """Get or create the global engine instance."""
    global _engine
    if _engine is None:
        _engine = SuggestionEngine()
    return _engine


def configure(
    catalog_path: Optional[Union[str, Path]] = None,
    engine: Optional[SuggestionEngine] = None,
) -> SuggestionEngine:
    """
    Replace the global engine, either with a given instance or with a fresh
    engine reading catalog_path. The new catalog is loaded lazily.
    """
    global _engine
    _engine = engine if engine is not None else SuggestionEngine(catalog_path=catalog_path)
    return _engine


def get_suggestions(query: str) -> Dict[str, Any]:
    """
    Public interface function to get autocomplete suggestions for a drug query.

    Args:
        query: Free text typed into the medication field (e.g. "Naprox")

    Returns:
        Dictionary with structure:
        {
            "results": [
                {"description": "Naproxen tablet 250 mg", "code": "PRK-10201"},
                ...
            ]
        }

    Raises:
        CatalogUnavailable: the catalog could not be loaded
        InvalidQuery: query is not a string
    """
    results = _get_engine().suggest(query)
    return {"results": [result.model_dump() for result in results]}


def reload_catalog() -> Dict[str, Any]:
    """
    Reload the catalog from its source and return the new status.
    Useful for picking up an updated catalog file without restarting the service.
    """
    _get_engine().reload()
    return get_catalog_status()


def get_catalog_status() -> Dict[str, Any]:
    """Status of the held catalog snapshot (loaded, entries, source, loaded_at)."""
    return _get_engine().status()
