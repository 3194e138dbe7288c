"""Errors raised by the suggestion module."""


class SuggestionError(Exception):
    """Base class for suggestion module errors."""


class CatalogUnavailable(SuggestionError):
    """The catalog source is missing, unreadable or malformed."""


class InvalidQuery(SuggestionError):
    """The query cannot be matched (currently: it is not a string)."""


class SuggestionUnavailable(SuggestionError):
    """The suggestion server failed and no local fallback is configured."""
