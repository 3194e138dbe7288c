"""
HTTP client for the suggestion endpoint, with retry and a local fallback.

Resilient design:
  1. Ask the suggestion server (primary)
  2. On failure, retry with exponential backoff
  3. If still failing, search a locally held engine (fallback)
  4. If the local catalog is unavailable too, return no suggestions
"""
import time
from typing import List, Optional

import requests
from loguru import logger

from .catalog import SuggestionResult
from .config import SUGGEST_CLIENT_BACKOFF, SUGGEST_CLIENT_RETRIES, SUGGEST_REQUEST_TIMEOUT
from .engine import SuggestionEngine
from .exceptions import CatalogUnavailable, SuggestionUnavailable


class SuggestionClient:
    def __init__(
        self,
        base_url: str,
        fallback: Optional[SuggestionEngine] = None,
        timeout: float = SUGGEST_REQUEST_TIMEOUT,
        retries: int = SUGGEST_CLIENT_RETRIES,
        backoff: float = SUGGEST_CLIENT_BACKOFF,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback
        self.timeout = timeout
        self.retries = max(0, retries)
        self.backoff = backoff
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "SuggestionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _fetch(self, query: str) -> List[SuggestionResult]:
        resp = self.session.get(f"{self.base_url}/suggest", params={"q": query}, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise ValueError("Malformed suggestion response")
        return [SuggestionResult.model_validate(item) for item in data["results"]]

    def suggest(self, query: str) -> List[SuggestionResult]:
        """
        Suggestions for query, from the server when reachable, otherwise from the fallback engine.

        Raises:
            SuggestionUnavailable: every attempt failed and no fallback is configured
        """
        query = (query or "").strip()
        if not query:
            return []

        delay = self.backoff
        last_exc: Optional[Exception] = None
        for attempt in range(self.retries + 1):
            try:
                return self._fetch(query)
            except (requests.RequestException, ValueError) as e:
                last_exc = e
                if attempt < self.retries:
                    logger.warning("[SuggestionClient] attempt {} failed ({}), retrying in {:.2f}s", attempt + 1, e, delay)
                    time.sleep(delay)
                    delay *= 2

        if self.fallback is None:
            raise SuggestionUnavailable(
                f"Suggestion server {self.base_url} failed after {self.retries + 1} attempt(s)"
            ) from last_exc

        logger.warning("[SuggestionClient] server unavailable ({}), using local catalog", last_exc)
        try:
            return self.fallback.suggest(query)
        except CatalogUnavailable as e:
            logger.error("[SuggestionClient] local catalog unavailable too: {}", e)
            return []
