"""
Suggestion Engine - fuzzy matching of free-text queries against the drug catalog.
The catalog is held as an immutable snapshot and refreshed only on explicit reload.
"""
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pytz
from loguru import logger
from rapidfuzz import fuzz, utils

from .catalog import CatalogEntry, CatalogSource, JsonCatalogLoader, SuggestionResult
from .config import SUGGEST_LIMIT, SUGGEST_SCORE_CUTOFF
from .exceptions import CatalogUnavailable, InvalidQuery


@dataclass(frozen=True)
class CatalogSnapshot:
    entries: Tuple[CatalogEntry, ...]
    source: str
    loaded_at: datetime


def suggest(
    query: str,
    catalog: Sequence[CatalogEntry],
    k: int = SUGGEST_LIMIT,
    score_cutoff: float = SUGGEST_SCORE_CUTOFF,
) -> List[SuggestionResult]:
    """
    Rank catalog entries by approximate similarity of their description to the query.

    Algorithm:
    1. Normalize the query (RapidFuzz default_process) and split it into words
    2. Score each query word against the best-matching description word,
       counting a fuzzy prefix as a match ("naprox" -> "naproxen")
    3. Keep an entry only if every word containing letters scores at least
       score_cutoff; dose numbers affect the ranking but never exclude
    4. Rank by the mean word score, then by whole-string similarity
       (an exact description beats a longer one containing it),
       then by catalog order
    5. Return the top k as value copies

    Args:
        query: Free text typed by the user (e.g. "Naprox")
        catalog: Ordered catalog entries
        k: Maximum number of results
        score_cutoff: Minimum similarity on a 0-100 scale

    Returns:
        Ordered list of SuggestionResult, at most k long
    """
    if not isinstance(query, str):
        raise InvalidQuery(f"Query must be a string, got {type(query).__name__}")

    processed_query = utils.default_process(query)
    query_words = processed_query.split()
    if not query_words or not catalog or k <= 0:
        return []

    # Words with letters name the drug or its form; pure numbers are doses
    required = [i for i, word in enumerate(query_words) if any(c.isalpha() for c in word)]
    if not required:
        required = list(range(len(query_words)))

    ranked = []
    for index, entry in enumerate(catalog):
        processed_description = utils.default_process(entry.description)
        description_words = processed_description.split()
        if not description_words:
            continue
        scores = [
            max(_word_score(word, candidate) for candidate in description_words)
            for word in query_words
        ]
        if any(scores[i] < score_cutoff for i in required):
            continue
        ranked.append((
            -sum(scores) / len(scores),
            -fuzz.ratio(processed_query, processed_description),
            index,
        ))

    ranked.sort()
    return [SuggestionResult.from_entry(catalog[index]) for _, _, index in ranked[:k]]


def _word_score(word: str, candidate: str) -> float:
    """Similarity of a query word to a description word, allowing the word to be a prefix."""
    score = fuzz.ratio(word, candidate)
    if len(candidate) > len(word):
        score = max(score, fuzz.ratio(word, candidate[:len(word)]))
    return score


class SuggestionEngine:
    """
    Catalog-backed suggestion service.

    The catalog is loaded lazily on the first non-empty query (or by load()),
    kept as an immutable snapshot, and replaced only by reload().
    Lookups never mutate the snapshot, so they need no locking.
    """

    def __init__(
        self,
        catalog_path: Optional[Union[str, Path]] = None,
        limit: int = SUGGEST_LIMIT,
        score_cutoff: float = SUGGEST_SCORE_CUTOFF,
        loader: Optional[CatalogSource] = None,
    ):
        """
        Args:
            catalog_path: Path to the catalog JSON file. Defaults to the configured path.
            limit: Maximum number of suggestions per query (K)
            score_cutoff: Minimum similarity score (0-100) for a match
            loader: CatalogSource to read entries from.
                    Overrides catalog_path when given.
        """
        self.loader = loader if loader is not None else JsonCatalogLoader(catalog_path)
        self.limit = limit
        self.score_cutoff = score_cutoff
        self._snapshot: Optional[CatalogSnapshot] = None
        self._load_lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[CatalogSnapshot]:
        return self._snapshot

    def _read_snapshot(self) -> CatalogSnapshot:
        entries = tuple(self.loader.load())
        return CatalogSnapshot(
            entries=entries,
            source=str(self.loader.path),
            loaded_at=datetime.now(pytz.utc),
        )

    def load(self) -> CatalogSnapshot:
        """Return the current snapshot, loading it first if needed. Raises CatalogUnavailable."""
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._load_lock:
            if self._snapshot is None:
                self._snapshot = self._read_snapshot()
            return self._snapshot

    def reload(self) -> CatalogSnapshot:
        """
        Re-read the catalog source and swap in a fresh snapshot.
        On failure the previous snapshot is kept and CatalogUnavailable propagates.
        """
        with self._load_lock:
            previous = self._snapshot
            try:
                self._snapshot = self._read_snapshot()
            except CatalogUnavailable:
                logger.error("Catalog reload from {} failed; keeping previous snapshot", self.loader)
                raise
            logger.info(
                "Reloaded catalog: {} -> {} entries",
                len(previous.entries) if previous else 0,
                len(self._snapshot.entries),
            )
            return self._snapshot

    def suggest(self, query: str, k: Optional[int] = None) -> List[SuggestionResult]:
        """
        Suggest catalog entries for a query.

        Args:
            query: Free text; empty or whitespace-only returns [] without loading the catalog
            k: Optional override of the configured limit

        Returns:
            Ordered list of SuggestionResult, best match first
        """
        if not isinstance(query, str):
            raise InvalidQuery(f"Query must be a string, got {type(query).__name__}")
        if not query.strip():
            return []

        snapshot = self.load()
        results = suggest(
            query,
            snapshot.entries,
            k=self.limit if k is None else k,
            score_cutoff=self.score_cutoff,
        )
        logger.debug("Query {!r} matched {} of {} entries", query, len(results), len(snapshot.entries))
        return results

    def status(self) -> Dict[str, Any]:
        """Describe the held snapshot without triggering a load."""
        snapshot = self._snapshot
        if snapshot is None:
            return {
                "loaded": False,
                "entries": 0,
                "source": str(self.loader.path),
                "loaded_at": None,
            }
        return {
            "loaded": True,
            "entries": len(snapshot.entries),
            "source": snapshot.source,
            "loaded_at": snapshot.loaded_at.isoformat(),
        }
