"""
Search engine: configuration + corpus statistics + scoring, in one object.

Usage:
    engine = SearchEngine()
    engine.initialize(documents)

    engine.set_field_weight("name", 150)
    results = engine.search("mocha", limit=10)

    for result in results.results:
        print(result.document.name, result.normalized_score, result.breakdown)
"""

import logging
import threading
import time
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..documents import Document
from .config import BM25Param, ConfigStore, FieldName, MatchType, render_config
from .corpus_stats import CorpusStatistics
from .fields import FIELD_POLICIES, FieldScorer
from .ranker import rank_results
from .results import ScoredResult, SearchResults

logger = logging.getLogger(__name__)

DEFAULT_RESULT_LIMIT = 50


class SearchEngine:
    """
    Configurable multi-field relevance scoring.

    Configuration, statistics and the indexed corpus are guarded by a lock.
    Each search works on a snapshot taken when it starts, so settings changed
    between searches always apply to the next one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._config = ConfigStore()
        self._stats = CorpusStatistics()
        self._documents: Tuple[Document, ...] = ()

    @property
    def statistics(self) -> CorpusStatistics:
        return self._stats

    @property
    def documents(self) -> Tuple[Document, ...]:
        """Corpus passed to the last initialize()"""
        return self._documents

    def initialize(self, documents: Sequence[Document]) -> None:
        """(Re)build corpus statistics. Call before searching and whenever the corpus changes."""
        documents = tuple(documents)
        stats = CorpusStatistics()
        stats.initialize(documents)

        # Statistics and corpus are swapped together
        with self._lock:
            self._stats = stats
            self._documents = documents

        logger.info(
            f"Search engine initialized: {stats.doc_count} documents, "
            f"{stats.vocabulary_size} unique terms"
        )

    def _snapshot(self) -> Tuple[FieldScorer, Tuple[Document, ...]]:
        with self._lock:
            config, stats, documents = self._config.snapshot(), self._stats, self._documents
        stats.require_initialized()
        return FieldScorer(config, stats), documents

    def score_document(self, doc: Document, query: str) -> ScoredResult:
        """Score one document; breakdown only lists fields that matched"""
        if not query or not query.strip():
            return ScoredResult(document=doc, total_score=0.0)
        scorer, _ = self._snapshot()
        return self._score_document(scorer, doc, query)

    @staticmethod
    def _score_document(scorer: FieldScorer, doc: Document, query: str) -> ScoredResult:
        breakdown = {}
        total_score = 0.0

        for field_name, policy in FIELD_POLICIES.items():
            contribution = policy(scorer, doc, query)
            if contribution is None:
                continue
            breakdown[field_name] = contribution
            total_score += contribution.field_score

        return ScoredResult(document=doc, total_score=total_score, breakdown=breakdown)

    def search(
        self,
        query: str,
        documents: Optional[Sequence[Document]] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> SearchResults:
        """
        Score, filter, rank and normalize documents for a query.

        Args:
            query: Free-text query, scored as given (empty or whitespace-only
                returns no results)
            documents: Documents to search; defaults to the initialized corpus
            limit: Maximum number of results

        Returns:
            SearchResults with normalized scores and elapsed time in ms

        Raises:
            ValueError: limit is negative
            StatisticsNotInitializedError: initialize() was never called
        """
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        if not query or not query.strip():
            return SearchResults(query=query)

        scorer, indexed = self._snapshot()
        if documents is None:
            documents = indexed

        start = time.perf_counter()
        scored = [self._score_document(scorer, doc, query) for doc in documents]
        ranked = rank_results(scored, limit)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.debug(
            f"Search '{query}': {len(ranked)} results from {len(documents)} documents in {elapsed_ms:.2f}ms"
        )

        return SearchResults(query=query, results=ranked, search_time_ms=elapsed_ms)

    def set_field_weight(self, field_name: Union[str, FieldName], value: float) -> None:
        with self._lock:
            self._config.set_field_weight(field_name, value)

    def set_match_multiplier(self, match_type: Union[str, MatchType], value: float) -> None:
        with self._lock:
            self._config.set_match_multiplier(match_type, value)

    def set_bm25_param(self, param: Union[str, BM25Param], value: float) -> None:
        with self._lock:
            self._config.set_bm25_param(param, value)

    def get_config(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return self._config.get_config()

    def reset(self) -> None:
        with self._lock:
            self._config.reset()
        logger.info("Scoring configuration reset to defaults")

    def load_config(self, blob: Mapping[str, Any], minimum: Optional[float] = None) -> None:
        """Apply a config blob; unknown groups and keys are ignored"""
        with self._lock:
            self._config.load(blob, minimum=minimum)

    def export_config(self, fmt: str = "json") -> str:
        return render_config(self.get_config(), fmt)
