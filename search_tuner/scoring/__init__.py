"""
Multi-field relevance scoring with BM25, field weights and match multipliers.

Components:
- tokenizer: Text normalization and term extraction
- corpus_stats: Document count, average length and document frequencies (IDF)
- matching: Match classification (exact, prefix, contains, fuzzy)
- bm25: BM25 scoring of a single field value
- fields: Per-field scoring policies and breakdown entries
- ranker: Filtering, sorting, truncation and 0-100 normalization
- config: Field weights, match multipliers, BM25 parameters
- engine: SearchEngine tying everything together

Key simplification: corpus-wide IDF
- Document frequencies are counted over all fields combined
- A term has the same IDF in every field
"""

from .tokenizer import tokenize
from .corpus_stats import CorpusStatistics, StatisticsNotInitializedError
from .config import BM25Param, ConfigStore, FieldName, MatchType, ScoringConfig
from .matching import MatchInfo, classify_match, levenshtein_distance
from .bm25 import FieldBM25
from .results import FieldContribution, ReviewsMatch, ScoredResult, SearchResults, TextMatch
from .ranker import rank_results
from .engine import DEFAULT_RESULT_LIMIT, SearchEngine

__all__ = [
    "tokenize",
    "CorpusStatistics",
    "StatisticsNotInitializedError",
    "BM25Param",
    "ConfigStore",
    "FieldName",
    "MatchType",
    "ScoringConfig",
    "MatchInfo",
    "classify_match",
    "levenshtein_distance",
    "FieldBM25",
    "FieldContribution",
    "ReviewsMatch",
    "ScoredResult",
    "SearchResults",
    "TextMatch",
    "rank_results",
    "DEFAULT_RESULT_LIMIT",
    "SearchEngine",
]
