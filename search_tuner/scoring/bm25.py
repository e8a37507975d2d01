"""
BM25 scorer for a single field value.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.
Each field value is scored on its own, with IDF and average document length
taken from the corpus-wide statistics.

Formula:
    score(field, query) = Σ idf(t) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × fl/avgdl))

Where:
    t = each distinct query token present in the field
    tf = term frequency in the field
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    fl = field length (number of tokens)
    avgdl = average document length over the corpus (all fields combined)
"""

from collections import Counter
from typing import List

from .corpus_stats import CorpusStatistics
from .tokenizer import tokenize


class FieldBM25:
    """
    BM25 scoring of field text against a query.

    Parameters are fixed per instance; build a new one per search so the
    current configuration is always used.
    """

    def __init__(self, stats: CorpusStatistics, k1: float = 1.2, b: float = 0.75):
        """
        Initialize BM25 scorer.

        Args:
            stats: Corpus statistics providing IDF and average length

            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Range: 0.0 - 3.0

            b: Length normalization parameter
                Higher = more penalty for long fields
                Range: 0.0 - 1.0
        """
        self.stats = stats
        self.k1 = k1
        self.b = b

    def score(self, field_text: str, query: str) -> float:
        """
        Compute BM25 score for a field value.

        Returns:
            BM25 score (0.0 for empty fields, an empty corpus, or no shared terms)

        Example:
            >>> bm25 = FieldBM25(stats)
            >>> bm25.score("Best mocha latte in town!", "mocha")
            1.43...
        """
        field_tokens = tokenize(field_text)
        field_length = len(field_tokens)

        if field_length == 0 or self.stats.avg_doc_length <= 0:
            return 0.0

        return self._score_terms(_distinct(tokenize(query)), Counter(field_tokens), field_length)

    def _score_terms(self, query_terms: List[str], term_frequencies: Counter, field_length: int) -> float:
        score = 0.0
        length_norm = 1 - self.b + self.b * (field_length / self.stats.avg_doc_length)

        for term in query_terms:
            tf = term_frequencies.get(term, 0)

            if tf == 0:
                continue

            numerator = tf * (self.k1 + 1)
            denominator = tf + self.k1 * length_norm

            # Only reachable with b > 1
            if denominator <= 0:
                continue

            score += self.stats.idf(term) * (numerator / denominator)

        return score


def _distinct(tokens: List[str]) -> List[str]:
    return list(dict.fromkeys(tokens))
