"""
Corpus statistics for BM25 IDF.

Aggregates, over the whole corpus:
- document count
- average document length (tokens over all searchable fields)
- document frequency per term (documents containing the term at least once)

Statistics are field-agnostic: a term has the same IDF whether it is scored
against a name or against reviews.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, Iterable

from ..documents import Document
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


class StatisticsNotInitializedError(RuntimeError):
    """IDF requested before the corpus statistics were built"""


def document_text(doc: Document) -> str:
    """All searchable text of a document, joined by spaces"""
    return " ".join([
        doc.name or "",
        doc.category or "",
        " ".join(doc.tags or ()),
        doc.description or "",
        " ".join(doc.reviews or ()),
    ])


class CorpusStatistics:
    """
    Document count, average length and document frequencies for a corpus.

    Build with `initialize(documents)`; every call rebuilds from scratch.
    """

    def __init__(self):
        self.doc_count: int = 0
        self.avg_doc_length: float = 0.0
        self._doc_freq: Dict[str, int] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def vocabulary_size(self) -> int:
        return len(self._doc_freq)

    def initialize(self, documents: Iterable[Document]) -> None:
        """
        (Re)build statistics from a document collection.

        Args:
            documents: Corpus to analyze (an empty corpus is valid)
        """
        doc_freq = defaultdict(int)
        doc_count = 0
        total_length = 0

        for doc in documents:
            terms = tokenize(document_text(doc))
            doc_count += 1
            total_length += len(terms)

            # Once per document, not per occurrence
            for term in set(terms):
                doc_freq[term] += 1

        self.doc_count = doc_count
        self.avg_doc_length = total_length / doc_count if doc_count else 0.0
        self._doc_freq = dict(doc_freq)
        self._initialized = True

        logger.debug(
            f"Built corpus statistics: {doc_count} documents, "
            f"{len(self._doc_freq)} unique terms, avg length {self.avg_doc_length:.2f}"
        )

    def require_initialized(self) -> None:
        if not self._initialized:
            raise StatisticsNotInitializedError(
                "Corpus statistics are not built; call initialize(documents) before searching"
            )

    def document_frequency(self, term: str) -> int:
        self.require_initialized()
        return self._doc_freq.get(term.lower(), 0)

    def idf(self, term: str) -> float:
        """
        BM25 inverse document frequency.

        Formula:
            idf = ln((N - df + 0.5) / (df + 0.5) + 1)

        Non-negative for every df in [1, N]; a term present in every
        document still gets a small positive weight.

        Returns:
            0.0 for terms never seen in the corpus
        """
        df = self.document_frequency(term)
        if df == 0:
            return 0.0

        return math.log((self.doc_count - df + 0.5) / (df + 0.5) + 1)
