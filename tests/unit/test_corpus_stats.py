"""
Unit tests for corpus statistics and BM25 IDF.
"""

import math

import pytest

from search_tuner.documents import Document
from search_tuner.scoring.corpus_stats import (
    CorpusStatistics,
    StatisticsNotInitializedError,
    document_text,
)


@pytest.fixture
def two_docs():
    return [
        Document(id=1, name="Mocha Cafe", tags=("coffee", "mocha")),
        Document(id=2, name="Sushi Master", category="japanese"),
    ]


class TestInitialize:
    """Test statistics built from a corpus"""

    def test_document_count_and_average_length(self, two_docs):
        """Test N and average token count over all fields"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)

        # doc 1: mocha cafe coffee mocha (4), doc 2: sushi master japanese (3)
        assert stats.doc_count == 2
        assert stats.avg_doc_length == pytest.approx(3.5)

    def test_document_frequency_counts_documents_not_occurrences(self, two_docs):
        """Test a term repeated inside one document counts once"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)

        assert stats.document_frequency("mocha") == 1
        assert stats.document_frequency("sushi") == 1
        assert stats.vocabulary_size == 6

    def test_document_frequency_bounds(self, locations):
        """Test every df is within [1, N]"""
        stats = CorpusStatistics()
        stats.initialize(locations)

        for term in ["mocha", "coffee", "pool", "best", "great", "sushi"]:
            df = stats.document_frequency(term)
            assert 1 <= df <= stats.doc_count

    def test_empty_corpus(self):
        """Test empty corpus gives zero statistics without dividing by zero"""
        stats = CorpusStatistics()
        stats.initialize([])

        assert stats.doc_count == 0
        assert stats.avg_doc_length == 0.0
        assert stats.idf("mocha") == 0.0

    def test_reinitialize_replaces_statistics(self, two_docs):
        """Test a second initialize starts from scratch"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)
        stats.initialize([Document(id=3, name="Aqua Pool Club")])

        assert stats.doc_count == 1
        assert stats.document_frequency("mocha") == 0
        assert stats.document_frequency("pool") == 1

    def test_document_text_joins_all_fields(self):
        """Test searchable text covers name, category, tags, description, reviews"""
        doc = Document(
            id=1,
            name="Mocha Cafe",
            category="cafe",
            tags=("coffee", "wifi"),
            description="Cozy",
            reviews=("Great", "Nice"),
            location="Downtown",
        )

        assert document_text(doc) == "Mocha Cafe cafe coffee wifi Cozy Great Nice"


class TestIDF:
    """Test BM25 IDF formula"""

    def test_idf_formula(self, two_docs):
        """Test idf = ln((N - df + 0.5)/(df + 0.5) + 1)"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)

        assert stats.idf("mocha") == pytest.approx(math.log((2 - 1 + 0.5) / (1 + 0.5) + 1))

    def test_idf_unseen_term_is_zero(self, two_docs):
        """Test terms absent from the corpus contribute nothing"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)

        assert stats.idf("pickleball") == 0.0

    def test_idf_case_insensitive(self, two_docs):
        """Test lookup lower-cases the term"""
        stats = CorpusStatistics()
        stats.initialize(two_docs)

        assert stats.idf("MOCHA") == stats.idf("mocha")

    def test_idf_term_in_every_document_is_small_positive(self):
        """Test df == N still gives a small positive weight, never zero"""
        docs = [Document(id=i, name=f"cafe number{i}") for i in range(10)]
        stats = CorpusStatistics()
        stats.initialize(docs)

        idf = stats.idf("cafe")

        assert idf > 0
        assert idf == pytest.approx(math.log(0.5 / 10.5 + 1))

    def test_rarer_terms_weigh_more(self, locations):
        """Test idf decreases as document frequency grows"""
        stats = CorpusStatistics()
        stats.initialize(locations)

        assert stats.document_frequency("sushi") < stats.document_frequency("mocha")
        assert stats.idf("sushi") > stats.idf("mocha") > 0
        assert math.isfinite(stats.idf("sushi"))

    def test_idf_before_initialize_raises(self):
        """Test statistics must be built before use"""
        stats = CorpusStatistics()

        with pytest.raises(StatisticsNotInitializedError):
            stats.idf("mocha")
