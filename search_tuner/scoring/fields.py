"""
Per-field scoring policies.

    field_score = field_weight × match_multiplier × max(bm25, floor)

The floor keeps every lexical match worth something even when BM25 is near
zero (long fields, fuzzy matches where the query token never appears).

Each field has its own policy:
- name, category: match classifier, snippet is the raw value
- tags: every tag classified on its own, the best-scoring tag wins
- description: substring containment only, snippet is a context window
- reviews: counts matching reviews, BM25 over all reviews, diminishing boost
"""

from typing import Callable, Dict, List, Optional

from ..documents import Document
from .bm25 import FieldBM25
from .config import FieldName, MatchType, ScoringConfig
from .corpus_stats import CorpusStatistics
from .matching import MatchInfo, classify_match
from .results import FieldContribution, ReviewsMatch, TextMatch

KEYWORD_BM25_FLOOR = 0.5    # name, category, tags
FREE_TEXT_BM25_FLOOR = 0.3  # description, reviews

REVIEW_BOOST_STEP = 0.2
REVIEW_BOOST_CAP = 2.0

CONTEXT_BEFORE = 20
CONTEXT_AFTER = 30
CONTEXT_FALLBACK_LENGTH = 50
ELLIPSIS = "..."


def extract_match_context(text: str, query: str) -> str:
    """
    Snippet around the first case-insensitive occurrence of the query.

    Window: 20 chars before the match to 30 chars after the matched text,
    with "..." where the window cuts the text.

    Example:
        >>> extract_match_context("Family-owned coffee house specializing in mocha beverages", "mocha")
        '...use specializing in mocha beverages'
    """
    idx = text.lower().find(query.lower())

    if idx == -1:
        return text[:CONTEXT_FALLBACK_LENGTH] + ELLIPSIS

    start = max(0, idx - CONTEXT_BEFORE)
    end = min(len(text), idx + len(query) + CONTEXT_AFTER)

    snippet = text[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def review_boost(match_count: int) -> float:
    """Diminishing returns for multiple matching reviews, capped at 2x"""
    return min(1 + match_count * REVIEW_BOOST_STEP, REVIEW_BOOST_CAP)


class FieldScorer:
    """
    Scores the fields of one document against one query.

    Built per search from a configuration snapshot, so weights and
    multipliers are the values current when the search started.
    """

    def __init__(self, config: ScoringConfig, stats: CorpusStatistics):
        self.config = config
        self.bm25 = FieldBM25(stats, k1=config.k1, b=config.b)

    def _text_match(
        self,
        field_name: FieldName,
        text: str,
        query: str,
        match: MatchInfo,
        floor: float,
        matched_text: str,
    ) -> TextMatch:
        weight = self.config.field_weights[field_name]
        bm25_score = self.bm25.score(text, query)
        return TextMatch(
            field_weight=weight,
            match_type=match.type,
            match_multiplier=match.multiplier,
            bm25_score=bm25_score,
            field_score=weight * match.multiplier * max(bm25_score, floor),
            matched_text=matched_text,
        )

    def _contains(self) -> MatchInfo:
        return MatchInfo(MatchType.CONTAINS, self.config.match_multipliers[MatchType.CONTAINS])

    def score_keyword(self, field_name: FieldName, text: str, query: str) -> Optional[TextMatch]:
        if not text:
            return None
        match = classify_match(text, query, self.config.match_multipliers)
        if match is None:
            return None
        return self._text_match(field_name, text, query, match, KEYWORD_BM25_FLOOR, text)

    def score_name(self, doc: Document, query: str) -> Optional[TextMatch]:
        return self.score_keyword(FieldName.NAME, doc.name, query)

    def score_category(self, doc: Document, query: str) -> Optional[TextMatch]:
        return self.score_keyword(FieldName.CATEGORY, doc.category, query)

    def score_tags(self, doc: Document, query: str) -> Optional[TextMatch]:
        """Only the best-scoring tag is surfaced"""
        best: Optional[TextMatch] = None
        best_score = 0.0

        for tag in doc.tags or ():
            candidate = self.score_keyword(FieldName.TAGS, tag, query)
            if candidate is not None and candidate.field_score > best_score:
                best = candidate
                best_score = candidate.field_score

        return best

    def score_description(self, doc: Document, query: str) -> Optional[TextMatch]:
        text = doc.description
        if not text or query.lower() not in text.lower():
            return None
        return self._text_match(
            FieldName.DESCRIPTION,
            text,
            query,
            self._contains(),
            FREE_TEXT_BM25_FLOOR,
            extract_match_context(text, query),
        )

    def score_reviews(self, doc: Document, query: str) -> Optional[ReviewsMatch]:
        reviews = doc.reviews or ()
        query_lower = query.lower()

        snippets: List[str] = [
            extract_match_context(review, query)
            for review in reviews
            if query_lower in review.lower()
        ]
        if not snippets:
            return None

        weight = self.config.field_weights[FieldName.REVIEWS]
        match = self._contains()
        bm25_score = self.bm25.score(" ".join(reviews), query)
        boost = review_boost(len(snippets))

        return ReviewsMatch(
            field_weight=weight,
            match_type=match.type,
            match_multiplier=match.multiplier,
            bm25_score=bm25_score,
            field_score=weight * match.multiplier * max(bm25_score, FREE_TEXT_BM25_FLOOR) * boost,
            match_count=len(snippets),
            review_boost=boost,
            matched_texts=tuple(snippets),
        )


FieldPolicy = Callable[[FieldScorer, Document, str], Optional[FieldContribution]]

# Scoring order is the order of this table
FIELD_POLICIES: Dict[FieldName, FieldPolicy] = {
    FieldName.NAME: FieldScorer.score_name,
    FieldName.CATEGORY: FieldScorer.score_category,
    FieldName.TAGS: FieldScorer.score_tags,
    FieldName.DESCRIPTION: FieldScorer.score_description,
    FieldName.REVIEWS: FieldScorer.score_reviews,
}
