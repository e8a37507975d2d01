"""
Result records: per-field contributions, scored documents, search results.

Field contributions are a tagged variant:
- TextMatch: one matched value (name, category, best tag, description window)
- ReviewsMatch: aggregate over all matching reviews
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Tuple

from ..documents import Document
from .config import FieldName, MatchType


@dataclass(frozen=True)
class FieldContribution:
    """Common members of every breakdown entry"""
    kind: ClassVar[str] = ""

    field_weight: float
    match_type: MatchType
    match_multiplier: float
    bm25_score: float     # Raw BM25, before the floor
    field_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "field_weight": self.field_weight,
            "match_type": self.match_type.value,
            "match_multiplier": self.match_multiplier,
            "bm25_score": self.bm25_score,
            "field_score": self.field_score,
        }


@dataclass(frozen=True)
class TextMatch(FieldContribution):
    kind: ClassVar[str] = "text"

    matched_text: str

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["matched_text"] = self.matched_text
        return data


@dataclass(frozen=True)
class ReviewsMatch(FieldContribution):
    kind: ClassVar[str] = "reviews"

    match_count: int
    review_boost: float
    matched_texts: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "match_count": self.match_count,
            "review_boost": self.review_boost,
            "matched_texts": list(self.matched_texts),
        })
        return data


@dataclass
class ScoredResult:
    """One document's score for one query"""
    document: Document
    total_score: float
    breakdown: Dict[FieldName, FieldContribution] = field(default_factory=dict)
    normalized_score: float = 0.0  # 0-100, set by the ranker


@dataclass
class SearchResults:
    query: str
    results: List[ScoredResult] = field(default_factory=list)
    search_time_ms: float = 0.0

    @property
    def total_matches(self) -> int:
        return len(self.results)
