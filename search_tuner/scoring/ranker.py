"""
Ranking: filter non-matches, sort, truncate, normalize to 0-100.
"""

from typing import Iterable, List

from .results import ScoredResult


def rank_results(scored: Iterable[ScoredResult], limit: int) -> List[ScoredResult]:
    """
    Rank scored documents for display.

    Drops results with total_score <= 0, sorts by total_score descending
    (stable, so ties keep corpus order), keeps the first `limit`, then sets
    normalized_score = 100 × total_score / top_score.

    Raises:
        ValueError: limit is negative
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ranked = sorted(
        (r for r in scored if r.total_score > 0),
        key=lambda r: r.total_score,
        reverse=True,
    )[:limit]

    top_score = ranked[0].total_score if ranked else 1.0
    for result in ranked:
        result.normalized_score = result.total_score / top_score * 100

    return ranked
