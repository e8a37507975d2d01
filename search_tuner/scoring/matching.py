"""
Match classification: how a query textually relates to a field value.

Types are tried in fixed priority order, first match wins:
    exact > prefix > contains > fuzzy

All comparisons are case-insensitive. Words are whitespace-delimited.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import MatchType

MAX_FUZZY_DISTANCE = 2

# Returned when lengths differ by more than MAX_FUZZY_DISTANCE
# (edit distance is bounded below by the length difference)
TOO_DIFFERENT = 999


@dataclass(frozen=True)
class MatchInfo:
    type: MatchType
    multiplier: float


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Edit distance with unit-cost insertion, deletion and substitution.

    Returns TOO_DIFFERENT without running the DP when the lengths differ by
    more than MAX_FUZZY_DISTANCE.

    Examples:
        >>> levenshtein_distance("mocha", "mocca")
        1
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("tea", "teahouse")
        999
    """
    m, n = len(s1), len(s2)

    if m == 0:
        return n
    if n == 0:
        return m
    if abs(m - n) > MAX_FUZZY_DISTANCE:
        return TOO_DIFFERENT

    previous = list(range(n + 1))
    for i in range(1, m + 1):
        current = [i] + [0] * n
        for j in range(1, n + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            current[j] = min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current

    return previous[n]


def classify_match(
    field_text: str,
    query: str,
    multipliers: Mapping[MatchType, float],
) -> Optional[MatchInfo]:
    """
    Determine whether and how a field value matches the query.

    Args:
        field_text: Raw field value
        query: Query string
        multipliers: Current multiplier per match type

    Returns:
        MatchInfo with the type and its configured multiplier, or None when
        the field does not match at all
    """
    field_lower = field_text.lower()
    query_lower = query.lower()
    words = field_lower.split()

    if field_lower == query_lower or query_lower in words:
        match_type = MatchType.EXACT
    elif field_lower.startswith(query_lower) or any(w.startswith(query_lower) for w in words):
        match_type = MatchType.PREFIX
    elif query_lower in field_lower:
        match_type = MatchType.CONTAINS
    elif any(levenshtein_distance(w, query_lower) <= MAX_FUZZY_DISTANCE for w in words):
        match_type = MatchType.FUZZY
    else:
        return None

    return MatchInfo(type=match_type, multiplier=multipliers[match_type])
