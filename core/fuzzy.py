# core/fuzzy.py

"""Fuzzy matching and ranking of candidate names against a query."""
from typing import List, Sequence

from core.data_structures import Match

EXACT_SCORE = 10000
PREFIX_SCORE = 5000
SUBSTRING_SCORE = 2000
MIN_SCORE = 50
USAGE_WEIGHT = 100

BOUNDARY_CHARS = frozenset(' -_./\\')

def is_word_boundary(candidate: str, pos: int) -> bool:
    """True if the character at ``pos`` starts a new word in ``candidate``.

    ``candidate`` is the original-case string so that camelCase transitions
    (a lowercase letter followed by an uppercase one) count as boundaries.
    """
    if pos <= 0 or pos >= len(candidate):
        return False
    prev = candidate[pos - 1]
    if prev in BOUNDARY_CHARS:
        return True
    return candidate[pos].isupper() and not prev.isupper()

def score(query: str, candidate: str) -> int:
    """Score how well ``candidate`` matches ``query`` (case-insensitive).

    Tiers: exact match, prefix, substring, then an ordered-subsequence scan.
    Returns 0 when not every query character is found in order.
    """
    q = query.lower()
    target = candidate.lower()

    if target == q:
        return EXACT_SCORE
    if target.startswith(q):
        return PREFIX_SCORE + len(q) * 10
    if q in target:
        return SUBSTRING_SCORE + len(q) * 5

    # Lowercasing can change length for a few code points; fall back to
    # the lowered text for boundary detection in that case.
    original = candidate if len(candidate) == len(target) else target

    query_index = 0
    consecutive = 0
    max_consecutive = 0
    total = 0
    boundary_bonus = 0
    first_char_bonus = 0

    for target_index, char in enumerate(target):
        if query_index >= len(q):
            break
        if char == q[query_index]:
            total += 10
            consecutive += 1
            max_consecutive = max(max_consecutive, consecutive)
            if query_index == 0 and target_index == 0:
                first_char_bonus = 50
            # Checked on the original case: an uppercase letter after a lowercase one
            # (camelCase) earns the bonus, which a lowercase-only check never gives.
            if is_word_boundary(original, target_index):
                boundary_bonus += 25
            query_index += 1
        else:
            consecutive = 0

    if query_index < len(q):
        return 0

    return total + max_consecutive * 30 + boundary_bonus + first_char_bonus

def rank(query: str, candidates: Sequence[str], usage_scores: Sequence[int]) -> List[Match]:
    """Rank candidates by match score plus usage boost.

    With an empty query every candidate is returned, ordered by usage.
    Ties keep the input order.
    """
    if not query:
        matches = [Match(usage_scores[i] * USAGE_WEIGHT, i) for i in range(len(candidates))]
    else:
        matches = []
        for i, candidate in enumerate(candidates):
            match_score = score(query, candidate)
            if match_score >= MIN_SCORE:
                matches.append(Match(match_score + usage_scores[i] * USAGE_WEIGHT, i))

    matches.sort(key=lambda m: (-m.score, m.index))
    return matches
