"""Subsequence fuzzy matcher.

The query's characters (whitespace ignored) must appear in the candidate
text in order. Among all such alignments the matcher picks the best one by
dynamic programming and returns its score:

- every matched character earns ``SCORE_MATCH``;
- a match at the start of the text or right after a separator earns
  ``BONUS_BOUNDARY``;
- a match directly following the previous match earns ``BONUS_CONSECUTIVE``;
- skipped characters between two matches cost ``PENALTY_GAP`` each, capped
  at ``MAX_GAP_PENALTY`` per gap. Leading and trailing text is free.

The cap is lower than ``SCORE_MATCH``, so any successful match scores above
zero and the default ``min_score`` of 0.0 keeps every match. An empty query
scores ``0.0`` against everything.
"""

from __future__ import annotations

from taskscout.config import CaseMode

SEPARATORS = frozenset(" -_/:.")

SCORE_MATCH = 1.0
BONUS_BOUNDARY = 0.8
BONUS_CONSECUTIVE = 1.0
PENALTY_GAP = 0.1
MAX_GAP_PENALTY = 0.8

# Gap length from which the penalty stays at MAX_GAP_PENALTY.
_CAPPED_GAP = round(MAX_GAP_PENALTY / PENALTY_GAP)
_UNREACHABLE = float("-inf")


def is_boundary(text: str, index: int) -> bool:
    """True when ``text[index]`` starts the text or follows a separator."""
    return index == 0 or text[index - 1] in SEPARATORS


class FuzzyMatcher:
    """Scores queries against candidate text.

    The matcher holds only its case policy, so one instance can be shared
    across threads.
    """

    def __init__(self, case_mode: CaseMode | str = CaseMode.SMART_CASE) -> None:
        self.case_mode = CaseMode(case_mode)

    def is_case_sensitive(self, query: str) -> bool:
        if self.case_mode is CaseMode.CASE_SENSITIVE:
            return True
        if self.case_mode is CaseMode.IGNORE_CASE:
            return False
        return any(ch.isupper() for ch in query)

    def score(self, query: str, text: str) -> float | None:
        """Score ``query`` against ``text``.

        Returns:
            The best alignment score, ``0.0`` for an empty query, or None
            when the query is not a subsequence of the text.
        """
        needle = [ch for ch in query if not ch.isspace()]
        if not needle:
            return 0.0
        haystack = list(text)
        if not self.is_case_sensitive(query):
            needle = [ch.lower() for ch in needle]
            haystack = [ch.lower() for ch in haystack]
        if not _is_subsequence(needle, haystack):
            return None

        size = len(haystack)
        bonus = [BONUS_BOUNDARY if is_boundary(text, j) else 0.0 for j in range(size)]

        # best[j]: best score of the query prefix so far with its last
        # character matched at text position j.
        best = [
            SCORE_MATCH + bonus[j] if haystack[j] == needle[0] else _UNREACHABLE
            for j in range(size)
        ]
        for i in range(1, len(needle)):
            current = [_UNREACHABLE] * size
            far = _UNREACHABLE  # best[k] over gaps long enough to hit the cap
            for j in range(size):
                k_far = j - 1 - _CAPPED_GAP
                if k_far >= 0 and best[k_far] > far:
                    far = best[k_far]
                if j < i or haystack[j] != needle[i]:
                    continue
                candidate = far - MAX_GAP_PENALTY
                if best[j - 1] != _UNREACHABLE:
                    candidate = max(candidate, best[j - 1] + BONUS_CONSECUTIVE)
                for gap in range(1, _CAPPED_GAP):
                    k = j - 1 - gap
                    if k < 0:
                        break
                    if best[k] != _UNREACHABLE:
                        candidate = max(candidate, best[k] - PENALTY_GAP * gap)
                if candidate != _UNREACHABLE:
                    current[j] = candidate + SCORE_MATCH + bonus[j]
            best = current

        result = max(best)
        return None if result == _UNREACHABLE else round(result, 6)


def _is_subsequence(needle: list[str], haystack: list[str]) -> bool:
    position = 0
    for ch in haystack:
        if ch == needle[position]:
            position += 1
            if position == len(needle):
                return True
    return False
