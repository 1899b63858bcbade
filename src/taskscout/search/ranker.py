"""Ranking of a scan snapshot against a query.

Ranking is a pure pass over an immutable ``ScanSnapshot``:

1. Parse filter tokens (``#tag``, ``source:``, ``@workspace``) out of the
   query and drop commands that fail them.
2. Score the remaining fuzzy pattern against each command's ``match_text``.
   Non-matches and scores below ``min_score`` are dropped. An empty pattern
   keeps everything with a neutral score.
3. Add a proximity bonus when context is enabled and a current directory is
   known.
4. Sort by (score desc, proximity desc, discovery index asc). The index makes
   the order total, so equal inputs always give equal output.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from taskscout.config import ScanConfig
from taskscout.discovery.models import ScanSnapshot
from taskscout.scanners.base import Command
from taskscout.search.context import proximity_bonus
from taskscout.search.fuzzy import FuzzyMatcher
from taskscout.search.query import parse_query


@dataclass(frozen=True)
class SearchResult:
    """One ranked command with the numbers that placed it."""

    command: Command
    score: float
    proximity: float
    index: int

    @property
    def sort_key(self) -> tuple[float, float, int]:
        return (-self.score, -self.proximity, self.index)


def rank(
    query: str,
    snapshot: ScanSnapshot,
    context_enabled: bool = True,
    current_dir: Path | None = None,
    config: ScanConfig | None = None,
) -> list[SearchResult]:
    """Rank snapshot entries for ``query`` and return scored results."""
    config = config or ScanConfig()
    parsed = parse_query(query)
    matcher = FuzzyMatcher(config.case_mode)
    use_context = context_enabled and current_dir is not None

    results: list[SearchResult] = []
    for entry in snapshot.entries:
        command = entry.command
        if parsed.has_filters and not parsed.matches(command):
            continue
        if parsed.pattern.strip():
            score = matcher.score(parsed.pattern, command.match_text)
            if score is None or score < config.min_score:
                continue
        else:
            score = 0.0
        proximity = 0.0
        if use_context:
            proximity = proximity_bonus(current_dir, entry.origin_dir, snapshot.root)
        results.append(SearchResult(command, score, proximity, entry.index))

    results.sort(key=lambda result: result.sort_key)
    return results


def search(
    query: str,
    snapshot: ScanSnapshot,
    context_enabled: bool = True,
    current_dir: Path | None = None,
    config: ScanConfig | None = None,
) -> list[Command]:
    """Return matching commands, best first.

    Args:
        query: Fuzzy pattern, optionally mixed with filter tokens.
        snapshot: Result of a previous scan.
        context_enabled: Whether directory proximity breaks score ties.
        current_dir: Invocation directory. Without it there is no proximity
            term.
        config: Supplies ``min_score`` and ``case_mode``.

    Returns:
        Commands ordered by score, proximity, then discovery order.
    """
    return [
        result.command
        for result in rank(query, snapshot, context_enabled, current_dir, config)
    ]
