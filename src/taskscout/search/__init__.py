"""Fuzzy search and context-aware ranking over scan snapshots."""

from __future__ import annotations

from taskscout.search.context import path_distance, proximity_bonus
from taskscout.search.fuzzy import FuzzyMatcher
from taskscout.search.query import ParsedQuery, parse_query
from taskscout.search.ranker import SearchResult, rank, search

__all__ = [
    "FuzzyMatcher",
    "ParsedQuery",
    "SearchResult",
    "parse_query",
    "path_distance",
    "proximity_bonus",
    "rank",
    "search",
]
