"""Memoisation backends for solver results."""

from .solution_cache import (
    inventory_signature,
    cache_key,
    SolutionCache,
    InMemorySolutionCache,
    JsonSolutionCache,
)
from .ranking_cache import RankingCache

__all__ = [
    "inventory_signature",
    "cache_key",
    "SolutionCache",
    "InMemorySolutionCache",
    "JsonSolutionCache",
    "RankingCache",
]
