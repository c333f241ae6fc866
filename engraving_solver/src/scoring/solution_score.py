"""Scoring of a candidate's solution set."""

from __future__ import annotations

from typing import Optional, Sequence

from engraving_solver.src.core.solution import Solution
from engraving_solver.src.utils import config_loader


def same_piece_count(solutions: Sequence[Solution]) -> int:
    """Return how many solutions use a single shape type throughout."""
    return sum(1 for s in solutions if s.is_single_shape())


def score_candidate(
    solutions: Sequence[Solution],
    tier: int,
    *,
    same_piece_weight: Optional[int] = None,
    tier_weight: Optional[int] = None,
) -> int:
    """Return ``count + 2 * same_piece + 10 * tier`` with configurable weights.

    ``tier`` is weighted so progression rank outweighs small differences in
    how many ways a candidate can be filled.
    """
    if same_piece_weight is None:
        same_piece_weight = config_loader.SAME_PIECE_WEIGHT
    if tier_weight is None:
        tier_weight = config_loader.TIER_WEIGHT
    return len(solutions) + same_piece_weight * same_piece_count(solutions) + tier_weight * tier


__all__ = ["same_piece_count", "score_candidate"]
