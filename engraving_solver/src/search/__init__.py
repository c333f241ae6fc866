from .best_target import (
    SearchOptions,
    RankedResult,
    SearchReport,
    BestTargetSearch,
    unlocked_up_to,
    find_best_targets,
    find_best_targets_async,
)

__all__ = [
    "SearchOptions",
    "RankedResult",
    "SearchReport",
    "BestTargetSearch",
    "unlocked_up_to",
    "find_best_targets",
    "find_best_targets_async",
]
