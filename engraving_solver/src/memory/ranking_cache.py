"""Short-lived memo of a whole best-target ranking."""

from __future__ import annotations

import time
from typing import Any, Callable, Iterable, List, Optional

from engraving_solver.src.utils import config_loader
from engraving_solver.src.utils.logger import get_logger

from .solution_cache import inventory_signature

logger = get_logger(__name__)


class RankingCache:
    """Hold one ranking for the inventory and unlock level it was computed for.

    An entry expires after ``ttl_s`` seconds and is dropped as soon as it is
    read with a different inventory or highest unlocked weapon.
    """

    def __init__(self, ttl_s: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = config_loader.RANKING_TTL_S if ttl_s is None else ttl_s
        self.clock = clock
        self._entry: Optional[dict] = None

    def get(self, pieces: Iterable[Any], highest_unlocked: Optional[int]) -> Optional[List[Any]]:
        entry = self._entry
        if entry is None:
            return None
        if self.clock() - entry["timestamp"] > self.ttl_s:
            logger.info("CACHE ranking expired")
        elif entry["inventory"] != inventory_signature(pieces):
            logger.info("CACHE ranking invalid, inventory changed")
        elif entry["highest_unlocked"] != highest_unlocked:
            logger.info("CACHE ranking invalid, highest unlocked weapon changed")
        else:
            logger.info("CACHE ranking hit")
            return list(entry["results"])
        self._entry = None
        return None

    def set(self, pieces: Iterable[Any], highest_unlocked: Optional[int], results: List[Any]) -> None:
        self._entry = {
            "results": list(results),
            "timestamp": self.clock(),
            "inventory": inventory_signature(pieces),
            "highest_unlocked": highest_unlocked,
        }

    def clear(self) -> None:
        self._entry = None


__all__ = ["RankingCache"]
