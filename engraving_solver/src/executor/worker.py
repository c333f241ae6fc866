"""Background execution of solves with stale-result discarding."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from engraving_solver.src.core.grid import EngravingGrid
from engraving_solver.src.core.pieces import InventoryPiece
from engraving_solver.src.core.solution import Solution
from engraving_solver.src.utils.logger import get_logger

from .solver import solve

logger = get_logger(__name__)


@dataclass
class SolveJob:
    generation: int
    future: Future
    stop_event: threading.Event = field(repr=False)

    def cancel(self) -> None:
        self.stop_event.set()
        self.future.cancel()


class SolveWorker:
    """Run :func:`solve` off the calling thread.

    Each :meth:`submit` starts a new generation and signals the previous job
    to stop at its next subset-size boundary. Results of superseded jobs are
    dropped by :meth:`result_if_current`.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generation = 0
        self._current: Optional[SolveJob] = None

    def submit(
        self,
        grid: EngravingGrid,
        pieces: Sequence[InventoryPiece],
        max_solutions: Optional[int] = None,
    ) -> SolveJob:
        snapshot = grid.copy()
        frozen = list(pieces)
        stop_event = threading.Event()
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            self._generation += 1
            future = self._executor.submit(
                solve,
                snapshot,
                frozen,
                max_solutions=max_solutions,
                should_stop=stop_event.is_set,
            )
            job = SolveJob(self._generation, future, stop_event)
            self._current = job
        return job

    def is_current(self, job: SolveJob) -> bool:
        with self._lock:
            return job.generation == self._generation

    def result_if_current(self, job: SolveJob, timeout: Optional[float] = None) -> Optional[List[Solution]]:
        """Return the job's solutions, or ``None`` if it was superseded.

        Exceptions raised by the solve propagate unless the job is stale.
        """
        if not self.is_current(job):
            logger.info(f"SOLVER discarding stale result of generation {job.generation}")
            return None
        result = job.future.result(timeout=timeout)
        if not self.is_current(job):
            logger.info(f"SOLVER discarding stale result of generation {job.generation}")
            return None
        return result

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._current is not None:
                self._current.stop_event.set()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SolveWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


__all__ = ["SolveJob", "SolveWorker"]
