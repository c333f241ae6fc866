"""Rank weapons by how well an inventory fills their engraving grid."""

from __future__ import annotations

import asyncio
import inspect
import time
from contextlib import nullcontext
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from engraving_solver.src.core.pieces import InventoryPiece
from engraving_solver.src.core.solution import Solution
from engraving_solver.src.core.template import Candidate, GridTemplate
from engraving_solver.src.executor.solver import solve
from engraving_solver.src.memory.ranking_cache import RankingCache
from engraving_solver.src.memory.solution_cache import InMemorySolutionCache, SolutionCache, cache_key
from engraving_solver.src.scoring.solution_score import same_piece_count, score_candidate
from engraving_solver.src.utils import config_loader
from engraving_solver.src.utils.logger import get_logger

logger = get_logger(__name__)

LookupResult = Optional[GridTemplate]
GridLookup = Callable[[Candidate], Union[LookupResult, Awaitable[LookupResult]]]


def unlocked_up_to(highest_id: int) -> Callable[[Candidate], bool]:
    """Return a predicate admitting candidates with ``candidate_id <= highest_id``."""

    def _allowed(candidate: Candidate) -> bool:
        return candidate.candidate_id <= highest_id

    return _allowed


def _default_tier(candidate: Candidate) -> int:
    return candidate.candidate_id


@dataclass
class SearchOptions:
    """Tunables of a best-target search; ``None`` falls back to the config."""

    max_solutions_per_candidate: Optional[int] = None
    time_budget_ms: Optional[int] = None
    preview_size: Optional[int] = None
    tier_lookup: Callable[[Candidate], int] = _default_tier
    allowed: Optional[Callable[[Candidate], bool]] = None
    clock: Callable[[], float] = time.monotonic

    def __post_init__(self) -> None:
        if self.max_solutions_per_candidate is None:
            self.max_solutions_per_candidate = config_loader.MAX_SOLUTIONS_PER_CANDIDATE
        if self.time_budget_ms is None:
            self.time_budget_ms = config_loader.TIME_BUDGET_MS
        if self.preview_size is None:
            self.preview_size = config_loader.PREVIEW_SIZE


@dataclass
class RankedResult:
    candidate: Candidate
    template: GridTemplate
    score: int
    solution_count: int
    same_piece_count: int
    solutions: List[Solution]
    total_active_slots: int

    @property
    def source(self) -> str:
        return self.template.source

    @property
    def submitted_by(self) -> Optional[str]:
        return self.template.submitted_by


@dataclass
class SearchReport:
    results: List[RankedResult] = field(default_factory=list)
    evaluated: int = 0
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    timed_out: bool = False
    elapsed_s: float = 0.0


class BestTargetSearch:
    """Solve every allowed candidate against one inventory and rank them.

    Grid templates come from the candidate itself or, when absent, from
    ``grid_lookup``. Lookup failures are logged and the candidate skipped.
    Solver results are memoised in ``cache`` under :func:`cache_key`.
    """

    def __init__(
        self,
        options: Optional[SearchOptions] = None,
        cache: Optional[SolutionCache] = None,
        grid_lookup: Optional[GridLookup] = None,
    ) -> None:
        self.options = options or SearchOptions()
        self.cache = cache if cache is not None else InMemorySolutionCache()
        self.grid_lookup = grid_lookup

    # ------------------------------------------------------------------
    # Per-candidate steps
    # ------------------------------------------------------------------
    def _solutions_for(self, candidate: Candidate, template: GridTemplate, pieces: Sequence[InventoryPiece]) -> List[Solution]:
        key = cache_key(candidate.candidate_id, pieces)
        lock = self.cache.lock_for(key) if hasattr(self.cache, "lock_for") else nullcontext()
        with lock:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info(f"CACHE hit for {candidate.name}")
                return cached
            solutions = solve(
                template.build_grid(),
                pieces,
                max_solutions=self.options.max_solutions_per_candidate,
            )
            self.cache.set(key, solutions)
        return solutions

    def evaluate(self, candidate: Candidate, template: GridTemplate, pieces: Sequence[InventoryPiece]) -> Optional[RankedResult]:
        """Return the ranked entry for ``candidate`` or ``None`` if unsolvable."""
        solutions = self._solutions_for(candidate, template, pieces)
        if not solutions:
            logger.info(f"SEARCH {candidate.name}: no solutions")
            return None
        tier = self.options.tier_lookup(candidate)
        same = same_piece_count(solutions)
        score = score_candidate(solutions, tier)
        logger.info(
            f"SEARCH {candidate.name}: {len(solutions)} solution(s), {same} same-piece, tier {tier}, score {score}"
        )
        return RankedResult(
            candidate=candidate,
            template=template,
            score=score,
            solution_count=len(solutions),
            same_piece_count=same,
            solutions=list(solutions[: self.options.preview_size]),
            total_active_slots=len(template.active_slots),
        )

    def _allowed(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        if self.options.allowed is None:
            return list(candidates)
        return [c for c in candidates if self.options.allowed(c)]

    def _lookup(self, candidate: Candidate) -> Any:
        if candidate.template is not None:
            return candidate.template
        if self.grid_lookup is None:
            return None
        return self.grid_lookup(candidate)

    def _skip(self, report: SearchReport, candidate: Candidate, reason: str) -> None:
        report.skipped.append((candidate.name, reason))

    def _lookup_failed(self, report: SearchReport, candidate: Candidate, exc: Exception) -> None:
        logger.error(f"SEARCH grid lookup failed for {candidate.name}: {exc}")
        self._skip(report, candidate, f"lookup failed: {exc}")

    def _resolve(self, report: SearchReport, candidate: Candidate) -> LookupResult:
        try:
            template = self._lookup(candidate)
            if inspect.isawaitable(template):
                if inspect.iscoroutine(template):
                    template.close()
                raise TypeError("asynchronous grid lookup requires run_async")
        except Exception as exc:
            self._lookup_failed(report, candidate, exc)
            return None
        if template is None:
            self._skip(report, candidate, "no grid data")
        return template

    async def _resolve_async(self, report: SearchReport, candidate: Candidate) -> LookupResult:
        try:
            template = self._lookup(candidate)
            if inspect.isawaitable(template):
                template = await template
        except Exception as exc:
            self._lookup_failed(report, candidate, exc)
            return None
        if template is None:
            self._skip(report, candidate, "no grid data")
        return template

    def _budget_spent(self, report: SearchReport, start: float) -> bool:
        """Return ``True`` and mark the report once the time budget is used up."""
        if (self.options.clock() - start) * 1000.0 <= self.options.time_budget_ms:
            return False
        logger.warning(f"SEARCH time budget of {self.options.time_budget_ms} ms reached, stopping")
        report.timed_out = True
        return True

    def _finish(self, report: SearchReport, start: float) -> SearchReport:
        # sorted() is stable, equal scores keep candidate order
        report.results = sorted(report.results, key=lambda r: r.score, reverse=True)
        report.elapsed_s = self.options.clock() - start
        logger.info(
            f"SEARCH complete in {report.elapsed_s:.1f}s: {len(report.results)} ranked, "
            f"{report.evaluated} evaluated, {len(report.skipped)} skipped"
        )
        return report

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run(self, candidates: Iterable[Candidate], pieces: Sequence[InventoryPiece]) -> SearchReport:
        """Evaluate ``candidates`` sequentially and return the ranked report.

        The budget is checked after every candidate, skipped ones included.
        """
        report = SearchReport()
        pieces = list(pieces)
        start = self.options.clock()
        if not pieces:
            return self._finish(report, start)
        for candidate in self._allowed(candidates):
            template = self._resolve(report, candidate)
            if template is not None:
                report.evaluated += 1
                result = self.evaluate(candidate, template, pieces)
                if result is not None:
                    report.results.append(result)
            if self._budget_spent(report, start):
                break
        return self._finish(report, start)

    async def run_async(
        self,
        candidates: Iterable[Candidate],
        pieces: Sequence[InventoryPiece],
        executor: Any = None,
    ) -> SearchReport:
        """Like :meth:`run` but awaits lookups and solves in ``executor``."""
        report = SearchReport()
        pieces = list(pieces)
        start = self.options.clock()
        if not pieces:
            return self._finish(report, start)
        loop = asyncio.get_running_loop()
        for candidate in self._allowed(candidates):
            template = await self._resolve_async(report, candidate)
            if template is not None:
                report.evaluated += 1
                result = await loop.run_in_executor(executor, self.evaluate, candidate, template, pieces)
                if result is not None:
                    report.results.append(result)
            if self._budget_spent(report, start):
                break
        return self._finish(report, start)


def _prepare(
    options: Optional[SearchOptions], highest_unlocked: Optional[int]
) -> SearchOptions:
    options = options or SearchOptions()
    if highest_unlocked is not None and options.allowed is None:
        options = replace(options, allowed=unlocked_up_to(highest_unlocked))
    return options


def find_best_targets(
    candidates: Iterable[Candidate],
    inventory_pieces: Sequence[InventoryPiece],
    options: Optional[SearchOptions] = None,
    *,
    cache: Optional[SolutionCache] = None,
    grid_lookup: Optional[GridLookup] = None,
    ranking_cache: Optional[RankingCache] = None,
    highest_unlocked: Optional[int] = None,
) -> List[RankedResult]:
    """Return candidates that ``inventory_pieces`` can fill, best first.

    ``highest_unlocked`` restricts the search to ``candidate_id`` up to that
    value unless ``options.allowed`` is already set. A ``ranking_cache``
    returns a previous complete ranking for the same inventory and unlock
    level; rankings cut short by the time budget are not stored.
    """
    if ranking_cache is not None:
        hit = ranking_cache.get(inventory_pieces, highest_unlocked)
        if hit is not None:
            return hit
    search = BestTargetSearch(_prepare(options, highest_unlocked), cache=cache, grid_lookup=grid_lookup)
    report = search.run(candidates, inventory_pieces)
    if ranking_cache is not None and not report.timed_out:
        ranking_cache.set(inventory_pieces, highest_unlocked, report.results)
    return report.results


async def find_best_targets_async(
    candidates: Iterable[Candidate],
    inventory_pieces: Sequence[InventoryPiece],
    options: Optional[SearchOptions] = None,
    *,
    cache: Optional[SolutionCache] = None,
    grid_lookup: Optional[GridLookup] = None,
    ranking_cache: Optional[RankingCache] = None,
    highest_unlocked: Optional[int] = None,
    executor: Any = None,
) -> List[RankedResult]:
    """Asynchronous variant of :func:`find_best_targets`."""
    if ranking_cache is not None:
        hit = ranking_cache.get(inventory_pieces, highest_unlocked)
        if hit is not None:
            return hit
    search = BestTargetSearch(_prepare(options, highest_unlocked), cache=cache, grid_lookup=grid_lookup)
    report = await search.run_async(candidates, inventory_pieces, executor=executor)
    if ranking_cache is not None and not report.timed_out:
        ranking_cache.set(inventory_pieces, highest_unlocked, report.results)
    return report.results


__all__ = [
    "SearchOptions",
    "RankedResult",
    "SearchReport",
    "BestTargetSearch",
    "unlocked_up_to",
    "find_best_targets",
    "find_best_targets_async",
]
