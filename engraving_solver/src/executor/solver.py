"""Combinatorial auto-solver for engraving grids.

The solver enumerates piece subsets of increasing size and tries to tile
the grid with each subset by backtracking from the first empty active cell.
Only one solution is kept per shape-type signature (for example
``"L-Shape:2,Line:2"``), so rarity and level variants of the same tiling
are not reported twice.
"""

from __future__ import annotations

from functools import lru_cache
from itertools import combinations
from typing import Callable, List, Optional, Sequence, Set, Tuple

from engraving_solver.src.core.errors import EngravingInputError, SolveCancelled
from engraving_solver.src.core.grid import EngravingGrid
from engraving_solver.src.core.grid_utils import can_place
from engraving_solver.src.core.pattern import ROTATIONS, Pattern, pattern_cells
from engraving_solver.src.core.pieces import InventoryPiece, PlacedPiece
from engraving_solver.src.core.solution import Placement, Solution, shape_type_signature
from engraving_solver.src.utils import config_loader
from engraving_solver.src.utils.logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=None)
def _filled(pattern: Pattern) -> Tuple[Tuple[int, int], ...]:
    return tuple(pattern_cells(pattern))


def min_pieces_needed(total_active: int, pieces: Sequence[InventoryPiece]) -> int:
    """Return the smallest subset size worth trying for ``total_active`` cells."""
    if not pieces:
        return 0
    avg_cells = sum(p.shape.cell_count for p in pieces) / len(pieces)
    return max(1, int(total_active // avg_cells))


def try_place_combination(grid: EngravingGrid, pieces: Sequence[InventoryPiece]) -> Optional[List[Placement]]:
    """Return placements tiling ``grid`` with exactly ``pieces``, or ``None``.

    ``grid`` is mutated during the search and restored before returning.
    """
    cells = grid.cells

    def _place(remaining: Tuple[InventoryPiece, ...], current: List[Placement]) -> Optional[List[Placement]]:
        if not remaining:
            return list(current) if grid.is_fully_covered() else None
        target = grid.first_empty_active_cell()
        if target is None:
            return None
        tr, tc = target
        for i, piece in enumerate(remaining):
            rest = remaining[:i] + remaining[i + 1 :]
            for rotation in ROTATIONS:
                pattern = piece.shape.rotated(rotation)
                filled = _filled(pattern)
                for pr, pc in filled:
                    ar, ac = tr - pr, tc - pc
                    if not can_place(grid, pattern, ar, ac):
                        continue
                    placed = PlacedPiece(piece.piece, rotation, ar, ac, piece.inventory_index)
                    for fr, fc in filled:
                        cells[ar + fr][ac + fc].piece = placed
                    current.append(Placement(piece, rotation, ar, ac))
                    result = _place(rest, current)
                    current.pop()
                    for fr, fc in filled:
                        cells[ar + fr][ac + fc].piece = None
                    if result is not None:
                        return result
        return None

    return _place(tuple(pieces), [])


def solve(
    grid: EngravingGrid,
    inventory_pieces: Sequence[InventoryPiece],
    *,
    max_solutions: Optional[int] = None,
    max_pieces: Optional[int] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> List[Solution]:
    """Return tilings of ``grid`` built from ``inventory_pieces``.

    Parameters
    ----------
    grid:
        Grid to cover. Pieces already on it are ignored and the grid itself
        is never modified.
    inventory_pieces:
        Distinct available pieces tagged with their inventory slot.
    max_solutions:
        Stop once this many solutions are collected. Defaults to
        ``config_loader.STANDALONE_MAX_SOLUTIONS`` (uncapped unless set).
    max_pieces:
        Largest subset size tried, capped by the inventory capacity.
    should_stop:
        Polled before each subset size; returning ``True`` raises
        :class:`SolveCancelled`.

    Returns
    -------
    list of Solution
        Empty when no subset covers the grid.
    """
    if not isinstance(grid, EngravingGrid):
        raise EngravingInputError("solve expects an EngravingGrid")
    pieces = list(inventory_pieces)
    for p in pieces:
        if not isinstance(p, InventoryPiece):
            raise EngravingInputError(f"inventory entries must be InventoryPiece, got {type(p).__name__}")
    if not pieces:
        return []
    if max_solutions is None:
        max_solutions = config_loader.STANDALONE_MAX_SOLUTIONS
    if max_pieces is None:
        max_pieces = config_loader.MAX_PIECES

    working = grid.copy()
    working.clear()
    total_active = working.count_active()
    if total_active == 0:
        return []

    min_pieces = min_pieces_needed(total_active, pieces)
    max_to_try = min(len(pieces), max_pieces)
    logger.debug(
        f"SOLVER {total_active} active slots, trying {min_pieces}..{max_to_try} of {len(pieces)} pieces"
    )

    solutions: List[Solution] = []
    found: Set[str] = set()

    def _capped() -> bool:
        return max_solutions is not None and len(solutions) >= max_solutions

    for size in range(min_pieces, max_to_try + 1):
        if _capped():
            break
        if should_stop is not None and should_stop():
            logger.info(f"SOLVER cancelled before trying {size} piece(s)")
            raise SolveCancelled(f"solve cancelled at subset size {size}")
        found_here = 0
        skipped = 0
        for combo in combinations(pieces, size):
            if _capped():
                break
            signature = shape_type_signature(combo)
            if signature in found:
                skipped += 1
                continue
            # a tiling needs exactly as many cells as there are active slots
            if sum(p.shape.cell_count for p in combo) != total_active:
                continue
            placements = try_place_combination(working, combo)
            if placements is not None:
                found.add(signature)
                solutions.append(Solution(tuple(placements)))
                found_here += 1
        logger.debug(f"SOLVER size {size}: {found_here} new signature(s), {skipped} duplicate combination(s)")

    logger.info(f"SOLVER found {len(solutions)} solution(s)")
    return solutions


__all__ = ["solve", "try_place_combination", "min_pieces_needed"]
