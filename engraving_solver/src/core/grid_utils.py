"""Placement validation and grid mutation helpers."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import EngravingInputError
from .grid import EngravingGrid
from .pattern import Pattern, pattern_cells
from .pieces import PlacedPiece
from .solution import Solution


def covered_cells(pattern: Pattern, anchor_row: int, anchor_col: int) -> List[Tuple[int, int]]:
    """Return grid coordinates covered by ``pattern`` placed at the anchor."""
    return [(anchor_row + pr, anchor_col + pc) for pr, pc in pattern_cells(pattern)]


def can_place(
    grid: EngravingGrid,
    pattern: Pattern,
    anchor_row: int,
    anchor_col: int,
    exempt_anchor: Optional[Tuple[int, int]] = None,
) -> bool:
    """Return ``True`` if ``pattern`` fits at ``(anchor_row, anchor_col)``.

    Every covered cell must be in bounds, active and free. A cell held by the
    piece anchored at ``exempt_anchor`` counts as free so a piece can be
    repositioned over its own old footprint.
    """
    if not isinstance(grid, EngravingGrid):
        raise EngravingInputError("can_place expects an EngravingGrid")
    if not pattern or not pattern[0]:
        raise EngravingInputError("pattern cannot be empty")
    size = grid.size
    cells = grid.cells
    for pr, row in enumerate(pattern):
        for pc, filled in enumerate(row):
            if not filled:
                continue
            r = anchor_row + pr
            c = anchor_col + pc
            if r < 0 or c < 0 or r >= size or c >= size:
                return False
            cell = cells[r][c]
            if not cell.active:
                return False
            if cell.piece is not None:
                if exempt_anchor is None or cell.piece.anchor != tuple(exempt_anchor):
                    return False
    return True


def remove_piece(grid: EngravingGrid, anchor: Tuple[int, int]) -> int:
    """Clear every cell holding the piece anchored at ``anchor``; return count."""
    removed = 0
    anchor = tuple(anchor)
    for row in grid.cells:
        for cell in row:
            if cell.piece is not None and cell.piece.anchor == anchor:
                cell.piece = None
                removed += 1
    return removed


def place_piece(
    grid: EngravingGrid,
    placed: PlacedPiece,
    exempt_anchor: Optional[Tuple[int, int]] = None,
) -> None:
    """Write ``placed`` into every cell it covers.

    When ``exempt_anchor`` is given the piece at that anchor is lifted first,
    which is how a piece already on the grid is moved or rotated.
    """
    if placed.anchor is None:
        raise EngravingInputError("placed piece needs anchor coordinates")
    pattern = placed.pattern()
    if not can_place(grid, pattern, placed.anchor_row, placed.anchor_col, exempt_anchor):
        raise EngravingInputError(
            f"{placed.piece.shape.name} does not fit at {placed.anchor} rotated {placed.rotation}"
        )
    if exempt_anchor is not None:
        remove_piece(grid, exempt_anchor)
    for r, c in covered_cells(pattern, placed.anchor_row, placed.anchor_col):
        grid.cells[r][c].piece = placed


def apply_solution(grid: EngravingGrid, solution: Solution) -> EngravingGrid:
    """Clear ``grid`` and place every placement of ``solution`` onto it."""
    grid.clear()
    for placement in solution:
        place_piece(grid, placement.to_placed_piece())
    return grid


__all__ = ["covered_cells", "can_place", "place_piece", "remove_piece", "apply_solution"]
