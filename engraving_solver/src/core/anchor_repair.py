"""Reconstruct anchor coordinates for grids saved before anchors existed."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import List, Set, Tuple

from engraving_solver.src.utils.logger import get_logger

from .grid import EngravingGrid
from .pattern import pattern_cells

logger = get_logger(__name__)


def _flood_group(grid: EngravingGrid, start: Tuple[int, int], seen: Set[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Return 4-connected cells holding the same kind of anchorless piece."""
    origin = grid.cells[start[0]][start[1]].piece
    queue = deque([start])
    seen.add(start)
    group: List[Tuple[int, int]] = []
    while queue:
        r, c = queue.popleft()
        group.append((r, c))
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nr, nc = r + dr, c + dc
            if not grid.in_bounds(nr, nc) or (nr, nc) in seen:
                continue
            other = grid.cells[nr][nc].piece
            if other is None or other.anchor is not None:
                continue
            if origin.same_placement_kind(other):
                seen.add((nr, nc))
                queue.append((nr, nc))
    return sorted(group)


def repair_missing_anchors(grid: EngravingGrid) -> int:
    """Fill in anchors of pieces that lack them and return how many were fixed.

    Cells are grouped by flood fill over adjacent cells sharing shape,
    rotation, rarity and level. Within a group the first unclaimed cell in
    row-major order is the first filled cell of some piece, which fixes that
    piece's anchor. The anchor is accepted only when its whole footprint lies
    in the group and is still unclaimed. Cells no footprint explains are left
    without an anchor.
    """
    repaired = 0
    seen: Set[Tuple[int, int]] = set()
    for r in range(grid.size):
        for c in range(grid.size):
            piece = grid.cells[r][c].piece
            if piece is None or piece.anchor is not None or (r, c) in seen:
                continue
            group = _flood_group(grid, (r, c), seen)
            pattern = piece.pattern()
            filled = pattern_cells(pattern)
            first_pr, first_pc = filled[0]
            members = set(group)
            claimed: Set[Tuple[int, int]] = set()
            leftover: List[Tuple[int, int]] = []
            for head_r, head_c in group:
                if (head_r, head_c) in claimed:
                    continue
                anchor_r, anchor_c = head_r - first_pr, head_c - first_pc
                footprint = [(anchor_r + pr, anchor_c + pc) for pr, pc in filled]
                if any(cell not in members or cell in claimed for cell in footprint):
                    leftover.append((head_r, head_c))
                    continue
                fixed = replace(piece, anchor_row=anchor_r, anchor_col=anchor_c)
                for fr, fc in footprint:
                    grid.cells[fr][fc].piece = fixed
                claimed.update(footprint)
                repaired += 1
            if leftover:
                logger.warning(
                    f"REPAIR {len(leftover)} {piece.piece.shape.name} cell(s) near {group[0]} match no footprint"
                )
    if repaired:
        logger.info(f"REPAIR reconstructed anchors for {repaired} piece(s)")
    return repaired


__all__ = ["repair_missing_anchors"]
