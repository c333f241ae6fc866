"""Visualization utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from engraving_solver.src.core.grid import EngravingGrid  # noqa: E402
from engraving_solver.src.core.grid_utils import apply_solution  # noqa: E402
from engraving_solver.src.core.solution import Solution  # noqa: E402


def render_grid(grid: EngravingGrid) -> str:
    """Return ``grid`` as text: ``.`` inactive, ``_`` empty, shape initial otherwise."""
    lines = []
    for row in grid.cells:
        chars = []
        for cell in row:
            if not cell.active:
                chars.append(".")
            elif cell.piece is None:
                chars.append("_")
            else:
                chars.append(cell.piece.piece.shape.name[0])
        lines.append(" ".join(chars))
    return "\n".join(lines)


def _label_matrix(grid: EngravingGrid) -> np.ndarray:
    labels = np.full((grid.size, grid.size), -1, dtype=int)
    order = {}
    for r, row in enumerate(grid.cells):
        for c, cell in enumerate(row):
            if not cell.active:
                continue
            if cell.piece is None:
                labels[r, c] = 0
                continue
            key = cell.piece.anchor if cell.piece.anchor is not None else id(cell.piece)
            labels[r, c] = order.setdefault(key, len(order) + 1)
    return labels


def plot_solution(grid: EngravingGrid, solution: Optional[Solution], path: str | Path) -> Path:
    """Save a picture of ``solution`` applied to a copy of ``grid`` at ``path``."""
    board = grid.copy()
    if solution is not None:
        apply_solution(board, solution)
    labels = _label_matrix(board)
    masked = np.ma.masked_less(labels, 0)

    fig, ax = plt.subplots(figsize=(board.size, board.size))
    ax.imshow(masked, cmap="tab10", interpolation="nearest", vmin=0, vmax=10)
    for r, row in enumerate(board.cells):
        for c, cell in enumerate(row):
            if cell.piece is not None:
                ax.text(c, r, cell.piece.piece.shape.name[0], ha="center", va="center")
    ax.axis("off")
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out)
    plt.close(fig)
    return out


__all__ = ["render_grid", "plot_solution"]
