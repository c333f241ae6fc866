"""Engraving grid model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import EngravingInputError
from .pieces import PlacedPiece


@dataclass
class Cell:
    """One grid slot: inactive, active and empty, or active and occupied."""

    active: bool = False
    piece: Optional[PlacedPiece] = None

    @property
    def is_empty(self) -> bool:
        return self.active and self.piece is None


class EngravingGrid:
    """Square matrix of :class:`Cell` objects for one soul weapon."""

    def __init__(self, cells: List[List[Cell]]) -> None:
        if not cells or not cells[0]:
            raise EngravingInputError("Grid cannot be empty")
        size = len(cells)
        for r, row in enumerate(cells):
            if len(row) != size:
                raise EngravingInputError("Grid must be square")
            for c, cell in enumerate(row):
                if cell.piece is not None and not cell.active:
                    raise EngravingInputError(f"inactive cell ({r}, {c}) cannot hold a piece")
        self.cells = cells

    # Construction --------------------------------------------------------

    @classmethod
    def empty(cls, size: int) -> "EngravingGrid":
        """Return a ``size`` x ``size`` grid with every cell inactive."""
        if size < 1:
            raise EngravingInputError("grid size must be positive")
        return cls([[Cell() for _ in range(size)] for _ in range(size)])

    @classmethod
    def from_active_slots(cls, size: int, slots: Iterable[Tuple[int, int]]) -> "EngravingGrid":
        """Return an empty grid whose ``slots`` coordinates are active."""
        grid = cls.empty(size)
        for row, col in slots:
            if not grid.in_bounds(row, col):
                raise EngravingInputError(f"active slot ({row}, {col}) outside {size}x{size} grid")
            grid.cells[row][col].active = True
        return grid

    @classmethod
    def from_mask(cls, mask: Sequence[Sequence[Any]]) -> "EngravingGrid":
        """Return an empty grid activated wherever ``mask`` is truthy."""
        return cls([[Cell(active=bool(v)) for v in row] for row in mask])

    # Accessors -----------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self.cells)

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def active_cells(self) -> List[Tuple[int, int]]:
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell.active
        ]

    def count_active(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.active)

    def first_empty_active_cell(self) -> Optional[Tuple[int, int]]:
        """Return the first active unoccupied cell in row-major order."""
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell.active and cell.piece is None:
                    return (r, c)
        return None

    def is_fully_covered(self) -> bool:
        """Return ``True`` if every active cell holds a piece."""
        return all(not cell.active or cell.piece is not None for row in self.cells for cell in row)

    def placements(self) -> List[PlacedPiece]:
        """Return one :class:`PlacedPiece` per distinct anchor, row-major."""
        seen = set()
        out: List[PlacedPiece] = []
        for row in self.cells:
            for cell in row:
                p = cell.piece
                if p is None:
                    continue
                key = p.anchor if p.anchor is not None else id(p)
                if key in seen:
                    continue
                seen.add(key)
                out.append(p)
        return out

    # Mutation ------------------------------------------------------------

    def copy(self) -> "EngravingGrid":
        """Return a working copy; cells are new, piece metadata is shared."""
        return EngravingGrid([[Cell(c.active, c.piece) for c in row] for row in self.cells])

    def clear(self) -> None:
        """Remove every piece, keeping the active layout."""
        for row in self.cells:
            for cell in row:
                cell.piece = None

    # Serialisation -------------------------------------------------------

    def to_dict(self) -> List[List[Dict[str, Any]]]:
        """Return the grid in the ``gridState`` layout used by saved builds."""
        return [
            [
                {"active": cell.active, "piece": cell.piece.to_dict() if cell.piece else None}
                for cell in row
            ]
            for row in self.cells
        ]

    @classmethod
    def from_dict(cls, data: Sequence[Sequence[Dict[str, Any]]], registry: Any) -> "EngravingGrid":
        cells = [
            [
                Cell(
                    active=bool(entry.get("active", False)),
                    piece=PlacedPiece.from_dict(entry["piece"], registry) if entry.get("piece") else None,
                )
                for entry in row
            ]
            for row in data
        ]
        return cls(cells)

    def __repr__(self) -> str:
        return f"EngravingGrid(size={self.size}, active={self.count_active()})"


__all__ = ["Cell", "EngravingGrid"]
