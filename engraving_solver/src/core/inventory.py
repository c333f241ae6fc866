"""Fixed-size engraving inventory."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from .errors import EngravingInputError
from .grid import EngravingGrid
from .pieces import InventoryPiece, PieceInstance

INVENTORY_SIZE = 8


class Inventory:
    """Eight ordered slots, each empty or holding a :class:`PieceInstance`.

    Pieces placed on a grid stay in their slot; the slot is reported as
    locked while the grid holds a piece with that ``source_inventory_index``.
    """

    def __init__(self, slots: Optional[Sequence[Optional[PieceInstance]]] = None) -> None:
        slots = list(slots or [])
        if len(slots) > INVENTORY_SIZE:
            raise EngravingInputError(f"inventory holds at most {INVENTORY_SIZE} pieces")
        self.slots: List[Optional[PieceInstance]] = slots + [None] * (INVENTORY_SIZE - len(slots))

    def __getitem__(self, index: int) -> Optional[PieceInstance]:
        return self.slots[index]

    def __len__(self) -> int:
        return sum(1 for p in self.slots if p is not None)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < INVENTORY_SIZE:
            raise EngravingInputError(f"inventory index must be 0..{INVENTORY_SIZE - 1}, got {index}")

    def set_slot(self, index: int, piece: Optional[PieceInstance]) -> None:
        self._check_index(index)
        self.slots[index] = piece

    def remove(self, index: int) -> Optional[PieceInstance]:
        self._check_index(index)
        piece, self.slots[index] = self.slots[index], None
        return piece

    def available(self) -> List[InventoryPiece]:
        """Return occupied slots tagged with their slot index."""
        return [InventoryPiece(p, i) for i, p in enumerate(self.slots) if p is not None]

    def locked_indices(self, grid: EngravingGrid) -> Set[int]:
        """Return slot indices whose piece is currently placed on ``grid``."""
        placed = {
            cell.piece.source_inventory_index
            for row in grid.cells
            for cell in row
            if cell.piece is not None
        }
        return {i for i, p in enumerate(self.slots) if p is not None and i in placed}

    def unlocked(self, grid: EngravingGrid) -> List[InventoryPiece]:
        locked = self.locked_indices(grid)
        return [p for p in self.available() if p.inventory_index not in locked]

    def return_pieces(self, grid: EngravingGrid) -> int:
        """Move placed pieces without a slot back into empty slots, then clear.

        Returns the number of pieces put back. Pieces that do not fit are
        dropped, matching the grid's "clear" action.
        """
        returned = 0
        locked = self.locked_indices(grid)
        for placed in grid.placements():
            if placed.source_inventory_index in locked:
                continue
            try:
                empty = self.slots.index(None)
            except ValueError:
                break
            self.slots[empty] = placed.piece
            returned += 1
        grid.clear()
        return returned

    # Serialisation -------------------------------------------------------

    def to_list(self) -> List[Optional[Dict[str, int]]]:
        return [p.to_dict() if p is not None else None for p in self.slots]

    @classmethod
    def from_list(cls, data: Iterable[Optional[Dict[str, Any]]], registry: Any) -> "Inventory":
        return cls([PieceInstance.from_dict(d, registry) if d else None for d in data])

    @classmethod
    def from_preset(cls, preset_id: str, registry: Any, presets: Optional[List[Dict[str, Any]]] = None) -> "Inventory":
        """Return the inventory of the built-in preset ``preset_id``."""
        if presets is None:
            from engraving_solver.src.data.shape_registry import load_presets

            presets = load_presets()
        for preset in presets:
            if preset.get("id") == preset_id or preset.get("name") == preset_id:
                return cls.from_list(preset.get("pieces", []), registry)
        raise EngravingInputError(f"unknown inventory preset {preset_id!r}")


__all__ = ["INVENTORY_SIZE", "Inventory"]
