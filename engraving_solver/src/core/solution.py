"""Placements and solutions produced by the auto-solver."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .pattern import Pattern
from .pieces import InventoryPiece, PieceInstance, PlacedPiece


@dataclass(frozen=True)
class Placement:
    """One piece at one rotation and anchor."""

    piece: InventoryPiece
    rotation: int
    anchor_row: int
    anchor_col: int

    def pattern(self) -> Pattern:
        return self.piece.shape.rotated(self.rotation)

    def to_placed_piece(self) -> PlacedPiece:
        return PlacedPiece(
            piece=self.piece.piece,
            rotation=self.rotation,
            anchor_row=self.anchor_row,
            anchor_col=self.anchor_col,
            source_inventory_index=self.piece.inventory_index,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "piece": dict(self.piece.piece.to_dict(), inventoryIndex=self.piece.inventory_index),
            "rotation": self.rotation,
            "anchorRow": self.anchor_row,
            "anchorCol": self.anchor_col,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry: Any) -> "Placement":
        piece_data = data["piece"]
        return cls(
            piece=InventoryPiece(
                PieceInstance.from_dict(piece_data, registry),
                int(piece_data.get("inventoryIndex", 0)),
            ),
            rotation=int(data["rotation"]),
            anchor_row=int(data["anchorRow"]),
            anchor_col=int(data["anchorCol"]),
        )


def shape_type_signature(pieces: Iterable[Any]) -> str:
    """Return the shape-name multiset of ``pieces``, e.g. ``"L-Shape:2,Line:1"``.

    Accepts :class:`InventoryPiece`, :class:`PieceInstance` or
    :class:`Placement` items; rarity and level are ignored.
    """
    counts: Counter = Counter()
    for item in pieces:
        if isinstance(item, Placement):
            item = item.piece
        counts[item.shape.name] += 1
    return ",".join(f"{name}:{counts[name]}" for name in sorted(counts))


@dataclass(frozen=True)
class Solution:
    """Ordered placements covering every active cell exactly once."""

    placements: Tuple[Placement, ...]

    def __iter__(self) -> Iterator[Placement]:
        return iter(self.placements)

    def __len__(self) -> int:
        return len(self.placements)

    def shape_signature(self) -> str:
        return shape_type_signature(self.placements)

    def shape_ids(self) -> List[int]:
        return [p.piece.piece.shape_id for p in self.placements]

    def is_single_shape(self) -> bool:
        """Return ``True`` if every placement uses the same shape type."""
        return len({p.piece.shape.name for p in self.placements}) == 1

    def to_dict(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.placements]

    @classmethod
    def from_dict(cls, data: Iterable[Dict[str, Any]], registry: Any) -> "Solution":
        return cls(tuple(Placement.from_dict(p, registry) for p in data))


__all__ = ["Placement", "Solution", "shape_type_signature"]
