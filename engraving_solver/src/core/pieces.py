"""Engraving shapes and the piece instances built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from .errors import EngravingInputError
from .pattern import ROTATIONS, Pattern, count_cells, normalize_pattern, rotate_pattern

MIN_PIECE_LEVEL = 1
MAX_PIECE_LEVEL = 50
RARITY_NAMES: Tuple[str, ...] = ("Common", "Great", "Rare", "Epic", "Legendary", "Mythic")


@dataclass(frozen=True)
class Shape:
    """Immutable polyomino definition with its stat tag."""

    id: int
    name: str
    stat_tag: str
    pattern: Pattern = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", normalize_pattern(self.pattern))

    @property
    def cell_count(self) -> int:
        return count_cells(self.pattern)

    def rotated(self, rotation: int) -> Pattern:
        """Return the pattern at ``rotation`` degrees (memoised per shape)."""
        return _rotated(self.pattern, rotation)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shape":
        try:
            return cls(
                id=int(data["id"]),
                name=str(data["name"]),
                stat_tag=str(data.get("statTag", data.get("stat_tag", ""))),
                pattern=data["pattern"],
            )
        except KeyError as exc:
            raise EngravingInputError(f"shape record missing field {exc}") from exc


@lru_cache(maxsize=None)
def _rotated(pattern: Pattern, rotation: int) -> Pattern:
    return rotate_pattern(pattern, rotation)


@dataclass(frozen=True)
class PieceInstance:
    """A concrete occurrence of a :class:`Shape` with rarity and level."""

    shape: Shape
    rarity: int = 0
    level: int = MIN_PIECE_LEVEL

    def __post_init__(self) -> None:
        if not 0 <= self.rarity < len(RARITY_NAMES):
            raise EngravingInputError(f"rarity must be 0..{len(RARITY_NAMES) - 1}, got {self.rarity}")
        if not MIN_PIECE_LEVEL <= self.level <= MAX_PIECE_LEVEL:
            raise EngravingInputError(
                f"level must be {MIN_PIECE_LEVEL}..{MAX_PIECE_LEVEL}, got {self.level}"
            )

    @property
    def shape_id(self) -> int:
        return self.shape.id

    @property
    def rarity_name(self) -> str:
        return RARITY_NAMES[self.rarity]

    def with_level(self, level: int) -> "PieceInstance":
        """Return a copy with ``level`` clamped into the valid range."""
        clamped = max(MIN_PIECE_LEVEL, min(MAX_PIECE_LEVEL, int(level)))
        return PieceInstance(self.shape, self.rarity, clamped)

    def to_dict(self) -> Dict[str, int]:
        return {"shapeId": self.shape_id, "rarity": self.rarity, "level": self.level}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry: Any) -> "PieceInstance":
        return cls(
            shape=registry.get(int(data["shapeId"])),
            rarity=int(data.get("rarity", 0)),
            level=int(data.get("level", MIN_PIECE_LEVEL)),
        )


@dataclass(frozen=True)
class InventoryPiece:
    """A piece tagged with the inventory slot it comes from."""

    piece: PieceInstance
    inventory_index: int

    @property
    def shape(self) -> Shape:
        return self.piece.shape


@dataclass(frozen=True)
class PlacedPiece:
    """Metadata stored in every grid cell covered by one placement.

    ``anchor_row``/``anchor_col`` are the rotated pattern's origin on the
    grid. They are ``None`` only for grids loaded from legacy data, see
    :func:`~engraving_solver.src.core.anchor_repair.repair_missing_anchors`.
    """

    piece: PieceInstance
    rotation: int = 0
    anchor_row: Optional[int] = None
    anchor_col: Optional[int] = None
    source_inventory_index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rotation not in ROTATIONS:
            raise EngravingInputError(f"rotation must be one of {ROTATIONS}, got {self.rotation!r}")

    @property
    def anchor(self) -> Optional[Tuple[int, int]]:
        if self.anchor_row is None or self.anchor_col is None:
            return None
        return (self.anchor_row, self.anchor_col)

    def pattern(self) -> Pattern:
        return self.piece.shape.rotated(self.rotation)

    def same_placement_kind(self, other: "PlacedPiece") -> bool:
        """Return ``True`` if ``other`` shares shape, rotation, rarity and level."""
        return (
            self.piece.shape_id == other.piece.shape_id
            and self.rotation == other.rotation
            and self.piece.rarity == other.piece.rarity
            and self.piece.level == other.piece.level
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.piece.to_dict())
        data.update(
            {
                "rotation": self.rotation,
                "anchorRow": self.anchor_row,
                "anchorCol": self.anchor_col,
                "inventoryIndex": self.source_inventory_index,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry: Any) -> "PlacedPiece":
        anchor_row = data.get("anchorRow")
        anchor_col = data.get("anchorCol")
        inv = data.get("inventoryIndex")
        return cls(
            piece=PieceInstance.from_dict(data, registry),
            rotation=int(data.get("rotation") or 0),
            anchor_row=None if anchor_row is None else int(anchor_row),
            anchor_col=None if anchor_col is None else int(anchor_col),
            source_inventory_index=None if inv is None else int(inv),
        )


__all__ = [
    "MIN_PIECE_LEVEL",
    "MAX_PIECE_LEVEL",
    "RARITY_NAMES",
    "Shape",
    "PieceInstance",
    "InventoryPiece",
    "PlacedPiece",
]
