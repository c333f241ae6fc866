"""Weapon grid templates and search candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .errors import EngravingInputError
from .grid import EngravingGrid

GRID_SIZES = {"4x4": 4, "5x5": 5}


@dataclass(frozen=True)
class GridTemplate:
    """Active-slot layout and completion bonus of one weapon."""

    grid_size: int
    active_slots: Tuple[Tuple[int, int], ...]
    completion_bonus: Dict[str, Any] = field(default_factory=dict, compare=False)
    source: str = "official"
    submitted_by: Optional[str] = None

    def __post_init__(self) -> None:
        if self.grid_size not in GRID_SIZES.values():
            raise EngravingInputError(f"grid size must be 4 or 5, got {self.grid_size}")
        slots = tuple((int(r), int(c)) for r, c in self.active_slots)
        for r, c in slots:
            if not (0 <= r < self.grid_size and 0 <= c < self.grid_size):
                raise EngravingInputError(
                    f"active slot ({r}, {c}) outside {self.grid_size}x{self.grid_size} grid"
                )
        object.__setattr__(self, "active_slots", slots)

    @property
    def grid_type(self) -> str:
        return f"{self.grid_size}x{self.grid_size}"

    def build_grid(self) -> EngravingGrid:
        """Return an empty grid with this template's active slots."""
        return EngravingGrid.from_active_slots(self.grid_size, self.active_slots)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "official") -> "GridTemplate":
        """Build a template from ``{gridType, activeSlots, completionEffect}``."""
        grid_type = data.get("gridType", "5x5")
        if grid_type not in GRID_SIZES:
            raise EngravingInputError(f"unknown grid type {grid_type!r}")
        slots = data.get("activeSlots")
        if not isinstance(slots, list):
            raise EngravingInputError("activeSlots must be a list")
        return cls(
            grid_size=GRID_SIZES[grid_type],
            active_slots=tuple((s["row"], s["col"]) for s in slots),
            completion_bonus=dict(data.get("completionEffect") or {}),
            source=source,
            submitted_by=data.get("submittedBy"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "gridType": self.grid_type,
            "activeSlots": [{"row": r, "col": c} for r, c in self.active_slots],
            "completionEffect": dict(self.completion_bonus),
        }
        if self.submitted_by is not None:
            data["submittedBy"] = self.submitted_by
        return data


@dataclass(frozen=True)
class Candidate:
    """A weapon evaluated by best-target search."""

    candidate_id: int
    name: str
    template: Optional[GridTemplate] = field(default=None, compare=False)


def completion_bonus(grid: EngravingGrid, template: GridTemplate) -> Optional[Dict[str, Any]]:
    """Return the template's completion bonus once ``grid`` is fully covered."""
    if not grid.count_active() or not grid.is_fully_covered():
        return None
    return template.completion_bonus


__all__ = ["GRID_SIZES", "GridTemplate", "Candidate", "completion_bonus"]
