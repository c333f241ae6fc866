"""Helper utilities for command line scripts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.inventory import Inventory
from engraving_solver.src.core.template import Candidate
from engraving_solver.src.data.shape_registry import ShapeRegistry
from engraving_solver.src.data.weapon_loader import load_weapon_grids


def load_inventory(registry: ShapeRegistry, inventory_path: Optional[Path], preset: Optional[str]) -> Inventory:
    """Return the inventory from a JSON slot list or a named preset."""
    if inventory_path is not None:
        with Path(inventory_path).open("r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("inventory", [])
        return Inventory.from_list(data, registry)
    return Inventory.from_preset(preset, registry)


def find_weapon(grids_path: Path, weapon_id: int) -> Candidate:
    for candidate in load_weapon_grids(grids_path):
        if candidate.candidate_id == weapon_id:
            return candidate
    raise EngravingInputError(f"no grid data for weapon {weapon_id}")


def weapon_candidates(grids_path: Path) -> List[Candidate]:
    return load_weapon_grids(grids_path)
