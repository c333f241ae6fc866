"""Local JSON export and import of engraving builds."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Tuple

from engraving_solver.src.core.anchor_repair import repair_missing_anchors
from engraving_solver.src.core.grid import EngravingGrid
from engraving_solver.src.core.inventory import Inventory
from engraving_solver.src.core.template import Candidate


def export_build(
    path: str | Path,
    name: str,
    weapon: Optional[Candidate],
    grid: EngravingGrid,
    inventory: Inventory,
) -> None:
    """Write the build to ``path`` in the builder's export format."""
    data = {
        "name": name or "Unnamed Build",
        "weaponId": weapon.candidate_id if weapon else None,
        "weaponName": weapon.name if weapon else None,
        "gridState": grid.to_dict(),
        "inventory": inventory.to_list(),
        "exportDate": datetime.now(timezone.utc).isoformat(),
    }
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with Path(path).open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def import_build(path: str | Path, registry: Any) -> Tuple[str, Optional[int], Optional[EngravingGrid], Inventory]:
    """Return ``(name, weapon_id, grid, inventory)`` read from ``path``.

    Grids saved before anchors were recorded are repaired on load.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    grid = None
    if data.get("gridState"):
        grid = EngravingGrid.from_dict(data["gridState"], registry)
        repair_missing_anchors(grid)
    inventory = Inventory.from_list(data.get("inventory") or [], registry)
    return data.get("name", ""), data.get("weaponId"), grid, inventory


__all__ = ["export_build", "import_build"]
