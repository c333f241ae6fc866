import json
from pathlib import Path

from engraving_solver.src.core.grid import EngravingGrid
from engraving_solver.src.core.grid_utils import place_piece
from engraving_solver.src.core.inventory import Inventory
from engraving_solver.src.core.pieces import PieceInstance, PlacedPiece
from engraving_solver.src.core.template import Candidate
from engraving_solver.src.data.build_io import export_build, import_build
from engraving_solver.src.data.shape_registry import load_shape_registry

REGISTRY = load_shape_registry()


def test_export_then_import(tmp_path: Path):
    grid = EngravingGrid.from_mask([[1, 1, 0], [1, 1, 0], [0, 0, 0]])
    square = PieceInstance(REGISTRY.get(4), 3, 12)
    place_piece(grid, PlacedPiece(square, 0, 0, 0, source_inventory_index=1))
    inventory = Inventory([PieceInstance(REGISTRY.get(5)), square])
    path = tmp_path / "builds" / "mine.json"

    export_build(path, "Mine", Candidate(3, "Ember Blade"), grid, inventory)
    data = json.loads(path.read_text())
    assert data["weaponName"] == "Ember Blade"
    assert "exportDate" in data

    name, weapon_id, loaded, loaded_inv = import_build(path, REGISTRY)
    assert (name, weapon_id) == ("Mine", 3)
    assert loaded.cell(1, 1).piece.anchor == (0, 0)
    assert loaded.cell(1, 1).piece.piece == square
    assert loaded_inv.to_list() == inventory.to_list()
    assert loaded_inv.locked_indices(loaded) == {1}


def test_import_repairs_missing_anchors(tmp_path: Path):
    piece = {"shapeId": 4, "rarity": 0, "level": 1, "rotation": 0}
    row = [{"active": True, "piece": piece}, {"active": True, "piece": piece}]
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps({"name": "Old", "weaponId": 1, "gridState": [row, row], "inventory": []}))

    _, _, grid, inventory = import_build(path, REGISTRY)
    assert len(inventory) == 0
    assert grid.cell(1, 1).piece.anchor == (0, 0)
    assert grid.is_fully_covered()
