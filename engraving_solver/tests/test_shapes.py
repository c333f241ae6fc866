import pytest

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.pieces import PieceInstance, Shape
from engraving_solver.src.data.shape_registry import ShapeRegistry, load_presets, load_shape_registry


def test_bundled_registry_has_seven_tetrominoes():
    registry = load_shape_registry()
    assert len(registry) == 7
    assert [s.id for s in registry] == [1, 2, 3, 4, 5, 6, 7]
    assert all(s.cell_count == 4 for s in registry)
    assert registry.get(5).name == "Line"
    assert registry.by_name("Square").stat_tag == "CRIT_DMG"


def test_unknown_and_duplicate_shapes_rejected():
    registry = load_shape_registry()
    with pytest.raises(EngravingInputError):
        registry.get(99)
    shape = Shape(1, "Dot", "ATK", [[1]])
    with pytest.raises(EngravingInputError):
        ShapeRegistry([shape, shape])


def test_shape_record_missing_field():
    with pytest.raises(EngravingInputError):
        Shape.from_dict({"id": 1, "name": "Dot"})


def test_piece_rarity_and_level_bounds():
    square = load_shape_registry().get(4)
    piece = PieceInstance(square, rarity=5, level=50)
    assert piece.rarity_name == "Mythic"
    with pytest.raises(EngravingInputError):
        PieceInstance(square, rarity=6)
    with pytest.raises(EngravingInputError):
        PieceInstance(square, level=0)
    assert piece.with_level(99).level == 50
    assert piece.with_level(-3).level == 1


def test_presets_bundled():
    presets = load_presets()
    assert [p["id"] for p in presets] == ["atk-gold", "crit-atk-gold", "hp-atk-gold"]
    assert all(len(p["pieces"]) == 8 for p in presets)
