import pytest

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.grid import Cell, EngravingGrid
from engraving_solver.src.core.grid_utils import can_place, place_piece, remove_piece
from engraving_solver.src.core.pieces import PieceInstance, PlacedPiece
from engraving_solver.src.core.template import GridTemplate, completion_bonus
from engraving_solver.src.data.shape_registry import load_shape_registry

REGISTRY = load_shape_registry()
SQUARE = REGISTRY.get(4)


def _full(size):
    return EngravingGrid.from_mask([[1] * size for _ in range(size)])


def test_grid_validation():
    with pytest.raises(EngravingInputError):
        EngravingGrid([])
    with pytest.raises(EngravingInputError):
        EngravingGrid([[Cell(True), Cell(True)], [Cell(True)]])
    piece = PlacedPiece(PieceInstance(SQUARE), 0, 0, 0)
    with pytest.raises(EngravingInputError):
        EngravingGrid([[Cell(False, piece)]])
    with pytest.raises(EngravingInputError):
        EngravingGrid.from_active_slots(4, [(4, 0)])


def test_first_empty_active_cell_row_major():
    grid = EngravingGrid.from_mask([[0, 0, 1], [1, 1, 1], [0, 0, 0]])
    assert grid.first_empty_active_cell() == (0, 2)
    assert grid.count_active() == 4


def test_can_place_bounds_and_activity():
    grid = _full(2)
    pattern = SQUARE.rotated(0)
    assert can_place(grid, pattern, 0, 0)
    assert not can_place(grid, pattern, 0, 1)
    assert not can_place(grid, pattern, -1, 0)
    holed = EngravingGrid.from_mask([[1, 1], [1, 0]])
    assert not can_place(holed, pattern, 0, 0)


def test_can_place_occupied_and_exempt_anchor():
    grid = _full(3)
    pattern = SQUARE.rotated(0)
    place_piece(grid, PlacedPiece(PieceInstance(SQUARE), 0, 0, 0))
    assert not can_place(grid, pattern, 0, 1)
    assert can_place(grid, pattern, 0, 1, exempt_anchor=(0, 0))
    assert not can_place(grid, pattern, 0, 1, exempt_anchor=(1, 1))


def test_move_piece_over_own_footprint():
    grid = _full(3)
    piece = PieceInstance(SQUARE)
    place_piece(grid, PlacedPiece(piece, 0, 0, 0))
    place_piece(grid, PlacedPiece(piece, 0, 0, 1), exempt_anchor=(0, 0))
    assert grid.cell(0, 0).piece is None
    assert grid.cell(1, 0).piece is None
    assert grid.cell(1, 2).piece.anchor == (0, 1)
    assert remove_piece(grid, (0, 1)) == 4
    assert grid.placements() == []


def test_can_place_rejects_non_grid():
    with pytest.raises(EngravingInputError):
        can_place([[1]], SQUARE.rotated(0), 0, 0)


def test_place_piece_that_does_not_fit():
    grid = _full(2)
    with pytest.raises(EngravingInputError):
        place_piece(grid, PlacedPiece(PieceInstance(SQUARE), 0, 1, 1))


def test_template_validation_and_completion_bonus():
    with pytest.raises(EngravingInputError):
        GridTemplate(3, ((0, 0),))
    with pytest.raises(EngravingInputError):
        GridTemplate(4, ((4, 4),))
    with pytest.raises(EngravingInputError):
        GridTemplate.from_dict({"gridType": "6x6", "activeSlots": []})
    template = GridTemplate.from_dict(
        {
            "gridType": "4x4",
            "activeSlots": [{"row": 0, "col": 0}, {"row": 0, "col": 1}, {"row": 1, "col": 0}, {"row": 1, "col": 1}],
            "completionEffect": {"atk": 2},
        }
    )
    grid = template.build_grid()
    assert grid.size == 4
    assert completion_bonus(grid, template) is None
    place_piece(grid, PlacedPiece(PieceInstance(SQUARE), 0, 0, 0))
    assert completion_bonus(grid, template) == {"atk": 2}


def test_cell_emptiness_and_active_cells():
    grid = EngravingGrid.from_mask([[1, 0], [1, 1]])
    assert grid.active_cells() == [(0, 0), (1, 0), (1, 1)]
    assert grid.cell(0, 0).is_empty
    assert not grid.cell(0, 1).is_empty
    grid.cells[1][1].piece = PlacedPiece(PieceInstance(SQUARE), 0, 0, 0)
    assert not grid.cell(1, 1).is_empty
