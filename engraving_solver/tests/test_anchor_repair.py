from engraving_solver.src.core.anchor_repair import repair_missing_anchors
from engraving_solver.src.core.grid import EngravingGrid
from engraving_solver.src.core.pieces import PieceInstance, PlacedPiece
from engraving_solver.src.data.shape_registry import load_shape_registry

REGISTRY = load_shape_registry()


def test_square_anchor_reconstructed():
    grid = EngravingGrid.from_mask([[1, 1, 1], [1, 1, 1], [1, 1, 1]])
    legacy = PlacedPiece(PieceInstance(REGISTRY.get(4)), 0)
    for r, c in [(1, 1), (1, 2), (2, 1), (2, 2)]:
        grid.cells[r][c].piece = legacy
    assert repair_missing_anchors(grid) == 1
    assert grid.cell(2, 2).piece.anchor == (1, 1)
    assert len(grid.placements()) == 1


def test_anchor_offset_by_first_filled_cell():
    grid = EngravingGrid.from_mask([[1, 1, 1], [1, 1, 1], [0, 0, 0]])
    # L-shape at 270 degrees: ((0, 0, 1), (1, 1, 1))
    legacy = PlacedPiece(PieceInstance(REGISTRY.get(1)), 270)
    for r, c in [(0, 2), (1, 0), (1, 1), (1, 2)]:
        grid.cells[r][c].piece = legacy
    assert repair_missing_anchors(grid) == 1
    assert grid.cell(1, 0).piece.anchor == (0, 0)


def test_anchored_grid_untouched():
    grid = EngravingGrid.from_mask([[1, 1], [1, 1]])
    placed = PlacedPiece(PieceInstance(REGISTRY.get(4)), 0, 0, 0)
    for r in range(2):
        for c in range(2):
            grid.cells[r][c].piece = placed
    assert repair_missing_anchors(grid) == 0
    assert grid.cell(1, 1).piece is placed


def test_adjacent_vertical_lines_keep_own_anchors():
    grid = EngravingGrid.from_mask([[1] * 4 for _ in range(4)])
    legacy = PlacedPiece(PieceInstance(REGISTRY.get(5)), 90)
    for r in range(4):
        grid.cells[r][0].piece = legacy
        grid.cells[r][1].piece = legacy
    assert repair_missing_anchors(grid) == 2
    assert sorted(p.anchor for p in grid.placements()) == [(0, 0), (0, 1)]
    assert all(grid.cell(r, 0).piece.anchor == (0, 0) for r in range(4))
    assert all(grid.cell(r, 1).piece.anchor == (0, 1) for r in range(4))


def test_adjacent_squares_keep_own_anchors():
    grid = EngravingGrid.from_mask([[1] * 4 for _ in range(4)])
    legacy = PlacedPiece(PieceInstance(REGISTRY.get(4)), 0)
    for r in range(2):
        for c in range(4):
            grid.cells[r][c].piece = legacy
    assert repair_missing_anchors(grid) == 2
    assert grid.cell(1, 1).piece.anchor == (0, 0)
    assert grid.cell(1, 2).piece.anchor == (0, 2)


def test_unexplained_cells_left_without_anchor():
    grid = EngravingGrid.from_mask([[1, 1, 1], [1, 1, 1], [1, 1, 1]])
    legacy = PlacedPiece(PieceInstance(REGISTRY.get(4)), 0)
    for r, c in [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0)]:
        grid.cells[r][c].piece = legacy
    assert repair_missing_anchors(grid) == 1
    assert grid.cell(1, 1).piece.anchor == (0, 0)
    assert grid.cell(2, 0).piece.anchor is None
