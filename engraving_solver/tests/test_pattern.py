import numpy as np
import pytest

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.pattern import (
    ROTATIONS,
    count_cells,
    normalize_pattern,
    pattern_cells,
    rotate_pattern,
)
from engraving_solver.src.data.shape_registry import load_shape_registry

REGISTRY = load_shape_registry()


def test_four_quarter_turns_return_original():
    for shape in REGISTRY:
        p = shape.pattern
        for _ in range(4):
            p = rotate_pattern(p, 90)
        assert p == shape.pattern


def test_rotation_preserves_cell_count():
    for shape in REGISTRY:
        for rotation in ROTATIONS:
            assert count_cells(rotate_pattern(shape.pattern, rotation)) == shape.cell_count


def test_quarter_turn_is_clockwise():
    l_shape = normalize_pattern([[1, 0], [1, 0], [1, 1]])
    assert rotate_pattern(l_shape, 90) == ((True, True, True), (True, False, False))
    assert rotate_pattern(l_shape, 270) == ((False, False, True), (True, True, True))


def test_half_turn_matches_two_quarter_turns():
    t_shape = normalize_pattern([[1, 1, 1], [0, 1, 0]])
    assert rotate_pattern(t_shape, 180) == rotate_pattern(rotate_pattern(t_shape, 90), 90)
    assert rotate_pattern(t_shape, 180) == ((False, True, False), (True, True, True))


def test_zero_rotation_returns_same_pattern():
    p = normalize_pattern([[1, 1, 1, 1]])
    assert rotate_pattern(p, 0) is p


def test_invalid_rotation_rejected():
    p = normalize_pattern([[1, 1]])
    with pytest.raises(EngravingInputError):
        rotate_pattern(p, 45)


def test_normalize_accepts_numpy_and_rejects_bad_input():
    assert normalize_pattern(np.array([[1, 0], [1, 1]])) == ((True, False), (True, True))
    with pytest.raises(EngravingInputError):
        normalize_pattern([])
    with pytest.raises(EngravingInputError):
        normalize_pattern([[1, 0], [1]])
    with pytest.raises(EngravingInputError):
        normalize_pattern([[0, 0]])


def test_pattern_cells_row_major():
    p = normalize_pattern([[0, 1, 1], [1, 1, 0]])
    assert pattern_cells(p) == [(0, 1), (0, 2), (1, 0), (1, 1)]
