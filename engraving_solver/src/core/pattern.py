"""Boolean occupancy patterns and their rotation."""

from __future__ import annotations

from typing import Any, List, Tuple

import numpy as np

from .errors import EngravingInputError

Pattern = Tuple[Tuple[bool, ...], ...]

ROTATIONS: Tuple[int, ...] = (0, 90, 180, 270)

__all__ = [
    "Pattern",
    "ROTATIONS",
    "normalize_pattern",
    "rotate_pattern",
    "pattern_cells",
    "count_cells",
    "validate_rotation",
]


def normalize_pattern(pattern: Any) -> Pattern:
    """Return ``pattern`` as a tuple of boolean rows.

    Accepts nested sequences of ``0``/``1`` or booleans as well as a 2D
    ``numpy`` array. Raises :class:`EngravingInputError` when the pattern is
    empty, ragged or has no filled cell.
    """
    if isinstance(pattern, np.ndarray):
        if pattern.ndim != 2:
            raise EngravingInputError("pattern must be 2-dimensional")
        rows = pattern.tolist()
    else:
        try:
            rows = [list(r) for r in pattern]
        except TypeError as exc:
            raise EngravingInputError(f"pattern must be a 2D sequence: {exc}") from exc
    if not rows or not rows[0]:
        raise EngravingInputError("pattern cannot be empty")
    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise EngravingInputError("all pattern rows must have the same length")
    out = tuple(tuple(bool(v) for v in r) for r in rows)
    if not any(any(r) for r in out):
        raise EngravingInputError("pattern must contain at least one filled cell")
    return out


def validate_rotation(rotation: int) -> int:
    """Return ``rotation`` if it is one of :data:`ROTATIONS`."""
    if rotation not in ROTATIONS:
        raise EngravingInputError(f"rotation must be one of {ROTATIONS}, got {rotation!r}")
    return rotation


def rotate_pattern(pattern: Pattern, rotation: int) -> Pattern:
    """Return ``pattern`` rotated clockwise by ``rotation`` degrees.

    A single step maps ``out[c][R - 1 - r] = in[r][c]``; 180 and 270 are
    compositions of that step. ``rotation == 0`` returns ``pattern`` itself.
    """
    validate_rotation(rotation)
    if rotation == 0:
        return pattern
    arr = np.asarray(pattern, dtype=bool)
    for _ in range(rotation // 90):
        arr = np.rot90(arr, k=-1)
    return tuple(tuple(bool(v) for v in row) for row in arr.tolist())


def pattern_cells(pattern: Pattern) -> List[Tuple[int, int]]:
    """Return ``(row, col)`` of the filled cells in row-major order."""
    return [
        (r, c)
        for r, row in enumerate(pattern)
        for c, filled in enumerate(row)
        if filled
    ]


def count_cells(pattern: Pattern) -> int:
    """Return the number of filled cells; invariant under rotation."""
    return int(np.count_nonzero(np.asarray(pattern, dtype=bool)))
