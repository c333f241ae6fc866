"""Exception types raised by the engraving solver."""

from __future__ import annotations


class EngravingInputError(ValueError):
    """Raised when a pattern, grid, piece or inventory is malformed."""


class SolveCancelled(RuntimeError):
    """Raised when a solve is interrupted by its stop callback."""


__all__ = ["EngravingInputError", "SolveCancelled"]
