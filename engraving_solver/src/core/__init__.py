"""Core grid, piece and placement data structures."""

from .errors import EngravingInputError, SolveCancelled
from .pattern import ROTATIONS, Pattern, normalize_pattern, rotate_pattern, pattern_cells, count_cells
from .pieces import Shape, PieceInstance, InventoryPiece, PlacedPiece, RARITY_NAMES
from .grid import Cell, EngravingGrid
from .solution import Placement, Solution, shape_type_signature
from .grid_utils import can_place, covered_cells, place_piece, remove_piece, apply_solution
from .template import GridTemplate, Candidate, completion_bonus
from .inventory import INVENTORY_SIZE, Inventory
from .anchor_repair import repair_missing_anchors

__all__ = [
    "EngravingInputError",
    "SolveCancelled",
    "ROTATIONS",
    "Pattern",
    "normalize_pattern",
    "rotate_pattern",
    "pattern_cells",
    "count_cells",
    "Shape",
    "PieceInstance",
    "InventoryPiece",
    "PlacedPiece",
    "RARITY_NAMES",
    "Cell",
    "EngravingGrid",
    "Placement",
    "Solution",
    "shape_type_signature",
    "can_place",
    "covered_cells",
    "place_piece",
    "remove_piece",
    "apply_solution",
    "GridTemplate",
    "Candidate",
    "completion_bonus",
    "INVENTORY_SIZE",
    "Inventory",
    "repair_missing_anchors",
]
