"""Shape, weapon and build data loaders."""

from .shape_registry import ShapeRegistry, load_shape_registry, load_presets
from .weapon_loader import (
    load_weapon_grids,
    load_weapons,
    merge_weapons,
    official_grid_lookup,
    parse_submission_comment,
)
from .build_io import export_build, import_build

__all__ = [
    "ShapeRegistry",
    "load_shape_registry",
    "load_presets",
    "load_weapon_grids",
    "load_weapons",
    "merge_weapons",
    "official_grid_lookup",
    "parse_submission_comment",
    "export_build",
    "import_build",
]
