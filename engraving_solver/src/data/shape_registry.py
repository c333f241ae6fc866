"""Catalogue of engraving shapes loaded from static data."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.pieces import Shape
from engraving_solver.src.utils.config_loader import CONFIG_DIR, load_config

_DEFAULT_PATH = CONFIG_DIR / "engravings.yaml"


class ShapeRegistry:
    """Read-only mapping from shape id to :class:`Shape`."""

    def __init__(self, shapes: Iterable[Shape]) -> None:
        self._shapes: Dict[int, Shape] = {}
        for shape in shapes:
            if shape.id in self._shapes:
                raise EngravingInputError(f"duplicate shape id {shape.id}")
            self._shapes[shape.id] = shape

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "ShapeRegistry":
        """Build from ``{"id", "name", "statTag", "pattern"}`` records."""
        return cls(Shape.from_dict(r) for r in records)

    def get(self, shape_id: int) -> Shape:
        try:
            return self._shapes[shape_id]
        except KeyError:
            raise EngravingInputError(f"unknown shape id {shape_id}") from None

    def by_name(self, name: str) -> Shape:
        for shape in self._shapes.values():
            if shape.name == name:
                return shape
        raise EngravingInputError(f"unknown shape {name!r}")

    def __iter__(self) -> Iterator[Shape]:
        return iter(sorted(self._shapes.values(), key=lambda s: s.id))

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._shapes


def _load_data(path: Optional[Path]) -> Dict[str, Any]:
    return load_config(path or _DEFAULT_PATH)


def load_shape_registry(path: Optional[Path] = None) -> ShapeRegistry:
    """Return the shape registry stored at ``path`` (bundled data by default)."""
    data = _load_data(path)
    return ShapeRegistry.from_records(data.get("shapes", []))


def load_presets(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Return the inventory presets bundled with the shape data."""
    return list(_load_data(path).get("presets", []))


__all__ = ["ShapeRegistry", "load_shape_registry", "load_presets"]
