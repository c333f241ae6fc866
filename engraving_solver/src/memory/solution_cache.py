"""Memoisation of solver results keyed by weapon and inventory."""

from __future__ import annotations

import json
import shutil
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from engraving_solver.src.core.solution import Solution
from engraving_solver.src.utils.logger import get_logger

logger = get_logger(__name__)


def inventory_signature(pieces: Iterable[Any]) -> str:
    """Return ``"shapeId:rarity:level,..."`` sorted so slot order is irrelevant."""
    keys = []
    for p in pieces:
        piece = getattr(p, "piece", p)
        keys.append((piece.shape_id, piece.rarity, piece.level))
    return ",".join(f"{s}:{r}:{lv}" for s, r, lv in sorted(keys))


def cache_key(candidate_id: Any, pieces: Iterable[Any]) -> str:
    """Return the memo key for ``candidate_id`` solved with ``pieces``."""
    return f"{candidate_id}-{inventory_signature(pieces)}"


class SolutionCache(Protocol):
    def get(self, key: str) -> Optional[List[Solution]]: ...

    def set(self, key: str, value: List[Solution]) -> None: ...


class InMemorySolutionCache:
    """Dictionary backed cache with a lock per key for parallel writers."""

    def __init__(self) -> None:
        self._data: Dict[str, List[Solution]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    def get(self, key: str) -> Optional[List[Solution]]:
        return self._data.get(key)

    def set(self, key: str, value: List[Solution]) -> None:
        self._data[key] = list(value)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


def auto_clean_cache_file(path: Path) -> None:
    """Back up an unreadable cache file and reset it to an empty object."""
    backup = path.with_suffix(".bak")
    try:
        shutil.move(str(path), backup)
        logger.warning(f"CACHE file backed up to {backup}")
    except OSError as exc:
        logger.error(f"CACHE failed to backup cache file: {exc}")
    path.write_text("{}", encoding="utf-8")


class JsonSolutionCache(InMemorySolutionCache):
    """Cache persisted as JSON; solutions are rebuilt through ``registry``."""

    def __init__(self, path: str | Path, registry: Any) -> None:
        super().__init__()
        self.path = Path(path)
        self.registry = registry
        self._raw: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"CACHE failed to load cache: {e}")
            auto_clean_cache_file(self.path)
            return {}
        if not isinstance(data, dict):
            logger.error("CACHE file format invalid")
            return {}
        return data

    def get(self, key: str) -> Optional[List[Solution]]:
        hit = super().get(key)
        if hit is not None:
            return hit
        raw = self._raw.get(key)
        if raw is None:
            return None
        try:
            solutions = [Solution.from_dict(s, self.registry) for s in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"CACHE dropping malformed entry {key}: {e}")
            del self._raw[key]
            return None
        super().set(key, solutions)
        return solutions

    def set(self, key: str, value: List[Solution]) -> None:
        super().set(key, value)
        self._raw[key] = [s.to_dict() for s in value]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self._raw, f)

    def clear(self) -> None:
        super().clear()
        self._raw = {}
        if self.path.exists():
            self.path.write_text("{}", encoding="utf-8")

    def __contains__(self, key: object) -> bool:
        return key in self._raw or super().__contains__(key)

    def __len__(self) -> int:
        return len(set(self._raw) | set(self._data))


__all__ = [
    "inventory_signature",
    "cache_key",
    "SolutionCache",
    "InMemorySolutionCache",
    "JsonSolutionCache",
    "auto_clean_cache_file",
]
