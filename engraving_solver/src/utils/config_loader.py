"""Loads YAML/JSON configuration files and global solver settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file."""
    path_p = Path(path)
    with open(path_p, "r", encoding="utf-8") as f:
        if path_p.suffix in {".yaml", ".yml"}:
            return yaml.safe_load(f) or {}
        if path_p.suffix == ".json":
            return json.load(f)
        raise ValueError("Unsupported config format")


def load_solver_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the solver configuration."""
    if path is None:
        path = CONFIG_DIR / "solver_config.yaml"
    if path.exists():
        return load_config(path)
    return {}


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


SOLVER_CONFIG: Dict[str, Any] = load_solver_config()

_SOLVER_CONF = SOLVER_CONFIG.get("solver", {}) or {}
MAX_PIECES: int = int(_SOLVER_CONF.get("max_pieces", 8))
STANDALONE_MAX_SOLUTIONS: Optional[int] = _optional_int(
    _SOLVER_CONF.get("standalone_max_solutions")
)

_SEARCH_CONF = SOLVER_CONFIG.get("best_target", {}) or {}
MAX_SOLUTIONS_PER_CANDIDATE: int = int(_SEARCH_CONF.get("max_solutions_per_candidate", 15))
TIME_BUDGET_MS: int = int(_SEARCH_CONF.get("time_budget_ms", 30000))
PREVIEW_SIZE: int = int(_SEARCH_CONF.get("preview_size", 5))
TIER_WEIGHT: int = int(_SEARCH_CONF.get("tier_weight", 10))
SAME_PIECE_WEIGHT: int = int(_SEARCH_CONF.get("same_piece_weight", 2))
RANKING_TTL_S: float = float(_SEARCH_CONF.get("ranking_ttl_s", 600))

LOG_LEVEL: str = str((SOLVER_CONFIG.get("logging", {}) or {}).get("level", "INFO"))


def set_standalone_max_solutions(value: Optional[int]) -> None:
    """Override the solution cap of direct ``solve`` calls (``None`` = uncapped)."""
    global STANDALONE_MAX_SOLUTIONS
    STANDALONE_MAX_SOLUTIONS = value
    SOLVER_CONFIG.setdefault("solver", {})["standalone_max_solutions"] = value


def set_max_solutions_per_candidate(value: int) -> None:
    """Override the per-candidate solution cap of best-target search."""
    global MAX_SOLUTIONS_PER_CANDIDATE
    MAX_SOLUTIONS_PER_CANDIDATE = value
    SOLVER_CONFIG.setdefault("best_target", {})["max_solutions_per_candidate"] = value


def set_time_budget_ms(value: int) -> None:
    """Override the soft wall-clock budget of best-target search."""
    global TIME_BUDGET_MS
    TIME_BUDGET_MS = value
    SOLVER_CONFIG.setdefault("best_target", {})["time_budget_ms"] = value


def set_preview_size(value: int) -> None:
    """Override how many solutions each ranked result keeps for preview."""
    global PREVIEW_SIZE
    PREVIEW_SIZE = value
    SOLVER_CONFIG.setdefault("best_target", {})["preview_size"] = value


def print_runtime_config() -> None:
    """Print a summary of the current runtime configuration."""
    info = {
        "max_pieces": MAX_PIECES,
        "standalone_max_solutions": STANDALONE_MAX_SOLUTIONS,
        "max_solutions_per_candidate": MAX_SOLUTIONS_PER_CANDIDATE,
        "time_budget_ms": TIME_BUDGET_MS,
        "preview_size": PREVIEW_SIZE,
        "tier_weight": TIER_WEIGHT,
        "same_piece_weight": SAME_PIECE_WEIGHT,
        "ranking_ttl_s": RANKING_TTL_S,
    }
    print("Runtime configuration:")
    for k, v in info.items():
        print(f"  {k}: {v}")
