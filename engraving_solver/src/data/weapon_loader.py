"""Weapon lists, official grid layouts and community grid submissions."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.template import Candidate, GridTemplate
from engraving_solver.src.utils.logger import get_logger

logger = get_logger(__name__)

_JSON_BLOCK = re.compile(r"```json\n([\s\S]*?)\n```")


def _read_json(path: str | Path) -> Any:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def load_weapon_grids(path: str | Path) -> List[Candidate]:
    """Return weapons with official grid data from ``soul-weapon-grids.json``.

    The file holds ``{"weapons": [{id, name, gridType, activeSlots,
    completionEffect}, ...]}``.
    """
    data = _read_json(path)
    weapons = data.get("weapons", []) if isinstance(data, dict) else []
    out: List[Candidate] = []
    for entry in weapons:
        out.append(
            Candidate(
                candidate_id=int(entry["id"]),
                name=str(entry["name"]),
                template=GridTemplate.from_dict(entry, source="official"),
            )
        )
    return out


def merge_weapons(all_weapons: List[Dict[str, Any]], grid_weapons: List[Candidate]) -> List[Candidate]:
    """Attach official grids to the full weapon list, matching by name.

    Weapons listed before the first weapon that has a grid cannot hold
    engravings and are dropped. Ids come from the full list.
    """
    by_name = {c.name: c for c in grid_weapons}
    start_id = None
    if grid_weapons:
        first_name = grid_weapons[0].name
        for w in all_weapons:
            if w.get("name") == first_name:
                start_id = int(w["id"])
                break
    merged: List[Candidate] = []
    for w in all_weapons:
        wid = int(w["id"])
        if start_id is not None and wid < start_id:
            continue
        official = by_name.get(w.get("name"))
        merged.append(
            Candidate(
                candidate_id=wid,
                name=str(w["name"]),
                template=official.template if official else None,
            )
        )
    return merged


def load_weapons(all_weapons_path: str | Path, grids_path: str | Path) -> List[Candidate]:
    """Return every engravable weapon, with official grids where known."""
    all_weapons = _read_json(all_weapons_path)
    if not isinstance(all_weapons, list):
        raise EngravingInputError("weapon list must be a JSON array")
    return merge_weapons(all_weapons, load_weapon_grids(grids_path))


def parse_submission_comment(body: str) -> Optional[GridTemplate]:
    """Return the community grid embedded in a submission comment.

    Submissions are fenced ```json blocks holding ``gridType``,
    ``activeSlots``, ``completionEffect`` and ``submittedBy``.
    Missing or malformed blocks yield ``None``.
    """
    match = _JSON_BLOCK.search(body or "")
    if not match:
        return None
    try:
        submission = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        logger.warning(f"SEARCH unreadable community submission: {exc}")
        return None
    if not isinstance(submission, dict):
        logger.warning("SEARCH community submission is not a JSON object")
        return None
    try:
        return GridTemplate.from_dict(submission, source="community")
    except (KeyError, TypeError, EngravingInputError) as exc:
        logger.warning(f"SEARCH malformed community submission: {exc!r}")
        return None


def official_grid_lookup(candidate: Candidate) -> Optional[GridTemplate]:
    return candidate.template


__all__ = [
    "load_weapon_grids",
    "merge_weapons",
    "load_weapons",
    "parse_submission_comment",
    "official_grid_lookup",
]
