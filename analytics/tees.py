"""Tee color and yardage resolution for tournament holes.

Every view that shows yardage (scorecards, totals, leaderboard headers)
goes through these functions so the numbers always agree.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from models.hole import Hole
from models.tee import TeeColor, TournamentHoleTee


def tee_selection_map(hole_tees: Iterable[TournamentHoleTee]) -> Dict[str, TeeColor]:
    """hole_id -> chosen tee color."""
    return {ht.hole_id: ht.tee_color for ht in hole_tees}


def resolve_tee_color(
    hole: Hole,
    selections: Mapping[str, TeeColor],
    default: Optional[TeeColor] = None,
) -> TeeColor:
    """Per-hole selection, then the tournament/player default, then white."""
    if hole.id and hole.id in selections:
        return TeeColor.parse(selections[hole.id])
    if default is not None:
        return TeeColor.parse(default)
    return TeeColor.WHITE


def resolve_yardage(hole: Hole, color: TeeColor) -> Optional[int]:
    """Yardage for the chosen tee, falling back to the white tee."""
    yardage = hole.yardage_for(color)
    if yardage is None:
        yardage = hole.yardage_white
    return yardage


def hole_yardages(
    holes: Iterable[Hole],
    selections: Mapping[str, TeeColor],
    default: Optional[TeeColor] = None,
) -> List[dict]:
    """Resolved tee color and yardage for each hole, ordered by hole number."""
    rows = []
    for hole in sorted(holes, key=lambda h: h.number):
        color = resolve_tee_color(hole, selections, default)
        rows.append({
            "hole_id": hole.id,
            "hole_number": hole.number,
            "par": hole.par,
            "tee_color": color,
            "yardage": resolve_yardage(hole, color),
        })
    return rows


def total_yardage(rows: Iterable[dict]) -> Optional[int]:
    """Sum resolved yardages, None when no hole has yardage data."""
    yardages = [r["yardage"] for r in rows if r["yardage"] is not None]
    return sum(yardages) if yardages else None
