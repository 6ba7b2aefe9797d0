"""Per-round totals derived from a round's score rows."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from models.round import HOLES_PER_ROUND
from models.score import Score


class RoundTotals(BaseModel):
    total_strokes: int = 0
    total_putts: int = 0
    fairways_hit: int = 0
    fairway_attempts: int = 0
    greens_in_regulation: int = 0
    holes_completed: int = 0

    @property
    def is_completed(self) -> bool:
        return self.holes_completed >= HOLES_PER_ROUND


def aggregate_round(scores: Iterable[Score]) -> RoundTotals:
    """
    Sum a round's scores into its stored totals.

    Scores must carry their hole so par 3s can be left out of the fairway
    numbers. A round with no scores yields all zeros.
    """
    totals = RoundTotals()
    for score in scores:
        totals.total_strokes += score.strokes
        totals.total_putts += score.putts
        totals.holes_completed += 1
        if score.green_in_regulation:
            totals.greens_in_regulation += 1
        if score.counts_for_fairway:
            totals.fairway_attempts += 1
            if score.fairway_hit:
                totals.fairways_hit += 1
    return totals
