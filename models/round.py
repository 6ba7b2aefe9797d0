from datetime import datetime
from pydantic import Field
from typing import List, Optional

from .base import BaseGolfModel
from .score import Score


HOLES_PER_ROUND = 18


class Round(BaseGolfModel):
    """One player's attempt at a tournament on a given round number."""
    id: Optional[str] = None
    tournament_id: str
    player_id: str
    round_number: int = Field(1, ge=1)

    # Denormalized totals, only ever written by recomputation from scores
    total_strokes: int = 0
    total_putts: int = 0
    fairways_hit: int = 0
    greens_in_regulation: int = 0
    holes_completed: int = 0
    is_completed: bool = False

    created_at: Optional[datetime] = None
    scores: List[Score] = Field(default_factory=list)


class TournamentRound(BaseGolfModel):
    """Scheduled date for one round number of a tournament."""
    id: Optional[str] = None
    tournament_id: Optional[str] = None
    round_number: int = Field(..., ge=1)
    round_date: datetime
    created_at: Optional[datetime] = None
