from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import Field, model_validator
from typing import Optional

from .base import BaseGolfModel
from .tee import TeeColor


class TournamentStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class ScoringFormat(str, Enum):
    STROKE_PLAY = "stroke_play"
    HANDICAP = "handicap"
    STABLEFORD = "stableford"


class Tournament(BaseGolfModel):
    """A tournament played on one course over one or more rounds."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    course_id: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: TournamentStatus = TournamentStatus.UPCOMING
    max_players: Optional[int] = Field(None, ge=1)
    number_of_rounds: int = Field(1, ge=1, le=8)
    scoring_format: ScoringFormat = ScoringFormat.STROKE_PLAY
    handicap_allowance: Decimal = Field(Decimal("1.00"), ge=0, le=1)
    created_by: Optional[str] = None
    winner_id: Optional[str] = None
    champions_meal: Optional[str] = None
    header_image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Tournament cannot end before it starts")
        return self

    def has_round(self, round_number: int) -> bool:
        return 1 <= round_number <= self.number_of_rounds


class TournamentPlayer(BaseGolfModel):
    """A player's registration in a tournament."""
    id: Optional[str] = None
    tournament_id: str
    player_id: str
    tee_selection: TeeColor = TeeColor.WHITE
    joined_at: Optional[datetime] = None
