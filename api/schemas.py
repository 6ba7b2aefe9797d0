"""API-specific request bodies and aggregated response models."""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

from analytics.leaderboard import LeaderboardEntry
from models import (
    Hole,
    PlayerAchievement,
    Round,
    Score,
    ScoringFormat,
    TeeColor,
    TournamentStatus,
)


# ================================================================
# Requests
# ================================================================

class HoleInput(BaseModel):
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=5)
    handicap: Optional[int] = Field(None, ge=1, le=18)
    yardage_white: Optional[int] = Field(None, ge=0, le=700)
    yardage_blue: Optional[int] = Field(None, ge=0, le=700)
    yardage_red: Optional[int] = Field(None, ge=0, le=700)
    yardage_gold: Optional[int] = Field(None, ge=0, le=700)


class CreateCourseRequest(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    description: Optional[str] = None
    holes: List[HoleInput] = Field(default_factory=list)


class HoleTeeInput(BaseModel):
    hole_id: str
    tee_color: TeeColor = TeeColor.WHITE


class CreateTournamentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    course_id: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    max_players: Optional[int] = Field(None, ge=1)
    number_of_rounds: int = Field(1, ge=1, le=8)
    scoring_format: ScoringFormat = ScoringFormat.STROKE_PLAY
    handicap_allowance: Decimal = Field(Decimal("1.00"), ge=0, le=1)
    hole_tees: List[HoleTeeInput] = Field(default_factory=list)
    round_dates: List[datetime] = Field(default_factory=list)


class JoinTournamentRequest(BaseModel):
    tee_selection: TeeColor = TeeColor.WHITE


class TournamentAdminUpdate(BaseModel):
    champions_meal: Optional[str] = None
    header_image_url: Optional[str] = None
    status: Optional[TournamentStatus] = None
    winner_id: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    handicap: Optional[float] = Field(None, ge=-10, le=54)
    profile_image_url: Optional[str] = None


class CreateRoundRequest(BaseModel):
    tournament_id: str
    round_number: int = Field(1, ge=1)


class ScoreFields(BaseModel):
    strokes: int = Field(..., ge=1, le=20)
    putts: int = Field(0, ge=0, le=10)
    fairway_hit: bool = False
    green_in_regulation: bool = False
    powerup_used: bool = False
    powerup_notes: Optional[str] = None


class ScoreRequest(ScoreFields):
    """Score entry for one hole; the round is created on first use."""
    tournament_id: str
    round_number: int = Field(1, ge=1)
    hole_id: str


class GalleryPhotoRequest(BaseModel):
    tournament_id: str
    image_url: str = Field(..., min_length=1)
    caption: Optional[str] = None


# ================================================================
# Responses
# ================================================================

class HoleYardageResponse(BaseModel):
    hole_id: Optional[str] = None
    hole_number: int
    par: int
    tee_color: TeeColor
    yardage: Optional[int] = None


class YardagesResponse(BaseModel):
    tournament_id: str
    holes: List[HoleYardageResponse]
    total_yardage: Optional[int] = None


class LeaderboardResponse(BaseModel):
    tournament_id: str
    scoring_format: ScoringFormat
    round_number: Optional[int] = None
    course_par: Optional[int] = None
    front_nine_par: Optional[int] = None
    back_nine_par: Optional[int] = None
    entries: List[LeaderboardEntry]


class PlayerScoreResponse(BaseModel):
    """Flat per-hole score row for scorecards."""
    player_id: str
    round_id: str
    round_number: int
    score: Score
    hole: Optional[Hole] = None


class ScoreSaveResponse(BaseModel):
    score: Score
    round: Round
    new_achievements: List[PlayerAchievement] = Field(default_factory=list)


class StatsResponse(BaseModel):
    player_id: str
    rounds_played: int
    wins: int
    average_score: Optional[float] = None
    average_putts: float
    fairways_hit_percentage: float
    gir_percentage: float
    handicap: Optional[float] = None
