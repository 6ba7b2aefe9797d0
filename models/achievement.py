from datetime import datetime
from enum import Enum
from pydantic import Field
from typing import Any, Dict, Optional

from .base import BaseGolfModel


class AchievementCondition(str, Enum):
    FIRST_TOURNAMENT = "first_tournament"
    HOLE_IN_ONE = "hole_in_one"
    EAGLE = "eagle"
    BIRDIE = "birdie"
    UNDER_PAR_ROUND = "under_par_round"
    TOURNAMENT_WIN = "tournament_win"
    SCORE_UNDER_THRESHOLD = "score_under_threshold"


class Achievement(BaseGolfModel):
    """An unlockable badge and the condition that awards it."""
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    # Unknown conditions from the database are kept as None and never award
    condition: Optional[AchievementCondition] = None
    value: Optional[int] = None
    points: int = Field(0, ge=0)
    is_active: bool = True


class PlayerAchievement(BaseGolfModel):
    """An achievement unlocked by a player."""
    id: Optional[str] = None
    player_id: str
    achievement_id: str
    tournament_id: Optional[str] = None
    round_id: Optional[str] = None
    unlocked_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    achievement: Optional[Achievement] = None
