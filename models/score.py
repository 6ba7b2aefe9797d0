from datetime import datetime
from pydantic import Field, model_validator
from typing import Any, Optional

from .base import BaseGolfModel
from .hole import Hole


SCORE_NAMES = {
    -2: "eagle",
    -1: "birdie",
    0: "par",
    1: "bogey",
    2: "double bogey",
    3: "triple bogey",
    4: "quadruple bogey",
}


def _hole_par(hole: Any) -> Optional[int]:
    if isinstance(hole, Hole):
        return hole.par
    if isinstance(hole, dict):
        return hole.get("par")
    return None


class Score(BaseGolfModel):
    """A player's recorded result on one hole of a round."""
    id: Optional[str] = None
    round_id: Optional[str] = None
    hole_id: str
    strokes: int = Field(..., ge=1, le=20)
    putts: int = Field(0, ge=0, le=10)
    fairway_hit: bool = False
    green_in_regulation: bool = False
    powerup_used: bool = False
    powerup_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    hole: Optional[Hole] = None

    @model_validator(mode='before')
    @classmethod
    def normalize_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Par 3s have no fairway to hit
        if _hole_par(data.get("hole")) == 3:
            data["fairway_hit"] = False
        if not data.get("powerup_used"):
            data["powerup_notes"] = None
        elif isinstance(data.get("powerup_notes"), str):
            data["powerup_notes"] = data["powerup_notes"].strip() or None
        return data

    @model_validator(mode='after')
    def validate_score_consistency(self):
        if self.putts > self.strokes:
            raise ValueError(f"Putts ({self.putts}) cannot exceed strokes ({self.strokes})")
        if self.powerup_used and not self.powerup_notes:
            raise ValueError("Powerup notes are required when a powerup is used")
        if self.hole is not None and self.hole.id and self.hole.id != self.hole_id:
            raise ValueError("Score hole_id does not match the attached hole")
        return self

    @property
    def hole_number(self) -> Optional[int]:
        return self.hole.number if self.hole else None

    @property
    def counts_for_fairway(self) -> bool:
        """Whether this hole is a fairway attempt (anything but a par 3)."""
        return self.hole is not None and not self.hole.is_par_three

    def to_par(self) -> Optional[int]:
        """Calculate score relative to par (+2, -1, etc.)."""
        if self.hole is None:
            return None
        return self.strokes - self.hole.par

    def get_score_type(self) -> Optional[str]:
        """Get the name for this score (eagle, birdie, par, bogey, etc.)."""
        relative = self.to_par()
        if relative is None:
            return None
        if self.strokes == 1:
            return "hole in one"
        if relative <= -3:
            return "albatross"
        if relative >= 5:
            return "5+ over"
        return SCORE_NAMES[relative]
