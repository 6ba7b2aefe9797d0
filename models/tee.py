from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .base import BaseGolfModel


class TeeColor(str, Enum):
    """Tee boxes a hole can carry yardage for."""
    WHITE = "white"
    BLUE = "blue"
    RED = "red"
    GOLD = "gold"

    @classmethod
    def parse(cls, value: Any) -> "TeeColor":
        """Map a free-form color to a known tee, falling back to white."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.WHITE


class TournamentHoleTee(BaseGolfModel):
    """Tee color a tournament plays on one hole."""
    id: Optional[str] = None
    tournament_id: Optional[str] = None
    hole_id: str
    tee_color: TeeColor = TeeColor.WHITE
    created_at: Optional[datetime] = None
