from pydantic import Field
from typing import Optional

from .base import BaseGolfModel
from .tee import TeeColor


class Hole(BaseGolfModel):
    """Represents a single hole on a golf course."""
    id: Optional[str] = None
    course_id: Optional[str] = None
    number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=5)
    handicap: Optional[int] = Field(None, ge=1, le=18)
    yardage_white: Optional[int] = Field(None, ge=0, le=700)
    yardage_blue: Optional[int] = Field(None, ge=0, le=700)
    yardage_red: Optional[int] = Field(None, ge=0, le=700)
    yardage_gold: Optional[int] = Field(None, ge=0, le=700)

    @property
    def is_par_three(self) -> bool:
        return self.par == 3

    def yardage_for(self, color: TeeColor) -> Optional[int]:
        """Raw yardage stored for a tee color (no fallback)."""
        return {
            TeeColor.WHITE: self.yardage_white,
            TeeColor.BLUE: self.yardage_blue,
            TeeColor.RED: self.yardage_red,
            TeeColor.GOLD: self.yardage_gold,
        }[TeeColor.parse(color)]
