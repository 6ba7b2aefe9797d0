from datetime import datetime
from pydantic import Field, field_validator
from typing import List, Optional

from .base import BaseGolfModel
from .hole import Hole


class Course(BaseGolfModel):
    """Golf course with its holes."""
    id: Optional[str] = None
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    total_holes: int = Field(18, ge=1, le=18)
    holes: List[Hole] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @field_validator('holes')
    @classmethod
    def validate_unique_hole_numbers(cls, v):
        numbers = [h.number for h in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Hole numbers must be unique within a course")
        return sorted(v, key=lambda h: h.number)

    @property
    def par(self) -> Optional[int]:
        """Total par, None when the course has no holes yet."""
        if not self.holes:
            return None
        return sum(h.par for h in self.holes)

    @property
    def front_nine_par(self) -> Optional[int]:
        """Calculate par for holes 1-9."""
        front = [h for h in self.holes if 1 <= h.number <= 9]
        return sum(h.par for h in front) if front else None

    @property
    def back_nine_par(self) -> Optional[int]:
        """Calculate par for holes 10-18."""
        back = [h for h in self.holes if 10 <= h.number <= 18]
        return sum(h.par for h in back) if back else None
