from datetime import datetime
from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class User(BaseGolfModel):
    """A golfer, identified by the external identity provider's subject id."""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    handicap: Optional[float] = Field(None, ge=-10, le=54)
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.email or self.id
