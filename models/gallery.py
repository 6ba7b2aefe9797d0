from datetime import datetime
from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class GalleryPhoto(BaseGolfModel):
    """A photo posted to a tournament's gallery."""
    id: Optional[str] = None
    tournament_id: str
    uploaded_by: str
    image_url: str = Field(..., min_length=1)
    caption: Optional[str] = None
    created_at: Optional[datetime] = None
