from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PostResponse(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
