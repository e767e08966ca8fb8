from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SavedLocationCreate(BaseModel):
    location_text: Optional[str] = None


class SavedLocationResponse(BaseModel):
    id: int
    location_text: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LocationSuggestion(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
