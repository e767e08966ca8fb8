"""
Coordinate Type Definitions

Pydantic model for geographic coordinates coming from untrusted input
(query strings, form fields).
"""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    """
    Geographic coordinates (latitude and longitude). Immutable once validated.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ..., ge=-90.0, le=90.0, allow_inf_nan=False, description="Latitude in decimal degrees"
    )
    longitude: float = Field(
        ..., ge=-180.0, le=180.0, allow_inf_nan=False, description="Longitude in decimal degrees"
    )

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Ensure latitude is a finite value within range."""
        if not math.isfinite(v) or not -90.0 <= v <= 90.0:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Ensure longitude is a finite value within range."""
        if not math.isfinite(v) or not -180.0 <= v <= 180.0:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return v

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"
