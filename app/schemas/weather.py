"""
Weather Schemas

Models for the National Weather Service resolution pipeline. Forecast
periods are passed through exactly as the upstream returns them.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

UNKNOWN_LOCATION: Dict[str, Any] = {"city": "Unknown", "state": "Unknown"}


class GridPointDescriptor(BaseModel):
    """
    Result of the ``/points/{lat},{lon}`` lookup. Both URLs are required;
    a descriptor without them cannot be built.
    """

    forecast_url: str = Field(..., min_length=1)
    hourly_forecast_url: str = Field(..., min_length=1)
    location: Optional[Dict[str, Any]] = None


class WeatherSnapshot(BaseModel):
    location: Dict[str, Any] = Field(default_factory=lambda: dict(UNKNOWN_LOCATION))
    current: Optional[Any] = None
    forecast: List[Any] = Field(default_factory=list)
    units: Any = Field(default_factory=dict)
