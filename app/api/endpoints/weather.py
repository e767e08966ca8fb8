"""
Weather API Endpoint

Current conditions and forecast for a coordinate pair, resolved through the
National Weather Service.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from app.core.context import SessionPrincipal
from app.core.errors import error_body
from app.schemas.geo import Coordinates
from app.schemas.weather import WeatherSnapshot
from app.services.auth_service import auth_service
from app.services.weather_client import WeatherServiceError
from app.services.weather_service import weather_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=WeatherSnapshot)
async def get_weather(
    lat: Optional[float] = Query(None, description="Latitude in decimal degrees"),
    lon: Optional[float] = Query(None, description="Longitude in decimal degrees"),
    principal: SessionPrincipal = Depends(auth_service.require_user),
):
    """
    Get the weather for a location.

    Args:
        lat: Latitude, required
        lon: Longitude, required
        principal: Logged in user (required)

    Returns:
        WeatherSnapshot with location, current conditions, forecast and units

    Raises:
        HTTPException: 400 for missing or invalid coordinates, 500 if the lookup fails
    """
    if lat is None or lon is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body("Bad Request", "Latitude and longitude are required"),
        )

    try:
        coordinates = Coordinates(latitude=lat, longitude=lon)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body("Bad Request", "Invalid coordinates"),
        ) from e

    logger.info("Weather request: coordinates=%s, user_id=%s", coordinates, principal.id)

    try:
        return await weather_service.get_weather(coordinates)

    except WeatherServiceError as e:
        logger.error("Weather lookup failed: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_body("Failed to fetch weather data", str(e)),
        ) from e
