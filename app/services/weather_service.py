"""
Weather Service

Resolves current conditions and the forecast for a coordinate pair using
three sequential National Weather Service calls:

1. ``/points/{lat},{lon}`` gives the grid point with forecast URLs
2. the daily forecast URL
3. the hourly forecast URL

The grid point lookup must succeed and contain both forecast URLs. The two
forecast payloads are not validated; missing pieces fall back to defaults
when the snapshot is assembled. A failed forecast fetch still aborts the
lookup and propagates the original error.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.schemas.geo import Coordinates
from app.schemas.weather import UNKNOWN_LOCATION, GridPointDescriptor, WeatherSnapshot
from app.services.weather_client import WeatherClient, WeatherServiceError, weather_client

logger = logging.getLogger(__name__)


class InvalidUpstreamShapeError(WeatherServiceError):
    """Raised when the points response has no ``properties`` object."""


class MissingForecastUrlError(WeatherServiceError):
    """Raised when the points response has no forecast URL."""


class MissingHourlyUrlError(WeatherServiceError):
    """Raised when the points response has no hourly forecast URL."""


def _properties(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict) and isinstance(payload.get("properties"), dict):
        return payload["properties"]
    return {}


def _decimal(value: float) -> str:
    # Plain notation with every significant digit; 1e-05 becomes 0.00001
    return format(Decimal(repr(value)), "f")


def _url(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class WeatherService:
    """
    Service for building weather snapshots from the National Weather Service API.
    """

    def __init__(self, client: Optional[WeatherClient] = None):
        self._client = client or weather_client

    @staticmethod
    def points_path(coordinates: Coordinates) -> str:
        return f"/points/{_decimal(coordinates.latitude)},{_decimal(coordinates.longitude)}"

    async def resolve_grid_point(self, coordinates: Coordinates) -> GridPointDescriptor:
        """
        Look up the forecast grid point for a coordinate pair.

        Raises:
            InvalidUpstreamShapeError: If the response has no properties object
            MissingForecastUrlError: If the forecast URL is absent
            MissingHourlyUrlError: If the hourly forecast URL is absent
            WeatherServiceError: Any fetch error from the client
        """
        data = await self._client.fetch_json(self.points_path(coordinates))

        if not isinstance(data, dict) or not isinstance(data.get("properties"), dict):
            raise InvalidUpstreamShapeError("Invalid response from points API")
        properties = data["properties"]

        forecast_url = _url(properties.get("forecast"))
        if forecast_url is None:
            raise MissingForecastUrlError("Unable to get forecast URL from points API")

        hourly_url = _url(properties.get("forecastHourly"))
        if hourly_url is None:
            raise MissingHourlyUrlError("Unable to get hourly forecast URL from points API")

        relative_location = properties.get("relativeLocation")
        location = _properties(relative_location) or None

        return GridPointDescriptor(
            forecast_url=forecast_url,
            hourly_forecast_url=hourly_url,
            location=location,
        )

    async def get_weather(self, coordinates: Coordinates) -> WeatherSnapshot:
        """
        Fetch current conditions and the forecast for a location.

        Args:
            coordinates: Validated coordinates to look up

        Returns:
            WeatherSnapshot with location, current period, forecast periods and units

        Raises:
            WeatherServiceError: On any failure, unchanged from the stage that raised it
        """
        try:
            grid_point = await self.resolve_grid_point(coordinates)
            logger.debug("Forecast URL: %s", grid_point.forecast_url)
            forecast = await self._client.fetch_json(grid_point.forecast_url)
            logger.debug("Hourly URL: %s", grid_point.hourly_forecast_url)
            hourly = await self._client.fetch_json(grid_point.hourly_forecast_url)
        except WeatherServiceError as e:
            logger.debug("Weather lookup for %s stopped: %s", coordinates, str(e))
            raise

        return self.assemble_snapshot(grid_point, forecast, hourly)

    @staticmethod
    def assemble_snapshot(
        grid_point: GridPointDescriptor, forecast: Any, hourly: Any
    ) -> WeatherSnapshot:
        """
        Combine the grid point and both forecast payloads, defaulting any
        missing pieces.
        """
        forecast_properties = _properties(forecast)
        hourly_properties = _properties(hourly)

        hourly_periods = hourly_properties.get("periods")
        current = None
        if isinstance(hourly_periods, list) and hourly_periods:
            current = hourly_periods[0]

        periods: List[Any] = forecast_properties.get("periods") or []
        if not isinstance(periods, list):
            periods = []

        units = forecast_properties.get("units") or {}

        return WeatherSnapshot(
            location=grid_point.location or dict(UNKNOWN_LOCATION),
            current=current,
            forecast=periods,
            units=units,
        )


# Singleton instance for dependency injection
weather_service = WeatherService()
