from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from app.schemas.weather import WeatherSnapshot
from app.services.weather_client import UpstreamHttpError
from app.services.weather_service import MissingForecastUrlError, weather_service

BOULDER = {"lat": 40.0065865220012, "lon": -105.26331967016468}


def sample_snapshot() -> WeatherSnapshot:
    return WeatherSnapshot(
        location={"city": "Boulder", "state": "CO"},
        current={"name": "", "temperature": 61, "temperatureUnit": "F", "shortForecast": "Sunny"},
        forecast=[
            {"name": "Tonight", "temperature": 41, "temperatureUnit": "F", "shortForecast": "Clear"},
            {"name": "Tuesday", "temperature": 66, "temperatureUnit": "F", "shortForecast": "Sunny"},
        ],
        units="us",
    )


def test_weather_requires_login(client: TestClient):
    with patch.object(weather_service, "get_weather", new=AsyncMock()) as mock_get:
        response = client.get("/api/weather", params=BOULDER)

    assert response.status_code == 401
    mock_get.assert_not_called()


def test_weather_success(auth_client: TestClient):
    snapshot = sample_snapshot()

    with patch.object(weather_service, "get_weather", new=AsyncMock(return_value=snapshot)) as mock_get:
        response = auth_client.get("/api/weather", params=BOULDER)

    assert response.status_code == 200
    data = response.json()
    assert data["location"] == {"city": "Boulder", "state": "CO"}
    assert data["current"]["temperature"] == 61
    assert [period["name"] for period in data["forecast"]] == ["Tonight", "Tuesday"]
    assert data["units"] == "us"

    coordinates = mock_get.call_args.args[0]
    assert coordinates.latitude == BOULDER["lat"]
    assert coordinates.longitude == BOULDER["lon"]


def test_weather_missing_parameters(auth_client: TestClient):
    with patch.object(weather_service, "get_weather", new=AsyncMock()) as mock_get:
        response = auth_client.get("/api/weather", params={"lat": 40.0})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Bad Request",
        "message": "Latitude and longitude are required",
    }
    mock_get.assert_not_called()


def test_weather_non_numeric_parameter(auth_client: TestClient):
    response = auth_client.get("/api/weather", params={"lat": "north", "lon": -105.0})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"


def test_weather_out_of_range(auth_client: TestClient):
    with patch.object(weather_service, "get_weather", new=AsyncMock()) as mock_get:
        response = auth_client.get("/api/weather", params={"lat": 95.0, "lon": -105.0})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid coordinates"
    mock_get.assert_not_called()


def test_weather_not_finite(auth_client: TestClient):
    response = auth_client.get("/api/weather", params={"lat": "nan", "lon": -105.0})

    assert response.status_code == 400


def test_weather_pipeline_error(auth_client: TestClient):
    error = MissingForecastUrlError("Unable to get forecast URL from points API")

    with patch.object(weather_service, "get_weather", new=AsyncMock(side_effect=error)):
        response = auth_client.get("/api/weather", params=BOULDER)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to fetch weather data",
        "message": "Unable to get forecast URL from points API",
    }


def test_weather_upstream_error_message(auth_client: TestClient):
    error = UpstreamHttpError(404, '{"title": "Data Unavailable For Requested Point"}')

    with patch.object(weather_service, "get_weather", new=AsyncMock(side_effect=error)):
        response = auth_client.get("/api/weather", params=BOULDER)

    assert response.status_code == 500
    assert response.json()["message"].startswith("HTTP 404:")
