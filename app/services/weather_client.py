"""
Weather Client

Low level access to the National Weather Service API
(https://api.weather.gov). A single call fetches one JSON document,
following redirects manually so the number of hops stays bounded.

Documentation: https://www.weather.gov/documentation/services-web-api
"""

import logging
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.schemas.health import ServiceHealth

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200


def _excerpt(text: str) -> str:
    return text[:EXCERPT_LENGTH]


class WeatherServiceError(Exception):
    """Base exception for weather lookups."""


class InvalidInputError(WeatherServiceError):
    """Raised when a URL or path is missing or blank, before any I/O."""


class MalformedUrlError(WeatherServiceError):
    """Raised when the resolved URL cannot be used for a request."""

    def __init__(self, original: Any, resolved: str, reason: str = ""):
        message = f"Invalid URL: {original!r} (resolved to {resolved!r})"
        if reason:
            message = f"{message} - {reason}"
        super().__init__(message)
        self.original = original
        self.resolved = resolved


class TransportError(WeatherServiceError):
    """Raised when network communication fails."""


class UpstreamHttpError(WeatherServiceError):
    """Raised when the weather API answers with an unexpected status."""

    def __init__(self, status_code: int, body_excerpt: str, url: str = ""):
        super().__init__(f"HTTP {status_code}: {body_excerpt}")
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        self.url = url


class ResponseParseError(WeatherServiceError):
    """Raised when a 200 response body is not valid JSON."""

    def __init__(self, message: str, body_excerpt: str):
        super().__init__(message)
        self.body_excerpt = body_excerpt


class TooManyRedirectsError(WeatherServiceError):
    """Raised when a redirect chain exceeds the configured hop limit."""

    def __init__(self, url: str, max_redirects: int):
        super().__init__(f"Exceeded {max_redirects} redirects while fetching {url}")
        self.url = url
        self.max_redirects = max_redirects


class WeatherClient:
    """
    Fetches JSON documents from the weather API.

    Paths without a scheme are resolved against the configured base URL.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        max_redirects: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self._base_url = (base_url or settings.WEATHER_API_BASE_URL).rstrip("/")
        self._user_agent = user_agent or settings.WEATHER_USER_AGENT
        self._max_redirects = (
            settings.WEATHER_MAX_REDIRECTS if max_redirects is None else max_redirects
        )
        self._timeout = settings.WEATHER_REQUEST_TIMEOUT if timeout is None else timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client. Redirects are handled by ``fetch_json``.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/json",
                },
                timeout=self._timeout,
                follow_redirects=False,
            )
        return self._client

    def resolve_url(self, url_or_path: Any) -> str:
        """
        Turn an absolute URL or a path relative to the base URL into a
        validated absolute URL.

        Raises:
            InvalidInputError: If the input is missing or blank
            MalformedUrlError: If the resolved URL is not a usable http(s) URL
        """
        if url_or_path is None:
            raise InvalidInputError("URL is required")
        if not isinstance(url_or_path, str):
            raise InvalidInputError(f"URL must be a string, got {type(url_or_path).__name__}")

        trimmed = url_or_path.strip()
        if not trimmed:
            raise InvalidInputError("URL is empty after trimming")

        if trimmed.startswith(("http://", "https://")):
            resolved = trimmed
        else:
            resolved = f"{self._base_url}/{trimmed.lstrip('/')}"

        try:
            parsed = httpx.URL(resolved)
        except httpx.InvalidURL as e:
            logger.warning(
                "URL parsing error: original=%r resolved=%r", url_or_path, resolved
            )
            raise MalformedUrlError(url_or_path, resolved, str(e)) from e

        if parsed.scheme not in ("http", "https") or not parsed.host:
            logger.warning(
                "URL parsing error: original=%r resolved=%r", url_or_path, resolved
            )
            raise MalformedUrlError(url_or_path, resolved, "missing scheme or host")

        return resolved

    async def fetch_json(self, url_or_path: Any) -> Any:
        """
        Fetch a JSON document.

        Args:
            url_or_path: Absolute URL or path relative to the weather API base

        Returns:
            The decoded JSON value

        Raises:
            InvalidInputError: If the input is missing or blank
            MalformedUrlError: If the URL cannot be parsed
            TransportError: On DNS, connection or timeout failures
            TooManyRedirectsError: If the redirect chain is too long
            UpstreamHttpError: On any other non-200 status
            ResponseParseError: If the body is not valid JSON
        """
        url = self.resolve_url(url_or_path)
        client = self._get_client()

        for _ in range(self._max_redirects + 1):
            try:
                response = await client.get(url)
            except httpx.TimeoutException as e:
                logger.warning("Request to weather API timed out: %s", url)
                raise TransportError(f"Request to {url} timed out") from e
            except httpx.HTTPError as e:
                logger.warning("Network error while contacting weather API: %s", str(e))
                raise TransportError(f"Network error: {str(e)}") from e

            location = response.headers.get("location")
            if 300 <= response.status_code < 400 and location:
                try:
                    target = str(httpx.URL(url).join(location))
                except httpx.InvalidURL as e:
                    raise MalformedUrlError(location, location, str(e)) from e
                logger.debug("Following %s redirect from %s to %s", response.status_code, url, target)
                url = self.resolve_url(target)
                continue

            return self._parse_response(url, response)

        logger.warning("Too many redirects while fetching %s", url)
        raise TooManyRedirectsError(url, self._max_redirects)

    @staticmethod
    def _parse_response(url: str, response: httpx.Response) -> Any:
        body = response.text
        if response.status_code != 200:
            logger.warning("Weather API returned status %s for %s", response.status_code, url)
            raise UpstreamHttpError(response.status_code, _excerpt(body), url)

        try:
            return response.json()
        except ValueError as e:
            logger.warning("Failed to parse weather API response from %s: %s", url, str(e))
            raise ResponseParseError(
                f"Failed to parse response: {str(e)}", _excerpt(body)
            ) from e

    async def health_check(self) -> ServiceHealth:
        """
        Check that the weather API answers on its base URL.
        """
        try:
            client = self._get_client()
            response = await client.get(f"{self._base_url}/")

            if response.status_code == 200:
                return ServiceHealth(healthy=True, message="Weather API is responding")
            return ServiceHealth(
                healthy=False,
                message=f"Weather API returned status code: {response.status_code}",
            )

        except httpx.TimeoutException:
            return ServiceHealth(healthy=False, message="Weather API request timed out")
        except Exception as e:  # pylint: disable=broad-except
            return ServiceHealth(healthy=False, message=f"Weather API check failed: {str(e)}")

    async def close(self):
        """
        Close the HTTP client.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
weather_client = WeatherClient()
