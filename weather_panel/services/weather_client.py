import logging
from typing import Any

import httpx
from pydantic import ValidationError

from weather_panel.config.settings import Settings
from weather_panel.models.weather import UpstreamErrorBody, WeatherReport
from weather_panel.utils.exceptions import (
    ConfigurationError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class WeatherClient:
    """
    Async client for the WeatherAPI.com current conditions endpoint
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._validate_config()
        self.client: httpx.AsyncClient | None = None

    def _validate_config(self) -> None:
        """Validate client configuration"""
        if not self.settings.weather_api_key:
            raise ConfigurationError("Weather API key is required but not provided")

        if not self.settings.weather_api_url:
            raise ConfigurationError("Weather API URL is required but not provided")

    async def __aenter__(self) -> "WeatherClient":
        """Async context manager entry"""
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.weather_api_timeout),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit"""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def fetch_report(self, query: str) -> WeatherReport:
        """
        Fetch current conditions for a free-text location.

        Raises:
            UpstreamError: the API answered with an error body
            TransportError: the API could not be reached or its body was unusable
        """
        if not self.client:
            raise ConfigurationError(
                "Weather client not initialized. Use async context manager."
            )

        logger.info(f"Fetching current conditions for: {query}")

        response = await self._make_api_request(query)
        report = self._parse_response(response, query)

        logger.info(f"Fetched current conditions for {report.location.name}")
        return report

    async def _make_api_request(self, query: str) -> httpx.Response:
        """Make HTTP request to weather API"""
        params = {
            "key": self.settings.weather_api_key,
            "q": query,
            "aqi": self.settings.aqi_flag,
        }

        try:
            return await self.client.get(
                str(self.settings.weather_api_url), params=params
            )

        except httpx.TimeoutException as e:
            logger.error(f"API request timed out for query: {query}")
            raise TransportError(
                f"API request timed out after {self.settings.weather_api_timeout} seconds"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error for query {query}: {e}")
            raise TransportError(f"Request failed: {str(e)}") from e

    def _parse_response(self, response: httpx.Response, query: str) -> WeatherReport:
        """Parse API response into a WeatherReport or raise the matching error"""
        # Error bodies arrive with 4xx statuses, so the status code alone decides nothing
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Non-JSON response for {query} (status {response.status_code}): {e}"
            )
            raise TransportError(
                f"Invalid JSON response: {str(e)}", response.status_code
            ) from e

        if isinstance(data, dict) and "error" in data:
            try:
                body = UpstreamErrorBody.model_validate(data)
            except ValidationError as e:
                raise TransportError(
                    f"Malformed error body: {str(e)}", response.status_code
                ) from e

            logger.warning(
                f"Weather API rejected query {query}: "
                f"{body.error.message} (code {body.error.code})"
            )
            raise UpstreamError(
                body.error.message, body.error.code, response.status_code
            )

        try:
            return WeatherReport.model_validate(data)
        except ValidationError as e:
            logger.error(f"Failed to parse weather data for {query}: {e}")
            raise TransportError(
                f"Failed to parse weather data: {str(e)}", response.status_code
            ) from e
