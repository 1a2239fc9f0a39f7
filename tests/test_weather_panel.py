import asyncio
from unittest.mock import AsyncMock

import pytest

from weather_panel.config.settings import Settings
from weather_panel.models.weather import WeatherReport
from weather_panel.providers.surface import InMemorySurface, Metric, Region, Slot
from weather_panel.services.weather_panel import WeatherPanel, compose_report_view
from weather_panel.utils.exceptions import (
    ConfigurationError,
    TransportError,
    UpstreamError,
)


class TestWeatherPanel:
    """Test suite for WeatherPanel"""

    @pytest.fixture
    def sample_report(self, sample_api_response):
        return WeatherReport.model_validate(sample_api_response)

    @pytest.fixture
    def mock_client(self, sample_report):
        client = AsyncMock()
        client.fetch_report.return_value = sample_report
        return client

    @pytest.fixture
    def surface(self):
        return InMemorySurface()

    @pytest.fixture
    def panel(self, mock_client, surface, test_settings):
        return WeatherPanel(mock_client, surface, test_settings)

    async def test_successful_fetch_renders_report(self, panel, mock_client, surface):
        """Test a successful response populates the report view"""
        await panel.fetch_and_render("London")

        mock_client.fetch_report.assert_awaited_once_with("London")
        assert surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.ERROR)
        assert not surface.is_visible(Region.LOADING)
        assert surface.field(Slot.ERROR) == ""
        assert surface.field(Slot.CITY_NAME) == "London"
        assert surface.field(Slot.TEMP) == "21°C"
        assert surface.field(Slot.FEELS_LIKE) == "Feels Like: 22°C"

    async def test_upstream_error_shows_message(self, panel, mock_client, surface):
        """Test an error body shows the exact upstream message"""
        mock_client.fetch_report.side_effect = UpstreamError(
            "No matching location found.", 1006, 400
        )

        await panel.fetch_and_render("Nonexistentville")

        assert surface.field(Slot.ERROR) == "No matching location found."
        assert surface.is_visible(Region.ERROR)
        assert not surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.LOADING)
        assert surface.field(Slot.CITY_NAME) == ""

    async def test_transport_error_shows_generic_message(
        self, panel, mock_client, surface
    ):
        """Test a transport failure hides the raw cause"""
        mock_client.fetch_report.side_effect = TransportError(
            "Request failed: [Errno 101] Network is unreachable"
        )

        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == "Failed to fetch weather data"
        assert not surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.LOADING)

    async def test_unexpected_error_does_not_escape(self, panel, mock_client, surface):
        """Test any other failure also ends in the generic error state"""
        mock_client.fetch_report.side_effect = ConfigurationError(
            "Weather client not initialized. Use async context manager."
        )

        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == "Failed to fetch weather data"
        assert not surface.is_visible(Region.REPORT)

    async def test_error_after_success_hides_report(self, panel, mock_client, surface):
        """Test an error replaces a previously shown report"""
        await panel.fetch_and_render("London")
        assert surface.is_visible(Region.REPORT)

        mock_client.fetch_report.side_effect = UpstreamError(
            "No matching location found."
        )
        await panel.fetch_and_render("Nonexistentville")

        assert not surface.is_visible(Region.REPORT)
        assert surface.field(Slot.ERROR) == "No matching location found."

    async def test_success_after_error_clears_error(
        self, panel, mock_client, surface, sample_report
    ):
        """Test a report clears a previously shown error"""
        mock_client.fetch_report.side_effect = UpstreamError(
            "No matching location found."
        )
        await panel.fetch_and_render("Nonexistentville")

        mock_client.fetch_report.side_effect = None
        mock_client.fetch_report.return_value = sample_report
        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == ""
        assert not surface.is_visible(Region.ERROR)
        assert surface.is_visible(Region.REPORT)

    async def test_loading_state_during_fetch(
        self, panel, mock_client, surface, sample_report
    ):
        """Test loading is shown and prior results hidden while the request is in flight"""
        await panel.fetch_and_render("London")
        seen = {}

        async def fake_fetch(city):
            seen["loading"] = surface.is_visible(Region.LOADING)
            seen["report"] = surface.is_visible(Region.REPORT)
            return sample_report

        mock_client.fetch_report.side_effect = fake_fetch
        await panel.fetch_and_render("London")

        assert seen == {"loading": True, "report": False}
        assert not surface.is_visible(Region.LOADING)
        assert surface.is_visible(Region.REPORT)

    async def test_submit_empty_input_is_noop(self, panel, mock_client, surface):
        """Test empty or whitespace-only input performs no fetch"""
        await panel.fetch_and_render("London")
        mock_client.fetch_report.reset_mock()
        before = surface.snapshot()

        assert await panel.submit("") is False
        assert await panel.submit("   \t ") is False

        mock_client.fetch_report.assert_not_awaited()
        assert surface.snapshot() == before

    async def test_submit_trims_and_clears_input(self, panel, mock_client, surface):
        """Test a submission is trimmed and the search box cleared"""
        surface.set_field(Slot.CITY_INPUT, "  Paris ")

        assert await panel.submit("  Paris ") is True

        mock_client.fetch_report.assert_awaited_once_with("Paris")
        assert surface.field(Slot.CITY_INPUT) == ""

    async def test_start_fetches_default_location(self, panel, mock_client, surface):
        """Test startup shows the default location"""
        await panel.start()

        mock_client.fetch_report.assert_awaited_once_with("London")
        assert surface.is_visible(Region.REPORT)

    async def test_render_is_idempotent(self, panel, surface, sample_report):
        """Test rendering the same report twice yields the same surface"""
        panel.render(sample_report)
        first = surface.snapshot()
        panel.render(sample_report)

        assert surface.snapshot() == first

    async def test_stale_response_is_discarded(
        self, panel, mock_client, surface, sample_api_response
    ):
        """Test an older request finishing last does not overwrite a newer one"""
        london = WeatherReport.model_validate(sample_api_response)
        sample_api_response["location"]["name"] = "Paris"
        paris = WeatherReport.model_validate(sample_api_response)
        release = asyncio.Event()

        async def fake_fetch(city):
            if city == "London":
                await release.wait()
                return london
            return paris

        mock_client.fetch_report.side_effect = fake_fetch

        slow = asyncio.create_task(panel.fetch_and_render("London"))
        await asyncio.sleep(0)
        await panel.fetch_and_render("Paris")
        release.set()
        await slow

        assert surface.field(Slot.CITY_NAME) == "Paris"
        assert surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.LOADING)

    async def test_last_write_wins_when_discard_disabled(
        self, mock_client, surface, sample_api_response
    ):
        """Test overlapping requests race when stale responses are kept"""
        settings = Settings(
            weather_api_key="test-api-key", discard_stale_responses=False
        )
        panel = WeatherPanel(mock_client, surface, settings)
        london = WeatherReport.model_validate(sample_api_response)
        sample_api_response["location"]["name"] = "Paris"
        paris = WeatherReport.model_validate(sample_api_response)
        release = asyncio.Event()

        async def fake_fetch(city):
            if city == "London":
                await release.wait()
                return london
            return paris

        mock_client.fetch_report.side_effect = fake_fetch

        slow = asyncio.create_task(panel.fetch_and_render("London"))
        await asyncio.sleep(0)
        await panel.fetch_and_render("Paris")
        release.set()
        await slow

        assert surface.field(Slot.CITY_NAME) == "London"


class TestComposeReportView:
    """Test suite for report display values"""

    @pytest.fixture
    def view(self, sample_api_response):
        from zoneinfo import ZoneInfo

        report = WeatherReport.model_validate(sample_api_response)
        return compose_report_view(report, ZoneInfo("UTC"))

    def test_location_fields(self, view):
        assert view.fields[Slot.CITY_NAME] == "London"
        assert view.fields[Slot.REGION] == (
            "City of London, Greater London, United Kingdom"
        )
        assert view.fields[Slot.COORDINATES] == "Coordinates: 51.52°, -0.11°"
        assert view.fields[Slot.LOCAL_TIME] == "Local Time: 2024-10-02 15:05"

    def test_condition_fields(self, view):
        assert view.fields[Slot.WEATHER_ICON] == (
            "//cdn.weatherapi.com/weather/128x128/day/116.png"
        )
        assert view.fields[Slot.WEATHER_ICON_ALT] == "Partly cloudy"
        assert view.fields[Slot.WEATHER_CONDITION] == "Partly cloudy"

    def test_temperature_fields(self, view):
        assert view.fields[Slot.TEMP] == "21°C"
        assert view.fields[Slot.TEMP_F] == "71°F"
        assert view.fields[Slot.FEELS_LIKE] == "Feels Like: 22°C"
        assert view.fields[Slot.FEELS_LIKE_F] == "Feels Like: 71°F"
        assert view.fields[Slot.LAST_UPDATED] == "Last updated: 2024-10-02 15:00"

    def test_measurement_fields(self, view):
        assert view.fields[Slot.WIND] == "Wind Speed: 15.1 km/h (9.4 mph)"
        assert view.fields[Slot.WIND_DIR] == "Wind Direction: SW"
        assert view.fields[Slot.WIND_DEGREE] == "Wind Degree: 230°"
        assert view.fields[Slot.GUST_SPEED] == "Wind Gust: 19.8 km/h (12.3 mph)"
        assert view.fields[Slot.HUMIDITY] == "Humidity: 65%"
        assert view.fields[Slot.PRECIPITATION] == "Precipitation: 0 mm"
        assert view.fields[Slot.PRECIP_IN] == "Precipitation: 0 in"
        assert view.fields[Slot.PRESSURE] == "Pressure: 1013 mb"
        assert view.fields[Slot.PRESSURE_IN] == "Pressure: 29.91 in"
        assert view.fields[Slot.VISIBILITY] == "Visibility: 10 km"
        assert view.fields[Slot.VISIBILITY_MILES] == "Visibility: 6 miles"
        assert view.fields[Slot.UV_INDEX] == "UV Index: 4 (Moderate)"
        assert view.fields[Slot.CLOUD_COVER] == "Cloud Cover: 50%"

    def test_timestamp_fields(self, view):
        assert view.fields[Slot.LAST_UPDATED_EPOCH] == (
            "Last Updated: 10/2/2024, 2:00:00 PM"
        )
        assert view.fields[Slot.LOCAL_TIME_EPOCH] == "Local Time: 10/2/2024, 2:05:00 PM"

    def test_scale_metrics(self, view):
        assert view.metrics[Metric.HUMIDITY_LEVEL] == 65.0
        assert view.metrics[Metric.UV_LEVEL] == pytest.approx(4 / 11 * 100)


class TestUnrenderableReports:
    """Reports that validate but cannot be formatted end in the error state"""

    @pytest.fixture
    def surface(self):
        return InMemorySurface()

    @pytest.fixture
    def mock_client(self):
        return AsyncMock()

    @pytest.fixture
    def panel(self, mock_client, surface, test_settings):
        return WeatherPanel(mock_client, surface, test_settings)

    async def test_nan_temperature_shows_generic_error(
        self, panel, mock_client, surface, sample_api_response
    ):
        report = WeatherReport.model_validate(sample_api_response)
        report.current.temp_c = float("nan")
        mock_client.fetch_report.return_value = report

        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == "Failed to fetch weather data"
        assert surface.is_visible(Region.ERROR)
        assert not surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.LOADING)
        assert surface.field(Slot.CITY_NAME) == ""

    async def test_out_of_range_epoch_shows_generic_error(
        self, panel, mock_client, surface, sample_api_response
    ):
        sample_api_response["location"]["localtime_epoch"] = 10**13
        mock_client.fetch_report.return_value = WeatherReport.model_validate(
            sample_api_response
        )

        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == "Failed to fetch weather data"
        assert not surface.is_visible(Region.REPORT)
        assert not surface.is_visible(Region.LOADING)
        assert surface.field(Slot.TEMP) == ""

    async def test_unrenderable_report_keeps_previous_report_hidden(
        self, panel, mock_client, surface, sample_api_response
    ):
        mock_client.fetch_report.return_value = WeatherReport.model_validate(
            sample_api_response
        )
        await panel.fetch_and_render("London")

        sample_api_response["current"]["last_updated_epoch"] = 10**13
        mock_client.fetch_report.return_value = WeatherReport.model_validate(
            sample_api_response
        )
        await panel.fetch_and_render("London")

        assert surface.field(Slot.ERROR) == "Failed to fetch weather data"
        assert not surface.is_visible(Region.REPORT)
