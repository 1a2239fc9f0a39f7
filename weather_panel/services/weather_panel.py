"""
Weather panel orchestrating one fetch/render/error cycle per user action.

The panel fetches current conditions through the weather client, turns the
report into display strings and writes them to a presentation surface. It
never lets an error escape: every failure ends with the surface showing an
error message instead of the report.
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from weather_panel.config.settings import Settings
from weather_panel.models.weather import WeatherQuery, WeatherReport
from weather_panel.providers.surface import Metric, PresentationSurface, Region, Slot
from weather_panel.services.weather_client import WeatherClient
from weather_panel.utils.exceptions import UpstreamError
from weather_panel.utils.formatting import (
    format_epoch,
    format_measure,
    format_temperature,
    humidity_scale_percent,
    upgrade_icon_url,
    uv_band,
    uv_scale_percent,
)

logger = logging.getLogger(__name__)


@dataclass
class ReportView:
    """Display values derived from a single report, ready to commit"""

    fields: dict[Slot, str] = field(default_factory=dict)
    metrics: dict[Metric, float] = field(default_factory=dict)


def compose_report_view(report: WeatherReport, tz: tzinfo | None = None) -> ReportView:
    """Compute every display string and scale width for a report."""
    location = report.location
    current = report.current
    band = uv_band(current.uv)

    fields = {
        Slot.CITY_NAME: location.name,
        Slot.REGION: f"{location.region}, {location.country}",
        Slot.COORDINATES: (
            f"Coordinates: {format_measure(location.lat)}°, "
            f"{format_measure(location.lon)}°"
        ),
        Slot.LOCAL_TIME: f"Local Time: {location.localtime}",
        Slot.WEATHER_ICON: upgrade_icon_url(current.condition.icon),
        Slot.WEATHER_ICON_ALT: current.condition.text,
        Slot.WEATHER_CONDITION: current.condition.text,
        Slot.TEMP: format_temperature(current.temp_c, "C"),
        Slot.TEMP_F: format_temperature(current.temp_f, "F"),
        Slot.LAST_UPDATED: f"Last updated: {current.last_updated}",
        Slot.WIND: (
            f"Wind Speed: {format_measure(current.wind_kph)} km/h "
            f"({format_measure(current.wind_mph)} mph)"
        ),
        Slot.WIND_DIR: f"Wind Direction: {current.wind_dir}",
        Slot.WIND_DEGREE: f"Wind Degree: {current.wind_degree}°",
        Slot.GUST_SPEED: (
            f"Wind Gust: {format_measure(current.gust_kph)} km/h "
            f"({format_measure(current.gust_mph)} mph)"
        ),
        Slot.HUMIDITY: f"Humidity: {current.humidity}%",
        Slot.PRECIPITATION: f"Precipitation: {format_measure(current.precip_mm)} mm",
        Slot.PRECIP_IN: f"Precipitation: {format_measure(current.precip_in)} in",
        Slot.PRESSURE: f"Pressure: {format_measure(current.pressure_mb)} mb",
        Slot.PRESSURE_IN: f"Pressure: {format_measure(current.pressure_in)} in",
        Slot.VISIBILITY: f"Visibility: {format_measure(current.vis_km)} km",
        Slot.VISIBILITY_MILES: f"Visibility: {format_measure(current.vis_miles)} miles",
        Slot.FEELS_LIKE: f"Feels Like: {format_temperature(current.feelslike_c, 'C')}",
        Slot.FEELS_LIKE_F: f"Feels Like: {format_temperature(current.feelslike_f, 'F')}",
        Slot.UV_INDEX: f"UV Index: {format_measure(current.uv)} ({band})",
        Slot.CLOUD_COVER: f"Cloud Cover: {current.cloud}%",
        Slot.LAST_UPDATED_EPOCH: (
            f"Last Updated: {format_epoch(current.last_updated_epoch, tz)}"
        ),
        Slot.LOCAL_TIME_EPOCH: f"Local Time: {format_epoch(location.localtime_epoch, tz)}",
    }
    metrics = {
        Metric.HUMIDITY_LEVEL: humidity_scale_percent(current.humidity),
        Metric.UV_LEVEL: uv_scale_percent(current.uv),
    }
    return ReportView(fields=fields, metrics=metrics)


class WeatherPanel:
    """
    Single-session weather panel.

    Flow of ``fetch_and_render``:
    1. Enter the loading state
    2. Fetch current conditions (one request)
    3. Render the report, or the upstream/generic error message
    4. Leave the loading state
    """

    def __init__(
        self,
        client: WeatherClient,
        surface: PresentationSurface,
        settings: Settings,
    ):
        self.client = client
        self.surface = surface
        self.settings = settings
        self.timezone: tzinfo | None = (
            ZoneInfo(settings.display_timezone) if settings.display_timezone else None
        )
        self._generation = 0

    async def start(self) -> None:
        """Startup trigger: show the default location"""
        logger.info(f"Loading default location: {self.settings.default_location}")
        await self.fetch_and_render(self.settings.default_location)

    async def submit(self, raw_query: str) -> bool:
        """
        Search submission trigger.

        Returns:
            True if a fetch was issued, False for empty or whitespace-only input
        """
        try:
            query = WeatherQuery(q=raw_query)
        except ValidationError:
            logger.debug("Ignoring empty search submission")
            return False

        self.surface.set_field(Slot.CITY_INPUT, "")
        await self.fetch_and_render(query.q)
        return True

    async def fetch_and_render(self, city: str) -> None:
        """Fetch conditions for ``city`` and show either the report or an error"""
        self._generation += 1
        generation = self._generation

        self._show_loading(True)
        try:
            report = await self.client.fetch_report(city)
            view = compose_report_view(report, self.timezone)

        except UpstreamError as e:
            if self._is_current(generation, city):
                self.render_error(e.message)
        except Exception as e:
            logger.error(f"Failed to fetch weather data for {city}: {e}")
            if self._is_current(generation, city):
                self.render_error(self.settings.generic_error_message)
        else:
            if self._is_current(generation, city):
                self._commit(view)
        finally:
            if self._is_current(generation, city, log=False):
                self._show_loading(False)

    def render(self, report: WeatherReport) -> None:
        """Commit a report to the surface and reveal the report view"""
        self._commit(compose_report_view(report, self.timezone))

    def _commit(self, view: ReportView) -> None:
        for slot, value in view.fields.items():
            self.surface.set_field(slot, value)
        for metric, percent in view.metrics.items():
            self.surface.set_style_metric(metric, percent)

        self.surface.set_field(Slot.ERROR, "")
        self.surface.set_visibility(Region.ERROR, False)
        self.surface.set_visibility(Region.REPORT, True)

    def render_error(self, message: str) -> None:
        """Show an error message and hide the report view"""
        self.surface.set_field(Slot.ERROR, message)
        self.surface.set_visibility(Region.ERROR, True)
        self.surface.set_visibility(Region.REPORT, False)

    def _show_loading(self, show: bool) -> None:
        self.surface.set_visibility(Region.LOADING, show)
        if show:
            self.surface.set_visibility(Region.REPORT, False)

    def _is_current(self, generation: int, city: str, log: bool = True) -> bool:
        if not self.settings.discard_stale_responses:
            return True
        if generation == self._generation:
            return True
        if log:
            logger.debug(f"Discarding stale response for {city}")
        return False
