from abc import ABC, abstractmethod
from enum import Enum


class Region(str, Enum):
    """Regions of the panel whose visibility can be toggled"""

    LOADING = "loading"
    ERROR = "error"
    REPORT = "report"


class Slot(str, Enum):
    """Named text/attribute slots of the panel"""

    CITY_INPUT = "cityInput"
    ERROR = "error"

    CITY_NAME = "cityName"
    REGION = "region"
    COORDINATES = "coordinates"
    LOCAL_TIME = "localTime"

    WEATHER_ICON = "weatherIcon"
    WEATHER_ICON_ALT = "weatherIconAlt"
    WEATHER_CONDITION = "weatherCondition"

    TEMP = "temp"
    TEMP_F = "tempF"
    LAST_UPDATED = "lastUpdated"

    WIND = "wind"
    WIND_DIR = "windDir"
    WIND_DEGREE = "windDegree"
    GUST_SPEED = "gustSpeed"

    HUMIDITY = "humidity"
    PRECIPITATION = "precipitation"
    PRECIP_IN = "precipIn"

    PRESSURE = "pressure"
    PRESSURE_IN = "pressureIn"
    VISIBILITY = "visibility"
    VISIBILITY_MILES = "visibilityMiles"

    FEELS_LIKE = "feelsLike"
    FEELS_LIKE_F = "feelsLikeF"
    UV_INDEX = "uvIndex"
    CLOUD_COVER = "cloudCover"

    LAST_UPDATED_EPOCH = "lastUpdatedEpoch"
    LOCAL_TIME_EPOCH = "localTimeEpoch"


class Metric(str, Enum):
    """Percentage-width visual scales"""

    HUMIDITY_LEVEL = "humidityLevel"
    UV_LEVEL = "uvLevel"


class PresentationSurface(ABC):
    """Abstract display target the weather panel writes into"""

    @abstractmethod
    def set_field(self, name: Slot, value: str) -> None:
        """
        Set the text or attribute value of a named slot

        Args:
            name: Slot to write
            value: Display string
        """
        pass

    @abstractmethod
    def set_visibility(self, region: Region, visible: bool) -> None:
        """
        Show or hide a region

        Args:
            region: Region to toggle
            visible: True to show, False to hide
        """
        pass

    @abstractmethod
    def set_style_metric(self, name: Metric, percent: float) -> None:
        """
        Set the width of a visual scale

        Args:
            name: Scale to resize
            percent: Width in percent, 0 to 100
        """
        pass
