import copy

import pytest

from weather_panel.config.settings import Settings

SAMPLE_API_RESPONSE = {
    "location": {
        "name": "London",
        "region": "City of London, Greater London",
        "country": "United Kingdom",
        "lat": 51.52,
        "lon": -0.11,
        "tz_id": "Europe/London",
        "localtime_epoch": 1727877900,
        "localtime": "2024-10-02 15:05",
    },
    "current": {
        "last_updated_epoch": 1727877600,
        "last_updated": "2024-10-02 15:00",
        "temp_c": 21.4,
        "temp_f": 70.5,
        "is_day": 1,
        "condition": {
            "text": "Partly cloudy",
            "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
            "code": 1003,
        },
        "wind_mph": 9.4,
        "wind_kph": 15.1,
        "wind_degree": 230,
        "wind_dir": "SW",
        "pressure_mb": 1013.0,
        "pressure_in": 29.91,
        "precip_mm": 0.0,
        "precip_in": 0.0,
        "humidity": 65,
        "cloud": 50,
        "feelslike_c": 21.5,
        "feelslike_f": 70.7,
        "windchill_c": 20.1,
        "heatindex_c": 21.5,
        "vis_km": 10.0,
        "vis_miles": 6.0,
        "uv": 4.0,
        "gust_mph": 12.3,
        "gust_kph": 19.8,
    },
}


@pytest.fixture
def sample_api_response():
    """Sample current.json response from WeatherAPI.com"""
    return copy.deepcopy(SAMPLE_API_RESPONSE)


@pytest.fixture
def test_settings():
    """Settings pointing at a fake key, rendering timestamps in UTC"""
    return Settings(
        weather_api_key="test-api-key",
        weather_api_url="https://api.weatherapi.com/v1/current.json",
        weather_api_timeout=10,
        display_timezone="UTC",
    )
