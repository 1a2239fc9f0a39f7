from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Weather Panel"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: Literal["development", "production"] = "development"

    host: str = "0.0.0.0"
    port: int = 8000

    weather_api_key: str = Field(default="", description="WeatherAPI.com API key")
    weather_api_url: HttpUrl = Field(
        default="https://api.weatherapi.com/v1/current.json",
        description="Current conditions endpoint",
    )
    weather_api_timeout: float = Field(
        default=10.0, description="Weather API request timeout in seconds"
    )
    include_air_quality: bool = Field(
        default=False, description="Ask the API for air quality data (aqi=yes)"
    )

    default_location: str = Field(
        default="London", description="Location fetched when the panel starts"
    )
    fetch_on_startup: bool = True
    discard_stale_responses: bool = Field(
        default=True,
        description="Drop responses of requests superseded by a newer one",
    )
    display_timezone: str | None = Field(
        default=None,
        description="IANA timezone for rendered timestamps, host local zone if unset",
    )
    generic_error_message: str = "Failed to fetch weather data"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def aqi_flag(self) -> str:
        return "yes" if self.include_air_quality else "no"


settings = Settings()
