from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .settings import Settings, settings


def validate_configuration(
    app_settings: Settings | None = None,
) -> dict[str, list[str] | bool]:
    """Validate configuration and return validation results."""
    app_settings = app_settings or settings
    errors = []
    warnings = []

    if not app_settings.weather_api_key.strip():
        errors.append("WEATHER_API_KEY must be set to a valid WeatherAPI.com key")

    if app_settings.weather_api_timeout <= 0:
        errors.append("WEATHER_API_TIMEOUT must be a positive number")

    if not app_settings.default_location.strip():
        if app_settings.fetch_on_startup:
            errors.append("DEFAULT_LOCATION must be set when FETCH_ON_STARTUP is on")
        else:
            warnings.append("DEFAULT_LOCATION is empty")

    if app_settings.display_timezone:
        try:
            ZoneInfo(app_settings.display_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(
                f"DISPLAY_TIMEZONE '{app_settings.display_timezone}' is not a known timezone"
            )

    if app_settings.include_air_quality:
        warnings.append("INCLUDE_AIR_QUALITY is on but air quality is never rendered")

    if not (1 <= app_settings.port <= 65535):
        errors.append("PORT must be between 1 and 65535")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def get_config_summary(
    app_settings: Settings | None = None,
) -> dict[str, str | int | float | bool | None]:
    """Get a summary of current configuration for logging/debugging."""
    app_settings = app_settings or settings
    return {
        "app_name": app_settings.app_name,
        "version": app_settings.app_version,
        "environment": app_settings.environment,
        "debug": app_settings.debug,
        "log_level": app_settings.log_level,
        "api_endpoint": f"{app_settings.host}:{app_settings.port}",
        "weather_api_url": str(app_settings.weather_api_url),
        "weather_api_timeout": app_settings.weather_api_timeout,
        "default_location": app_settings.default_location,
        "display_timezone": app_settings.display_timezone,
        "discard_stale_responses": app_settings.discard_stale_responses,
        "weather_api_configured": bool(
            app_settings.weather_api_key and len(app_settings.weather_api_key.strip()) >= 10
        ),
    }
