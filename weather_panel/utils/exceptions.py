from typing import Any


class WeatherPanelError(Exception):
    """Base exception for weather panel errors"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = "WEATHER_PANEL_ERROR"


class UpstreamError(WeatherPanelError):
    """Exception raised when the weather API answers with an error body"""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, {"code": code, "status_code": status_code})
        self.code = code
        self.status_code = status_code
        self.error_code = "UPSTREAM_ERROR"


class TransportError(WeatherPanelError):
    """Exception raised when the weather API cannot be reached or understood"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code
        self.error_code = "TRANSPORT_ERROR"


class ConfigurationError(WeatherPanelError):
    """Exception raised when configuration is invalid"""

    def __init__(self, message: str):
        super().__init__(message)
        self.error_code = "CONFIGURATION_ERROR"
