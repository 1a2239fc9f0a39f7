import logging
import sys
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from weather_panel.api.routes import router
from weather_panel.config.settings import Settings, settings
from weather_panel.config.utils import get_config_summary, validate_configuration
from weather_panel.providers.surface import InMemorySurface
from weather_panel.services.weather_client import WeatherClient
from weather_panel.services.weather_panel import WeatherPanel
from weather_panel.utils.exceptions import WeatherPanelError
from weather_panel.views.page import router as page_router


def setup_logging(settings_obj: Settings) -> None:
    """Configure structured logging for the application."""

    log_level = getattr(logging, settings_obj.log_level.upper())

    if settings_obj.log_format == "json" and not settings_obj.is_development:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifespan - startup and shutdown events.

    Opens the weather client, creates the panel with an in-memory surface and
    shows the default location before the first request is served.
    """
    logger = structlog.get_logger(__name__)
    app_settings: Settings = app.state.settings

    logger.info("Starting weather panel", version=app_settings.app_version)

    validation = validate_configuration(app_settings)
    for warning in validation["warnings"]:
        logger.warning("Configuration warning", warning=warning)
    if not validation["valid"]:
        logger.error("Invalid configuration", errors=validation["errors"])
    logger.info("Configuration loaded", **get_config_summary(app_settings))

    async with WeatherClient(app_settings) as client:
        panel = WeatherPanel(client, InMemorySurface(), app_settings)
        app.state.panel = panel

        if app_settings.fetch_on_startup:
            await panel.start()

        yield  # Application is running

        logger.info("Shutting down weather panel")
        del app.state.panel


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or settings

    setup_logging(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Current weather conditions for any location",
        docs_url="/docs" if app_settings.is_development else None,
        redoc_url="/redoc" if app_settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["*"]
        if app_settings.is_development
        else ["localhost", "127.0.0.1"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next) -> Response:
        """Log requests and add processing time headers."""
        logger = structlog.get_logger(__name__)

        start_time = time.time()
        request_id = f"req_{int(start_time * 1000000)}"

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger.info("Request started")

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                process_time=process_time,
            )

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                process_time=process_time,
            )
            raise

    @app.exception_handler(WeatherPanelError)
    async def weather_panel_error_handler(
        _request: Request, exc: WeatherPanelError
    ) -> JSONResponse:
        """Handle weather panel specific errors."""
        logger = structlog.get_logger(__name__)
        logger.error(
            "Weather panel error", error=str(exc), error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": exc.error_code,
                "message": str(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected errors gracefully."""
        logger = structlog.get_logger(__name__)
        logger.error(
            "Unhandled exception", error=str(exc), error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_SERVER_ERROR",
                "message": "An internal server error occurred",
                "details": str(exc) if app_settings.is_development else None,
            },
        )

    app.include_router(router, prefix="/api/v1")
    app.include_router(page_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "weather_panel.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
