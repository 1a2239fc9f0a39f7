from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from weather_panel.providers.surface import InMemorySurface
from weather_panel.services.weather_panel import WeatherPanel

logger = structlog.get_logger(__name__)
router = APIRouter()


def get_weather_panel(request: Request) -> WeatherPanel:
    """
    Dependency injection for the weather panel.

    Retrieves the panel instance from the application state.
    The panel is created during application startup.
    """
    if not hasattr(request.app.state, "panel"):
        raise HTTPException(status_code=503, detail="Weather panel not available")

    return request.app.state.panel


def get_panel_surface(
    panel: WeatherPanel = Depends(get_weather_panel),
) -> InMemorySurface:
    """
    Dependency injection for the readable panel surface.

    The HTTP layer renders from surface snapshots, which only the in-memory
    surface provides.
    """
    if not isinstance(panel.surface, InMemorySurface):
        raise HTTPException(status_code=503, detail="Panel surface cannot be read")

    return panel.surface


@router.get(
    "/panel",
    response_model=dict[str, Any],
    summary="Current panel state",
    description="""
    Return everything currently on the weather panel:
    - `fields`: display strings keyed by slot name
    - `metrics`: humidity and UV scale widths in percent
    - `visibility`: loading, error and report region toggles
    """,
    tags=["Panel"],
)
async def get_panel_state(
    surface: InMemorySurface = Depends(get_panel_surface),
) -> dict[str, Any]:
    """Get a snapshot of the panel surface."""
    return surface.snapshot().model_dump()


@router.get(
    "/search",
    response_model=dict[str, Any],
    summary="Search a location",
    description="""
    Submit a location query to the panel.

    Empty or whitespace-only queries are ignored and leave the panel unchanged.
    Upstream and transport errors are not HTTP errors: they show up in the
    returned panel state as the `error` field with the report region hidden.
    """,
    tags=["Panel"],
)
async def search(
    city: Annotated[
        str,
        Query(
            description="City name, coordinates or landmark",
            max_length=100,
            examples=["London"],
        ),
    ] = "",
    panel: WeatherPanel = Depends(get_weather_panel),
    surface: InMemorySurface = Depends(get_panel_surface),
) -> dict[str, Any]:
    """Run one fetch/render cycle and return the resulting panel state."""
    logger.info("Search submitted", city=city)

    fetched = await panel.submit(city)

    state = surface.snapshot()
    logger.info(
        "Search completed",
        city=city,
        fetched=fetched,
        error=state.fields.get("error") or None,
    )
    return {"fetched": fetched, "state": state.model_dump()}


@router.get(
    "/health",
    response_model=dict[str, Any],
    summary="Liveness probe",
    tags=["Health"],
)
async def health_check(request: Request) -> dict[str, Any]:
    """Report whether the panel has been created."""
    return {
        "status": "ok",
        "panel_ready": hasattr(request.app.state, "panel"),
    }
