from pathlib import Path
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from weather_panel.api.routes import get_panel_surface, get_weather_panel
from weather_panel.providers.surface import InMemorySurface
from weather_panel.services.weather_panel import WeatherPanel

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    surface: InMemorySurface = Depends(get_panel_surface),
) -> HTMLResponse:
    """Render the panel page from the current surface state."""
    state = surface.snapshot()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "fields": state.fields,
            "metrics": state.metrics,
            "visibility": state.visibility,
        },
    )


@router.get("/search", include_in_schema=False)
async def search_form(
    city: Annotated[str, Query(max_length=100)] = "",
    panel: WeatherPanel = Depends(get_weather_panel),
) -> RedirectResponse:
    """Handle the search form, then send the browser back to the page."""
    fetched = await panel.submit(city)
    logger.info("Search form submitted", city=city, fetched=fetched)
    return RedirectResponse(url="/", status_code=303)
