from .base import Metric, PresentationSurface, Region, Slot
from .memory import InMemorySurface, PanelState

__all__ = [
    "PresentationSurface",
    "InMemorySurface",
    "PanelState",
    "Region",
    "Slot",
    "Metric",
]
