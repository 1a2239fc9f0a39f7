from pydantic import BaseModel, Field

from .base import Metric, PresentationSurface, Region, Slot


class PanelState(BaseModel):
    """Snapshot of everything currently on the panel"""

    fields: dict[str, str] = Field(default_factory=dict)
    metrics: dict[str, float] = Field(default_factory=dict)
    visibility: dict[str, bool] = Field(default_factory=dict)


class InMemorySurface(PresentationSurface):
    """Headless surface that keeps slot values in dictionaries"""

    def __init__(self) -> None:
        self.fields: dict[Slot, str] = {}
        self.metrics: dict[Metric, float] = {}
        self.visibility: dict[Region, bool] = {region: False for region in Region}

    def set_field(self, name: Slot, value: str) -> None:
        self.fields[Slot(name)] = value

    def set_visibility(self, region: Region, visible: bool) -> None:
        self.visibility[Region(region)] = visible

    def set_style_metric(self, name: Metric, percent: float) -> None:
        self.metrics[Metric(name)] = percent

    def field(self, name: Slot) -> str:
        return self.fields.get(Slot(name), "")

    def is_visible(self, region: Region) -> bool:
        return self.visibility[Region(region)]

    def snapshot(self) -> PanelState:
        return PanelState(
            fields={slot.value: value for slot, value in self.fields.items()},
            metrics={metric.value: value for metric, value in self.metrics.items()},
            visibility={
                region.value: visible for region, visible in self.visibility.items()
            },
        )
