"""
Display formatting helpers for the weather panel.

All helpers are pure: the same input always yields the same string, which keeps
re-rendering a report idempotent.
"""

from datetime import datetime, tzinfo
from decimal import ROUND_FLOOR, Decimal

UV_SCALE_MAX = 11

# Inclusive upper bounds
UV_BANDS: list[tuple[float, str]] = [
    (2, "Low"),
    (5, "Moderate"),
    (7, "High"),
    (10, "Very High"),
]
UV_BAND_EXTREME = "Extreme"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity (21.5 -> 22, -2.5 -> -2)."""
    shifted = Decimal(str(value)) + Decimal("0.5")
    return int(shifted.to_integral_value(rounding=ROUND_FLOOR))


def format_temperature(value: float, unit: str = "C") -> str:
    return f"{round_half_up(value)}°{unit}"


def format_measure(value: float) -> str:
    """Render a measurement without a trailing '.0' on whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def uv_band(uv: float) -> str:
    """Map a UV index to its qualitative band."""
    for upper, label in UV_BANDS:
        if uv <= upper:
            return label
    return UV_BAND_EXTREME


def uv_scale_percent(uv: float) -> float:
    """Width of the UV scale, clamped to 0-100 since the index can exceed 11."""
    return min(max(uv / UV_SCALE_MAX * 100, 0.0), 100.0)


def humidity_scale_percent(humidity: int) -> float:
    return float(min(max(humidity, 0), 100))


def format_epoch(epoch: int, tz: tzinfo | None = None) -> str:
    """
    Convert Unix epoch seconds to a viewer-local date and time string.

    Uses the host's local timezone unless ``tz`` is given. Output looks like
    ``10/2/2024, 2:05:00 PM``.
    """
    if tz is None:
        moment = datetime.fromtimestamp(epoch).astimezone()
    else:
        moment = datetime.fromtimestamp(epoch, tz=tz)

    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def upgrade_icon_url(icon: str) -> str:
    """Point a condition icon at the 128x128 artwork instead of 64x64."""
    return icon.replace("64x64", "128x128")
