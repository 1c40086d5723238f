"""Deterministic translation of resolved weather into engine inputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from models.weather import WeatherCondition
from models.wardrobe_item import WardrobeItem

TEMPERATURE_SEASON_BANDS_C = (
    (5.0, "winter"),
    (15.0, "fall"),
    (25.0, "spring"),
)

_HEAVY_MARKERS = ("heavy", "wool", "winter", "knit")
_HOT_BOTTOM_MARKERS = ("jeans", "thick", "corduroy")
_OPEN_SHOE_MARKERS = ("sandal", "open", "flip")


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[WardrobeItem]
    removed: Dict[str, str]
    debug: Dict[str, object]


def season_for_temperature(temperature_c: float) -> str:
    """Map a temperature to the season whose wardrobe suits it best."""

    for upper_bound, season in TEMPERATURE_SEASON_BANDS_C:
        if temperature_c < upper_bound:
            return season
    return "summer"


def _text(item: WardrobeItem) -> str:
    parts = [item.name, item.description, item.material]
    return " ".join(part.lower() for part in parts if part)


def _exclusion_reason(item: WardrobeItem, weather: WeatherCondition) -> Optional[str]:
    temperature = weather.temperature_c
    text = _text(item)

    if item.slot == "outerwear":
        if temperature < 15:
            return None
        if weather.is_wet and weather.precipitation > 30:
            return None
        if temperature > 25:
            return "outerwear too warm above 25C"
    elif item.slot == "top":
        if temperature > 25 and any(marker in text for marker in _HEAVY_MARKERS):
            return "heavy top above 25C"
    elif item.slot == "bottom":
        if temperature < 10 and "short" in text:
            return "shorts below 10C"
        if temperature > 28 and any(marker in text for marker in _HOT_BOTTOM_MARKERS):
            return "heavy bottom above 28C"
    elif item.slot == "dress":
        if temperature < 10 and "long" not in text:
            return "short dress below 10C"
    elif item.slot == "shoes":
        if weather.is_wet and weather.precipitation > 50 and any(marker in text for marker in _OPEN_SHOE_MARKERS):
            return "open shoes in heavy precipitation"
    return None


def filter_by_weather(items: List[WardrobeItem], weather: WeatherCondition) -> FilteringResult:
    """Drop items that are clearly wrong for the resolved weather."""

    removed: Dict[str, str] = {}
    kept: List[WardrobeItem] = []
    for item in items:
        reason = _exclusion_reason(item, weather)
        if reason:
            removed[item.item_id] = reason
        else:
            kept.append(item)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "temperature_c": weather.temperature_c,
        "condition": weather.condition,
        "precipitation": weather.precipitation,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = ["FilteringResult", "TEMPERATURE_SEASON_BANDS_C", "filter_by_weather", "season_for_temperature"]
