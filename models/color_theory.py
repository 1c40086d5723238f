"""Lightweight color harmony helpers for deterministic outfit scoring."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

COLOR_MAP: Dict[str, str] = {
    "navy blue": "navy",
    "light blue": "blue",
    "sky blue": "blue",
    "denim": "blue",
    "off white": "white",
    "ivory": "white",
    "cream": "beige",
    "tan": "beige",
    "camel": "beige",
    "khaki": "beige",
    "grey": "gray",
    "charcoal": "gray",
    "olive": "green",
    "mint": "green",
    "burgundy": "red",
    "maroon": "red",
    "coral": "orange",
    "mustard": "yellow",
    "lilac": "purple",
    "lavender": "purple",
    "violet": "purple",
    "fuchsia": "pink",
}

COLOR_FAMILIES: Dict[str, str] = {
    "black": "neutral",
    "white": "neutral",
    "gray": "neutral",
    "beige": "neutral",
    "brown": "neutral",
    "navy": "neutral",
    "red": "warm",
    "orange": "warm",
    "yellow": "warm",
    "pink": "warm",
    "green": "cool",
    "blue": "cool",
    "indigo": "cool",
    "purple": "cool",
}

_COMPLEMENTARY_PAIRS = {
    ("red", "green"),
    ("blue", "orange"),
    ("yellow", "purple"),
    ("pink", "green"),
    ("navy", "orange"),
    ("black", "white"),
}

_COLOR_WHEEL: List[str] = ["red", "orange", "yellow", "green", "blue", "indigo", "purple", "pink"]


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical lower-case color name."""

    key = " ".join(str(raw_string).strip().lower().split())
    return COLOR_MAP.get(key, key)


def _normalise_colors(colors: Iterable[str]) -> List[str]:
    return [normalize_color_name(color) for color in colors if color]


def color_family(color: str) -> Optional[str]:
    """Return ``neutral``, ``warm`` or ``cool`` for known colors."""

    return COLOR_FAMILIES.get(normalize_color_name(color))


def monochrome(color_list: Iterable[str]) -> bool:
    """Return True when all provided colors collapse to a single tone."""

    unique_colors = {color for color in _normalise_colors(color_list) if color}
    result = len(unique_colors) <= 1
    logger.debug("monochrome check %s -> %s", unique_colors, result)
    return result


def complementary(color1: str, color2: str) -> bool:
    """Return True when the colors form a complementary pair."""

    c1, c2 = normalize_color_name(color1), normalize_color_name(color2)
    if c1 == c2:
        return False
    result = (c1, c2) in _COMPLEMENTARY_PAIRS or (c2, c1) in _COMPLEMENTARY_PAIRS
    logger.debug("complementary check (%s, %s) -> %s", c1, c2, result)
    return result


def analogous(color1: str, color2: str) -> bool:
    """Return True when the colors sit next to each other on a simple wheel."""

    c1, c2 = normalize_color_name(color1), normalize_color_name(color2)
    if c1 == c2 or c1 not in _COLOR_WHEEL or c2 not in _COLOR_WHEEL:
        return False
    distance = abs(_COLOR_WHEEL.index(c1) - _COLOR_WHEEL.index(c2))
    return min(distance, len(_COLOR_WHEEL) - distance) == 1


def harmony_credit(color: str, scheme: Sequence[str]) -> float:
    """Score one item color against a requested color scheme.

    1.0 for an exact scheme color, 0.5 when it shares a family with a scheme
    color or is complementary/analogous to one, otherwise 0.0.
    """

    normalized = normalize_color_name(color)
    palette = _normalise_colors(scheme)
    if normalized in palette:
        return 1.0
    family = color_family(normalized)
    for candidate in palette:
        if family is not None and family == color_family(candidate):
            return 0.5
        if complementary(normalized, candidate) or analogous(normalized, candidate):
            return 0.5
    return 0.0


__all__ = [
    "COLOR_MAP",
    "COLOR_FAMILIES",
    "normalize_color_name",
    "color_family",
    "monochrome",
    "complementary",
    "analogous",
    "harmony_credit",
]
