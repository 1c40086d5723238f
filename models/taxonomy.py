"""Canonical taxonomy definitions for wardrobe items.

This module centralises the canonical labels for categories, seasons, style
tags and occasions. Helper functions keep normalisation consistent across the
engine, the repository and the HTTP layer.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


CATEGORIES: List[str] = ["top", "bottom", "dress", "shoes", "outerwear", "accessory"]

CATEGORY_ALIASES: Dict[str, str] = {
    "tops": "top",
    "shirt": "top",
    "blouse": "top",
    "bottoms": "bottom",
    "pants": "bottom",
    "trousers": "bottom",
    "skirt": "bottom",
    "dresses": "dress",
    "jumpsuit": "dress",
    "shoe": "shoes",
    "footwear": "shoes",
    "jacket": "outerwear",
    "coat": "outerwear",
    "accessories": "accessory",
    "bag": "accessory",
    "jewelry": "accessory",
    "jewellery": "accessory",
}

SEASONS = ["spring", "summer", "fall", "winter", "all"]
ALL_SEASONS = "all"

SEASON_ALIASES: Dict[str, str] = {
    "autumn": "fall",
    "all_year": "all",
    "all_season": "all",
    "all_seasons": "all",
    "any": "all",
}

OCCASION_STYLES: Dict[str, FrozenSet[str]] = {
    "business": frozenset({"formal", "business", "business-casual", "smart-casual"}),
    "formal": frozenset({"formal", "elegant", "black-tie"}),
    "casual": frozenset({"casual", "street", "sporty", "relaxed"}),
    "party": frozenset({"party", "elegant", "trendy", "glam"}),
    "date": frozenset({"elegant", "romantic", "smart-casual", "casual"}),
    "wedding": frozenset({"formal", "elegant", "romantic"}),
    "sport": frozenset({"sporty", "athleisure"}),
    "travel": frozenset({"casual", "relaxed", "athleisure"}),
}

OCCASION_ALIASES: Dict[str, str] = {
    "work": "business",
    "office": "business",
    "gym": "sport",
    "workout": "sport",
    "night_out": "party",
    "evening": "party",
}


def normalize_category(value: Optional[str]) -> str:
    """Map a raw category label to its canonical key.

    Unknown labels are returned normalised but unchanged so that callers can
    decide whether to skip them; an empty value yields an empty string.
    """

    if not value:
        return ""
    key = _normalize_key(str(value))
    return CATEGORY_ALIASES.get(key, key)


def is_known_category(value: str) -> bool:
    return value in CATEGORIES


def normalize_season(value: Optional[str]) -> Optional[str]:
    """Return the canonical season for ``value`` or ``None`` when unset.

    Raises a :class:`ValueError` for labels outside the season vocabulary.
    """

    if value is None or not str(value).strip():
        return None
    key = _normalize_key(str(value))
    key = SEASON_ALIASES.get(key, key)
    if key not in SEASONS:
        raise ValueError(f"Unsupported season '{value}'. Allowed: {SEASONS}")
    return key


def normalize_style(value: Optional[str]) -> Optional[str]:
    """Style tags are free-form; compare them lower-cased with dashes."""

    if value is None or not str(value).strip():
        return None
    return str(value).strip().lower().replace("_", "-").replace(" ", "-")


def normalize_occasion(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    key = _normalize_key(str(value))
    return OCCASION_ALIASES.get(key, key)


def styles_for_occasion(occasion: Optional[str]) -> Optional[FrozenSet[str]]:
    """Look up the style tags appropriate for an occasion, ``None`` if unknown."""

    key = normalize_occasion(occasion)
    if key is None:
        return None
    return OCCASION_STYLES.get(key)


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Normalise and deduplicate free-form style tags preserving order."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_style(value)
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "CATEGORY_ALIASES",
    "SEASONS",
    "ALL_SEASONS",
    "OCCASION_STYLES",
    "normalize_category",
    "is_known_category",
    "normalize_season",
    "normalize_style",
    "normalize_occasion",
    "styles_for_occasion",
    "normalise_tags",
]
