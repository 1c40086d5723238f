"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.outfit import OutfitCandidate, OutfitCriteria
from models.wardrobe import RankedWardrobe, Wardrobe
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from models.weather import WeatherCondition

__all__ = [
    "OutfitCandidate",
    "OutfitCriteria",
    "RankedWardrobe",
    "Wardrobe",
    "WardrobeItem",
    "WeatherCondition",
    "from_raw_metadata",
]
