"""Outfit candidate schema produced by the recommendation engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.color_theory import normalize_color_name
from models.taxonomy import normalise_tags, normalize_occasion, normalize_season
from models.wardrobe_item import WardrobeItem
from models.weather import WeatherCondition


@dataclass
class OutfitCriteria:
    """Optional constraints biasing outfit recommendations."""

    occasion: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[WeatherCondition] = None
    style_preference: List[str] = field(default_factory=list)
    color_scheme: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.occasion = normalize_occasion(self.occasion)
        self.season = normalize_season(self.season)
        self.style_preference = normalise_tags(self.style_preference or [])
        colors: List[str] = []
        for raw in self.color_scheme or []:
            color = normalize_color_name(raw)
            if color and color not in colors:
                colors.append(color)
        self.color_scheme = colors


@dataclass
class OutfitCandidate:
    """A non-persisted grouping of compatible wardrobe items.

    Generated fresh per request; ``items`` keeps slot order (base, bottom,
    outerwear, shoes, accessories).
    """

    items: List[WardrobeItem]
    score: float = 0.0
    sub_scores: Dict[str, float] = field(default_factory=dict)
    matched_criteria: List[str] = field(default_factory=list)

    @property
    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items]

    @property
    def name(self) -> str:
        names = [item.display_name for item in self.items[:2]]
        return " with ".join(names)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "item_ids": self.item_ids,
            "items": [item.to_dict() for item in self.items],
            "score": self.score,
            "sub_scores": dict(self.sub_scores),
            "matched_criteria": list(self.matched_criteria),
        }
