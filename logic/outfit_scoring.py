"""Deterministic scoring for candidate outfits."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from models.color_theory import harmony_credit, monochrome
from models.outfit import OutfitCriteria
from models.taxonomy import ALL_SEASONS, styles_for_occasion
from models.wardrobe_item import WardrobeItem

WEIGHTS = {
    "season": 0.30,
    "color": 0.25,
    "style": 0.25,
    "occasion": 0.20,
}
NEUTRAL_CREDIT = 0.5

SubScore = Tuple[float, str]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def season_score(items: List[WardrobeItem], season: Optional[str]) -> SubScore:
    """Full credit when every piece is tagged ``season`` or ``all``, zero on any mismatch.

    Untagged pieces count as ``all``. Requesting ``all`` therefore only rewards
    outfits made of all-season pieces.
    """

    if season is None:
        return NEUTRAL_CREDIT, "season: not specified"
    mismatched = [item.item_id for item in items if item.season not in (None, ALL_SEASONS, season)]
    if mismatched:
        return 0.0, f"season: {', '.join(mismatched)} not suited to {season}"
    return 1.0, f"season: every piece suits {season}"


def color_score(items: List[WardrobeItem], color_scheme: List[str]) -> SubScore:
    """Full credit inside the scheme, partial credit for related colors."""

    colors = [item.canonical_color for item in items]
    if not color_scheme:
        if colors and monochrome(colors):
            return 1.0, f"color: monochrome {colors[0]} look"
        return 1.0, "color: no scheme requested"
    if all(color in color_scheme for color in colors):
        return 1.0, "color: every piece within the requested scheme"
    credit = sum(harmony_credit(color, color_scheme) for color in colors) / len(colors)
    return _clamp(credit), f"color: partial harmony with scheme ({credit:.2f})"


def style_score(items: List[WardrobeItem], style_preference: List[str]) -> SubScore:
    """Full credit when every styled piece matches a preferred style."""

    if not style_preference:
        return 1.0, "style: no preference"
    preferred = set(style_preference)
    mismatched = [item.item_id for item in items if item.style is not None and item.style not in preferred]
    if mismatched:
        return 0.0, f"style: {', '.join(mismatched)} outside {', '.join(style_preference)}"
    return 1.0, f"style: matches {', '.join(style_preference)}"


def occasion_score(items: List[WardrobeItem], occasion: Optional[str]) -> SubScore:
    """Share of pieces whose style fits the occasion's style set."""

    if occasion is None:
        return NEUTRAL_CREDIT, "occasion: not specified"
    allowed = styles_for_occasion(occasion)
    if allowed is None:
        return NEUTRAL_CREDIT, f"occasion: no style mapping for '{occasion}'"
    fitting = [item for item in items if item.style is None or item.style in allowed]
    credit = len(fitting) / len(items) if items else 0.0
    return _clamp(credit), f"occasion: {len(fitting)}/{len(items)} pieces fit {occasion}"


def score_outfit(items: List[WardrobeItem], criteria: OutfitCriteria) -> Dict[str, object]:
    """Calculate the weighted total (0-100) plus sub scores and explanation."""

    parts = {
        "season": season_score(items, criteria.season),
        "color": color_score(items, criteria.color_scheme),
        "style": style_score(items, criteria.style_preference),
        "occasion": occasion_score(items, criteria.occasion),
    }
    sub_scores = {name: value for name, (value, _) in parts.items()}
    total = sum(sub_scores[name] * weight for name, weight in WEIGHTS.items())
    return {
        "total": round(total * 100, 2),
        "sub_scores": sub_scores,
        "explanation": [reason for _, reason in parts.values()],
    }


__all__ = [
    "WEIGHTS",
    "NEUTRAL_CREDIT",
    "season_score",
    "color_score",
    "style_score",
    "occasion_score",
    "score_outfit",
]
