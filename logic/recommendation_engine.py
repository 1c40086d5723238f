"""Deterministic outfit recommendation with transparent diagnostics.

Items are partitioned into slots (base, bottom, outerwear, shoes,
accessories), combinations are enumerated under explicit bounds, scored with
:mod:`logic.outfit_scoring` and ranked. The engine is a pure function of the
wardrobe snapshot it receives.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from logic.errors import EmptyWardrobeError
from logic.outfit_scoring import score_outfit
from logic.weather_rules import filter_by_weather, season_for_temperature
from models.outfit import OutfitCandidate, OutfitCriteria
from models.taxonomy import is_known_category
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from models.weather import WeatherCondition
from lookbook_app.logging_config import get_logger, log_event

logger = get_logger(__name__)

SLOTS = ("top", "dress", "bottom", "outerwear", "shoes", "accessory")
DEFAULT_LIMIT = 5

RawItem = Union[WardrobeItem, Mapping[str, object]]


@dataclass(frozen=True)
class EnumerationLimits:
    """Bounds on how many combinations the engine considers.

    ``max_combinations`` is the hard cap on how many combinations are scored.
    Per-slot caps only apply once a wardrobe has more combinations than that;
    if the capped set is still too large, an evenly spaced sample is scored.
    """

    max_combinations: int = 200
    max_per_base: int = 5
    max_bottoms: int = 5
    max_shoes: int = 3
    max_outerwear: int = 2
    max_accessories_considered: int = 4
    max_accessories_per_outfit: int = 2
    min_items: int = 2
    max_items: int = 5

    def __post_init__(self) -> None:
        if self.max_combinations < 1:
            raise ValueError("max_combinations must be at least 1")
        if self.min_items > self.max_items:
            raise ValueError("min_items cannot exceed max_items")


@dataclass(frozen=True)
class RecommendationResult:
    candidates: List[OutfitCandidate]
    diagnostics: Dict[str, object] = field(default_factory=dict)


def coerce_items(raw_items: Iterable[RawItem]) -> Tuple[List[WardrobeItem], Dict[str, str]]:
    """Build items from storage rows, skipping malformed ones and duplicates."""

    items: List[WardrobeItem] = []
    skipped: Dict[str, str] = {}
    seen = set()
    for index, raw in enumerate(raw_items):
        if isinstance(raw, WardrobeItem):
            item = raw
        else:
            try:
                item = from_raw_metadata(dict(raw))
            except ValueError as exc:
                key = str(raw.get("item_id") or raw.get("id") or f"#{index}")
                skipped[key] = str(exc)
                logger.warning("Skipping wardrobe entry %s due to validation error: %s", key, exc)
                continue
        if item.item_id in seen:
            skipped[item.item_id] = "duplicate identifier"
            continue
        seen.add(item.item_id)
        items.append(item)
    return items, skipped


def partition_slots(items: Sequence[WardrobeItem]) -> Tuple[Dict[str, List[WardrobeItem]], Dict[str, str]]:
    """Group items by slot, newest first; unknown categories are skipped."""

    slots: Dict[str, List[WardrobeItem]] = {slot: [] for slot in SLOTS}
    skipped: Dict[str, str] = {}
    for item in items:
        if not is_known_category(item.slot):
            skipped[item.item_id] = f"unknown category '{item.category}'"
            logger.warning("Skipping wardrobe item %s with unknown category '%s'", item.item_id, item.category)
            continue
        slots[item.slot].append(item)
    for values in slots.values():
        values.sort(key=lambda i: i.recency_key, reverse=True)
    return slots, skipped


def _enumerate_combinations(
    slots: Dict[str, List[WardrobeItem]], limits: EnumerationLimits, capped: bool = True
) -> Iterator[List[WardrobeItem]]:
    def take(slot: str, cap: int) -> List[WardrobeItem]:
        return slots[slot][:cap] if capped else list(slots[slot])

    bases = take("top", limits.max_per_base) + take("dress", limits.max_per_base)
    outerwear_options: List[Optional[WardrobeItem]] = [None, *take("outerwear", limits.max_outerwear)]
    shoe_options: List[Optional[WardrobeItem]] = [None, *take("shoes", limits.max_shoes)]
    accessories = take("accessory", limits.max_accessories_considered)
    accessory_options: List[Tuple[WardrobeItem, ...]] = [
        combo
        for size in range(limits.max_accessories_per_outfit + 1)
        for combo in itertools.combinations(accessories, size)
    ]

    for base in bases:
        bottoms: List[Optional[WardrobeItem]]
        if base.slot == "dress":
            bottoms = [None]
        else:
            bottoms = list(take("bottom", limits.max_bottoms))
        for bottom, outer, shoes, extras in itertools.product(
            bottoms, outerwear_options, shoe_options, accessory_options
        ):
            combo = [piece for piece in (base, bottom, outer, shoes) if piece is not None]
            combo.extend(extras)
            if limits.min_items <= len(combo) <= limits.max_items:
                yield combo


def _collect_combinations(
    slots: Dict[str, List[WardrobeItem]], limits: EnumerationLimits
) -> Tuple[List[List[WardrobeItem]], bool]:
    """Enumerate every combination, falling back to per-slot caps for big wardrobes.

    Returns the combinations and whether the per-slot caps were applied.
    """

    uncapped = list(
        itertools.islice(_enumerate_combinations(slots, limits, capped=False), limits.max_combinations + 1)
    )
    if len(uncapped) <= limits.max_combinations:
        return uncapped, False
    return list(_enumerate_combinations(slots, limits)), True


def _sample_evenly(combinations: List[List[WardrobeItem]], cap: int) -> List[List[WardrobeItem]]:
    if len(combinations) <= cap:
        return combinations
    step = len(combinations) / cap
    return [combinations[int(index * step)] for index in range(cap)]


def _rank(candidates: List[OutfitCandidate]) -> List[OutfitCandidate]:
    """Score desc, then fewer items, then newest item identifiers first."""

    by_recency = sorted(
        candidates,
        key=lambda c: sorted((item.recency_key for item in c.items), reverse=True),
        reverse=True,
    )
    return sorted(by_recency, key=lambda c: (-c.score, len(c.items)))


def _resolve_weather(
    slots: Dict[str, List[WardrobeItem]], criteria: OutfitCriteria, limits: EnumerationLimits
) -> Tuple[Dict[str, List[WardrobeItem]], OutfitCriteria, Dict[str, object]]:
    weather: WeatherCondition = criteria.weather  # type: ignore[assignment]
    season = criteria.season or season_for_temperature(weather.temperature_c)
    filtered = filter_by_weather([item for values in slots.values() for item in values], weather)
    diagnostics: Dict[str, object] = {
        "resolved_season": season,
        "weather_removed": filtered.removed,
        "weather_relaxed": False,
    }
    filtered_slots, _ = partition_slots(filtered.items)
    if next(_enumerate_combinations(filtered_slots, limits, capped=False), None) is None:
        # Relax the weather filter rather than return nothing.
        diagnostics["weather_relaxed"] = True
        logger.info("Weather filter left no outfits; relaxing to the full wardrobe")
        chosen = slots
    else:
        chosen = filtered_slots
    return chosen, replace(criteria, season=season), diagnostics


def build_recommendations(
    raw_items: Sequence[RawItem],
    criteria: Optional[OutfitCriteria] = None,
    limits: Optional[EnumerationLimits] = None,
) -> RecommendationResult:
    """Return every ranked candidate with diagnostics describing the run."""

    if not raw_items:
        raise EmptyWardrobeError()
    criteria = criteria or OutfitCriteria()
    limits = limits or EnumerationLimits()

    items, skipped = coerce_items(raw_items)
    slots, unknown = partition_slots(items)
    skipped.update(unknown)
    diagnostics: Dict[str, object] = {"input_count": len(raw_items)}
    if criteria.weather is not None:
        slots, criteria, weather_diagnostics = _resolve_weather(slots, criteria, limits)
        diagnostics.update(weather_diagnostics)

    combinations, capped = _collect_combinations(slots, limits)
    sampled = _sample_evenly(combinations, limits.max_combinations)

    candidates: List[OutfitCandidate] = []
    seen = set()
    for combo in sampled:
        key = frozenset(item.item_id for item in combo)
        if key in seen:
            continue
        seen.add(key)
        result = score_outfit(combo, criteria)
        candidates.append(
            OutfitCandidate(
                items=combo,
                score=result["total"],
                sub_scores=result["sub_scores"],
                matched_criteria=result["explanation"],
            )
        )
    ranked = _rank(candidates)

    diagnostics.update(
        {
            "skipped": skipped,
            "slot_counts": {slot: len(values) for slot, values in slots.items()},
            "combinations_enumerated": len(combinations),
            "slot_caps_applied": capped,
            "combinations_scored": len(candidates),
            "sampled": len(sampled) < len(combinations),
            "season": criteria.season,
        }
    )
    log_event(
        logger,
        logging.INFO,
        "outfit_candidates_ranked",
        input_count=len(raw_items),
        skipped_count=len(skipped),
        combinations_enumerated=len(combinations),
        combinations_scored=len(candidates),
        best_score=ranked[0].score if ranked else None,
    )
    return RecommendationResult(candidates=ranked, diagnostics=diagnostics)


def recommend(
    items: Sequence[RawItem],
    criteria: Optional[OutfitCriteria] = None,
    limit: int = DEFAULT_LIMIT,
    limits: Optional[EnumerationLimits] = None,
) -> List[OutfitCandidate]:
    """Rank outfit candidates for one wardrobe snapshot.

    Raises :class:`EmptyWardrobeError` when ``items`` is empty. An empty list
    means the wardrobe lacks a base layer (or a bottom for its tops).
    """

    if limit < 0:
        raise ValueError("limit cannot be negative")
    return build_recommendations(items, criteria, limits).candidates[:limit]


def recommend_for_weather(
    items: Sequence[RawItem],
    weather: WeatherCondition,
    criteria: Optional[OutfitCriteria] = None,
    limit: int = DEFAULT_LIMIT,
    limits: Optional[EnumerationLimits] = None,
) -> List[OutfitCandidate]:
    criteria = replace(criteria or OutfitCriteria(), weather=weather)
    return recommend(items, criteria, limit=limit, limits=limits)


__all__ = [
    "DEFAULT_LIMIT",
    "EnumerationLimits",
    "RecommendationResult",
    "build_recommendations",
    "coerce_items",
    "partition_slots",
    "recommend",
    "recommend_for_weather",
]
