"""Outfit recommendation engine: slots, scoring, ordering and bounds."""
from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.errors import EmptyWardrobeError
from logic.recommendation_engine import (
    EnumerationLimits,
    build_recommendations,
    partition_slots,
    recommend,
    recommend_for_weather,
)
from models.outfit import OutfitCriteria
from models.wardrobe_item import WardrobeItem
from models.weather import WeatherCondition


def _item(item_id: str, category: str, color: str = "black", **kwargs) -> WardrobeItem:
    return WardrobeItem(item_id=item_id, user_id="u1", category=category, color=color, **kwargs)


def test_summer_top_and_bottom_yield_single_full_season_candidate() -> None:
    items = [
        _item("top1", "top", color="blue", season="summer"),
        _item("bottom1", "bottom", color="white", season="summer"),
    ]

    results = recommend(items, OutfitCriteria(season="summer"))

    assert len(results) == 1
    assert results[0].item_ids == ["top1", "bottom1"]
    assert results[0].sub_scores["season"] == 1.0
    assert results[0].score == 90.0
    assert any("summer" in reason for reason in results[0].matched_criteria)


def test_empty_wardrobe_raises_distinct_error() -> None:
    with pytest.raises(EmptyWardrobeError):
        recommend([])


def test_accessories_only_returns_empty_list() -> None:
    items = [_item("acc1", "accessory"), _item("acc2", "accessory", color="gold")]
    assert recommend(items) == []


def test_missing_base_layer_returns_empty_list() -> None:
    items = [_item("bottom1", "bottom"), _item("shoes1", "shoes"), _item("coat1", "outerwear")]
    assert recommend(items) == []


def test_top_without_bottom_cannot_form_outfit() -> None:
    items = [_item("top1", "top"), _item("shoes1", "shoes")]
    assert recommend(items) == []


def test_dress_needs_a_second_piece() -> None:
    assert recommend([_item("dress1", "dress")]) == []

    results = recommend([_item("dress1", "dress"), _item("shoes1", "shoes")])
    assert [candidate.item_ids for candidate in results] == [["dress1", "shoes1"]]


def test_results_sorted_by_score_then_fewer_items() -> None:
    items = [
        _item("top1", "top"),
        _item("bottom1", "bottom"),
        _item("shoes1", "shoes"),
        _item("acc1", "accessory"),
    ]

    results = recommend(items, limit=10)

    assert len(results) == 4
    for first, second in zip(results, results[1:]):
        assert first.score >= second.score
        if first.score == second.score:
            assert len(first.items) <= len(second.items)
    assert results[0].item_ids == ["top1", "bottom1"]


def test_recently_added_items_win_ties() -> None:
    items = [
        _item("top-old", "top", created_at=datetime(2024, 1, 1)),
        _item("top-new", "top", created_at=datetime(2024, 6, 1)),
        _item("bottom1", "bottom", created_at=datetime(2023, 1, 1)),
    ]

    results = recommend(items)

    assert [candidate.item_ids[0] for candidate in results] == ["top-new", "top-old"]


def test_season_mismatch_scores_zero_credit() -> None:
    items = [
        _item("top1", "top", season="all"),
        _item("bottom1", "bottom", season="summer"),
        _item("coat1", "outerwear", season="winter"),
    ]

    results = recommend(items, OutfitCriteria(season="summer"), limit=10)

    best, worst = results[0], results[-1]
    assert "coat1" not in best.item_ids
    assert best.sub_scores["season"] == 1.0
    assert "coat1" in worst.item_ids
    assert worst.sub_scores["season"] == 0.0


def test_style_preference_requires_every_styled_piece_to_match() -> None:
    items = [
        _item("formal-top", "top", style="formal"),
        _item("casual-top", "top", style="casual"),
        _item("trousers", "bottom", style="formal"),
    ]

    results = recommend(items, OutfitCriteria(style_preference=["Formal"]))

    assert results[0].item_ids == ["formal-top", "trousers"]
    assert results[0].sub_scores["style"] == 1.0
    assert results[-1].sub_scores["style"] == 0.0


def test_color_scheme_gives_partial_credit_to_related_colors() -> None:
    items = [_item("top1", "top", color="blue"), _item("bottom1", "bottom", color="green")]

    results = recommend(items, OutfitCriteria(color_scheme=["Blue"]))

    assert results[0].sub_scores["color"] == 0.75


def test_color_scheme_full_credit_when_all_pieces_inside() -> None:
    items = [_item("top1", "top", color="Navy Blue"), _item("bottom1", "bottom", color="white")]

    results = recommend(items, OutfitCriteria(color_scheme=["navy", "white"]))

    assert results[0].sub_scores["color"] == 1.0


def test_occasion_mapping_scores_share_of_fitting_pieces() -> None:
    items = [_item("top1", "top", style="formal"), _item("bottom1", "bottom", style="street")]

    business = recommend(items, OutfitCriteria(occasion="work"))
    unknown = recommend(items, OutfitCriteria(occasion="picnic"))

    assert business[0].sub_scores["occasion"] == 0.5
    assert unknown[0].sub_scores["occasion"] == 0.5
    assert any("no style mapping" in reason for reason in unknown[0].matched_criteria)


def test_malformed_and_unknown_items_are_skipped() -> None:
    raw_items = [
        {"item_id": "top1", "user_id": "u1", "category": "Tops", "color": "Red"},
        {"item_id": "bottom1", "user_id": "u1", "category": "bottoms", "color": "black"},
        {"item_id": "swim1", "user_id": "u1", "category": "swimwear", "color": "blue"},
        {"item_id": "broken", "user_id": "u1", "category": "", "color": "blue"},
    ]

    result = build_recommendations(raw_items)

    assert [candidate.item_ids for candidate in result.candidates] == [["top1", "bottom1"]]
    assert set(result.diagnostics["skipped"]) == {"swim1", "broken"}


def test_duplicate_identifiers_are_collapsed() -> None:
    top = _item("top1", "top")
    results = recommend([top, top, _item("bottom1", "bottom")], limit=10)
    assert len(results) == 1


def test_enumeration_is_capped_for_large_wardrobes() -> None:
    items = (
        [_item(f"top{i}", "top") for i in range(10)]
        + [_item(f"bottom{i}", "bottom") for i in range(10)]
        + [_item(f"shoes{i}", "shoes") for i in range(5)]
        + [_item(f"coat{i}", "outerwear") for i in range(4)]
        + [_item(f"acc{i}", "accessory") for i in range(6)]
    )

    result = build_recommendations(items, limits=EnumerationLimits(max_combinations=200))

    assert result.diagnostics["combinations_enumerated"] > 200
    assert result.diagnostics["combinations_scored"] == 200
    assert result.diagnostics["sampled"] is True
    assert result.diagnostics["slot_caps_applied"] is True
    assert all(2 <= len(candidate.items) <= 5 for candidate in result.candidates)
    assert len(recommend(items)) == 5


def test_recommendations_are_deterministic() -> None:
    items = [
        _item("top1", "top", color="white"),
        _item("top2", "top", color="blue"),
        _item("bottom1", "bottom"),
        _item("shoes1", "shoes"),
        _item("acc1", "accessory"),
    ]
    criteria = OutfitCriteria(color_scheme=["white", "black"])

    first = [candidate.item_ids for candidate in recommend(items, criteria, limit=10)]
    second = [candidate.item_ids for candidate in recommend(items, criteria, limit=10)]

    assert first == second


def test_partition_slots_orders_newest_first() -> None:
    slots, skipped = partition_slots(
        [
            _item("a", "top", created_at=datetime(2024, 1, 1)),
            _item("b", "top", created_at=datetime(2024, 2, 1)),
            _item("c", "cape"),
        ]
    )
    assert [item.item_id for item in slots["top"]] == ["b", "a"]
    assert skipped == {"c": "unknown category 'cape'"}


def test_hot_weather_drops_outerwear_and_resolves_summer() -> None:
    items = [
        _item("top1", "top", season="summer"),
        _item("bottom1", "bottom"),
        _item("coat1", "outerwear"),
    ]
    weather = WeatherCondition(condition="sunny", temperature_c=30, precipitation=0)

    results = recommend_for_weather(items, weather, limit=10)
    result = build_recommendations(items, OutfitCriteria(weather=weather))

    assert all("coat1" not in candidate.item_ids for candidate in results)
    assert result.diagnostics["resolved_season"] == "summer"
    assert results[0].sub_scores["season"] == 1.0


def test_weather_filter_relaxes_when_nothing_would_remain() -> None:
    items = [_item("dress1", "dress", name="Mini dress"), _item("shoes1", "shoes")]
    weather = WeatherCondition(condition="snowy", temperature_c=-2, precipitation=80)

    result = build_recommendations(items, OutfitCriteria(weather=weather))

    assert result.diagnostics["weather_relaxed"] is True
    assert result.diagnostics["resolved_season"] == "winter"
    assert result.candidates[0].item_ids == ["dress1", "shoes1"]


def test_negative_limit_rejected() -> None:
    with pytest.raises(ValueError):
        recommend([_item("top1", "top")], limit=-1)


def test_small_wardrobes_score_every_combination() -> None:
    items = [_item(f"top{i}", "top") for i in range(6)] + [_item("bottom1", "bottom")]

    result = build_recommendations(items)

    assert len(result.candidates) == 6
    assert result.diagnostics["slot_caps_applied"] is False
    assert result.diagnostics["sampled"] is False


def test_aliased_categories_and_colors_are_matched_canonically() -> None:
    items = [_item("tee", "Shirt", color="white"), _item("skirt", "Skirt", color="Denim")]

    results = recommend(items, OutfitCriteria(color_scheme=["white", "blue"]))

    assert results[0].item_ids == ["tee", "skirt"]
    assert results[0].sub_scores["color"] == 1.0
    assert [item.category for item in results[0].items] == ["shirt", "skirt"]
    assert results[0].items[1].color == "denim"


def test_unknown_category_warning_logged_once_for_weather_requests(caplog: pytest.LogCaptureFixture) -> None:
    items = [_item("top1", "top"), _item("bottom1", "bottom"), _item("cape1", "cape")]
    weather = WeatherCondition(condition="cloudy", temperature_c=12)

    with caplog.at_level(logging.WARNING, logger="logic.recommendation_engine"):
        result = build_recommendations(items, OutfitCriteria(weather=weather))

    assert len([record for record in caplog.records if "cape1" in record.getMessage()]) == 1
    assert result.diagnostics["skipped"] == {"cape1": "unknown category 'cape'"}
    assert result.candidates[0].item_ids == ["top1", "bottom1"]
