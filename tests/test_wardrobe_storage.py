"""Wardrobe item model, taxonomy and SQLite repository tests."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.errors import DuplicateWardrobeItemError, WardrobeItemNotFoundError
from logic.ranking import rank
from models import taxonomy
from models.wardrobe_item import WardrobeItem, from_raw_metadata
from tools.wardrobe_store import SQLiteWardrobeStore


@pytest.fixture()
def sample_metadata() -> Dict[str, object]:
    return {
        "id": "item-1",
        "user_id": "user-123",
        "image_url": "https://example.com/image.jpg",
        "name": "Navy blazer",
        "category": "Jacket",
        "color": "Navy Blue",
        "style": "Smart Casual",
        "season": "Autumn",
        "material": "Wool",
    }


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "wardrobe.db")


def _item(item_id: str, user_id: str = "user-123", category: str = "top", **kwargs) -> WardrobeItem:
    return WardrobeItem(item_id=item_id, user_id=user_id, category=category, color=kwargs.pop("color", "white"), **kwargs)


def test_taxonomy_normalisation() -> None:
    """Aliases collapse onto canonical labels; unknown seasons are rejected."""

    assert taxonomy.normalize_category("Trousers") == "bottom"
    assert taxonomy.normalize_category("Cape") == "cape"
    assert not taxonomy.is_known_category("cape")
    assert taxonomy.normalize_season("Autumn") == "fall"
    assert taxonomy.normalize_season("") is None
    assert taxonomy.normalize_style("Business Casual") == "business-casual"
    assert taxonomy.styles_for_occasion("Office") == taxonomy.OCCASION_STYLES["business"]
    assert taxonomy.styles_for_occasion("brunch") is None
    with pytest.raises(ValueError):
        taxonomy.normalize_season("monsoon")


def test_from_raw_metadata_normalises_fields(sample_metadata: Dict[str, object]) -> None:
    item = from_raw_metadata(sample_metadata)

    assert item.item_id == "item-1"
    assert item.category == "jacket"
    assert item.slot == "outerwear"
    assert item.color == "navy blue"
    assert item.canonical_color == "navy"
    assert item.style == "smart-casual"
    assert item.season == "fall"
    assert item.material == "wool"


def test_item_requires_category_and_color(sample_metadata: Dict[str, object]) -> None:
    with pytest.raises(ValueError):
        from_raw_metadata({**sample_metadata, "category": ""})
    with pytest.raises(ValueError):
        from_raw_metadata({**sample_metadata, "color": None})
    with pytest.raises(ValueError):
        from_raw_metadata({**sample_metadata, "user_id": None})


def test_store_round_trip(store: SQLiteWardrobeStore, sample_metadata: Dict[str, object]) -> None:
    """Created items can be read back, updated, searched and deleted."""

    item = from_raw_metadata(sample_metadata)
    store.create_item(item)

    fetched = store.get_item("user-123", "item-1")
    assert fetched is not None
    assert fetched.to_dict() == item.to_dict()
    assert fetched.created_at is not None

    updated = store.update_item("user-123", "item-1", {"color": "black", "item_id": "ignored"})
    assert updated is not None and updated.color == "black"
    assert store.get_item("user-123", "ignored") is None

    assert store.search_items("user-123", {"category": "coat"})[0].item_id == "item-1"
    assert store.search_items("user-123", {"seasons": ["summer"]}) == []
    assert store.search_items("user-123", {"styles": ["Smart Casual"], "colors": ["Black"]})

    assert store.delete_item("user-123", "item-1") is True
    assert store.delete_item("user-123", "item-1") is False
    assert store.list_items_for_user("user-123") == []


def test_items_are_scoped_per_user(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("shared-id", user_id="alice"))
    store.create_item(_item("shared-id", user_id="bob", color="red"))

    assert store.get_item("alice", "shared-id").color == "white"
    assert store.get_item("bob", "shared-id").color == "red"
    assert [item.item_id for item in store.list_items_for_user("alice")] == ["shared-id"]


def test_create_item_never_overwrites_existing_item(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("tee", color="red"))
    store.record_wear("user-123", "tee")

    with pytest.raises(DuplicateWardrobeItemError):
        store.create_item(_item("tee", category="shoes", color="green"))

    kept = store.get_item("user-123", "tee")
    assert (kept.category, kept.color, kept.wear_count) == ("top", "red", 1)


def test_update_item_keeps_wear_history_and_entered_values(store: SQLiteWardrobeStore) -> None:
    created = store.create_item(_item("tee"))
    store.record_wear("user-123", "tee")

    updated = store.update_item("user-123", "tee", {"category": "Shirt", "color": "Denim"})

    assert updated is not None
    assert (updated.category, updated.color, updated.wear_count) == ("shirt", "denim", 1)
    assert updated.created_at == created.created_at
    assert store.get_item("user-123", "tee").to_dict() == updated.to_dict()
    assert [item.item_id for item in store.search_items("user-123", {"category": "top", "colors": ["blue"]})] == ["tee"]


def test_update_missing_item_returns_none(store: SQLiteWardrobeStore) -> None:
    assert store.update_item("user-123", "missing", {"color": "red"}) is None


def test_record_wear_increments_count(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("tee"))
    worn_at = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)

    store.record_wear("user-123", "tee", worn_at)
    item = store.record_wear("user-123", "tee", worn_at)

    assert item.wear_count == 2
    assert item.last_worn == worn_at


def test_record_wear_unknown_item_raises(store: SQLiteWardrobeStore) -> None:
    with pytest.raises(WardrobeItemNotFoundError):
        store.record_wear("user-123", "missing")


def test_wardrobes_track_item_counts_and_rankings(store: SQLiteWardrobeStore) -> None:
    """Each user gets one wardrobe row whose item count is derived from items."""

    for index in range(3):
        store.create_item(_item(f"a{index}", user_id="alice"))
    store.create_item(_item("b0", user_id="bob"))

    wardrobes = store.list_wardrobes()
    assert [(w.user_id, w.item_count) for w in wardrobes] == [("alice", 3), ("bob", 1)]
    assert all(w.ranking_position is None for w in wardrobes)

    updated = store.save_rankings(rank(wardrobes), updated_at=datetime(2025, 1, 1, tzinfo=timezone.utc))

    assert updated == 2
    alice = store.get_wardrobe("alice")
    bob = store.get_wardrobe("bob")
    assert (alice.ranking_position, alice.ranking_score) == (1, 100.0)
    assert (bob.ranking_position, bob.ranking_score) == (2, 50.0)
    assert bob.updated_at == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert store.get_wardrobe("carol") is None


def test_recommendation_logs_are_persisted(store: SQLiteWardrobeStore) -> None:
    store.log_recommendation_request("alice", {"occasion": "party", "colorScheme": ["red"]}, 4, 2)

    logs = store.list_recommendation_logs("alice")

    assert len(logs) == 1
    assert logs[0]["request_params"] == {"occasion": "party", "colorScheme": ["red"]}
    assert (logs[0]["items_count"], logs[0]["results_count"]) == (4, 2)
    assert store.list_recommendation_logs("bob") == []
