"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from models.color_theory import normalize_color_name
from models.taxonomy import normalize_category, normalize_season, normalize_style


def _clean_label(value: Any) -> str:
    return " ".join(str(value or "").strip().lower().split())


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass
class WardrobeItem:
    """Represents one garment or accessory owned by a user.

    ``category`` and ``color`` are required and kept as entered, trimmed and
    lower-cased. Aliases only apply when values are compared: see :attr:`slot`
    and :attr:`canonical_color`. Categories outside the canonical taxonomy are
    stored too, but the recommendation engine will not place them in an outfit.
    """

    item_id: str
    user_id: str
    category: str
    color: str
    name: Optional[str] = None
    style: Optional[str] = None
    season: Optional[str] = None
    material: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    last_worn: Optional[datetime] = None
    wear_count: int = 0
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.category = _clean_label(self.category)
        if not self.category:
            raise ValueError(f"Wardrobe item {self.item_id!r} is missing a category")
        self.color = _clean_label(self.color)
        if not self.color:
            raise ValueError(f"Wardrobe item {self.item_id!r} is missing a color")
        self.style = normalize_style(self.style)
        self.season = normalize_season(self.season)
        self.material = self.material.strip().lower() if self.material else None
        self.last_worn = _parse_timestamp(self.last_worn)
        self.created_at = _parse_timestamp(self.created_at)
        self.wear_count = int(self.wear_count or 0)
        if self.wear_count < 0:
            raise ValueError("wear_count cannot be negative")

    @property
    def slot(self) -> str:
        """Canonical category used for outfit slots, e.g. ``skirt`` -> ``bottom``."""

        return normalize_category(self.category)

    @property
    def canonical_color(self) -> str:
        return normalize_color_name(self.color)

    @property
    def display_name(self) -> str:
        return self.name or f"{self.color} {self.category}"

    @property
    def recency_key(self) -> Tuple[str, str]:
        """Sort key where larger means more recently added."""

        added = self.created_at.isoformat() if self.created_at else ""
        return added, self.item_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "user_id": self.user_id,
            "name": self.name,
            "category": self.category,
            "color": self.color,
            "style": self.style,
            "season": self.season,
            "material": self.material,
            "description": self.description,
            "image_url": self.image_url,
            "last_worn": self.last_worn.isoformat() if self.last_worn else None,
            "wear_count": self.wear_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose storage row."""

    item_id = metadata.get("item_id", metadata.get("id"))
    required = {"item_id": item_id, "user_id": metadata.get("user_id")}
    missing = [key for key, value in required.items() if not value]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    return WardrobeItem(
        item_id=str(item_id),
        user_id=str(metadata["user_id"]),
        category=str(metadata.get("category") or ""),
        color=str(metadata.get("color") or ""),
        name=metadata.get("name"),
        style=metadata.get("style"),
        season=metadata.get("season"),
        material=metadata.get("material"),
        description=metadata.get("description"),
        image_url=metadata.get("image_url"),
        last_worn=metadata.get("last_worn"),
        wear_count=metadata.get("wear_count") or 0,
        created_at=metadata.get("created_at"),
    )


__all__ = ["WardrobeItem", "from_raw_metadata"]
