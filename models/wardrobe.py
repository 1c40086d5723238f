"""Wardrobe domain models used for the global leaderboard."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass
class Wardrobe:
    """A user's whole collection treated as one leaderboard entry."""

    wardrobe_id: str
    user_id: str
    item_count: int = 0
    ranking_position: Optional[int] = None
    ranking_score: Optional[float] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.wardrobe_id,
            "user_id": self.user_id,
            "item_count": self.item_count,
            "ranking_position": self.ranking_position,
            "ranking_score": self.ranking_score,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class RankedWardrobe:
    wardrobe_id: str
    user_id: Optional[str]
    item_count: int
    ranking_position: int
    ranking_score: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.wardrobe_id,
            "user_id": self.user_id,
            "item_count": self.item_count,
            "ranking_position": self.ranking_position,
            "ranking_score": self.ranking_score,
        }
