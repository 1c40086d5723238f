"""Global wardrobe leaderboard computation.

Rankings are recomputed in bulk from a snapshot of every wardrobe. The
snapshot may be slightly stale: items added while a batch runs are only
reflected by the next run.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from models.wardrobe import RankedWardrobe, Wardrobe

WardrobeLike = Union[Wardrobe, Mapping[str, object]]

TOP_RANKED_LIMIT = 10
_TIERS = ((3, "gold"), (10, "blue"), (25, "green"))


def _as_entry(wardrobe: WardrobeLike) -> RankedWardrobe:
    if isinstance(wardrobe, Wardrobe):
        return RankedWardrobe(
            wardrobe_id=wardrobe.wardrobe_id,
            user_id=wardrobe.user_id,
            item_count=int(wardrobe.item_count),
            ranking_position=0,
            ranking_score=0.0,
        )
    wardrobe_id = wardrobe.get("id", wardrobe.get("wardrobe_id"))
    if wardrobe_id is None:
        raise ValueError(f"Wardrobe entry is missing an id: {dict(wardrobe)}")
    user_id = wardrobe.get("user_id")
    return RankedWardrobe(
        wardrobe_id=str(wardrobe_id),
        user_id=str(user_id) if user_id is not None else None,
        item_count=int(wardrobe.get("item_count") or 0),
        ranking_position=0,
        ranking_score=0.0,
    )


def rank(wardrobes: Sequence[WardrobeLike]) -> List[RankedWardrobe]:
    """Order wardrobes by item count and derive a percentile-style score.

    Ties keep their input order. Position is ``index + 1`` and the score is
    ``100 - index / N * 100`` rounded to two decimals.
    """

    entries = [_as_entry(wardrobe) for wardrobe in wardrobes]
    total = len(entries)
    ordered = sorted(entries, key=lambda entry: -entry.item_count)
    return [
        RankedWardrobe(
            wardrobe_id=entry.wardrobe_id,
            user_id=entry.user_id,
            item_count=entry.item_count,
            ranking_position=index + 1,
            ranking_score=round(100 - (index / total * 100), 2),
        )
        for index, entry in enumerate(ordered)
    ]


def ranking_tier(position: Optional[int]) -> str:
    """Badge tier for a leaderboard position."""

    if not position:
        return "unranked"
    for upper_bound, tier in _TIERS:
        if position <= upper_bound:
            return tier
    return "purple"


def ranking_stats(wardrobes: Iterable[Wardrobe]) -> Dict[str, object]:
    """Summarise persisted rankings: totals and the current top ids."""

    snapshot = list(wardrobes)
    ranked = sorted(
        (wardrobe for wardrobe in snapshot if wardrobe.ranking_position is not None),
        key=lambda wardrobe: wardrobe.ranking_position,
    )
    return {
        "total_wardrobes": len(snapshot),
        "ranked_wardrobes": len(ranked),
        "top_ranked": [wardrobe.wardrobe_id for wardrobe in ranked[:TOP_RANKED_LIMIT]],
    }


__all__ = ["TOP_RANKED_LIMIT", "rank", "ranking_stats", "ranking_tier"]
