"""Batch job recomputing the wardrobe leaderboard."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from lookbook_app.logging_config import get_logger, log_event, operation_context
from logic.ranking import rank, ranking_stats, ranking_tier
from tools.observability import instrument_call
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)


class RankingAgent:
    """Reads every wardrobe, ranks the snapshot and writes positions back.

    The read-rank-write sequence is not serialised against concurrent item
    changes; additions made during a run show up on the next run.
    """

    def __init__(self, store: WardrobeStore) -> None:
        self.store = store

    @instrument_call("update_wardrobe_rankings")
    def update_rankings(self) -> Dict[str, object]:
        with operation_context("agent:ranking.update_rankings") as correlation_id:
            snapshot = self.store.list_wardrobes()
            ranked = rank(snapshot)
            updated = self.store.save_rankings(ranked)
            log_event(
                LOGGER,
                logging.INFO,
                "wardrobe_rankings_updated",
                correlation_id=correlation_id,
                wardrobe_count=len(snapshot),
                updated=updated,
            )
            return {
                "success": True,
                "message": "Wardrobe rankings updated successfully",
                "updated": updated,
            }

    def stats(self) -> Dict[str, object]:
        return ranking_stats(self.store.list_wardrobes())

    def wardrobe_ranking(self, user_id: str) -> Optional[Dict[str, object]]:
        wardrobe = self.store.get_wardrobe(user_id)
        if wardrobe is None:
            return None
        payload = wardrobe.to_dict()
        payload["tier"] = ranking_tier(wardrobe.ranking_position)
        return payload


__all__ = ["RankingAgent"]
