"""Outfit stylist agent wiring the wardrobe repository to the recommendation engine."""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import replace
from typing import Dict, Optional

from agents.weather_agent import WeatherAgent
from lookbook_app.config import LookbookConfig
from lookbook_app.logging_config import get_logger, log_event, operation_context
from logic.errors import NOT_ENOUGH_VARIETY_MESSAGE, EmptyWardrobeError
from logic.recommendation_engine import EnumerationLimits, build_recommendations
from models.outfit import OutfitCriteria
from tools.styling_assistant import StylingAssistant
from tools.wardrobe_store import WardrobeStore

logger = get_logger(__name__)


def _criteria_summary(criteria: OutfitCriteria) -> Dict[str, object]:
    return {
        "occasion": criteria.occasion,
        "season": criteria.season,
        "weather": (
            {
                "type": criteria.weather.condition,
                "temperature": criteria.weather.temperature_c,
                "precipitation": criteria.weather.precipitation,
            }
            if criteria.weather
            else None
        ),
        "stylePreference": criteria.style_preference,
        "colorScheme": criteria.color_scheme,
    }


class OutfitStylistAgent:
    """Builds ranked outfits from a user's stored wardrobe."""

    def __init__(
        self,
        config: LookbookConfig,
        store: WardrobeStore,
        weather_agent: Optional[WeatherAgent] = None,
        styling_assistant: Optional[StylingAssistant] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.weather_agent = weather_agent
        self.styling_assistant = styling_assistant or StylingAssistant()
        self.limits = EnumerationLimits(max_combinations=config.max_combinations)

    def _apply_weather(self, criteria: OutfitCriteria, location: Optional[str]) -> OutfitCriteria:
        if self.weather_agent is None:
            logger.warning("Weather-based recommendation requested without a weather agent")
            return criteria
        try:
            resolved = self.weather_agent.resolve(location=location)
        except ValueError as exc:
            logger.warning("Weather resolution failed, continuing without weather: %s", exc)
            return criteria
        return replace(criteria, weather=resolved["weather"])

    def recommend_outfits(
        self,
        user_id: str,
        criteria: Optional[OutfitCriteria] = None,
        limit: Optional[int] = None,
        weather_based: bool = False,
        location: Optional[str] = None,
        log_request: bool = False,
    ) -> Dict[str, object]:
        """Return ranked outfits, a styling note and debug diagnostics.

        Raises :class:`EmptyWardrobeError` when the user has no items at all.
        """

        criteria = criteria or OutfitCriteria()
        if limit is None:
            limit = self.config.default_limit
        if limit < 0:
            raise ValueError("limit cannot be negative")
        with operation_context("agent:stylist.recommend_outfits", user_id=user_id) as correlation_id:
            items = self.store.list_items_for_user(user_id)
            if not items:
                raise EmptyWardrobeError(user_id)

            if weather_based:
                criteria = self._apply_weather(criteria, location)

            result = build_recommendations(items, criteria, self.limits)
            top_ranked = result.candidates[:limit]
            styling_note = (
                self.styling_assistant.suggest(top_ranked[0], criteria) if top_ranked else None
            )

            if log_request:
                try:
                    self.store.log_recommendation_request(
                        user_id=user_id,
                        request_params=_criteria_summary(criteria),
                        items_count=len(items),
                        results_count=len(result.candidates),
                    )
                except sqlite3.Error as exc:
                    logger.error("Failed to log recommendation request: %s", exc)

            log_event(
                logger,
                level=logging.INFO,
                event="agent_call_completed",
                agent="stylist",
                method="recommend_outfits",
                correlation_id=correlation_id,
                items_count=len(items),
                outfit_count=len(top_ranked),
                total_available=len(result.candidates),
            )
            return {
                "recommendations": [candidate.to_dict() for candidate in top_ranked],
                "count": len(top_ranked),
                "total_available": len(result.candidates),
                "styling_note": styling_note,
                "message": None if result.candidates else NOT_ENOUGH_VARIETY_MESSAGE,
                "criteria": _criteria_summary(criteria),
                "debug_summary": result.diagnostics,
            }


__all__ = ["OutfitStylistAgent"]
