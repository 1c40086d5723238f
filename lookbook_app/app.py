"""Application bootstrap wiring storage, collaborators and agents."""

from __future__ import annotations

import logging
from typing import Optional

from agents.outfit_stylist_agent import OutfitStylistAgent
from agents.ranking_agent import RankingAgent
from agents.weather_agent import WeatherAgent
from lookbook_app.config import LookbookConfig
from lookbook_app.logging_config import configure_logging, get_logger, log_event
from tools.styling_assistant import StylingAssistant
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from tools.weather_provider import OpenWeatherProvider, WeatherProvider


LOGGER = get_logger(__name__)


class LookbookApp:
    """Wires together the repository, external collaborators and agents."""

    def __init__(
        self,
        config: LookbookConfig | None = None,
        store: Optional[WardrobeStore] = None,
        weather_provider: Optional[WeatherProvider] = None,
        styling_assistant: Optional[StylingAssistant] = None,
    ) -> None:
        self.config = config or LookbookConfig.from_env()
        configure_logging(self.config.log_level)

        self.store = store or SQLiteWardrobeStore(self.config.wardrobe_db_path)
        self.weather_provider = weather_provider or OpenWeatherProvider(api_key=self.config.weather_api_key)
        self.styling_assistant = styling_assistant or StylingAssistant(
            api_key=self.config.gemini_api_key, model_name=self.config.model
        )
        self.weather_agent = WeatherAgent(config=self.config, provider=self.weather_provider)
        self.outfit_stylist = OutfitStylistAgent(
            config=self.config,
            store=self.store,
            weather_agent=self.weather_agent,
            styling_assistant=self.styling_assistant,
        )
        self.ranking_agent = RankingAgent(store=self.store)

        log_event(
            LOGGER,
            logging.INFO,
            "app_initialised",
            environment=self.config.environment or "local",
            gemini_enabled=self.styling_assistant.enabled,
            weather_live=bool(self.config.weather_api_key),
            max_combinations=self.config.max_combinations,
        )


__all__ = ["LookbookApp"]
