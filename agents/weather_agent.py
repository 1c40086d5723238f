"""Weather agent that resolves a location into engine-ready weather inputs."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional

from lookbook_app.config import LookbookConfig
from lookbook_app.logging_config import get_logger, log_event, operation_context
from logic.weather_rules import TEMPERATURE_SEASON_BANDS_C, season_for_temperature
from models.weather import WeatherCondition
from tools.weather_provider import WeatherProfile, WeatherProvider


LOGGER = get_logger(__name__)

WINDY_THRESHOLD_MS = 10.0

_CONDITION_MAP = {
    "clear": "sunny",
    "sunny": "sunny",
    "rain": "rainy",
    "drizzle": "rainy",
    "thunderstorm": "rainy",
    "snow": "snowy",
    "clouds": "cloudy",
    "mist": "cloudy",
    "fog": "cloudy",
    "haze": "cloudy",
}


class WeatherAgent:
    """Fetches weather and classifies it for outfit recommendations."""

    def __init__(self, config: LookbookConfig, provider: WeatherProvider) -> None:
        self.config = config
        self.provider = provider

    def _weather_type(self, profile: WeatherProfile) -> str:
        condition = _CONDITION_MAP.get(profile.weather_condition.lower(), "cloudy")
        if condition in {"sunny", "cloudy"} and profile.wind_speed >= WINDY_THRESHOLD_MS:
            return "windy"
        return condition

    def to_condition(self, profile: WeatherProfile) -> WeatherCondition:
        precipitation = max(0.0, min(100.0, profile.precipitation_probability * 100))
        return WeatherCondition(
            condition=self._weather_type(profile),
            temperature_c=round(profile.temperature_c, 1),
            precipitation=round(precipitation, 1),
        )

    def resolve(self, location: Optional[str] = None, target_date: Optional[date] = None) -> Dict[str, object]:
        """Fetch the forecast and return the weather condition and implied season."""

        location = location or self.config.default_location
        target_date = target_date or date.today()
        with operation_context("agent:weather.resolve") as correlation_id:
            forecast = self.provider.get_forecast(location=location, date=target_date)
            condition = self.to_condition(forecast)
            season = season_for_temperature(condition.temperature_c)
            log_event(
                LOGGER,
                level=logging.INFO,
                event="agent_call_completed",
                agent="weather",
                method="resolve",
                correlation_id=correlation_id,
                location=location,
                weather_type=condition.condition,
                season=season,
            )
            return {
                "location": location,
                "date": target_date.isoformat(),
                "weather": condition,
                "season": season,
                "source": forecast.source,
                "debug_summary": {
                    "season_bands_c": {season_name: f"<{bound:g}" for bound, season_name in TEMPERATURE_SEASON_BANDS_C},
                    "windy_threshold_ms": WINDY_THRESHOLD_MS,
                },
            }


__all__ = ["WeatherAgent"]
