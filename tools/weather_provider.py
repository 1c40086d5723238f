"""Forecast providers: OpenWeather over HTTP and an offline stand-in.

OpenWeather returns 3-hour slots; the provider folds the slots for the
requested day into one :class:`WeatherProfile`. Any failure (missing key,
network error, unexpected payload) degrades to a mild fallback profile whose
``source`` records the reason.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from lookbook_app.logging_config import get_logger, log_event
from tools.observability import instrument_call

LOGGER = get_logger(__name__)

FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"


class _SlotCondition(BaseModel):
    main: str = "Clouds"
    description: str = ""


class _SlotWind(BaseModel):
    speed: float = 0.0


class _SlotTemperatures(BaseModel):
    temp_min: float
    temp_max: float


class ForecastSlot(BaseModel):
    """One 3-hour forecast slot as returned by OpenWeather."""

    dt_txt: str
    main: _SlotTemperatures
    pop: float = Field(0.0, ge=0.0, le=1.0)
    wind: _SlotWind = Field(default_factory=_SlotWind)
    weather: List[_SlotCondition] = Field(default_factory=list)

    @property
    def day(self) -> str:
        return self.dt_txt[:10]

    @property
    def condition(self) -> str:
        return self.weather[0].main.lower() if self.weather else "clouds"


class ForecastPayload(BaseModel):
    slots: List[ForecastSlot] = Field(default_factory=list, alias="list")


@dataclass
class WeatherProfile:
    """Daily weather summary; ``precipitation_probability`` is in ``[0, 1]``."""

    temp_min: float
    temp_max: float
    precipitation_probability: float
    wind_speed: float
    weather_condition: str
    source: str = "provider"

    @property
    def temperature_c(self) -> float:
        return (self.temp_min + self.temp_max) / 2


FALLBACK_PROFILE = WeatherProfile(
    temp_min=12.0,
    temp_max=18.0,
    precipitation_probability=0.1,
    wind_speed=5.0,
    weather_condition="clouds",
    source="fallback",
)


def summarise_day(slots: List[ForecastSlot], target_date: date) -> Optional[WeatherProfile]:
    """Fold the slots of ``target_date`` (or the earliest day listed) into a profile."""

    if not slots:
        return None
    target_day = target_date.isoformat()
    day_slots = [slot for slot in slots if slot.day == target_day]
    if not day_slots:
        first_day = slots[0].day
        day_slots = [slot for slot in slots if slot.day == first_day]
    conditions = Counter(slot.condition for slot in day_slots)
    return WeatherProfile(
        temp_min=min(slot.main.temp_min for slot in day_slots),
        temp_max=max(slot.main.temp_max for slot in day_slots),
        precipitation_probability=max(slot.pop for slot in day_slots),
        wind_speed=max(slot.wind.speed for slot in day_slots),
        weather_condition=conditions.most_common(1)[0][0],
    )


class WeatherProvider(ABC):
    """Source of daily forecasts for a location."""

    @abstractmethod
    def get_forecast(self, location: str, date: date) -> WeatherProfile:
        """Return the forecast for ``location`` on ``date``."""


class OpenWeatherProvider(WeatherProvider):
    def __init__(self, api_key: str | None = None, timeout_seconds: float = 5.0, units: str = "metric") -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.units = units

    def _fallback(self, reason: str) -> WeatherProfile:
        log_event(LOGGER, logging.WARNING, "weather_fallback_used", reason=reason)
        return replace(FALLBACK_PROFILE, source=f"fallback:{reason}")

    @instrument_call("get_weather_forecast")
    def get_forecast(self, location: str, date: date) -> WeatherProfile:
        if not location:
            raise ValueError("location is required for weather lookups")
        if not self.api_key:
            return self._fallback("missing_api_key")

        try:
            response = requests.get(
                FORECAST_URL,
                params={"q": location, "appid": self.api_key, "units": self.units},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = ForecastPayload.model_validate(response.json())
        except requests.RequestException as exc:
            LOGGER.error("OpenWeather request failed: %s", type(exc).__name__)
            return self._fallback("request_error")
        except (ValidationError, ValueError) as exc:
            LOGGER.error("OpenWeather payload rejected: %s", type(exc).__name__)
            return self._fallback("schema_validation")

        profile = summarise_day(payload.slots, date)
        if profile is None:
            return self._fallback("no_forecast_entries")
        return profile


class MockWeatherProvider(WeatherProvider):
    """Returns a fixed profile and records every lookup."""

    def __init__(self, profile: WeatherProfile | None = None) -> None:
        self.profile = profile or WeatherProfile(
            temp_min=12.0,
            temp_max=18.0,
            precipitation_probability=0.1,
            wind_speed=5.0,
            weather_condition="clear",
            source="mock",
        )
        self.calls: List[tuple] = []

    def get_forecast(self, location: str, date: date) -> WeatherProfile:
        self.calls.append((location, date))
        return self.profile


__all__ = [
    "FALLBACK_PROFILE",
    "ForecastPayload",
    "ForecastSlot",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "WeatherProfile",
    "WeatherProvider",
    "summarise_day",
]
