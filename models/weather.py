"""Resolved weather inputs consumed by the recommendation engine."""

from dataclasses import dataclass

WEATHER_TYPES = ("sunny", "rainy", "snowy", "cloudy", "windy")


@dataclass(frozen=True)
class WeatherCondition:
    """Weather already resolved by a provider.

    ``precipitation`` is a percentage chance in ``[0, 100]``.
    """

    condition: str
    temperature_c: float
    precipitation: float = 0.0

    def __post_init__(self) -> None:
        condition = str(self.condition).strip().lower()
        if condition not in WEATHER_TYPES:
            raise ValueError(f"Unsupported weather type '{self.condition}'. Allowed: {list(WEATHER_TYPES)}")
        if not 0.0 <= float(self.precipitation) <= 100.0:
            raise ValueError("precipitation must be a percentage between 0 and 100")
        object.__setattr__(self, "condition", condition)
        object.__setattr__(self, "temperature_c", float(self.temperature_c))
        object.__setattr__(self, "precipitation", float(self.precipitation))

    @property
    def is_wet(self) -> bool:
        return self.condition in {"rainy", "snowy"}
