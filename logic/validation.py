"""Pydantic schemas validating request payloads before they reach the core."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.outfit import OutfitCriteria
from models.taxonomy import normalize_season
from models.weather import WEATHER_TYPES, WeatherCondition
from logic.viral_prediction import ViralSignals


def _split_csv(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part).strip() for part in value if str(part).strip()]


class WeatherInput(BaseModel):
    """Weather already resolved by the caller."""

    type: str = Field(description=f"One of {', '.join(WEATHER_TYPES)}")
    temperature: float = Field(description="Temperature in Celsius")
    precipitation: float = Field(0.0, ge=0.0, le=100.0, description="Chance of precipitation, percent")

    @field_validator("type")
    @classmethod
    def _validate_type(cls, value: str) -> str:
        key = value.strip().lower()
        if key not in WEATHER_TYPES:
            raise ValueError(f"weather type must be one of {list(WEATHER_TYPES)}")
        return key

    def to_condition(self) -> WeatherCondition:
        return WeatherCondition(condition=self.type, temperature_c=self.temperature, precipitation=self.precipitation)


class RecommendationRequest(BaseModel):
    """Criteria accepted by the recommendation endpoints."""

    occasion: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[WeatherInput] = None
    style_preference: List[str] = Field(default_factory=list, alias="stylePreference")
    color_scheme: List[str] = Field(default_factory=list, alias="colorScheme")
    limit: Optional[int] = Field(None, ge=1, le=50)

    model_config = {"populate_by_name": True}

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return normalize_season(value)

    @field_validator("style_preference", "color_scheme", mode="before")
    @classmethod
    def _split_lists(cls, value: Any) -> List[str]:
        return _split_csv(value)

    def to_criteria(self) -> OutfitCriteria:
        return OutfitCriteria(
            occasion=self.occasion,
            season=self.season,
            weather=self.weather.to_condition() if self.weather else None,
            style_preference=self.style_preference,
            color_scheme=self.color_scheme,
        )


class WardrobeItemInput(BaseModel):
    """Payload for adding an item to a wardrobe."""

    item_id: Optional[str] = None
    name: Optional[str] = None
    category: str = Field(min_length=1)
    color: str = Field(min_length=1)
    style: Optional[str] = None
    season: Optional[str] = None
    material: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return normalize_season(value)


class WardrobeItemUpdate(BaseModel):
    """Partial edit of an existing item; omitted fields stay unchanged."""

    name: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, min_length=1)
    style: Optional[str] = None
    season: Optional[str] = None
    material: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return normalize_season(value)


class WearEventInput(BaseModel):
    worn_at: Optional[datetime] = None


class ViralPredictionRequest(BaseModel):
    """Observed signals for a look; scores are on a 0-100 scale."""

    look_id: str = Field(min_length=1)
    followers_count: int = Field(0, ge=0)
    trend_alignment: float = Field(ge=0.0, le=100.0)
    visual_quality: float = Field(ge=0.0, le=100.0)
    timing: float = Field(ge=0.0, le=100.0)
    engagement: float = Field(ge=0.0, le=100.0)

    def to_signals(self) -> ViralSignals:
        return ViralSignals(
            followers_count=self.followers_count,
            trend_alignment=self.trend_alignment,
            visual_quality=self.visual_quality,
            timing=self.timing,
            engagement=self.engagement,
        )


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["invalid"] = "invalid"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False, include_context=False)).model_dump()


__all__ = [
    "WeatherInput",
    "RecommendationRequest",
    "WardrobeItemInput",
    "WardrobeItemUpdate",
    "WearEventInput",
    "ViralPredictionRequest",
    "ValidationResult",
    "validation_failure",
]
