"""Gemini-backed styling notes for recommended outfits."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from google import generativeai as genai
from google.api_core import exceptions as google_exceptions

from models.outfit import OutfitCandidate, OutfitCriteria
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

STYLIST_GUARDRAILS = (
    "Only mention pieces that are listed in the prompt; never suggest purchases.",
    "Do not comment on the wearer's body shape, weight or appearance.",
    "Keep advice short, friendly and practical.",
)


def stylist_instruction() -> str:
    rules = "\n".join(f"- {rule}" for rule in STYLIST_GUARDRAILS)
    return f"You are the Lookbook stylist. You write styling notes for outfits.\nRules:\n{rules}"


def build_prompt(outfit: OutfitCandidate, criteria: OutfitCriteria) -> str:
    """Describe the outfit and criteria without user identifiers or URLs."""

    pieces = [
        f"- {item.display_name} ({item.category}, {item.color}"
        + (f", {item.style}" if item.style else "")
        + ")"
        for item in outfit.items
    ]
    context: List[str] = []
    if criteria.occasion:
        context.append(f"occasion: {criteria.occasion}")
    if criteria.season:
        context.append(f"season: {criteria.season}")
    if criteria.weather:
        context.append(f"weather: {criteria.weather.condition}, {criteria.weather.temperature_c:.0f}C")
    if criteria.style_preference:
        context.append(f"preferred styles: {', '.join(criteria.style_preference)}")
    return (
        "Write two sentences of styling advice for this outfit.\n"
        "Pieces:\n" + "\n".join(pieces) + "\n"
        "Context: " + ("; ".join(context) if context else "everyday wear")
    )


def fallback_note(outfit: OutfitCandidate) -> str:
    names = [item.display_name for item in outfit.items]
    if len(names) == 1:
        joined = names[0]
    else:
        joined = ", ".join(names[:-1]) + f" and {names[-1]}"
    return f"Pair {joined} for an easy, put-together look."


class StylingAssistant:
    """Writes a short styling note; falls back to a template when Gemini is unavailable."""

    def __init__(self, api_key: Optional[str] = None, model_name: str = "gemini-1.5-flash", model: Any = None) -> None:
        self.model_name = model_name
        self._model = model
        if self._model is None and api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(
                model_name,
                system_instruction=stylist_instruction(),
            )

    @property
    def enabled(self) -> bool:
        return self._model is not None

    @instrument_call("suggest_styling_note")
    def suggest(self, outfit: OutfitCandidate, criteria: Optional[OutfitCriteria] = None) -> str:
        if not self.enabled:
            return fallback_note(outfit)
        prompt = build_prompt(outfit, criteria or OutfitCriteria())
        try:
            response = self._model.generate_content(prompt)
            text = (response.text or "").strip()
        except google_exceptions.GoogleAPIError as exc:
            LOGGER.error("Gemini request failed", exc_info=exc)
            return fallback_note(outfit)
        except ValueError as exc:
            # Raised by the SDK when the candidate was blocked and has no text.
            LOGGER.warning("Gemini returned no usable text", exc_info=exc)
            return fallback_note(outfit)
        return text or fallback_note(outfit)


__all__ = ["STYLIST_GUARDRAILS", "StylingAssistant", "build_prompt", "fallback_note", "stylist_instruction"]
