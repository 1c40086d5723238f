"""Versioned weighted model estimating a look's viral potential.

All inputs are supplied by the caller; nothing here is randomised. Bump
``MODEL_VERSION`` whenever ``WEIGHTS`` or the normalisation change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

MODEL_VERSION = "v1"

WEIGHTS = {
    "followers": 0.2,
    "trend_alignment": 0.3,
    "visual_quality": 0.25,
    "timing": 0.15,
    "engagement": 0.1,
}

FOLLOWER_SATURATION = 1000

FACTOR_LABELS = {
    "followers": "Follower Count",
    "trend_alignment": "Trend Alignment",
    "visual_quality": "Visual Quality",
    "timing": "Posting Timing",
    "engagement": "User Engagement",
}

FACTOR_ADVICE = {
    "followers": "Try engaging more with other users to grow your following",
    "trend_alignment": "Consider incorporating current popular fashion trends in your looks",
    "visual_quality": "Ensure good lighting and composition in your fashion photos",
    "timing": "Post during peak user activity times for better visibility",
    "engagement": "Respond to comments and interact with your audience more",
}


@dataclass(frozen=True)
class ViralSignals:
    """Observed signals for one look; every score is on a 0-100 scale."""

    followers_count: int
    trend_alignment: float
    visual_quality: float
    timing: float
    engagement: float

    def __post_init__(self) -> None:
        if self.followers_count < 0:
            raise ValueError("followers_count cannot be negative")
        for name in ("trend_alignment", "visual_quality", "timing", "engagement"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be between 0 and 100, got {value}")


def normalise_followers(followers_count: int) -> float:
    return min(followers_count / FOLLOWER_SATURATION * 100, 100.0)


def predict_viral_potential(signals: ViralSignals) -> Dict[str, object]:
    factor_scores = {
        "followers": normalise_followers(signals.followers_count),
        "trend_alignment": float(signals.trend_alignment),
        "visual_quality": float(signals.visual_quality),
        "timing": float(signals.timing),
        "engagement": float(signals.engagement),
    }
    viral_score = sum(WEIGHTS[name] * score for name, score in factor_scores.items())

    # Stable sort keeps declaration order for equal factor scores.
    ordered: List[str] = sorted(factor_scores, key=lambda name: -factor_scores[name])
    return {
        "viral_probability": min(round(viral_score), 100),
        "viral_score": round(viral_score, 2),
        "top_contributing_factors": [FACTOR_LABELS[name] for name in ordered[:3]],
        "recommendations": [FACTOR_ADVICE[name] for name in ordered[-2:]],
        "factor_scores": {name: round(score, 2) for name, score in factor_scores.items()},
        "model_version": MODEL_VERSION,
    }


__all__ = ["MODEL_VERSION", "WEIGHTS", "ViralSignals", "normalise_followers", "predict_viral_potential"]
