"""Viral potential model outputs."""

import pytest

from logic.viral_prediction import MODEL_VERSION, ViralSignals, normalise_followers, predict_viral_potential


def test_prediction_weights_signals_and_lists_factors() -> None:
    signals = ViralSignals(followers_count=500, trend_alignment=80, visual_quality=60, timing=40, engagement=20)

    prediction = predict_viral_potential(signals)

    assert prediction["viral_score"] == 57.0
    assert prediction["viral_probability"] == 57
    assert prediction["top_contributing_factors"] == ["Trend Alignment", "Visual Quality", "Follower Count"]
    assert prediction["recommendations"] == [
        "Post during peak user activity times for better visibility",
        "Respond to comments and interact with your audience more",
    ]
    assert prediction["model_version"] == MODEL_VERSION


def test_prediction_is_deterministic() -> None:
    signals = ViralSignals(followers_count=120, trend_alignment=33.3, visual_quality=90, timing=12, engagement=70)
    assert predict_viral_potential(signals) == predict_viral_potential(signals)


def test_followers_saturate_at_one_hundred() -> None:
    assert normalise_followers(250) == 25.0
    assert normalise_followers(50_000) == 100.0


def test_signals_reject_out_of_range_scores() -> None:
    with pytest.raises(ValueError):
        ViralSignals(followers_count=10, trend_alignment=120, visual_quality=50, timing=50, engagement=50)
    with pytest.raises(ValueError):
        ViralSignals(followers_count=-1, trend_alignment=10, visual_quality=50, timing=50, engagement=50)
