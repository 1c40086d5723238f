"""HTTP surface tests using FastAPI's TestClient."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from logic.errors import EMPTY_WARDROBE_MESSAGE, NOT_ENOUGH_VARIETY_MESSAGE
from lookbook_app.app import LookbookApp
from lookbook_app.config import LookbookConfig
from server.api import create_app
from tools.styling_assistant import StylingAssistant
from tools.weather_provider import MockWeatherProvider


@pytest.fixture()
def lookbook(tmp_path: Path) -> LookbookApp:
    return LookbookApp(
        config=LookbookConfig(wardrobe_db_path=str(tmp_path / "api.db")),
        weather_provider=MockWeatherProvider(),
        styling_assistant=StylingAssistant(),
    )


@pytest.fixture()
def client(lookbook: LookbookApp) -> TestClient:
    return TestClient(create_app(lookbook))


def _add(client: TestClient, user_id: str, **payload) -> dict:
    response = client.post(f"/wardrobe/{user_id}/items", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["gemini_enabled"] is False


def test_recommendations_for_empty_wardrobe_return_404(client: TestClient) -> None:
    response = client.get("/outfits/recommendations", params={"user_id": "nobody"})

    assert response.status_code == 404
    assert response.json() == {"error": EMPTY_WARDROBE_MESSAGE}


def test_recommendations_for_top_and_bottom(client: TestClient) -> None:
    _add(client, "alice", item_id="tee", category="Top", color="White", season="summer")
    _add(client, "alice", item_id="skirt", category="skirt", color="black", season="summer")

    response = client.get(
        "/outfits/recommendations",
        params={"user_id": "alice", "season": "summer", "color_scheme": "white,black"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["count"] == 1
    assert body["recommendations"][0]["item_ids"] == ["tee", "skirt"]
    assert body["recommendations"][0]["sub_scores"]["season"] == 1.0
    assert body["recommendations"][0]["sub_scores"]["color"] == 1.0
    assert body["message"] is None


def test_recommendations_without_base_layer_explain_why(client: TestClient) -> None:
    _add(client, "alice", category="accessory", color="gold")

    body = client.get("/outfits/recommendations", params={"user_id": "alice"}).json()

    assert body["recommendations"] == []
    assert body["message"] == NOT_ENOUGH_VARIETY_MESSAGE


def test_invalid_season_is_rejected(client: TestClient) -> None:
    response = client.get("/outfits/recommendations", params={"user_id": "alice", "season": "monsoon"})

    assert response.status_code == 422
    assert response.json()["status"] == "invalid"


def test_weather_based_recommendations_use_provider(client: TestClient, lookbook: LookbookApp) -> None:
    _add(client, "alice", category="dress", color="red")
    _add(client, "alice", category="shoes", color="black")

    body = client.get(
        "/outfits/recommendations",
        params={"user_id": "alice", "weather_based": "true", "location": "Lisbon,PT"},
    ).json()

    assert body["criteria"]["weather"]["type"] == "sunny"
    assert body["debug_summary"]["resolved_season"] == "spring"
    assert lookbook.weather_provider.calls[0][0] == "Lisbon,PT"


def test_post_recommendations_accepts_camel_case_and_logs(client: TestClient, lookbook: LookbookApp) -> None:
    _add(client, "alice", item_id="blazer", category="top", color="navy", style="formal")
    _add(client, "alice", item_id="trousers", category="bottom", color="gray", style="formal")

    response = client.post(
        "/outfits/recommendations",
        json={
            "user_id": "alice",
            "occasion": "business",
            "stylePreference": ["formal"],
            "colorScheme": ["navy", "gray"],
            "weather": {"type": "cloudy", "temperature": 12, "precipitation": 10},
            "limit": 3,
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["recommendations"][0]["score"] == 100.0
    assert body["criteria"]["stylePreference"] == ["formal"]
    assert lookbook.store.list_recommendation_logs("alice")[0]["results_count"] == 1


def test_item_wear_and_delete(client: TestClient) -> None:
    created = _add(client, "alice", item_id="loafers", category="shoes", color="brown")
    assert created["wear_count"] == 0

    worn = client.post("/wardrobe/alice/items/loafers/wear", json={"worn_at": "2025-05-01T08:00:00Z"})
    assert worn.status_code == 200
    assert worn.json()["wear_count"] == 1

    assert client.post("/wardrobe/alice/items/missing/wear").status_code == 404

    listing = client.get("/wardrobe/alice/items").json()
    assert listing["count"] == 1

    assert client.delete("/wardrobe/alice/items/loafers").status_code == 200
    assert client.delete("/wardrobe/alice/items/loafers").status_code == 404


def test_added_item_keeps_category_and_color_as_entered(client: TestClient) -> None:
    created = _add(client, "u1", item_id="skirt1", category="Skirt", color=" Denim ")

    stored = client.get("/wardrobe/u1/items").json()["items"][0]

    assert (created["category"], created["color"]) == ("skirt", "denim")
    assert (stored["category"], stored["color"]) == ("skirt", "denim")


def test_adding_an_existing_item_id_conflicts(client: TestClient) -> None:
    _add(client, "u1", item_id="t1", category="top", color="red")
    for _ in range(3):
        assert client.post("/wardrobe/u1/items/t1/wear").status_code == 200

    response = client.post("/wardrobe/u1/items", json={"item_id": "t1", "category": "shoes", "color": "green"})

    assert response.status_code == 409
    item = client.get("/wardrobe/u1/items").json()["items"][0]
    assert (item["category"], item["color"], item["wear_count"]) == ("top", "red", 3)


def test_edit_item_changes_fields_and_keeps_wear_count(client: TestClient) -> None:
    _add(client, "u1", item_id="t1", category="top", color="red")
    client.post("/wardrobe/u1/items/t1/wear")

    response = client.patch("/wardrobe/u1/items/t1", json={"color": "Burgundy", "style": "casual"})

    assert response.status_code == 200
    body = response.json()
    assert (body["category"], body["color"], body["style"], body["wear_count"]) == ("top", "burgundy", "casual", 1)
    assert client.patch("/wardrobe/u1/items/missing", json={"color": "red"}).status_code == 404


def test_admin_ranking_update_and_stats(client: TestClient) -> None:
    for index in range(3):
        _add(client, "alice", category="top", color="white", item_id=f"a{index}")
    _add(client, "bob", category="top", color="white")

    updated = client.post("/admin/update-rankings").json()
    stats = client.get("/admin/update-rankings").json()
    alice = client.get("/wardrobe/alice/ranking").json()

    assert updated["updated"] == 2
    assert stats["stats"]["ranked_wardrobes"] == 2
    assert stats["stats"]["top_ranked"][0] == alice["id"]
    assert (alice["ranking_position"], alice["ranking_score"], alice["tier"]) == (1, 100.0, "gold")
    assert client.get("/wardrobe/nobody/ranking").status_code == 404


def test_viral_prediction_endpoint(client: TestClient) -> None:
    response = client.post(
        "/looks/viral-prediction",
        json={
            "look_id": "look-1",
            "followers_count": 2000,
            "trend_alignment": 50,
            "visual_quality": 50,
            "timing": 50,
            "engagement": 50,
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["look_id"] == "look-1"
    assert body["viral_probability"] == 60
    assert body["top_contributing_factors"][0] == "Follower Count"


def test_viral_prediction_rejects_out_of_range_scores(client: TestClient) -> None:
    response = client.post(
        "/looks/viral-prediction",
        json={"look_id": "look-1", "trend_alignment": 101, "visual_quality": 50, "timing": 50, "engagement": 50},
    )
    assert response.status_code == 422
