"""Tests for the HTTP API."""

import base64

from fastapi.testclient import TestClient

from calorie_tracker.api.app import create_app
from calorie_tracker.containers import AppContainer
from tests.conftest import FakeStructuredClient, InMemoryKeyValueStore

OATMEAL = {
    "name": "Oatmeal",
    "meal_type": "Breakfast",
    "weight_g": 200,
    "calories": 140,
    "protein_g": 5,
    "carbs_g": 24,
    "fat_g": 3,
}

APPLE = {
    "name": "Apple",
    "brand": None,
    "calories": 52,
    "protein_g": 0.3,
    "carbs_g": 14,
    "fat_g": 0.2,
    "serving_units": [{"name": "medium", "grams": 182}],
}


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_manual_entry_appears_in_log_and_summary(container: AppContainer) -> None:
    client = _client(container)

    created = client.post("/log/entries", json={"entries": [OATMEAL]})
    log = client.get("/log")
    summary = client.get("/summary", params={"day": "2024-05-10"})

    assert created.status_code == 201
    entry = created.json()["entries"][0]
    assert entry["date"] == "2024-05-10"
    assert entry["base_calories"] == 70
    breakfast = log.json()["meals"][0]
    assert breakfast["meal_type"] == "Breakfast"
    assert breakfast["entries"][0]["id"] == entry["id"]
    body = summary.json()
    assert body["summary"]["totals"]["calories"] == 140
    assert body["goals"]["remaining_calories"] == 2060


def test_manual_entry_requires_positive_calories(container: AppContainer) -> None:
    response = _client(container).post(
        "/log/entries", json={"entries": [{**OATMEAL, "calories": 0}]}
    )

    assert response.status_code == 422


def test_catalog_entry_scales_servings(container: AppContainer) -> None:
    response = _client(container).post(
        "/log/entries/from-catalog",
        json={"food": APPLE, "meal_type": "Snacks", "unit": "medium", "count": 1},
    )

    assert response.status_code == 201
    entry = response.json()["entries"][0]
    assert entry["weight_g"] == 182
    assert entry["calories"] == 95
    assert entry["carbs_g"] == 25


def test_catalog_entry_rejects_unknown_unit(container: AppContainer) -> None:
    response = _client(container).post(
        "/log/entries/from-catalog",
        json={"food": APPLE, "meal_type": "Snacks", "unit": "cup", "count": 1},
    )

    assert response.status_code == 422
    assert "Unknown serving unit" in response.json()["detail"]


def test_rescale_replace_and_delete(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    client = _client(container)
    entry_id = client.post("/log/entries", json={"entries": [OATMEAL]}).json()[
        "entries"
    ][0]["id"]

    rescaled = client.patch(f"/log/entries/{entry_id}", json={"weight_g": 100})
    replaced = client.put(f"/log/entries/{entry_id}/food", json={"food": APPLE})
    deleted = client.delete(f"/log/entries/{entry_id}")

    assert rescaled.json()["calories"] == 70
    assert replaced.json()["name"] == "Apple"
    assert replaced.json()["weight_g"] == 100
    assert replaced.json()["calories"] == 52
    assert deleted.status_code == 204
    assert container.session.state.entries == ()
    assert store.values["foodItems"] == "[]"


def test_rescale_by_serving_unit(container: AppContainer) -> None:
    client = _client(container)
    entry_id = client.post(
        "/log/entries/from-catalog",
        json={"food": APPLE, "meal_type": "Snacks", "unit": "g", "count": 100},
    ).json()["entries"][0]["id"]

    response = client.patch(
        f"/log/entries/{entry_id}",
        json={"unit": "medium", "count": 2, "serving_units": APPLE["serving_units"]},
    )

    assert response.status_code == 200
    assert response.json()["weight_g"] == 364


def test_gram_servings_always_weigh_one_gram(container: AppContainer) -> None:
    client = _client(container)
    heavy_gram = [{"name": "g", "grams": 100}]
    added = client.post(
        "/log/entries/from-catalog",
        json={
            "food": {**APPLE, "serving_units": heavy_gram},
            "meal_type": "Snacks",
            "unit": "g",
            "count": 150,
        },
    )
    entry_id = added.json()["entries"][0]["id"]

    rescaled = client.patch(
        f"/log/entries/{entry_id}",
        json={"unit": "g", "count": 50, "serving_units": heavy_gram},
    )

    assert added.json()["entries"][0]["weight_g"] == 150
    assert added.json()["entries"][0]["calories"] == 78
    assert rescaled.json()["weight_g"] == 50


def test_rescale_requires_one_portion(container: AppContainer) -> None:
    response = _client(container).patch("/log/entries/any", json={})

    assert response.status_code == 422


def test_unknown_entry_returns_404(container: AppContainer) -> None:
    response = _client(container).delete("/log/entries/missing")

    assert response.status_code == 404


def test_failed_save_returns_503_and_keeps_state(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    store.fail_writes = True

    response = _client(container).post("/log/entries", json={"entries": [OATMEAL]})

    assert response.status_code == 503
    assert container.session.state.entries == ()


def test_select_date(container: AppContainer) -> None:
    client = _client(container)

    client.put("/session/date", json={"day": "2024-05-12"})
    created = client.post("/log/entries", json={"entries": [OATMEAL]})

    assert client.get("/session/date").json() == {"day": "2024-05-12"}
    assert created.json()["entries"][0]["date"] == "2024-05-12"


def test_progress_covers_last_days(container: AppContainer) -> None:
    client = _client(container)
    client.post("/log/entries", json={"entries": [OATMEAL]})

    response = client.get("/progress", params={"days": 7})

    body = response.json()
    assert len(body["period"]["daily"]) == 7
    assert body["period"]["daily"][-1]["calories"] == 140
    assert body["period"]["avg_calories"] == 20
    assert body["distribution"]["protein_g"] == 5


def test_profile_macros_and_tdee(container: AppContainer) -> None:
    client = _client(container)

    macros = client.post(
        "/profile/macros", json={"protein_pct": 40, "carbs_pct": 40, "fat_pct": 20}
    )
    rejected = client.post(
        "/profile/macros", json={"protein_pct": 40, "carbs_pct": 40, "fat_pct": 30}
    )
    estimate = client.post(
        "/profile/tdee",
        json={"weekly_goal": "lose0.5", "activity_level": "sedentary"},
    )
    applied = client.post(
        "/profile/tdee/apply",
        json={"weekly_goal": "lose0.5", "activity_level": "sedentary"},
    )

    assert macros.json()["macro_goal"] == {
        "protein_g": 220,
        "carbs_g": 220,
        "fat_g": 49,
    }
    assert rejected.status_code == 422
    assert "Current total: 110%" in rejected.json()["detail"]
    assert client.get("/profile").json()["macro_goal"]["fat_g"] == 49
    assert estimate.json()["estimate"]["maintenance_calories"] == 2076
    assert applied.json()["daily_goal"] == 1526
    assert applied.json()["weekly_goal"] == "lose0.5"


def test_update_profile_validates(container: AppContainer) -> None:
    client = _client(container)
    profile = client.get("/profile").json()

    updated = client.put("/profile", json={**profile, "daily_goal": 1800})
    rejected = client.put("/profile", json={**profile, "daily_goal": -5})

    assert updated.json()["daily_goal"] == 1800
    assert rejected.status_code == 422


def test_scan_and_accept(
    container: AppContainer, model_client: FakeStructuredClient
) -> None:
    model_client.queue(
        "meal_estimate",
        {
            "items": [
                {
                    "name": "toast",
                    "weight_g": 40,
                    "calories": 110,
                    "protein_g": 4,
                    "carbs_g": 20,
                    "fat_g": 1.5,
                }
            ],
            "total_calories": 110,
        },
    )
    model_client.queue(
        "food_details",
        {
            "items": [
                {
                    "food_item": "toast",
                    "quantity": "1 slice",
                    "weight_g": 40,
                    "reason": "Given weight.",
                }
            ]
        },
    )
    client = _client(container)
    image = base64.b64encode(b"\xff\xd8\xff fake jpeg").decode()

    scan = client.post("/ai/scan", json={"image_base64": image})
    accepted = client.post(
        "/log/entries/from-scan",
        json={"items": scan.json()["items"], "meal_type": "Breakfast"},
    )

    assert scan.status_code == 200
    assert scan.json()["items"][0]["calories"] == 110
    assert accepted.status_code == 201
    assert accepted.json()["entries"][0]["name"] == "toast"


def test_scan_rejects_invalid_base64(container: AppContainer) -> None:
    response = _client(container).post("/ai/scan", json={"image_base64": "%%%"})

    assert response.status_code == 422


def test_ai_failure_returns_502(
    container: AppContainer, model_client: FakeStructuredClient
) -> None:
    model_client.queue("food_search", RuntimeError("down"), RuntimeError("down"))

    response = _client(container).post("/ai/search", json={"query": "apple"})

    assert response.status_code == 502
    assert "debug" not in response.json()["detail"]


def test_ai_failure_shows_debug_detail_locally(
    container: AppContainer, model_client: FakeStructuredClient
) -> None:
    container.settings = container.settings.model_copy(update={"environment": "local"})
    model_client.queue("recipe_makeover", RuntimeError("down"))

    response = _client(container).post(
        "/ai/recipes/reimagine",
        json={"ingredients": "eggs", "instructions": "fry", "goal": "vegan"},
    )

    assert response.status_code == 502
    assert "debug: AIServiceError" in response.json()["detail"]


def test_search_returns_catalog_items(
    container: AppContainer, model_client: FakeStructuredClient
) -> None:
    model_client.queue("food_search", {"items": [APPLE]})

    response = _client(container).post("/ai/search", json={"query": "apple"})

    (item,) = response.json()["items"]
    assert [unit["name"] for unit in item["serving_units"]] == ["g", "medium"]


def test_parse_and_log(
    container: AppContainer, model_client: FakeStructuredClient
) -> None:
    model_client.queue(
        "food_log",
        {
            "items": [
                {
                    "name": "banana",
                    "weight_g": 120,
                    "calories": 107,
                    "protein_g": 1.3,
                    "carbs_g": 27,
                    "fat_g": 0.4,
                }
            ]
        },
    )

    response = _client(container).post(
        "/ai/parse",
        json={"query": "a banana", "meal_type": "Snacks", "log": True},
    )

    body = response.json()
    assert body["stale"] is False
    assert body["logged"][0]["name"] == "banana"
    assert len(container.session.state.entries) == 1
