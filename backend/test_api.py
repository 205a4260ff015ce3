"""
API tests for the adaptation workflow.

Each test builds its own app around a temporary recipe store, so nothing
touches the configured data directory or the network.
"""

import json
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from recipe_adapter.main import create_app
from recipe_adapter.models.fodmap import FodmapRating, IngredientRating
from recipe_adapter.services.fodmap_dataset import FodmapDatasetService
from recipe_adapter.services.llm_adapter import GenerationResult
from recipe_adapter.services.recipe_store import JsonRecipeStore, RecipeStoreError


@pytest.fixture
def fodmap_service():
    service = Mock(spec=FodmapDatasetService)
    service.rate_ingredients.return_value = [
        IngredientRating(ingredient="garlic", rating=FodmapRating.HIGH),
    ]
    return service


@pytest.fixture
def app(recipe_store, fodmap_service):
    return create_app(recipe_store=recipe_store, fodmap_service=fodmap_service, use_ai=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def saved_recipe(client, sample_recipe):
    response = client.post("/recipes", json=sample_recipe.model_dump(mode="json"))
    assert response.status_code == 201
    return sample_recipe


@pytest.fixture
def pending(client, saved_recipe):
    response = client.post("/adapt", json={"recipe_id": "1", "diets": ["Low FODMAP"]})
    assert response.status_code == 200
    return response.json()["proposal"]


class TestStatus:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"

    def test_health_reports_ai_disabled(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["configuration"]["ai_adaptation_enabled"] is False
        assert data["warnings"]

    def test_options(self, client):
        data = client.get("/options").json()
        assert "Low FODMAP" in data["diets"]
        assert data["allergies"]


class TestRecipes:
    def test_save_and_list(self, client, saved_recipe):
        recipes = client.get("/recipes").json()
        assert [r["id"] for r in recipes] == ["1"]

    def test_get(self, client, saved_recipe):
        assert client.get("/recipes/1").json()["title"] == "Creamy Garlic Pasta"

    def test_get_unknown(self, client):
        assert client.get("/recipes/missing").status_code == 404

    def test_get_invalid_id(self, client):
        assert client.get("/recipes/bad id!").status_code == 400

    def test_delete(self, client, saved_recipe):
        assert client.delete("/recipes/1").json() == {"deleted": "1"}
        assert client.delete("/recipes/1").status_code == 404

    def test_invalid_recipe_rejected(self, client):
        assert client.post("/recipes", json={"id": "1", "title": "   "}).status_code == 422

    def test_save_failure(self, fodmap_service, sample_recipe):
        store = Mock(spec=JsonRecipeStore)
        store.save_recipe.side_effect = RecipeStoreError("disk full")
        client = TestClient(create_app(recipe_store=store, fodmap_service=fodmap_service, use_ai=False))

        response = client.post("/recipes", json=sample_recipe.model_dump(mode="json"))

        assert response.status_code == 503
        assert response.json()["detail"] == "Could not save recipe"


class TestAdapt:
    def test_fallback_adaptation(self, client, pending):
        names = [i["name"] for i in pending["adapted"]["ingredients"]]

        assert names[1] == "garlic-infused oil"
        assert len(pending["choices"]) == len(names)
        assert pending["diets"] == ["Low FODMAP"]
        assert pending["original"]["id"] == "1"

    def test_response_fields(self, client, saved_recipe):
        data = client.post("/adapt", json={"recipe_id": "1", "diets": ["Low FODMAP"]}).json()

        assert data["used_fallback"] is True
        assert data["message"] == "AI unavailable, using built-in substitutions"
        assert data["summary"].startswith("Made ")

    def test_inline_recipe(self, client, make_recipe):
        recipe = make_recipe(["garlic", "carrot"], recipe_id="inline")

        response = client.post(
            "/adapt",
            json={"recipe": recipe.model_dump(mode="json"), "allergies": ["FODMAP-sensitive"]},
        )

        assert response.status_code == 200
        assert response.json()["proposal"]["original"]["id"] == "inline"

    def test_unknown_recipe(self, client):
        response = client.post("/adapt", json={"recipe_id": "nope", "diets": ["Vegan"]})
        assert response.status_code == 404

    def test_no_restrictions(self, client, saved_recipe):
        response = client.post("/adapt", json={"recipe_id": "1", "diets": []})
        assert response.status_code == 422

    def test_recipe_without_ingredients(self, client, make_recipe):
        recipe = make_recipe([], recipe_id="empty")

        response = client.post(
            "/adapt", json={"recipe": recipe.model_dump(mode="json"), "diets": ["Vegan"]}
        )

        assert response.status_code == 422

    def test_ai_adaptation(self, recipe_store, fodmap_service, sample_recipe, make_generator):
        recipe_store.save_recipe(sample_recipe)
        generator = make_generator(GenerationResult(value=json.dumps({
            "title": "Low FODMAP Pasta",
            "ingredients": [{"amount": "1", "name": i.name} for i in sample_recipe.ingredients],
            "instructions": ["Cook."],
            "notes": "Chef notes",
        })))
        client = TestClient(create_app(recipe_store=recipe_store, generator=generator,
                                       fodmap_service=fodmap_service))

        data = client.post("/adapt", json={"recipe_id": "1", "diets": ["Low FODMAP"]}).json()

        assert data["used_fallback"] is False
        adapted = data["proposal"]["adapted"]
        assert adapted["ingredients"][1]["name"] == "garlic-infused oil"
        assert "**FODMAP Corrections:**" in adapted["notes"]


class TestReview:
    def test_no_proposal(self, client):
        assert client.get("/proposal").status_code == 404
        assert client.post("/proposal/accept-all").status_code == 404
        assert client.post("/proposal/reset-all").status_code == 404
        assert client.post("/proposal/commit").status_code == 404
        assert client.put("/proposal/choices/0", json={"adapted_name": "x"}).status_code == 404

    def test_get_proposal(self, client, pending):
        assert client.get("/proposal").json() == pending

    def test_update_choice(self, client, pending):
        response = client.put(
            "/proposal/choices/2", json={"adapted_name": "green onion tops", "accepted": True}
        )

        choice = response.json()["choices"][2]
        assert choice["adapted_name"] == "green onion tops"
        assert choice["accepted"] is True

    def test_update_choice_out_of_range(self, client, pending):
        response = client.put("/proposal/choices/99", json={"adapted_name": "salt"})
        assert response.status_code == 404

    def test_reset_then_accept_all(self, client, pending):
        reset = client.post("/proposal/reset-all").json()
        assert all(not c["accepted"] for c in reset["choices"])
        assert all(c["adapted_name"] == c["original_name"] for c in reset["choices"])

        accepted = client.post("/proposal/accept-all").json()
        assert all(not c["accepted"] for c in accepted["choices"])

    def test_discard(self, client, pending):
        assert client.delete("/proposal").json() == {"status": "cleared"}
        assert client.get("/proposal").status_code == 404


class TestCommit:
    def test_commit_saves_new_recipe(self, client, pending, recipe_store):
        response = client.post("/proposal/commit")

        assert response.status_code == 200
        data = response.json()
        assert data["original_id"] == "1"
        assert data["recipe"]["id"].startswith("1-adapted-")
        assert "adapted" in data["recipe"]["tags"]
        assert "delete the original" in data["delete_original_prompt"]
        assert {r.id for r in recipe_store.list_recipes()} == {"1", data["recipe"]["id"]}
        assert client.get("/proposal").status_code == 404

    def test_commit_with_rejected_choice(self, client, pending):
        client.put("/proposal/choices/1", json={"adapted_name": "garlic-infused oil", "accepted": False})

        recipe = client.post("/proposal/commit").json()["recipe"]

        assert recipe["ingredients"][1]["name"] == "garlic clove"

    def test_commit_failure_keeps_proposal(self, client, pending, app, monkeypatch):
        def fail(recipe):
            raise RecipeStoreError("disk full")

        monkeypatch.setattr(app.state.recipe_store, "save_recipe", fail)

        response = client.post("/proposal/commit")

        assert response.status_code == 503
        assert response.json()["detail"] == "Could not save adapted recipe"
        assert client.get("/proposal").json() == pending

    def test_delete_original_after_commit(self, client, pending):
        client.post("/proposal/commit")

        assert client.delete("/recipes/1").status_code == 200
        assert len(client.get("/recipes").json()) == 1


class TestFodmap:
    def test_rate(self, client, fodmap_service):
        response = client.post("/fodmap/rate", json={"ingredients": ["garlic"]})

        assert response.status_code == 200
        assert response.json()[0]["rating"] == "high"
        fodmap_service.rate_ingredients.assert_called_once_with(["garlic"], False)

    def test_rate_requires_ingredients(self, client):
        assert client.post("/fodmap/rate", json={"ingredients": []}).status_code == 422
