"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import os

# Keep the module-level app away from Gemini and the real data directory
os.environ["USE_AI_ADAPTATION"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from typing import List, Optional, Type

from pydantic import BaseModel

from recipe_adapter.models.recipe import AdaptedIngredient, AdaptedRecipeData, Ingredient, Recipe
from recipe_adapter.services.llm_adapter import GenerationCapability, GenerationResult
from recipe_adapter.services.recipe_store import JsonRecipeStore


class FakeGenerator(GenerationCapability):
    """
    Scripted generation capability.

    Returns ``result`` for every call and records the prompts and schemas
    it was called with.
    """

    def __init__(self, result: GenerationResult):
        self.result = result
        self.calls = []

    def generate(self, prompt: str, schema: Optional[Type[BaseModel]] = None) -> GenerationResult:
        self.calls.append((prompt, schema))
        return self.result


def build_recipe(
    names: List[str],
    recipe_id: str = "1",
    title: str = "Garlic Pasta",
    instructions: Optional[List[str]] = None,
    **extra,
) -> Recipe:
    """Recipe with one ingredient per name (amount "1")."""
    return Recipe(
        id=recipe_id,
        title=title,
        ingredients=[
            Ingredient(id=f"i{idx}", name=name, amount="1") for idx, name in enumerate(names)
        ],
        instructions=instructions if instructions is not None else ["Cook everything."],
        created_at="2024-01-01T00:00:00.000Z",
        updated_at="2024-01-01T00:00:00.000Z",
        **extra,
    )


def build_adapted(names: List[str], notes: Optional[str] = None) -> AdaptedRecipeData:
    return AdaptedRecipeData(
        title="Adapted",
        ingredients=[AdaptedIngredient(amount="1", name=name) for name in names],
        instructions=["Cook everything."],
        notes=notes,
    )


@pytest.fixture
def make_recipe():
    """
    Factory for recipes.

    Usage in tests:
        def test_something(make_recipe):
            recipe = make_recipe(["garlic clove", "butter"])
    """
    return build_recipe


@pytest.fixture
def make_adapted():
    """Factory for adapted recipe data."""
    return build_adapted


@pytest.fixture
def sample_recipe():
    """Sample recipe covering garlic, onion, dairy and wheat."""
    return Recipe(
        id="1",
        title="Creamy Garlic Pasta",
        description="Weeknight pasta",
        servings=2,
        prep_time=10,
        cook_time=15,
        ingredients=[
            Ingredient(id="i1", name="pasta", amount="200", unit="g"),
            Ingredient(id="i2", name="garlic clove", amount="2"),
            Ingredient(id="i3", name="onion", amount="1"),
            Ingredient(id="i4", name="heavy cream", amount="1", unit="cup"),
            Ingredient(id="i5", name="carrot", amount="1"),
        ],
        instructions=["Cook the pasta.", "Serve with rice on the side."],
        notes="Family favourite",
        tags=["dinner"],
        created_at="2024-01-01T00:00:00.000Z",
        updated_at="2024-01-01T00:00:00.000Z",
        is_favorite=True,
    )


@pytest.fixture
def recipe_store(tmp_path):
    """Empty JSON recipe store in a temporary directory."""
    return JsonRecipeStore(tmp_path / "recipes.json")


@pytest.fixture
def make_generator():
    """
    Factory for fake generators.

    Usage in tests:
        def test_something(make_generator):
            gen = make_generator(GenerationResult(value='{"title": ...}'))
    """
    return FakeGenerator
