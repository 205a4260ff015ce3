"""Tests for committing a reviewed proposal."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from recipe_adapter.services.proposal_commit import (
    build_adapted_recipe,
    build_final_ingredients,
    commit_proposal,
)
from recipe_adapter.services.proposal_store import NoPendingProposalError, ProposalStore
from recipe_adapter.services.recipe_store import JsonRecipeStore, RecipeStoreError
from recipe_adapter.utils.helpers import to_epoch_millis

NOW = datetime(2024, 3, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def proposals(sample_recipe, make_adapted):
    store = ProposalStore()
    store.set_proposal(
        sample_recipe,
        make_adapted([
            "gluten-free pasta",
            "garlic-infused oil",
            "chives",
            "lactose-free cream",
            "carrot",
        ], notes="Adapted notes"),
        ["Low FODMAP", "Gluten-free"],
        ["Lactose"],
    )
    return store


class TestFinalIngredients:
    def test_unaccepted_choices_keep_original_name(self, proposals):
        proposals.update_choice(2, "chives", False)

        names = [i.name for i in build_final_ingredients(proposals.proposal)]

        assert names == [
            "gluten-free pasta",
            "garlic-infused oil",
            "onion",
            "lactose-free cream",
            "carrot",
        ]

    def test_reset_restores_everything(self, proposals, sample_recipe):
        proposals.reset_all()

        names = [i.name for i in build_final_ingredients(proposals.proposal)]

        assert names == [i.name for i in sample_recipe.ingredients]


class TestBuildAdaptedRecipe:
    def test_identity_and_metadata(self, proposals):
        recipe = build_adapted_recipe(proposals.proposal, NOW)
        stamp = to_epoch_millis(NOW)

        assert recipe.id == f"1-adapted-{stamp}"
        assert recipe.title == "Creamy Garlic Pasta (Low FODMAP & Gluten-free Adapted)"
        assert [i.id for i in recipe.ingredients] == [f"ing-{stamp}-{n}" for n in range(5)]
        assert recipe.created_at == recipe.updated_at == "2024-03-01T12:30:45.123Z"

    def test_copies_original_fields(self, proposals):
        recipe = build_adapted_recipe(proposals.proposal, NOW)

        assert recipe.servings == 2
        assert recipe.description == "Weeknight pasta"
        assert recipe.is_favorite is True
        assert recipe.notes == "Adapted notes"
        assert recipe.instructions == ["Cook everything."]

    def test_tags(self, proposals):
        recipe = build_adapted_recipe(proposals.proposal, NOW)
        assert recipe.tags == ["dinner", "low fodmap", "gluten-free", "adapted"]

    def test_amounts_come_from_adapted_ingredients(self, proposals):
        recipe = build_adapted_recipe(proposals.proposal, NOW)
        assert {i.amount for i in recipe.ingredients} == {"1"}

    def test_original_untouched(self, proposals, sample_recipe):
        build_adapted_recipe(proposals.proposal, NOW)
        assert proposals.proposal.original.tags == ["dinner"]
        assert proposals.proposal.original.id == "1"


class TestCommit:
    def test_saves_then_clears(self, proposals, recipe_store, sample_recipe):
        recipe_store.save_recipe(sample_recipe)

        saved = commit_proposal(proposals, recipe_store, NOW)

        assert proposals.proposal is None
        assert recipe_store.get_recipe(saved.id) == saved
        assert recipe_store.get_recipe("1") is not None

    def test_store_failure_keeps_proposal(self, proposals):
        failing = Mock(spec=JsonRecipeStore)
        failing.save_recipe.side_effect = RecipeStoreError("disk full")

        with pytest.raises(RecipeStoreError):
            commit_proposal(proposals, failing, NOW)

        assert proposals.proposal is not None
        assert proposals.proposal.choices[0].adapted_name == "gluten-free pasta"

    def test_nothing_pending(self, recipe_store):
        with pytest.raises(NoPendingProposalError):
            commit_proposal(ProposalStore(), recipe_store)


class TestMisalignedProposal:
    def test_longer_adapted_list_keeps_extra_entry(self, make_recipe, make_adapted, recipe_store):
        store = ProposalStore()
        store.set_proposal(
            make_recipe(["milk"]),
            make_adapted(["lactose-free milk", "pinch of salt"]),
            ["Low FODMAP"],
            [],
        )

        saved = commit_proposal(store, recipe_store, NOW)

        assert [i.name for i in saved.ingredients] == ["lactose-free milk", "pinch of salt"]
        assert len(saved.ingredients) == 2

    def test_shorter_adapted_list_drops_trailing_originals(self, make_recipe, make_adapted, recipe_store):
        store = ProposalStore()
        store.set_proposal(
            make_recipe(["milk", "garlic", "salt"]),
            make_adapted(["lactose-free milk"]),
            ["Low FODMAP"],
            [],
        )

        saved = commit_proposal(store, recipe_store, NOW)

        assert [i.name for i in saved.ingredients] == ["lactose-free milk"]

    def test_missing_choice_keeps_original_name(self, make_recipe, make_adapted):
        store = ProposalStore()
        proposal = store.set_proposal(
            make_recipe(["milk", "garlic"]),
            make_adapted(["lactose-free milk", "garlic-infused oil"]),
            ["Low FODMAP"],
            [],
        )
        truncated = proposal.model_copy(update={"choices": proposal.choices[:1]})

        names = [i.name for i in build_final_ingredients(truncated)]

        assert names == ["lactose-free milk", "garlic"]
