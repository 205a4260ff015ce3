"""Tests for the pending proposal and its review actions."""

import pytest
from pydantic import ValidationError

from recipe_adapter.models.adaptation import AdaptationProposal
from recipe_adapter.services.proposal_store import (
    NoPendingProposalError,
    ProposalStore,
    build_choice_options,
    build_default_choices,
)


@pytest.fixture
def store(make_recipe, make_adapted):
    store = ProposalStore()
    store.set_proposal(
        make_recipe(["garlic clove", "butter", "carrot"]),
        make_adapted(["garlic-infused oil", "butter", "Carrot "]),
        ["Low FODMAP"],
        [],
    )
    return store


def assert_aligned(store):
    proposal = store.proposal
    assert len(proposal.choices) == len(proposal.adapted.ingredients)


class TestDefaultChoices:
    def test_accepted_only_when_name_changed(self, store):
        assert [c.accepted for c in store.proposal.choices] == [True, False, False]

    def test_choice_carries_amount_and_unit(self, store):
        choice = store.proposal.choices[0]
        assert choice.original_name == "garlic clove"
        assert choice.amount == "1"
        assert choice.unit is None

    def test_options_start_with_adapted_name(self, store):
        assert store.proposal.choices[0].options == ["garlic-infused oil", "garlic chives"]
        assert store.proposal.choices[1].options == ["butter"]

    def test_options_deduplicated(self):
        options = build_choice_options("onion", "chives", [])
        assert options == ["chives", "green onion tops", "asafoetida (pinch)"]

    def test_bread_options_for_low_carb(self):
        options = build_choice_options("white bread", "almond flour bread or cloud bread", ["Low carb"])
        assert options == [
            "almond flour bread or cloud bread",
            "gluten-free bread",
            "sourdough spelt (small serve)",
            "almond flour bread",
            "cloud bread",
        ]

    def test_bread_options_otherwise(self):
        options = build_choice_options("white bread", "gluten-free bread", ["Vegan"])
        assert options == ["gluten-free bread", "sourdough spelt (small serve)", "almond flour bread"]

    def test_almond_flour_gets_no_flour_options(self):
        assert build_choice_options("almond flour", "almond flour", []) == ["almond flour"]

    def test_flour_options(self):
        assert build_choice_options("plain flour", "gluten-free flour blend", []) == [
            "gluten-free flour blend", "rice flour", "almond flour",
        ]

    def test_longer_adapted_list_uses_adapted_name_as_original(self, make_recipe, make_adapted):
        choices = build_default_choices(
            make_recipe(["milk"]),
            make_adapted(["lactose-free milk", "salt"]),
            [],
        )
        assert len(choices) == 2
        assert choices[1].original_name == "salt"
        assert choices[1].accepted is False


class TestReviewActions:
    def test_update_choice(self, store):
        store.update_choice(2, "parsnip", True)

        choice = store.proposal.choices[2]
        assert choice.adapted_name == "parsnip"
        assert choice.accepted is True
        assert_aligned(store)

    def test_update_choice_out_of_range(self, store):
        with pytest.raises(IndexError):
            store.update_choice(3, "salt", True)
        with pytest.raises(IndexError):
            store.update_choice(-1, "salt", True)

    def test_accept_all_ignores_case_and_whitespace(self, store):
        store.update_choice(1, "  BUTTER ", False)
        store.update_choice(2, "parsnip", False)

        store.accept_all()

        assert [c.accepted for c in store.proposal.choices] == [True, False, True]
        for c in store.proposal.choices:
            assert c.accepted == (c.adapted_name.strip().lower() != c.original_name.strip().lower())
        assert_aligned(store)

    def test_reset_all(self, store):
        store.update_choice(2, "parsnip", True)

        store.reset_all()

        for c in store.proposal.choices:
            assert c.adapted_name == c.original_name
            assert c.accepted is False
        assert_aligned(store)

    def test_changed_flag(self, store):
        assert [c.changed for c in store.proposal.choices] == [True, False, False]


class TestLifecycle:
    def test_no_proposal_initially(self):
        store = ProposalStore()
        assert store.proposal is None
        assert store.snapshot() is None

    @pytest.mark.parametrize("action", ["accept_all", "reset_all"])
    def test_actions_require_pending_proposal(self, action):
        with pytest.raises(NoPendingProposalError):
            getattr(ProposalStore(), action)()

    def test_update_requires_pending_proposal(self):
        with pytest.raises(NoPendingProposalError):
            ProposalStore().update_choice(0, "x", True)

    def test_set_proposal_replaces(self, store, make_recipe, make_adapted):
        store.set_proposal(make_recipe(["milk"], recipe_id="2"), make_adapted(["lactose-free milk"]), [], ["Lactose"])

        assert store.proposal.original.id == "2"
        assert store.proposal.allergies == ["Lactose"]
        assert len(store.proposal.choices) == 1

    def test_clear(self, store):
        store.clear()
        assert store.proposal is None

    def test_snapshot_is_a_copy(self, store):
        snapshot = store.snapshot()
        snapshot.choices[0].adapted_name = "something else"
        assert store.proposal.choices[0].adapted_name == "garlic-infused oil"

    def test_misaligned_proposal_rejected(self, make_recipe, make_adapted):
        with pytest.raises(ValidationError):
            AdaptationProposal(
                original=make_recipe(["milk"]),
                adapted=make_adapted(["milk", "salt"]),
                choices=[],
            )
