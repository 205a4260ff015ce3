"""Tests for the substitution catalog lookup."""

import pytest

from recipe_adapter.services.substitution_catalog import (
    SubstitutionCatalog,
    SubstitutionRule,
    default_catalog,
    find_substitution,
    resolve_diet_key,
)


class TestCatalogOrder:
    """The catalog order is part of the lookup contract."""

    def test_base_rules_then_custom_rules(self):
        first_fragments = [rule.original[0] for rule in default_catalog.rules]
        assert first_fragments == [
            "butter", "milk", "eggs", "bacon", "chicken", "beef", "cheese",
            "flour", "sugar", "pasta", "bread", "rice", "honey", "cream",
            "yogurt", "soy sauce", "peanuts", "almonds", "fish", "shrimp",
            "garlic", "onion",
            "shallot", "stock", "tomato sauce", "bbq sauce",
        ]

    def test_earlier_rule_shadows_custom_rule(self):
        """'chicken stock' hits the chicken rule, which has no low-FODMAP value."""
        assert find_substitution("chicken stock", "Low FODMAP") is None

    def test_custom_rule_used_when_no_base_rule_matches(self):
        assert find_substitution("shallots", "Low FODMAP") == "green onion tops or chives"

    def test_uppercase_custom_fragment_matches(self):
        assert find_substitution("BBQ sauce", "low fodmap") == (
            "low FODMAP BBQ sauce (no onion/garlic), or make your own"
        )


class TestFindSubstitution:
    def test_vegan_butter(self):
        assert find_substitution("butter", "Vegan") == "vegan butter or coconut oil"

    def test_case_and_whitespace_insensitive_name(self):
        assert find_substitution("  Whole Milk ", "Dairy-free") == "almond milk or oat milk"

    def test_ingredient_name_inside_fragment(self):
        """Bidirectional containment: 'mozz' sits inside the 'mozzarella' fragment."""
        assert find_substitution("mozz", "Vegan") == "nutritional yeast or vegan cheese"

    def test_loose_match_over_matches(self):
        assert find_substitution("ice cream", "Vegan") == "coconut cream or cashew cream"

    def test_matched_rule_without_value_does_not_fall_through(self):
        assert find_substitution("egg", "Low FODMAP") is None

    def test_unknown_ingredient(self):
        assert find_substitution("carrot", "Vegan") is None

    def test_unknown_diet_never_matches(self):
        assert find_substitution("butter", "Low-sodium") is None

    def test_repeated_calls_are_stable(self):
        results = {find_substitution("spaghetti", "Keto") for _ in range(5)}
        assert results == {"zucchini noodles or shirataki noodles"}

    def test_empty_name_matches_first_rule(self):
        """Documented quirk: an empty name is contained in every fragment."""
        assert find_substitution("", "Vegan") == "vegan butter or coconut oil"


class TestDietAliases:
    @pytest.mark.parametrize("alias", ["fodmap", "Low FODMAP", "fodmap-sensitive", "FODMAP sensitive"])
    def test_fodmap_aliases(self, alias):
        assert resolve_diet_key(alias) == "lowFodmap"

    def test_gluten_aliases(self):
        assert resolve_diet_key("Gluten") == resolve_diet_key("Gluten-free") == "glutenFree"

    def test_unknown_passes_through(self):
        assert resolve_diet_key("Low-sodium") == "Low-sodium"

    def test_alias_lookup_gives_same_result(self):
        expected = find_substitution("onion", "low fodmap")
        assert expected == "green tops of scallions, chives, or a pinch of asafoetida"
        assert find_substitution("onion", "fodmap-sensitive") == expected


class TestInjectedCatalog:
    def test_custom_rule_list(self):
        catalog = SubstitutionCatalog(
            base_rules=[{"original": ["Tofu"], "vegan": "tofu", "keto": "paneer"}],
            custom_rules=[],
        )
        assert catalog.find_substitution("firm tofu", "Keto") == "paneer"
        assert catalog.find_substitution("butter", "Vegan") is None

    def test_rule_drops_unknown_keys_and_empty_values(self):
        rule = SubstitutionRule.from_dict({"original": ["X"], "vegan": "", "spicy": "y", "keto": "z"})
        assert rule.original == ("x",)
        assert rule.suggestions == {"keto": "z"}

    def test_suggestions_for_low_fodmap(self):
        suggestions = default_catalog.suggestions_for(["Low FODMAP"])
        assert "garlic-infused oil" in suggestions
        assert "green onion tops or chives" in suggestions
        assert "vegan butter or coconut oil" not in suggestions
