"""
Diet-specific ingredient substitution catalog.

This module holds the static substitution table and the lookup used by the
rule-based adaptation engine and by the reconciliation pass over AI output.

The catalog is an ordered list, not a map: rules are scanned in order and
the first rule whose fragments match the ingredient wins. Custom rules are
appended after the base rules, so they only apply to ingredients no base
rule already matches. A matched rule with no suggestion for the requested
diet returns None; later rules are not consulted.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set, Tuple

from recipe_adapter.utils.constants import (
    BASE_SUBSTITUTION_RULES,
    CUSTOM_SUBSTITUTION_RULES,
    DIET_KEYS,
    DIET_KEY_ALIASES,
)
from recipe_adapter.utils.helpers import names_overlap

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubstitutionRule:
    """
    One row of the substitution catalog.

    Attributes:
        original: Lowercase name fragments this rule applies to
        suggestions: Diet key -> suggested replacement (at most one per key)
    """
    original: Tuple[str, ...]
    suggestions: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict) -> "SubstitutionRule":
        """Build a rule from a constants-table row."""
        fragments = tuple(str(f).lower() for f in data.get("original", []))
        suggestions = {k: v for k, v in data.items() if k in DIET_KEYS and v}
        return cls(original=fragments, suggestions=suggestions)

    def matches(self, normalized_name: str) -> bool:
        """True if any fragment overlaps the (lowercased, trimmed) name."""
        return any(names_overlap(normalized_name, frag) for frag in self.original)

    def suggestion_for(self, diet_key: str) -> Optional[str]:
        return self.suggestions.get(diet_key)


def resolve_diet_key(diet: str) -> str:
    """
    Map a display diet/allergy name to the internal catalog key.

    Unrecognized names pass through unchanged, which means they never match
    any rule value.

    Example:
        >>> resolve_diet_key("FODMAP-sensitive")
        "lowFodmap"
        >>> resolve_diet_key("Low-sodium")
        "Low-sodium"
    """
    return DIET_KEY_ALIASES.get(diet.lower(), diet)


class SubstitutionCatalog:
    """
    Ordered, read-only collection of substitution rules.

    Attributes:
        rules: Rules in lookup order (base rules then custom rules)
    """

    def __init__(
        self,
        base_rules: Optional[Iterable[Dict]] = None,
        custom_rules: Optional[Iterable[Dict]] = None,
    ):
        base = BASE_SUBSTITUTION_RULES if base_rules is None else base_rules
        custom = CUSTOM_SUBSTITUTION_RULES if custom_rules is None else custom_rules
        self.rules: Tuple[SubstitutionRule, ...] = tuple(
            SubstitutionRule.from_dict(row) for row in [*base, *custom]
        )
        logger.debug(f"SubstitutionCatalog loaded with {len(self.rules)} rules")

    def find_rule(self, ingredient_name: str) -> Optional[SubstitutionRule]:
        """Return the first rule matching the ingredient, if any."""
        normalized = ingredient_name.lower().strip()
        for rule in self.rules:
            if rule.matches(normalized):
                return rule
        return None

    def find_substitution(self, ingredient_name: str, diet: str) -> Optional[str]:
        """
        Look up the replacement for an ingredient under a diet.

        Args:
            ingredient_name: Free-text ingredient name
            diet: Diet or allergy display name (aliases resolved)

        Returns:
            Optional[str]: Suggested replacement, or None if no rule matches
                or the first matching rule has nothing for this diet.

        Example:
            >>> catalog.find_substitution("butter", "Vegan")
            "vegan butter or coconut oil"
        """
        rule = self.find_rule(ingredient_name)
        if rule is None:
            return None
        return rule.suggestion_for(resolve_diet_key(diet))

    def suggestions_for(self, diets: Iterable[str]) -> Set[str]:
        """Every suggestion (lowercased) the catalog can produce for these diets."""
        keys = {resolve_diet_key(d) for d in diets}
        return {
            value.lower()
            for rule in self.rules
            for key, value in rule.suggestions.items()
            if key in keys
        }


# Default catalog, loaded once at import
default_catalog = SubstitutionCatalog()


def find_substitution(ingredient_name: str, diet: str) -> Optional[str]:
    """Look up a substitution in the default catalog."""
    return default_catalog.find_substitution(ingredient_name, diet)
