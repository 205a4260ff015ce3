"""
Pending adaptation proposal and its review actions.

A proposal pairs an original recipe with an adapted version and one
``IngredientChoice`` per adapted ingredient. The user reviews the choices
(accept, override, reset) before committing. At most one proposal is
pending per store; setting a new one replaces the old.
"""

import logging
import re
from typing import List, Optional

from recipe_adapter.models.adaptation import AdaptationProposal, IngredientChoice
from recipe_adapter.models.recipe import AdaptedRecipeData, Recipe
from recipe_adapter.utils.constants import (
    BREAD_DEFAULT_EXTRA_OPTIONS,
    BREAD_LOW_CARB_OPTIONS,
    CHOICE_OPTION_TRIGGERS,
    LOW_CARB_DIET_PATTERN,
)
from recipe_adapter.utils.helpers import dedupe_preserving_order, names_differ

logger = logging.getLogger(__name__)


class NoPendingProposalError(LookupError):
    """A review action was requested with no proposal pending."""


def build_choice_options(original_name: str, adapted_name: str, diets: List[str]) -> List[str]:
    """
    Picker candidates for one ingredient.

    Keyword triggers are matched against the lowercased original name. The
    adapted name always comes first.

    Example:
        >>> build_choice_options("garlic clove", "garlic-infused oil", [])
        ["garlic-infused oil", "garlic chives"]
    """
    lowered = original_name.lower()
    low_carb = any(re.search(LOW_CARB_DIET_PATTERN, d, re.IGNORECASE) for d in diets)

    options: List[str] = []
    for keyword, candidates in CHOICE_OPTION_TRIGGERS.items():
        if keyword not in lowered:
            continue
        if keyword == "flour" and "almond" in lowered:
            continue
        options.extend(candidates)
        if keyword == "bread":
            options.extend(BREAD_LOW_CARB_OPTIONS if low_carb else BREAD_DEFAULT_EXTRA_OPTIONS)

    return dedupe_preserving_order([adapted_name, *options])


def build_default_choices(
    original: Recipe,
    adapted: AdaptedRecipeData,
    diets: List[str],
) -> List[IngredientChoice]:
    """
    One choice per adapted ingredient, index-aligned with the original.

    When the adapted list is longer than the original, the extra entries
    use the adapted name as their original name, so they show as unchanged.
    """
    if len(adapted.ingredients) != len(original.ingredients):
        logger.warning(
            f"Adapted recipe has {len(adapted.ingredients)} ingredients but original "
            f"'{original.title}' has {len(original.ingredients)}; aligning by index"
        )

    choices = []
    for idx, ingredient in enumerate(adapted.ingredients):
        original_name = (
            original.ingredients[idx].name if idx < len(original.ingredients) else ingredient.name
        )
        choices.append(
            IngredientChoice(
                original_name=original_name,
                adapted_name=ingredient.name,
                amount=ingredient.amount,
                unit=ingredient.unit,
                options=build_choice_options(original_name, ingredient.name, diets),
                accepted=names_differ(ingredient.name, original_name),
            )
        )
    return choices


class ProposalStore:
    """Holds at most one pending adaptation proposal."""

    def __init__(self):
        self._proposal: Optional[AdaptationProposal] = None

    @property
    def proposal(self) -> Optional[AdaptationProposal]:
        return self._proposal

    @property
    def has_proposal(self) -> bool:
        return self._proposal is not None

    def snapshot(self) -> Optional[AdaptationProposal]:
        """Deep copy of the pending proposal, for rendering."""
        if self._proposal is None:
            return None
        return self._proposal.model_copy(deep=True)

    def set_proposal(
        self,
        original: Recipe,
        adapted: AdaptedRecipeData,
        diets: List[str],
        allergies: List[str],
    ) -> AdaptationProposal:
        """Replace any pending proposal with a new one and default choices."""
        if self._proposal is not None:
            logger.info(f"Replacing pending proposal for '{self._proposal.original.title}'")

        self._proposal = AdaptationProposal(
            original=original,
            adapted=adapted,
            diets=list(diets),
            allergies=list(allergies),
            choices=build_default_choices(original, adapted, diets),
        )
        changed = sum(1 for c in self._proposal.choices if c.accepted)
        logger.info(
            f"Proposal set for '{original.title}' "
            f"({len(self._proposal.choices)} ingredients, {changed} changed)"
        )
        return self._proposal

    def clear(self) -> None:
        self._proposal = None

    def _require(self) -> AdaptationProposal:
        if self._proposal is None:
            raise NoPendingProposalError("No pending adaptation proposal")
        return self._proposal

    def update_choice(self, index: int, next_name: str, accepted: bool = True) -> IngredientChoice:
        """
        Override one choice with a free-form name.

        Raises:
            NoPendingProposalError: If nothing is pending
            IndexError: If ``index`` is outside the choice list
        """
        proposal = self._require()
        if index < 0 or index >= len(proposal.choices):
            raise IndexError(
                f"Choice index {index} out of range (0-{len(proposal.choices) - 1})"
            )

        choice = proposal.choices[index]
        choice.adapted_name = next_name
        choice.accepted = accepted
        logger.debug(f"Choice {index} set to '{next_name}' (accepted={accepted})")
        return choice

    def accept_all(self) -> AdaptationProposal:
        """Accept every choice whose name actually differs from the original."""
        proposal = self._require()
        for choice in proposal.choices:
            choice.accepted = names_differ(choice.adapted_name, choice.original_name)
        return proposal

    def reset_all(self) -> AdaptationProposal:
        """Revert every choice to its original name, unaccepted."""
        proposal = self._require()
        for choice in proposal.choices:
            choice.adapted_name = choice.original_name
            choice.accepted = False
        return proposal
