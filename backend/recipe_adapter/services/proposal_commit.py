"""
Turn a reviewed proposal into a new stored recipe.

The original recipe is never touched. Deleting it is a separate,
user-confirmed action.
"""

import logging
from datetime import datetime
from typing import List, Optional

from recipe_adapter.models.adaptation import AdaptationProposal
from recipe_adapter.models.recipe import AdaptedIngredient, Ingredient, Recipe
from recipe_adapter.services.proposal_store import NoPendingProposalError, ProposalStore
from recipe_adapter.services.recipe_store import JsonRecipeStore
from recipe_adapter.utils.constants import ADAPTED_TAG
from recipe_adapter.utils.helpers import build_adapted_title, to_epoch_millis, to_iso, utc_now

logger = logging.getLogger(__name__)


def build_final_ingredients(proposal: AdaptationProposal) -> List[AdaptedIngredient]:
    """
    Resolve each adapted ingredient to the name that will be saved.

    Accepted choices use the selected name; otherwise the original name at
    the same index is kept, falling back to the adapted name when the
    original list is shorter.
    """
    final = []
    for idx, ingredient in enumerate(proposal.adapted.ingredients):
        choice = proposal.choices[idx] if idx < len(proposal.choices) else None
        if choice is not None and choice.accepted:
            name = choice.adapted_name
        elif idx < len(proposal.original.ingredients):
            name = proposal.original.ingredients[idx].name
        else:
            name = ingredient.name
        final.append(AdaptedIngredient(amount=ingredient.amount, unit=ingredient.unit, name=name))
    return final


def build_adapted_recipe(proposal: AdaptationProposal, now: Optional[datetime] = None) -> Recipe:
    """
    Build the recipe to save from a proposal.

    The result copies the original and replaces id, title, ingredients,
    instructions, notes, tags and timestamps.

    Example:
        >>> build_adapted_recipe(proposal).id
        "1-adapted-1717171717171"
    """
    now = now or utc_now()
    stamp = to_epoch_millis(now)
    timestamp = to_iso(now)
    original = proposal.original

    ingredients = [
        Ingredient(id=f"ing-{stamp}-{idx}", name=ing.name, amount=ing.amount, unit=ing.unit)
        for idx, ing in enumerate(build_final_ingredients(proposal))
    ]

    return original.model_copy(
        deep=True,
        update={
            "id": f"{original.id}-adapted-{stamp}",
            "title": build_adapted_title(original.title, proposal.diets, proposal.allergies),
            "ingredients": ingredients,
            "instructions": list(proposal.adapted.instructions),
            "notes": proposal.adapted.notes,
            "tags": [*original.tags, *(d.lower() for d in proposal.diets), ADAPTED_TAG],
            "created_at": timestamp,
            "updated_at": timestamp,
            "is_favorite": original.is_favorite,
        },
    )


def commit_proposal(
    store: ProposalStore,
    recipe_store: JsonRecipeStore,
    now: Optional[datetime] = None,
) -> Recipe:
    """
    Save the pending proposal as a new recipe and clear it.

    The proposal is cleared only after the save succeeds, so a failed save
    can be retried.

    Raises:
        NoPendingProposalError: If nothing is pending
        RecipeStoreError: If saving fails (proposal kept)
    """
    proposal = store.proposal
    if proposal is None:
        raise NoPendingProposalError("No pending adaptation proposal")

    recipe = build_adapted_recipe(proposal, now)
    logger.info(f"Saving adapted recipe '{recipe.title}' ({recipe.id})")
    recipe_store.save_recipe(recipe)
    store.clear()
    return recipe
