"""
Rule-based recipe adaptation engine.

This module adapts a recipe to a set of diets and allergies without any
network access, using the substitution catalog and the FODMAP heuristics.
It is the fallback whenever the AI collaborator is unavailable, so a
proposal can always be built offline.

Algorithm per ingredient:
1. Consult the catalog for each restriction in order (diets, then
   allergies); the first suggestion that changes the name is used and the
   remaining restrictions are skipped.
2. If nothing changed and low-FODMAP was requested, apply the heuristics.
3. Otherwise keep the original name.

Every substitution is recorded in an audit trail that is appended to the
recipe notes, followed by a fixed disclaimer.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from recipe_adapter.models.recipe import AdaptedIngredient, AdaptedRecipeData, Recipe
from recipe_adapter.services.fodmap_heuristics import apply_fodmap_heuristics, wants_low_fodmap
from recipe_adapter.services.substitution_catalog import SubstitutionCatalog, default_catalog
from recipe_adapter.utils.constants import (
    ADAPTATION_DISCLAIMER,
    INSTRUCTION_REWRITES,
    LOW_FODMAP_LABEL,
    SUBSTITUTIONS_HEADING,
)
from recipe_adapter.utils.helpers import (
    append_audit_block,
    build_adapted_title,
    combine_restrictions,
    format_audit_line,
)

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class Substitution:
    """
    One recorded ingredient change.

    Attributes:
        original: Name before the change
        replacement: Name after the change
        restriction: Diet/allergy (or "Low FODMAP") that caused it
    """
    original: str
    replacement: str
    restriction: str

    def audit_line(self) -> str:
        return format_audit_line(self.original, self.replacement, self.restriction)


def substitute_ingredient_name(
    name: str,
    restrictions: Sequence[str],
    low_fodmap: bool,
    catalog: SubstitutionCatalog = default_catalog,
) -> Optional[Substitution]:
    """
    Find the substitution for a single ingredient name.

    Args:
        name: Ingredient name as written
        restrictions: Combined diets + allergies, in priority order
        low_fodmap: Whether the heuristics fallback applies
        catalog: Catalog to consult

    Returns:
        Optional[Substitution]: The change to make, or None to keep the name
    """
    for restriction in restrictions:
        suggestion = catalog.find_substitution(name, restriction)
        if suggestion and suggestion != name:
            return Substitution(name, suggestion, restriction)

    if low_fodmap:
        heuristic = apply_fodmap_heuristics(name)
        if heuristic:
            return Substitution(name, heuristic, LOW_FODMAP_LABEL)

    return None


def _match_leading_case(matched: str, replacement: str) -> str:
    """Capitalize the replacement when the matched text starts with a capital."""
    if matched[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def rewrite_instructions(instructions: List[str], diets: List[str]) -> List[str]:
    """
    Apply diet-keyed phrase rewrites to instruction text.

    Keto/Low-carb swap rice and pasta serving suggestions; Gluten-free
    prefixes every "flour" and "bread" occurrence. Matching is
    case-insensitive and not word-bounded.
    """
    rewritten = list(instructions)
    for trigger_diets, rules in INSTRUCTION_REWRITES:
        if not any(d in diets for d in trigger_diets):
            continue
        for pattern, replacement in rules:
            rewritten = [
                re.sub(
                    pattern,
                    lambda m, r=replacement: _match_leading_case(m.group(0), r),
                    step,
                    flags=re.IGNORECASE,
                )
                for step in rewritten
            ]
    return rewritten


def adapt_recipe_with_database(
    recipe: Recipe,
    diets: List[str],
    allergies: List[str],
    catalog: SubstitutionCatalog = default_catalog,
) -> AdaptedRecipeData:
    """
    Adapt a recipe using only the local substitution rules.

    Args:
        recipe: Recipe to adapt (never modified)
        diets: Selected diets, e.g. ["Low FODMAP", "Vegan"]
        allergies: Selected allergies/intolerances
        catalog: Catalog to consult (defaults to the built-in one)

    Returns:
        AdaptedRecipeData: Adapted title, ingredients, instructions and
            notes with the substitution audit trail

    Example:
        >>> adapted = adapt_recipe_with_database(recipe, ["Low FODMAP"], [])
        >>> adapted.ingredients[0].name
        "garlic-infused oil"
    """
    logger.info(
        f"Rule-based adaptation of '{recipe.title}' "
        f"(diets={diets}, allergies={allergies})"
    )

    restrictions = combine_restrictions(diets, allergies)
    low_fodmap = wants_low_fodmap(restrictions)
    substitutions: List[Substitution] = []

    adapted_ingredients = []
    for ingredient in recipe.ingredients:
        change = substitute_ingredient_name(ingredient.name, restrictions, low_fodmap, catalog)
        name = ingredient.name
        if change:
            substitutions.append(change)
            name = change.replacement
            logger.debug(f"Substituted {change.audit_line()}")
        adapted_ingredients.append(
            AdaptedIngredient(amount=ingredient.amount, unit=ingredient.unit, name=name)
        )

    notes = append_audit_block(
        recipe.notes,
        SUBSTITUTIONS_HEADING,
        [s.audit_line() for s in substitutions],
    )
    notes += "\n\n" + ADAPTATION_DISCLAIMER

    logger.info(f"Rule-based adaptation made {len(substitutions)} substitution(s)")

    return AdaptedRecipeData(
        title=build_adapted_title(recipe.title, diets, allergies),
        description=recipe.description,
        ingredients=adapted_ingredients,
        instructions=rewrite_instructions(recipe.instructions, diets),
        notes=notes,
    )


def count_substitutions(recipe: Recipe, adapted: AdaptedRecipeData) -> int:
    """Number of index-aligned ingredient names that differ from the original."""
    count = 0
    for idx, ingredient in enumerate(adapted.ingredients):
        original_name = (
            recipe.ingredients[idx].name if idx < len(recipe.ingredients) else ingredient.name
        )
        if ingredient.name != original_name:
            count += 1
    return count


def get_adaptation_summary(
    original_count: int,
    adapted_count: int,
    substitutions_made: int,
) -> str:
    """
    Short user-facing summary of an adaptation.

    Example:
        >>> get_adaptation_summary(5, 5, 2)
        "Made 2 substitutions to adapt this recipe."
    """
    if substitutions_made == 0:
        return "No substitutions were needed for this recipe!"

    plural = "s" if substitutions_made > 1 else ""
    return f"Made {substitutions_made} substitution{plural} to adapt this recipe."
