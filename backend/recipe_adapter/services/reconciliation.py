"""
Low-FODMAP correctness pass over AI-sourced adaptations.

The AI collaborator is not trusted to avoid high-FODMAP ingredients even
when asked to. Whenever low FODMAP is among the requested restrictions,
every ingredient the AI returned is re-run through the substitution catalog
and the FODMAP heuristics before the result is shown to the user.

Names that already equal a known low-FODMAP replacement (a catalog
``lowFodmap`` value or a heuristic replacement) are not re-corrected, so
"chives or green onion tops" stays put instead of bouncing between the
catalog and heuristic wordings on repeated passes.

Diets can also replace each other's suggestions in a loop (vegan and
low-FODMAP milk, keto and low-FODMAP pasta). When the correction walk
revisits a name it stops at the first settled name in the loop, so diet
order no longer decides the winner there: Keto + Low FODMAP turns "pasta"
into "gluten-free pasta or rice noodles" rather than the keto noodles, and
Vegan + Low FODMAP turns "milk" into "lactose-free milk or almond milk".
Outside a loop the first matching restriction still wins.

Callers must run ``enforce_low_fodmap_on_adapted`` on every AI-sourced
adaptation.
"""

import logging
from typing import List, Optional, Sequence, Set

from recipe_adapter.models.recipe import AdaptedRecipeData
from recipe_adapter.services.adaptation_engine import Substitution
from recipe_adapter.services.fodmap_heuristics import (
    apply_fodmap_heuristics,
    heuristic_replacements,
    wants_low_fodmap,
)
from recipe_adapter.services.substitution_catalog import (
    SubstitutionCatalog,
    default_catalog,
    resolve_diet_key,
)
from recipe_adapter.utils.constants import FODMAP_CORRECTIONS_HEADING, LOW_FODMAP_LABEL
from recipe_adapter.utils.helpers import append_audit_block, combine_restrictions

logger = logging.getLogger(__name__)

LOW_FODMAP_KEY = "lowFodmap"

_MAX_CORRECTION_STEPS = 10


def known_low_fodmap_names(catalog: SubstitutionCatalog = default_catalog) -> Set[str]:
    """Lowercased names that are themselves low-FODMAP replacements."""
    return catalog.suggestions_for([LOW_FODMAP_KEY]) | heuristic_replacements()


def correct_ingredient_name(
    name: str,
    restrictions: Sequence[str],
    settled: Set[str],
    catalog: SubstitutionCatalog = default_catalog,
) -> Optional[Substitution]:
    """
    One correction step for an ingredient name, or None to keep it.

    Same first-match order as the rule-based engine, except that low-FODMAP
    lookups are skipped for names in ``settled``.
    """
    is_settled = name.strip().lower() in settled

    for restriction in restrictions:
        if is_settled and resolve_diet_key(restriction) == LOW_FODMAP_KEY:
            continue
        suggestion = catalog.find_substitution(name, restriction)
        if suggestion and suggestion != name:
            return Substitution(name, suggestion, restriction)

    if not is_settled:
        heuristic = apply_fodmap_heuristics(name)
        if heuristic and heuristic != name:
            return Substitution(name, heuristic, LOW_FODMAP_LABEL)

    return None


def reconcile_ingredient_name(
    name: str,
    restrictions: Sequence[str],
    settled: Set[str],
    catalog: SubstitutionCatalog = default_catalog,
) -> Optional[Substitution]:
    """
    Repeat correction steps until the name stops changing.

    Conflicting catalog entries can send a name around a loop (a keto cream
    suggestion and the low-FODMAP cream suggestion replace each other). When
    the walk revisits a name, the loop is cut at its first known low-FODMAP
    name (or at the revisited name if the loop has none). Either way the
    result is a fixed point: reconciling it again yields no change.

    Returns:
        Optional[Substitution]: ``name`` to the final name, attributed to
            the restriction that produced it; None if the name is kept
    """
    seen = [name]
    causes = [LOW_FODMAP_LABEL]
    for _ in range(_MAX_CORRECTION_STEPS):
        step = correct_ingredient_name(seen[-1], restrictions, settled, catalog)
        if step is None:
            chosen = len(seen) - 1
            break
        if step.replacement in seen:
            start = seen.index(step.replacement)
            loop = range(start, len(seen))
            chosen = next(
                (i for i in loop if seen[i].strip().lower() in settled),
                start,
            )
            break
        seen.append(step.replacement)
        causes.append(step.restriction)
    else:
        chosen = len(seen) - 1
        logger.warning(f"Correction of '{name}' did not settle; keeping '{seen[chosen]}'")

    if chosen == 0:
        return None
    return Substitution(name, seen[chosen], causes[chosen])


def enforce_low_fodmap_on_adapted(
    adapted: AdaptedRecipeData,
    diets: List[str],
    allergies: List[str],
    catalog: SubstitutionCatalog = default_catalog,
) -> AdaptedRecipeData:
    """
    Re-apply low-FODMAP substitutions to an adapted recipe.

    Args:
        adapted: Adaptation to check (typically AI output); never mutated
        diets: Selected diets
        allergies: Selected allergies, including custom ones
        catalog: Catalog to consult (defaults to the built-in one)

    Returns:
        AdaptedRecipeData: ``adapted`` itself when low FODMAP was not
            requested, otherwise a corrected copy. A "FODMAP Corrections"
            block is appended to the notes only if something changed.
    """
    restrictions = combine_restrictions(diets, allergies)
    if not wants_low_fodmap(restrictions):
        return adapted

    settled = known_low_fodmap_names(catalog)
    corrections: List[str] = []
    ingredients = []
    for ingredient in adapted.ingredients:
        change = reconcile_ingredient_name(ingredient.name, restrictions, settled, catalog)
        if change:
            corrections.append(change.audit_line())
            ingredients.append(ingredient.model_copy(update={"name": change.replacement}))
        else:
            ingredients.append(ingredient.model_copy())

    if not corrections:
        logger.debug(f"No FODMAP corrections needed for '{adapted.title}'")
        return adapted.model_copy(update={"ingredients": ingredients})

    logger.info(f"Applied {len(corrections)} FODMAP correction(s) to '{adapted.title}'")
    return adapted.model_copy(
        update={
            "ingredients": ingredients,
            "notes": append_audit_block(adapted.notes, FODMAP_CORRECTIONS_HEADING, corrections),
        }
    )
