"""
Recipe adaptation orchestration.

Tries the AI collaborator first and falls back to the rule-based engine on
any failure, so an adaptation can always be produced offline. AI output is
always passed through the low-FODMAP reconciliation pass before it is
returned.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from recipe_adapter.models.recipe import AdaptedRecipeData, Recipe
from recipe_adapter.services.adaptation_engine import (
    adapt_recipe_with_database,
    count_substitutions,
    get_adaptation_summary,
)
from recipe_adapter.services.llm_adapter import (
    AdaptationParseError,
    GenerationCapability,
    build_adaptation_prompt,
    parse_adapted_recipe,
)
from recipe_adapter.services.reconciliation import enforce_low_fodmap_on_adapted
from recipe_adapter.services.substitution_catalog import SubstitutionCatalog, default_catalog
from recipe_adapter.utils.constants import AI_FALLBACK_MESSAGE

logger = logging.getLogger(__name__)


@dataclass
class AdaptationOutcome:
    """
    Result of adapting a recipe.

    Attributes:
        adapted: Adapted recipe (already FODMAP-reconciled when AI-sourced)
        diets: Diets used
        allergies: Allergies used, including custom allergies
        used_fallback: True if the rule-based engine produced the result
        message: User-facing status message
        summary: Substitution count summary
        ai_error: Why the AI path was abandoned, if it was
    """
    adapted: AdaptedRecipeData
    diets: List[str] = field(default_factory=list)
    allergies: List[str] = field(default_factory=list)
    used_fallback: bool = False
    message: str = ""
    summary: str = ""
    ai_error: Optional[str] = None


class RecipeAdaptationService:
    """
    Adapts recipes for diets and allergies.

    Attributes:
        generator: AI collaborator, or None to always use the rule engine
        use_structured_output: Ask the generator for a schema-validated
            object instead of free text
        catalog: Substitution catalog used by fallback and reconciliation
    """

    def __init__(
        self,
        generator: Optional[GenerationCapability] = None,
        use_structured_output: bool = False,
        catalog: SubstitutionCatalog = default_catalog,
    ):
        self.generator = generator
        self.use_structured_output = use_structured_output
        self.catalog = catalog
        logger.info(
            f"RecipeAdaptationService initialized "
            f"(ai={'enabled' if generator else 'disabled'}, "
            f"structured_output={use_structured_output})"
        )

    def adapt(
        self,
        recipe: Recipe,
        diets: List[str],
        allergies: List[str],
        custom_allergies: Optional[str] = None,
    ) -> AdaptationOutcome:
        """
        Adapt ``recipe`` for the selected diets and allergies.

        Args:
            recipe: Recipe to adapt (never modified)
            diets: Selected diets
            allergies: Selected allergies
            custom_allergies: Free-text allergies, appended to ``allergies``

        Returns:
            AdaptationOutcome: Adapted data plus how it was produced

        Raises:
            ValueError: If the recipe has no ingredients
        """
        if not recipe.ingredients:
            raise ValueError(f"Recipe '{recipe.title}' has no ingredients to adapt")

        all_allergies = list(allergies)
        if custom_allergies and custom_allergies.strip():
            all_allergies.append(custom_allergies.strip())

        adapted: Optional[AdaptedRecipeData] = None
        ai_error: Optional[str] = None

        if self.generator is None:
            ai_error = "AI adaptation disabled"
        else:
            try:
                adapted = self._adapt_with_ai(recipe, diets, all_allergies)
                adapted = enforce_low_fodmap_on_adapted(adapted, diets, all_allergies, self.catalog)
                logger.info(f"AI adaptation of '{recipe.title}' successful (FODMAP-reconciled)")
            except AdaptationParseError as e:
                adapted = None
                ai_error = str(e)
                logger.warning(f"AI adaptation failed, using rule-based fallback: {e}")
            except Exception as e:
                adapted = None
                ai_error = f"AI adaptation error: {e}"
                logger.warning(
                    f"AI adaptation raised {type(e).__name__}, using rule-based fallback: {e}"
                )

        used_fallback = adapted is None
        if used_fallback:
            adapted = adapt_recipe_with_database(recipe, diets, all_allergies, self.catalog)

        substitutions = count_substitutions(recipe, adapted)
        if len(adapted.ingredients) != len(recipe.ingredients):
            logger.warning(
                f"Adapted ingredient count ({len(adapted.ingredients)}) differs from "
                f"original ({len(recipe.ingredients)}); review diff may be misleading"
            )

        return AdaptationOutcome(
            adapted=adapted,
            diets=list(diets),
            allergies=all_allergies,
            used_fallback=used_fallback,
            message=(
                AI_FALLBACK_MESSAGE if used_fallback
                else "We prepared an adapted version. Review and approve substitutions."
            ),
            summary=get_adaptation_summary(
                len(recipe.ingredients), len(adapted.ingredients), substitutions
            ),
            ai_error=ai_error,
        )

    def _adapt_with_ai(
        self,
        recipe: Recipe,
        diets: List[str],
        allergies: List[str],
    ) -> AdaptedRecipeData:
        """Call the generator; any failure is raised as AdaptationParseError."""
        prompt = build_adaptation_prompt(recipe, diets, allergies)
        schema = AdaptedRecipeData if self.use_structured_output else None

        result = self.generator.generate(prompt, schema)
        if not result.ok:
            raise AdaptationParseError(result.error)

        if isinstance(result.value, AdaptedRecipeData):
            adapted = result.value
        elif isinstance(result.value, str):
            adapted = parse_adapted_recipe(result.value)
        else:
            raise AdaptationParseError(
                f"Unexpected generator result type: {type(result.value).__name__}"
            )

        if not adapted.ingredients:
            raise AdaptationParseError("AI response contained no ingredients")
        return adapted
