"""
LLM adapter: Gemini-backed text/object generation for recipe adaptation.

The adaptation service depends only on the ``GenerationCapability``
interface: ``generate(prompt, schema)`` returns a ``GenerationResult``
holding either a value (free text, or a validated schema instance) or an
error. Remote failures never raise out of ``generate``; the caller decides
how to fall back.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Type

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from recipe_adapter.config import settings
from recipe_adapter.models.recipe import AdaptedRecipeData, Recipe

logger = logging.getLogger(__name__)


class AdaptationParseError(ValueError):
    """The AI response did not contain a usable adapted recipe."""


# ─── Generation capability ─────────────────────────────────────────────────────

@dataclass
class GenerationResult:
    """Outcome of a generation call: exactly one of value / error is set."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "GenerationResult":
        return cls(value=None, error=error)


class GenerationCapability(ABC):
    """Remote text/object generation."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        schema: Optional[Type[BaseModel]] = None,
    ) -> GenerationResult:
        """
        Generate a response for ``prompt``.

        Without ``schema`` the value is the raw response text; with a
        pydantic ``schema`` the value is a validated instance of it.
        """


class GeminiGenerator(GenerationCapability):
    """Gemini implementation of the generation capability."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.LLM_MODEL
        self.timeout_seconds = timeout_seconds or settings.LLM_TIMEOUT
        self.client = None
        if self.api_key:
            self.client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout_seconds * 1000),
            )
            logger.info(f"GeminiGenerator initialized (model={self.model})")
        else:
            logger.info("GeminiGenerator has no API key; generation disabled")

    @property
    def available(self) -> bool:
        return self.client is not None

    def generate(
        self,
        prompt: str,
        schema: Optional[Type[BaseModel]] = None,
    ) -> GenerationResult:
        if not self.available:
            return GenerationResult.failure(
                "AI service is not configured. Set GEMINI_API_KEY to enable recipe adaptation."
            )

        config_kwargs = {
            "temperature": settings.LLM_TEMPERATURE,
            "max_output_tokens": settings.LLM_MAX_TOKENS,
        }
        if schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = schema

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(**config_kwargs),
            )

            if schema is None:
                text = response.text or ""
                if not text.strip():
                    return GenerationResult.failure("Empty response from Gemini")
                return GenerationResult(value=text)

            parsed = response.parsed
            if isinstance(parsed, schema):
                return GenerationResult(value=parsed)
            return GenerationResult(value=schema.model_validate_json(response.text or ""))

        except ValidationError as e:
            logger.warning(f"Gemini response failed schema validation: {e}")
            return GenerationResult.failure(f"Schema validation failed: {e}")
        except Exception as e:
            logger.error(f"Gemini API call failed: {e}")
            return GenerationResult.failure(f"Gemini API error: {e}")


# ─── Prompt building ───────────────────────────────────────────────────────────

def build_adaptation_prompt(recipe: Recipe, diets: List[str], allergies: List[str]) -> str:
    """
    Natural-language prompt asking the model for an adapted recipe as JSON.

    ``allergies`` should already include any custom allergies.
    """
    dietary_reqs = ", ".join(diets) if diets else "None"
    allergy_list = ", ".join(allergies) if allergies else "None"

    ingredients_text = "\n".join(
        f"{ing.amount} {ing.unit or ''} {ing.name}".strip().replace("  ", " ")
        for ing in recipe.ingredients
    )
    instructions_text = "\n".join(
        f"{i + 1}. {step}" for i, step in enumerate(recipe.instructions)
    )

    details = ""
    if recipe.description:
        details += f"Description: {recipe.description}\n"
    if recipe.servings:
        details += f"Servings: {recipe.servings}\n"
    if recipe.prep_time:
        details += f"Prep Time: {recipe.prep_time} min\n"
    if recipe.cook_time:
        details += f"Cook Time: {recipe.cook_time} min\n"

    return (
        "Adapt the following recipe to meet these dietary requirements and allergies "
        "while maintaining the dish's essence and flavor profile.\n\n"
        f"**Original Recipe: {recipe.title}**\n"
        f"{details}\n"
        f"**Ingredients:**\n{ingredients_text}\n\n"
        f"**Instructions:**\n{instructions_text}\n\n"
        f"**Dietary Requirements:** {dietary_reqs}\n"
        f"**Allergies/Intolerances:** {allergy_list}\n\n"
        "**Instructions:**\n"
        "1. Substitute ingredients to meet the requirements\n"
        "2. Adjust cooking methods if needed\n"
        "3. Preserve the dish's original character and flavor as much as possible\n"
        "4. Provide clear explanations for major substitutions\n"
        "5. Note if the adaptation significantly changes the dish\n"
        "6. Keep the ingredient list in the same order, one entry per original ingredient\n\n"
        "**Response Format (JSON):**\n"
        "Return ONLY a valid JSON object with this structure:\n"
        "{\n"
        '  "title": "Adapted recipe name",\n'
        '  "description": "Brief description",\n'
        '  "ingredients": [{"amount": "1", "unit": "cup", "name": "ingredient name"}],\n'
        '  "instructions": ["step 1", "step 2"],\n'
        '  "notes": "Chef notes on substitutions"\n'
        "}"
    )


# ─── Response parsing ──────────────────────────────────────────────────────────

def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` block in ``text``, or None.

    Braces inside JSON string literals are ignored, so markdown fences and
    chatter around the object do not matter.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start: i + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def parse_adapted_recipe(text: str) -> AdaptedRecipeData:
    """
    Parse free-text AI output into AdaptedRecipeData.

    Raises:
        AdaptationParseError: No JSON object, invalid JSON, or schema mismatch
    """
    json_str = extract_json_object(text)
    if not json_str:
        raise AdaptationParseError("No JSON found in AI response")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise AdaptationParseError(f"Invalid JSON in AI response: {e}") from e

    try:
        return AdaptedRecipeData.model_validate(data)
    except ValidationError as e:
        raise AdaptationParseError(f"AI response does not match recipe schema: {e}") from e
