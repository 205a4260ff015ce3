"""
Pydantic models for the adaptation review workflow.

This module defines the per-ingredient review records, the pending
adaptation proposal, and the request/response schemas for the adaptation
and review endpoints.
"""

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from typing import List, Optional

from recipe_adapter.models.recipe import AdaptedRecipeData, Recipe
from recipe_adapter.utils.validators import (
    parse_custom_allergies,
    validate_ingredient_name,
    validate_restrictions,
)


class IngredientChoice(BaseModel):
    """
    Review record for one adapted ingredient.

    Attributes:
        original_name: Ingredient name in the original recipe
        adapted_name: Currently selected name (mutable by review actions)
        amount: Quantity carried from the adapted ingredient
        unit: Unit carried from the adapted ingredient
        options: Picker candidates; first entry is the proposed name
        accepted: Whether the adapted name is used on commit
    """
    original_name: str = Field(..., description="Original ingredient name")
    adapted_name: str = Field(..., description="Selected ingredient name")
    amount: str = Field("", description="Quantity")
    unit: Optional[str] = Field(None, description="Unit of measurement")
    options: List[str] = Field(default_factory=list, description="Candidate names")
    accepted: bool = Field(False, description="Whether the change is accepted")

    @computed_field
    @property
    def changed(self) -> bool:
        """True when the selected name differs from the original (for diff highlighting)."""
        return self.adapted_name.strip().lower() != self.original_name.strip().lower()


class AdaptationProposal(BaseModel):
    """
    A pending, user-reviewable adaptation.

    ``choices`` is index-aligned with ``adapted.ingredients``.
    """
    original: Recipe
    adapted: AdaptedRecipeData
    diets: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    choices: List[IngredientChoice] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_alignment(self) -> 'AdaptationProposal':
        """Choices must line up one-to-one with adapted ingredients."""
        if len(self.choices) != len(self.adapted.ingredients):
            raise ValueError(
                f"choices ({len(self.choices)}) must align with adapted ingredients "
                f"({len(self.adapted.ingredients)})"
            )
        return self


class AdaptRequest(BaseModel):
    """
    Request model for the /adapt endpoint.

    Either ``recipe_id`` (looked up in the recipe store) or an inline
    ``recipe`` must be supplied, plus at least one diet or allergy.
    """
    recipe_id: Optional[str] = Field(None, description="Stored recipe identifier")
    recipe: Optional[Recipe] = Field(None, description="Inline recipe")
    diets: List[str] = Field(default_factory=list, description="Selected diets")
    allergies: List[str] = Field(default_factory=list, description="Selected allergies")
    custom_allergies: Optional[str] = Field(
        None,
        max_length=200,
        description="Free-text allergies appended to the allergy list",
    )

    @field_validator('diets', 'allergies')
    @classmethod
    def clean_restrictions(cls, v: List[str]) -> List[str]:
        return validate_restrictions(v)

    @field_validator('custom_allergies')
    @classmethod
    def clean_custom_allergies(cls, v: Optional[str]) -> Optional[str]:
        return parse_custom_allergies(v)

    @model_validator(mode='after')
    def check_request(self) -> 'AdaptRequest':
        if not self.recipe_id and self.recipe is None:
            raise ValueError('Either recipe_id or recipe must be provided')
        if not self.diets and not self.allergies and not self.custom_allergies:
            raise ValueError('Please select at least one dietary preference or allergy')
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "recipe_id": "1",
                "diets": ["Low FODMAP"],
                "allergies": ["Gluten"],
                "custom_allergies": "sesame",
            }
        }
    }


class AdaptResponse(BaseModel):
    """Response model for the /adapt endpoint."""
    proposal: AdaptationProposal
    used_fallback: bool = Field(False, description="True if the rule-based engine was used")
    message: str = Field(..., description="User-facing status message")
    summary: str = Field(..., description="Substitution count summary")


class ChoiceUpdateRequest(BaseModel):
    """Override a single ingredient choice."""
    adapted_name: str = Field(..., description="New selected name")
    accepted: bool = Field(True, description="Whether to use the selected name")

    @field_validator('adapted_name')
    @classmethod
    def clean_name(cls, v: str) -> str:
        return validate_ingredient_name(v)


class CommitResponse(BaseModel):
    """
    Response model for committing a proposal.

    Deletion of the original is never automatic; the client asks the user
    and then calls ``DELETE /recipes/{original_id}``.
    """
    recipe: Recipe
    original_id: str
    delete_original_prompt: str = Field(
        "Would you like to delete the original recipe? "
        "You can keep it if you want to compare later.",
    )


class FodmapRateRequest(BaseModel):
    """Request model for rating ingredients against the FODMAP dataset."""
    ingredients: List[str] = Field(..., min_length=1, max_length=100)
    force_refresh: bool = False
