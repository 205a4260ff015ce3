"""
Pydantic models for recipe data.

This module defines the data models for stored recipes and for the
transient adapted-recipe shape produced by the adaptation engine. All
models use Pydantic for automatic validation, serialization, and type
safety.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional


IngredientCategory = Literal["produce", "dairy", "meat", "pantry", "spices", "other"]
SourcePlatform = Literal["web", "instagram", "pinterest", "tiktok", "facebook", "manual"]


class Ingredient(BaseModel):
    """
    A single ingredient line of a stored recipe.

    Attributes:
        id: Identifier unique within the recipe
        name: Free-text ingredient name (not normalized)
        amount: Free-text quantity (e.g. "2", "1/2")
        unit: Optional unit (e.g. "cup", "g")
        category: Optional shopping category tag
        is_optional: Whether the ingredient may be left out
    """
    id: str = Field(..., description="Ingredient identifier (unique within recipe)")
    name: str = Field(..., description="Ingredient name")
    amount: str = Field("", description="Free-text quantity")
    unit: Optional[str] = Field(None, description="Unit of measurement")
    category: Optional[IngredientCategory] = Field(None, description="Category tag")
    is_optional: Optional[bool] = Field(None, description="Optional ingredient flag")


class NutritionInfo(BaseModel):
    """Per-serving nutrition; grams unless noted."""
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = Field(None, description="Sodium in mg")


class Recipe(BaseModel):
    """
    A stored recipe, owned by the recipe store.

    The adaptation engine only reads recipes; adapted versions are always
    produced as new objects.
    """
    id: str = Field(..., description="Unique recipe identifier")
    title: str = Field(..., min_length=1, description="Recipe title")
    description: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    source_platform: Optional[SourcePlatform] = None
    prep_time: Optional[int] = Field(None, ge=0, description="Prep time in minutes")
    cook_time: Optional[int] = Field(None, ge=0, description="Cook time in minutes")
    servings: Optional[int] = Field(None, ge=0)
    ingredients: List[Ingredient] = Field(..., description="Ordered ingredient list")
    instructions: List[str] = Field(default_factory=list, description="Ordered steps")
    nutrition: Optional[NutritionInfo] = None
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    notes: Optional[str] = None
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    updated_at: str = Field(..., description="ISO-8601 update timestamp")
    is_favorite: bool = False

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not empty or whitespace only."""
        if not v or not v.strip():
            raise ValueError('Recipe title cannot be empty')
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "1",
                "title": "Garlic Butter Pasta",
                "servings": 2,
                "ingredients": [
                    {"id": "i1", "name": "pasta", "amount": "200", "unit": "g"},
                    {"id": "i2", "name": "garlic clove", "amount": "2"},
                    {"id": "i3", "name": "butter", "amount": "30", "unit": "g"},
                ],
                "instructions": ["Cook the pasta.", "Serve with rice."],
                "created_at": "2024-01-01T00:00:00.000Z",
                "updated_at": "2024-01-01T00:00:00.000Z",
            }
        }
    }


class AdaptedIngredient(BaseModel):
    """Ingredient line of an adapted recipe (no id, not yet persisted)."""
    amount: str = Field("", description="Free-text quantity")
    unit: Optional[str] = Field(None, description="Unit of measurement")
    name: str = Field(..., description="Ingredient name")

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        """AI output sometimes uses bare numbers for amounts."""
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v


class AdaptedRecipeData(BaseModel):
    """
    Output of the adaptation engine and the schema the AI is asked to return.

    Structurally looser than Recipe: it is a transient proposal.
    """
    title: str
    description: Optional[str] = None
    ingredients: List[AdaptedIngredient]
    instructions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
