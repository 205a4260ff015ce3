"""
Pydantic models for the public FODMAP food list.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional


class FodmapRating(str, Enum):
    """Normalized FODMAP rating."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    UNKNOWN = "unknown"


class FodmapEntry(BaseModel):
    """A single food from the FODMAP dataset."""
    name: str
    group: Optional[str] = None
    category: Optional[str] = None
    rating: FodmapRating = FodmapRating.UNKNOWN
    details: Optional[str] = None
    serving_note: Optional[str] = None
    sources: Optional[List[str]] = None


class FodmapDataset(BaseModel):
    """Downloaded (or cached) FODMAP dataset."""
    entries: List[FodmapEntry] = Field(default_factory=list)
    fetched_at: str
    version: Optional[str] = None


class IngredientRating(BaseModel):
    """Rating result for one ingredient name."""
    ingredient: str
    rating: FodmapRating
    match: Optional[FodmapEntry] = None
