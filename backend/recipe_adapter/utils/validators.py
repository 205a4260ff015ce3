"""
Input validation utilities.

This module provides validation functions for user input to ensure
data integrity and security throughout the application.
"""

import re
import logging
from typing import List, Optional

# Configure logging
logger = logging.getLogger(__name__)

MAX_RESTRICTIONS = 30
MAX_RESTRICTION_LENGTH = 100
MAX_INGREDIENT_NAME_LENGTH = 500

_DANGEROUS_PATTERNS = [
    r'<script',  # Script tags
    r'javascript:',  # JavaScript protocol
    r'on\w+\s*=',  # Event handlers (onclick, onload, etc)
]


def sanitize_input(text: str) -> str:
    """
    Remove dangerous characters from user input.

    Strips potentially harmful content while preserving
    legitimate input for restriction names and ingredients.

    Args:
        text: Raw user input string

    Returns:
        str: Sanitized string
    """
    if not text:
        return ""

    # Remove leading/trailing whitespace
    sanitized = text.strip()

    # Remove null bytes
    sanitized = sanitized.replace('\0', '')

    # Remove control characters except newlines and tabs
    sanitized = ''.join(
        char for char in sanitized
        if ord(char) >= 32 or char in '\n\t'
    )

    # Remove excessive whitespace
    sanitized = re.sub(r'\s+', ' ', sanitized)

    # Remove HTML/XML tags
    sanitized = re.sub(r'<[^>]+>', '', sanitized)

    # Remove script-related content
    sanitized = re.sub(r'javascript:', '', sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r'on\w+\s*=', '', sanitized, flags=re.IGNORECASE)

    return sanitized.strip()


def validate_restrictions(restrictions: List[str]) -> List[str]:
    """
    Validate and clean a list of diet or allergy names.

    Entries are stripped; blank entries are dropped. Display casing is kept
    because the engine matches some diets ("Keto", "Gluten-free") by their
    exact display name.

    Args:
        restrictions: Raw restriction strings from the selection UI

    Returns:
        List[str]: Cleaned restriction list (order preserved)

    Raises:
        ValueError: If the list is too long or an entry is invalid
    """
    if len(restrictions) > MAX_RESTRICTIONS:
        raise ValueError(
            f"Cannot select more than {MAX_RESTRICTIONS} restrictions "
            f"(got {len(restrictions)})"
        )

    cleaned = []
    for i, restriction in enumerate(restrictions):
        if not isinstance(restriction, str):
            raise ValueError(
                f"Restriction at index {i} must be a string, "
                f"got {type(restriction).__name__}"
            )
        value = restriction.strip()
        if not value:
            continue
        if len(value) > MAX_RESTRICTION_LENGTH:
            raise ValueError(
                f"Restriction at index {i} exceeds maximum length of "
                f"{MAX_RESTRICTION_LENGTH} characters"
            )
        for pattern in _DANGEROUS_PATTERNS:
            if re.search(pattern, value, re.IGNORECASE):
                raise ValueError(f"Restriction at index {i} contains invalid characters")
        cleaned.append(value)

    logger.debug(f"Restrictions validated: {cleaned}")
    return cleaned


def parse_custom_allergies(text: Optional[str]) -> Optional[str]:
    """
    Clean the free-text custom allergies field.

    Returns None when nothing usable remains, so callers can skip appending.
    """
    if text is None:
        return None
    cleaned = sanitize_input(text)
    return cleaned or None


def validate_ingredient_name(name: str) -> str:
    """
    Validate a user-supplied ingredient name (e.g. a review override).

    Raises:
        ValueError: If the name is empty, too long, or contains script content
    """
    if not name or not name.strip():
        raise ValueError("Ingredient name cannot be empty")

    if len(name) > MAX_INGREDIENT_NAME_LENGTH:
        raise ValueError(
            f"Ingredient name exceeds maximum length of "
            f"{MAX_INGREDIENT_NAME_LENGTH} characters"
        )

    for pattern in _DANGEROUS_PATTERNS:
        if re.search(pattern, name, re.IGNORECASE):
            raise ValueError("Ingredient name contains invalid characters")

    return name.strip()


def validate_recipe_id(recipe_id: str) -> bool:
    """
    Validate recipe ID format.

    Ensures recipe ID is a valid identifier without dangerous characters.

    Args:
        recipe_id: Recipe identifier string

    Returns:
        bool: True if valid

    Raises:
        ValueError: If validation fails
    """
    if not recipe_id or not recipe_id.strip():
        raise ValueError("Recipe ID cannot be empty")

    if len(recipe_id) > 100:
        raise ValueError("Recipe ID cannot exceed 100 characters")

    # Allow alphanumeric, hyphens, and underscores only
    if not re.match(r'^[a-zA-Z0-9_-]+$', recipe_id):
        raise ValueError(
            "Recipe ID must contain only alphanumeric characters, "
            "hyphens, and underscores"
        )

    return True
