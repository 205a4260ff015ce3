"""
Common utility helper functions.

This module provides reusable utility functions for name matching,
restriction handling, and audit-trail formatting used throughout the
application.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from recipe_adapter.utils.constants import AUDIT_BULLET

# Configure logging
logger = logging.getLogger(__name__)


def normalize_ingredient_name(ingredient: str) -> str:
    """
    Standardize ingredient names for dataset matching.

    Performs the following normalization:
    1. Convert to lowercase
    2. Remove leading/trailing whitespace
    3. Remove special characters except hyphens, digits and spaces
    4. Collapse multiple spaces

    Args:
        ingredient: Raw ingredient string

    Returns:
        str: Normalized ingredient name

    Example:
        >>> normalize_ingredient_name("  Garlic (Fresh)! ")
        "garlic fresh"
    """
    if not ingredient:
        return ""

    normalized = ingredient.lower().strip()
    normalized = re.sub(r'[^a-z0-9\s\-]', '', normalized)
    normalized = re.sub(r'\s+', ' ', normalized)

    return normalized.strip()


def names_overlap(ingredient_name: str, fragment: str) -> bool:
    """
    Loose bidirectional containment match between an ingredient and a fragment.

    True when the fragment appears inside the ingredient name or the
    ingredient name appears inside the fragment. The ingredient name is
    expected to be lowercased and trimmed already.

    This is a deliberate heuristic and over-matches: "cream" matches
    "ice cream", and a very short name such as "g" matches any fragment
    containing that letter.

    Args:
        ingredient_name: Lowercased, trimmed ingredient name
        fragment: Catalog fragment

    Returns:
        bool: True if either string contains the other
    """
    return fragment in ingredient_name or ingredient_name in fragment


def combine_restrictions(
    diets: Optional[Iterable[str]],
    allergies: Optional[Iterable[str]],
) -> List[str]:
    """Diets first, then allergies, order preserved."""
    return [*(diets or []), *(allergies or [])]


def build_diet_label(diets: List[str], allergies: List[str]) -> str:
    """
    Label embedded in adapted recipe titles.

    Diets joined with " & ", falling back to the allergy list when no diets
    were selected.
    """
    if diets:
        return " & ".join(diets)
    return " & ".join(allergies)


def build_adapted_title(title: str, diets: List[str], allergies: List[str]) -> str:
    """Return '<title> (<label> Adapted)'."""
    return f"{title} ({build_diet_label(diets, allergies)} Adapted)"


def format_audit_line(original: str, replacement: str, restriction: str) -> str:
    """Single audit-trail entry: '<original> → <new> (for <restriction>)'."""
    return f"{original} → {replacement} (for {restriction})"


def append_audit_block(notes: Optional[str], heading: str, lines: List[str]) -> str:
    """
    Append a bulleted audit block under a heading to existing notes.

    Existing notes are separated from the block by a blank line. When
    ``lines`` is empty the notes are returned unchanged (None becomes "").

    Example:
        >>> append_audit_block("", "**Substitutions Made:**", ["a → b (for Vegan)"])
        "**Substitutions Made:**\\n• a → b (for Vegan)"
    """
    notes = notes or ""
    if not lines:
        return notes

    block = heading + "\n" + "\n".join(f"{AUDIT_BULLET}{line}" for line in lines)
    return notes + ("\n\n" if notes else "") + block


def dedupe_preserving_order(values: Iterable[str]) -> List[str]:
    """Remove exact duplicates, keeping the first occurrence."""
    seen = set()
    unique: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


def names_differ(adapted_name: str, original_name: str) -> bool:
    """Case-insensitive, whitespace-trimmed comparison of two names."""
    return adapted_name.strip().lower() != original_name.strip().lower()


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    """Milliseconds since the epoch, used for generated ids."""
    return int(moment.timestamp() * 1000)


def to_iso(moment: datetime) -> str:
    """ISO-8601 string with millisecond precision and a trailing 'Z'."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{moment.microsecond // 1000:03d}Z"
    )
