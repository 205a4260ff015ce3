"""
Pattern-based low-FODMAP corrections.

A small fixed set of substring triggers used in two places: as a fallback
inside the rule-based engine when the catalog has nothing for an ingredient,
and as the correctness pass over AI-sourced adaptations.
"""

from typing import Iterable, Optional, Set

from recipe_adapter.utils.constants import FODMAP_HEURISTIC_TRIGGERS, FODMAP_MARKER


def apply_fodmap_heuristics(name: str) -> Optional[str]:
    """
    Return the low-FODMAP replacement for an ingredient name, or None.

    Triggers are checked in order against the lowercased name; plain
    "flour" only matches exactly (so "rice flour" is left alone).

    Example:
        >>> apply_fodmap_heuristics("Garlic clove")
        "garlic-infused oil"
        >>> apply_fodmap_heuristics("carrot") is None
        True
    """
    lowered = name.lower()
    for substrings, exact_names, replacement in FODMAP_HEURISTIC_TRIGGERS:
        if any(s in lowered for s in substrings) or lowered in exact_names:
            return replacement
    return None


def wants_low_fodmap(restrictions: Iterable[str]) -> bool:
    """True if any restriction mentions FODMAP (case-insensitive substring)."""
    return any(FODMAP_MARKER in r.lower() for r in restrictions)


def heuristic_replacements() -> Set[str]:
    """All heuristic replacement names, lowercased."""
    return {replacement.lower() for _, _, replacement in FODMAP_HEURISTIC_TRIGGERS}
