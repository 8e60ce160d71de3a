"""Grocery suggestion catalog and name-based categorization.

A grocery item's category comes from a case-insensitive exact match of its
name against the static catalog below; anything else is filed under
``"Other"``.  The same catalog drives autocomplete.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

DEFAULT_CATEGORY = "Other"


@dataclass(frozen=True)
class CategorySuggestion:
    """A known grocery item and the category it belongs to."""
    name: str
    category: str


GROCERY_SUGGESTIONS: Tuple[CategorySuggestion, ...] = (
    CategorySuggestion("Milk", "Dairy"),
    CategorySuggestion("Eggs", "Dairy"),
    CategorySuggestion("Bread", "Bakery"),
    CategorySuggestion("Bananas", "Produce"),
    CategorySuggestion("Apples", "Produce"),
    CategorySuggestion("Chicken Breast", "Meat"),
    CategorySuggestion("Rice", "Pantry"),
    CategorySuggestion("Pasta", "Pantry"),
    CategorySuggestion("Yogurt", "Dairy"),
    CategorySuggestion("Spinach", "Produce"),
)


def _normalise(name: str) -> str:
    return name.strip().lower()


def find_suggestion(
    name: str,
    catalog: Iterable[CategorySuggestion] = GROCERY_SUGGESTIONS,
) -> Optional[CategorySuggestion]:
    target = _normalise(name)
    for suggestion in catalog:
        if suggestion.name.lower() == target:
            return suggestion
    return None


def categorize(
    name: str,
    catalog: Iterable[CategorySuggestion] = GROCERY_SUGGESTIONS,
) -> str:
    """Return the catalog category for ``name`` or ``DEFAULT_CATEGORY``."""
    match = find_suggestion(name, catalog)
    return match.category if match else DEFAULT_CATEGORY


def match_suggestions(
    query: str,
    existing_names: Iterable[str] = (),
    catalog: Iterable[CategorySuggestion] = GROCERY_SUGGESTIONS,
) -> List[CategorySuggestion]:
    """Catalog entries whose name contains ``query``, ignoring case.

    Entries whose name equals one of ``existing_names`` (ignoring case) are
    left out so the user is not offered something already on the list.
    The result keeps catalog order and is not truncated.
    """
    needle = query.lower()
    taken = {name.lower() for name in existing_names}
    return [
        suggestion
        for suggestion in catalog
        if needle in suggestion.name.lower() and suggestion.name.lower() not in taken
    ]
