"""Grocery planner: a categorized shopping list with a running budget.

The planner owns the list for the lifetime of a session.  It is hydrated
from a :class:`~finwise.storage.GroceryRepository` once, at construction,
and writes the full list back after every mutation that changes it.
Aggregates (grouping, totals, counts) are computed from the list on every
call and never cached.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from . import config
from .formatting import parse_price
from .suggestions import (
    DEFAULT_CATEGORY,
    GROCERY_SUGGESTIONS,
    CategorySuggestion,
    categorize,
    match_suggestions,
)

if TYPE_CHECKING:  # pragma: no cover
    from .storage import GroceryRepository

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("id", "name", "price", "completed", "category")


class GroceryDecodeError(ValueError):
    """Raised when stored grocery data does not describe a valid item list."""


@dataclass
class GroceryItem:
    id: str
    name: str
    price: float = 0.0
    completed: bool = False
    category: str = DEFAULT_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "GroceryItem":
        """Build an item from its stored form, rejecting anything malformed."""
        if not isinstance(data, dict):
            raise GroceryDecodeError(f"expected an object, got {type(data).__name__}")
        missing = [name for name in ITEM_FIELDS if name not in data]
        if missing:
            raise GroceryDecodeError(f"missing fields: {', '.join(missing)}")

        item_id, name, price = data["id"], data["name"], data["price"]
        completed, category = data["completed"], data["category"]
        if not isinstance(item_id, str) or not item_id:
            raise GroceryDecodeError(f"invalid id: {item_id!r}")
        if not isinstance(name, str) or not isinstance(category, str):
            raise GroceryDecodeError(f"invalid name/category for item {item_id}")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise GroceryDecodeError(f"invalid price for item {item_id}: {price!r}")
        if not math.isfinite(price) or price < 0:
            raise GroceryDecodeError(f"invalid price for item {item_id}: {price!r}")
        if not isinstance(completed, bool):
            raise GroceryDecodeError(f"invalid completed flag for item {item_id}")

        return cls(id=item_id, name=name, price=float(price), completed=completed, category=category)


@dataclass(frozen=True)
class GrocerySummary:
    item_count: int
    completed_count: int
    total_budget: float


class GroceryPlanner:
    """Mutable grocery list backed by a repository."""

    def __init__(
        self,
        repository: "GroceryRepository",
        catalog: Iterable[CategorySuggestion] = GROCERY_SUGGESTIONS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.repository = repository
        self.catalog: Tuple[CategorySuggestion, ...] = tuple(catalog)
        self._clock = clock or time.time
        self._items: List[GroceryItem] = list(repository.load())
        self.pending_name = ""
        self.pending_price = ""
        logger.debug("Grocery planner loaded %d items", len(self._items))

    @property
    def items(self) -> Tuple[GroceryItem, ...]:
        return tuple(self._items)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, name: str, price: float = 0.0) -> Optional[GroceryItem]:
        """Append a new item; blank names are ignored.

        Negative, non-finite or unparsable prices are stored as zero.
        """
        if not name or not name.strip():
            return None
        price = parse_price(price)

        item = GroceryItem(
            id=self._new_id(),
            name=name.strip(),
            price=price,
            completed=False,
            category=categorize(name, self.catalog),
        )
        self._items.append(item)
        self.pending_name = ""
        self.pending_price = ""
        self._persist()
        logger.debug("Added %s (%s) at %.2f", item.name, item.category, item.price)
        return item

    def toggle_item(self, item_id: str) -> bool:
        """Flip ``completed`` on the matching item.  Returns False if absent."""
        item = self._find(item_id)
        if item is None:
            return False
        item.completed = not item.completed
        self._persist()
        return True

    def delete_item(self, item_id: str) -> bool:
        item = self._find(item_id)
        if item is None:
            return False
        self._items.remove(item)
        self._persist()
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def suggestions(self, query: str) -> List[CategorySuggestion]:
        """All catalog matches for ``query`` not already on the list."""
        return match_suggestions(query, (item.name for item in self._items), self.catalog)

    def visible_suggestions(self, query: str, limit: Optional[int] = None) -> List[CategorySuggestion]:
        limit = config.SUGGESTION_DISPLAY_LIMIT if limit is None else limit
        return self.suggestions(query)[: max(0, limit)]

    def group_by_category(self) -> Dict[str, List[GroceryItem]]:
        grouped: Dict[str, List[GroceryItem]] = {}
        for item in self._items:
            grouped.setdefault(item.category, []).append(item)
        return grouped

    def category_totals(self) -> Dict[str, float]:
        return {
            category: sum((item.price for item in items), 0.0)
            for category, items in self.group_by_category().items()
        }

    def total_budget(self) -> float:
        """Sum of all prices, completed or not."""
        return sum((item.price for item in self._items), 0.0)

    def item_count(self) -> int:
        return len(self._items)

    def completed_count(self) -> int:
        return sum(1 for item in self._items if item.completed)

    def summary(self) -> GrocerySummary:
        return GrocerySummary(
            item_count=self.item_count(),
            completed_count=self.completed_count(),
            total_budget=self.total_budget(),
        )

    def to_frame(self) -> pd.DataFrame:
        """The list as a DataFrame, one row per item in list order."""
        return pd.DataFrame([item.to_dict() for item in self._items], columns=list(ITEM_FIELDS))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find(self, item_id: str) -> Optional[GroceryItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def _new_id(self) -> str:
        # millisecond timestamp, bumped past any id already in use
        taken = {item.id for item in self._items}
        candidate = int(self._clock() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _persist(self) -> None:
        self.repository.save(self._items)
