from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from services.pos.app.engine.money import to_money

LOW_STOCK_THRESHOLD = 5
ALL_CATEGORIES = "All"
DEFAULT_CATEGORY = "Misc"


@dataclass(frozen=True, slots=True)
class AvailableMenuItem:
    id: str
    name: str
    category: str
    price: Decimal
    available_servings: int

    @property
    def is_out_of_stock(self) -> bool:
        return self.available_servings <= 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.available_servings <= LOW_STOCK_THRESHOLD

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> "AvailableMenuItem":
        """Build from a `/menu/available` row (camelCase or the backend's own keys)."""
        servings = raw.get("availableServings", raw.get("available_servings", raw.get("servings", 0)))
        try:
            servings = max(0, int(servings or 0))
        except (TypeError, ValueError):
            servings = 0
        return cls(
            id=str(raw.get("id") or raw.get("_id") or ""),
            name=str(raw.get("name") or ""),
            category=str(raw.get("category") or DEFAULT_CATEGORY),
            price=to_money(raw.get("price", 0)),
            available_servings=servings,
        )


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable menu snapshot. Refreshing swaps the whole snapshot, never edits items."""

    items: tuple[AvailableMenuItem, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, menu_item_id: str) -> AvailableMenuItem | None:
        for item in self.items:
            if item.id == menu_item_id:
                return item
        return None

    def categories(self) -> list[str]:
        seen: list[str] = []
        for item in self.items:
            if item.category not in seen:
                seen.append(item.category)
        return [ALL_CATEGORIES, *sorted(seen)]

    def filter(self, category: str | None = None, search: str | None = None) -> list[AvailableMenuItem]:
        term = (search or "").strip().lower()
        out = []
        for item in self.items:
            if category and category != ALL_CATEGORIES and item.category != category:
                continue
            if term and term not in item.name.lower():
                continue
            out.append(item)
        return out


EMPTY_CATALOG = CatalogSnapshot()
