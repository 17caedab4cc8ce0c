"""Cart aggregation: line item mutations and the subtotal fold."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from services.pos.app.engine.errors import CapacityError, ValidationError
from services.pos.app.engine.money import ZERO, q2
from services.pos.app.models.catalog import CatalogSnapshot
from services.pos.app.models.draft import LineItem, OrderDraft


def subtotal(line_items: Iterable[LineItem]) -> Decimal:
    return q2(sum((li.line_total for li in line_items), ZERO))


def add_item(draft: OrderDraft, catalog: CatalogSnapshot, menu_item_id: str) -> LineItem:
    """Add one serving of a catalog item, merging into an existing line."""
    menu_item = catalog.get(menu_item_id)
    if menu_item is None:
        raise ValidationError(f"Unknown menu item: {menu_item_id}")

    in_cart = draft.quantity_of(menu_item_id)
    if in_cart + 1 > menu_item.available_servings:
        raise CapacityError(
            menu_item.name,
            available=menu_item.available_servings,
            requested=in_cart + 1,
            menu_item_id=menu_item_id,
        )

    index = draft.index_of(menu_item_id)
    if index is not None:
        line = draft.line_items[index]
        line.quantity += 1
        return line

    line = LineItem(
        menu_item_id=menu_item.id,
        name=menu_item.name,
        unit_price=menu_item.price,
        quantity=1,
    )
    draft.line_items.append(line)
    return line


def set_quantity(draft: OrderDraft, catalog: CatalogSnapshot, index: int, quantity: int) -> LineItem | None:
    """Set a line's quantity. Zero or less removes the line and returns None."""
    line = _line_at(draft, index)
    if quantity <= 0:
        del draft.line_items[index]
        return None

    menu_item = catalog.get(line.menu_item_id)
    if menu_item is not None:
        others = draft.quantity_of(line.menu_item_id) - line.quantity
        if others + quantity > menu_item.available_servings:
            raise CapacityError(
                menu_item.name,
                available=menu_item.available_servings,
                requested=others + quantity,
                menu_item_id=menu_item.id,
            )

    line.quantity = quantity
    return line


def remove_item(draft: OrderDraft, index: int) -> LineItem:
    line = _line_at(draft, index)
    del draft.line_items[index]
    return line


def over_capacity(draft: OrderDraft, catalog: CatalogSnapshot) -> list[str]:
    """Names of items whose cart quantity exceeds the snapshot's servings."""
    names: list[str] = []
    for line in draft.line_items:
        menu_item = catalog.get(line.menu_item_id)
        if menu_item is None or line.name in names:
            continue
        if draft.quantity_of(line.menu_item_id) > menu_item.available_servings:
            names.append(line.name)
    return names


def _line_at(draft: OrderDraft, index: int) -> LineItem:
    if index < 0 or index >= len(draft.line_items):
        raise ValidationError(f"No line item at position {index}")
    return draft.line_items[index]
