from __future__ import annotations

from typing import Any
from uuid import uuid4

from services.pos.app.engine.errors import SubmissionError
from services.pos.app.models.catalog import AvailableMenuItem, CatalogSnapshot
from services.pos.app.services.backend_base import OrderCreated, TableStatus

_DEFAULT_MENU: list[dict[str, Any]] = [
    {"id": "m-sisig", "name": "Pork Sisig", "category": "Mains", "price": 150, "availableServings": 20},
    {"id": "m-adobo", "name": "Chicken Adobo", "category": "Mains", "price": 200, "availableServings": 15},
    {"id": "m-pancit", "name": "Pancit Canton", "category": "Noodles", "price": 180, "availableServings": 10},
    {"id": "m-lumpia", "name": "Lumpiang Shanghai", "category": "Sides", "price": 90, "availableServings": 4},
    {"id": "m-halohalo", "name": "Halo-Halo", "category": "Desserts", "price": 120, "availableServings": 8},
    {"id": "m-rice", "name": "Plain Rice", "category": None, "price": 25, "availableServings": 50},
]


class MockRestaurantBackend:
    """In-memory stand-in for the restaurant backend.

    Keeps per-item servings and deducts them on every accepted order, and tracks which
    dine-in tables are occupied.
    """

    vendor = "BACKEND_MOCK"

    def __init__(
        self,
        menu: list[dict[str, Any]] | None = None,
        occupied_tables: dict[str, str] | None = None,
    ) -> None:
        self._menu = {row["id"]: dict(row) for row in (menu if menu is not None else _DEFAULT_MENU)}
        self._occupied = dict(occupied_tables or {})
        self.orders: list[dict[str, Any]] = []

    async def fetch_catalog(self) -> CatalogSnapshot:
        items = tuple(AvailableMenuItem.from_payload(row) for row in self._menu.values())
        return CatalogSnapshot(items=items)

    async def table_status(self, table_number: str) -> TableStatus:
        customer = self._occupied.get(table_number)
        if customer is None:
            return TableStatus(table_number=table_number, available=True)
        return TableStatus(table_number=table_number, available=False, customer=customer, status="pending")

    async def create_order(self, payload: dict[str, Any]) -> OrderCreated:
        table = str(payload.get("table_number") or "")
        if table and table in self._occupied:
            status = await self.table_status(table)
            raise SubmissionError(
                f"Table {table} is currently occupied by {status.customer}",
                status_code=409,
                table_status=status.as_dict(),
            )

        for line in payload.get("order_items", []):
            row = self._menu.get(line.get("menu_item_id"))
            if row is None:
                raise SubmissionError(f"Menu item not found: {line.get('item_name')}", status_code=400)
            if row["availableServings"] < line["quantity"]:
                raise SubmissionError(
                    f"Insufficient servings for {row['name']}. "
                    f"Available: {row['availableServings']}, Required: {line['quantity']}",
                    status_code=400,
                )

        for line in payload.get("order_items", []):
            self._menu[line["menu_item_id"]]["availableServings"] -= line["quantity"]

        if table and payload.get("order_type") == "dine_in":
            self._occupied[table] = str(payload.get("customer_name") or "")

        order_id = uuid4().hex[:24]
        self.orders.append({**payload, "_id": order_id})
        return OrderCreated(order_id=order_id, payload={**payload, "_id": order_id})
