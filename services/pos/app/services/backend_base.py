from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from services.pos.app.models.catalog import CatalogSnapshot


@dataclass(frozen=True, slots=True)
class OrderCreated:
    order_id: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TableStatus:
    table_number: str
    available: bool
    customer: str | None = None
    status: str | None = None

    @classmethod
    def from_payload(cls, table_number: str, raw: dict[str, Any]) -> "TableStatus":
        return cls(
            table_number=str(raw.get("table_number") or raw.get("tableNumber") or table_number),
            available=bool(raw.get("available", True)),
            customer=raw.get("customer"),
            status=raw.get("status"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "table_number": self.table_number,
            "available": self.available,
            "customer": self.customer,
            "status": self.status,
        }


class RestaurantBackend(Protocol):
    """The restaurant's REST backend, consumed but not owned by the POS.

    Implementations raise BackendUnavailableError when the catalog cannot be read and
    SubmissionError when an order is not accepted.
    """

    vendor: str

    async def fetch_catalog(self) -> CatalogSnapshot: ...

    async def create_order(self, payload: dict[str, Any]) -> OrderCreated: ...

    async def table_status(self, table_number: str) -> TableStatus: ...
