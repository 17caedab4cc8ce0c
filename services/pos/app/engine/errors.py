from __future__ import annotations

from typing import Any

from packages.shared.schemas.order_v1 import BlockReasonV1


class PosError(Exception):
    """Base class for errors surfaced to the POS terminal."""


class ValidationError(PosError):
    def __init__(self, message: str, reasons: list[BlockReasonV1] | None = None) -> None:
        super().__init__(message)
        self.reasons = list(reasons or [])


class CapacityError(PosError):
    def __init__(self, name: str, available: int, requested: int, menu_item_id: str = "") -> None:
        if available <= 0:
            message = f"No servings available for {name}"
        else:
            message = (
                f"Cannot add more {name}. Only {available} serving(s) available "
                f"(requested {requested})."
            )
        super().__init__(message)
        self.menu_item_id = menu_item_id
        self.available = available
        self.requested = requested


class GeocodeError(PosError):
    """Address could not be resolved. Always retryable."""

    retryable = True

    def __init__(self, message: str, address: str = "") -> None:
        super().__init__(message)
        self.address = address


class SubmissionError(PosError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        table_status: dict[str, Any] | None = None,
        reservation: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.table_status = table_status
        self.reservation = reservation

    @property
    def is_seating_conflict(self) -> bool:
        return self.table_status is not None or "currently occupied" in str(self).lower()


class BackendUnavailableError(PosError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Restaurant backend unavailable: {detail}")


class SessionBusyError(PosError):
    def __init__(self, operation: str) -> None:
        super().__init__(f"A {operation} is already in progress")
        self.operation = operation
