from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from services.pos.app.engine.errors import BackendUnavailableError, SubmissionError
from services.pos.app.models.catalog import AvailableMenuItem, CatalogSnapshot
from services.pos.app.services.backend_base import OrderCreated, TableStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _HttpConfig:
    base_url: str
    token: str
    timeout_s: float


class HttpRestaurantBackend:
    """Restaurant backend reached over its REST API.

    Env vars:
    - POS_BACKEND_ADAPTER=http
    - POS_BACKEND_BASE_URL (default: http://localhost:5000)
    - POS_BACKEND_TOKEN (bearer token, default: none)
    - POS_HTTP_TIMEOUT_S (default: 10)
    """

    vendor = "BACKEND_HTTP"

    def __init__(self, cfg: _HttpConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._cfg = cfg
        self._transport = transport

    @classmethod
    def from_env(cls) -> "HttpRestaurantBackend":
        return cls(
            _HttpConfig(
                base_url=os.getenv("POS_BACKEND_BASE_URL", "http://localhost:5000").rstrip("/"),
                token=os.getenv("POS_BACKEND_TOKEN", "").strip(),
                timeout_s=float(os.getenv("POS_HTTP_TIMEOUT_S", "10")),
            )
        )

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self._cfg.token:
            headers["Authorization"] = f"Bearer {self._cfg.token}"
        return httpx.AsyncClient(
            base_url=self._cfg.base_url,
            headers=headers,
            timeout=self._cfg.timeout_s,
            transport=self._transport,
        )

    async def fetch_catalog(self) -> CatalogSnapshot:
        try:
            async with self._client() as client:
                resp = await client.get("/menu/available")
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise BackendUnavailableError(f"GET /menu/available returned {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise BackendUnavailableError(f"GET /menu/available failed: {e}") from e
        except ValueError as e:
            raise BackendUnavailableError("GET /menu/available returned invalid JSON") from e

        rows = data.get("data", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise BackendUnavailableError("GET /menu/available returned an unexpected shape")

        return CatalogSnapshot(items=tuple(AvailableMenuItem.from_payload(r) for r in rows if isinstance(r, dict)))

    async def table_status(self, table_number: str) -> TableStatus:
        path = f"/orders/tables/{quote(table_number, safe='')}/status"
        try:
            async with self._client() as client:
                resp = await client.get(path)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise BackendUnavailableError(f"GET {path} returned {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise BackendUnavailableError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise BackendUnavailableError(f"GET {path} returned invalid JSON") from e

        return TableStatus.from_payload(table_number, data if isinstance(data, dict) else {})

    async def create_order(self, payload: dict[str, Any]) -> OrderCreated:
        try:
            async with self._client() as client:
                resp = await client.post("/orders", json=payload)
        except httpx.RequestError as e:
            raise SubmissionError(f"Failed to create order: {e}") from e

        if resp.is_error:
            raise _submission_error(resp)

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return OrderCreated(order_id=str(data.get("_id") or data.get("id") or ""), payload=data)


def _submission_error(resp: httpx.Response) -> SubmissionError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    logger.warning("POST /orders rejected with %s: %s", resp.status_code, body.get("message"))
    return SubmissionError(
        str(body.get("message") or "Failed to create order"),
        status_code=resp.status_code,
        table_status=body.get("tableStatus"),
        reservation=body.get("reservation"),
    )
