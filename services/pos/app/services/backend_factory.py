from __future__ import annotations

import os

from services.pos.app.services.backend_base import RestaurantBackend
from services.pos.app.services.backend_mock import MockRestaurantBackend


def get_backend() -> RestaurantBackend:
    """Select the restaurant backend adapter based on env vars.

    Defaults to the in-memory mock so tests and local dev are deterministic unless
    explicitly configured otherwise.
    """

    mode = os.getenv("POS_BACKEND_ADAPTER", "mock").strip().lower()

    if mode == "mock":
        return MockRestaurantBackend()

    if mode == "http":
        from services.pos.app.services.backend_http import HttpRestaurantBackend

        return HttpRestaurantBackend.from_env()

    raise ValueError(f"Unknown POS_BACKEND_ADAPTER={mode!r}. Expected mock or http.")
