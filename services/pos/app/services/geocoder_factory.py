from __future__ import annotations

import os

from services.pos.app.services.geocoder_base import Geocoder
from services.pos.app.services.geocoder_mock import MockGeocoder


def get_geocoder() -> Geocoder:
    """Select a geocoder based on env vars.

    Defaults to the mock geocoder so tests and local dev never hit the network unless
    explicitly configured otherwise.
    """

    mode = os.getenv("POS_GEOCODER", "mock").strip().lower()

    if mode == "mock":
        return MockGeocoder()

    if mode == "photon":
        from services.pos.app.services.geocoder_photon import PhotonGeocoder

        return PhotonGeocoder.from_env()

    raise ValueError(f"Unknown POS_GEOCODER={mode!r}. Expected mock or photon.")
