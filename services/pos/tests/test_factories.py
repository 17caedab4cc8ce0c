import pytest
from services.pos.app.services.backend_factory import get_backend
from services.pos.app.services.geocoder_factory import get_geocoder


def test_backend_defaults_to_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POS_BACKEND_ADAPTER", raising=False)
    assert get_backend().vendor == "BACKEND_MOCK"


def test_backend_http_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_BACKEND_ADAPTER", "http")
    monkeypatch.setenv("POS_BACKEND_BASE_URL", "http://pos-backend:5000/")
    assert get_backend().vendor == "BACKEND_HTTP"


def test_backend_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_BACKEND_ADAPTER", "nope")
    with pytest.raises(ValueError, match="Unknown POS_BACKEND_ADAPTER"):
        get_backend()


def test_geocoder_defaults_to_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POS_GEOCODER", raising=False)
    assert get_geocoder().provider == "MOCK"


def test_geocoder_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_GEOCODER", "nope")
    with pytest.raises(ValueError, match="Unknown POS_GEOCODER"):
        get_geocoder()
