import pytest
from fastapi.testclient import TestClient
from services.pos.app.main import app
from services.pos.app.services.store import store

client = TestClient(app)


@pytest.fixture(autouse=True)
def _mock_adapters(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POS_BACKEND_ADAPTER", "mock")
    monkeypatch.setenv("POS_GEOCODER", "mock")
    store.clear()
    yield
    store.clear()


def _new_session() -> str:
    response = client.post("/v1/pos/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def test_health() -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_new_session_starts_with_an_empty_draft() -> None:
    data = client.post("/v1/pos/sessions").json()

    assert data["type"] == "DRAFT"
    assert data["draft"]["order_type"] == "dine_in"
    assert data["gate"]["state"] == "INCOMPLETE"
    assert "no items in order" in data["gate"]["reasons"]
    assert data["actions"] == []


def test_unknown_session_is_404() -> None:
    assert client.get("/v1/pos/sessions/missing").status_code == 404
    assert client.post("/v1/pos/sessions/missing/pay").status_code == 404


def test_dine_in_cash_order_end_to_end() -> None:
    sid = _new_session()
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-sisig"})
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-sisig"})
    draft = client.patch(
        f"/v1/pos/sessions/{sid}/draft",
        json={"customer_name": "Ana", "table_number": "3", "cash_tendered": "500"},
    ).json()

    assert draft["pricing"]["total"] == "300.00"
    assert draft["gate"]["state"] == "READY"
    assert [a["type"] for a in draft["actions"]] == ["PAY"]

    pending = client.post(f"/v1/pos/sessions/{sid}/pay").json()
    assert pending["type"] == "CONFIRM"
    assert [a["type"] for a in pending["actions"]] == ["CONFIRM", "CANCEL"]

    done = client.post(f"/v1/pos/sessions/{sid}/confirm").json()
    assert done["type"] == "DONE"
    assert done["order_id"]
    assert done["body"]["receipt"]["total"] == "300.00"
    assert done["body"]["receipt"]["change"] == "200.00"
    assert done["draft"]["line_items"] == []


def test_confirm_without_pay_is_rejected() -> None:
    sid = _new_session()
    response = client.post(f"/v1/pos/sessions/{sid}/confirm")
    assert response.status_code == 422


def test_pay_with_missing_fields_lists_reasons() -> None:
    sid = _new_session()
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-adobo"})

    response = client.post(f"/v1/pos/sessions/{sid}/pay")

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert "missing customer name" in detail["reasons"]
    assert "insufficient cash" in detail["reasons"]


def test_adding_past_available_servings_is_409() -> None:
    sid = _new_session()
    for _ in range(4):
        assert client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-lumpia"}).status_code == 200

    response = client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-lumpia"})

    assert response.status_code == 409
    assert response.json()["detail"]["available"] == 4
    card = client.get(f"/v1/pos/sessions/{sid}").json()
    assert card["draft"]["line_items"][0]["quantity"] == 4


def test_quantity_zero_removes_the_line() -> None:
    sid = _new_session()
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-adobo"})

    card = client.patch(f"/v1/pos/sessions/{sid}/items/0", json={"quantity": 0}).json()

    assert card["draft"]["line_items"] == []


def test_address_on_dine_in_order_is_422() -> None:
    sid = _new_session()
    response = client.patch(f"/v1/pos/sessions/{sid}/draft", json={"street": "12 Rizal St"})
    assert response.status_code == 422


def test_delivery_quote_flow() -> None:
    sid = _new_session()
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-adobo"})
    card = client.patch(
        f"/v1/pos/sessions/{sid}/draft",
        json={
            "customer_name": "Ben",
            "customer_phone": "09175550101",
            "order_type": "delivery",
            "payment_method": "gcash",
            "street": "12 Rizal St",
            "barangay": "Poblacion",
            "city": "Boac",
        },
    ).json()

    assert card["draft"]["delivery_address"] == "12 Rizal St, Poblacion, Boac, Marinduque, MIMAROPA"
    assert "delivery fee not quoted" in card["gate"]["reasons"]
    assert "QUOTE" in [a["type"] for a in card["actions"]]

    quoted = client.post(f"/v1/pos/sessions/{sid}/delivery/quote").json()

    assert float(quoted["draft"]["delivery_distance_km"]) > 0
    assert float(quoted["pricing"]["delivery_fee"]) >= 50
    assert quoted["gate"]["state"] == "READY"
    assert quoted["notices"][-1]["level"] == "SUCCESS"


def test_delivery_quote_for_unknown_place_is_502() -> None:
    sid = _new_session()
    client.patch(
        f"/v1/pos/sessions/{sid}/draft",
        json={"order_type": "delivery", "street": "1 Main", "barangay": "X", "city": "Atlantis"},
    )

    response = client.post(f"/v1/pos/sessions/{sid}/delivery/quote")

    assert response.status_code == 502
    assert response.json()["detail"]["retryable"] is True

    card = client.get(f"/v1/pos/sessions/{sid}").json()
    assert card["notices"] == []


def test_catalog_filters_by_category_and_search() -> None:
    sid = _new_session()

    full = client.get(f"/v1/pos/sessions/{sid}/catalog").json()
    assert full["categories"][0] == "All"
    assert "Misc" in full["categories"]

    mains = client.get(f"/v1/pos/sessions/{sid}/catalog", params={"category": "Mains"}).json()
    assert {i["id"] for i in mains["items"]} == {"m-sisig", "m-adobo"}

    rice = client.get(f"/v1/pos/sessions/{sid}/catalog", params={"q": "RICE"}).json()
    assert [i["id"] for i in rice["items"]] == ["m-rice"]

    lumpia = client.get(f"/v1/pos/sessions/{sid}/catalog", params={"q": "lumpia"}).json()
    assert lumpia["items"][0]["low_stock"] is True


def test_closed_session_is_gone() -> None:
    sid = _new_session()
    assert client.delete(f"/v1/pos/sessions/{sid}").json() == {"ok": True}
    assert client.get(f"/v1/pos/sessions/{sid}").status_code == 404


def test_bad_adapter_config_is_500(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_BACKEND_ADAPTER", "nope")
    assert client.post("/v1/pos/sessions").status_code == 500


def test_tiny_numeric_cash_does_not_settle_the_order() -> None:
    sid = _new_session()
    client.post(f"/v1/pos/sessions/{sid}/items", json={"menu_item_id": "m-sisig"})

    card = client.patch(
        f"/v1/pos/sessions/{sid}/draft",
        json={"customer_name": "Ana", "cash_tendered": 0.00001},
    ).json()

    assert card["draft"]["cash_tendered"] == "0.00"
    assert "insufficient cash" in card["gate"]["reasons"]
