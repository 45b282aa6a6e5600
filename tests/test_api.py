from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from walletshop.main import app


@pytest.fixture
def client(catalog):
    return TestClient(app)


def submit(client, wallet_code, lines):
    return client.post("/api/v1/order/change", json={"walletCode": wallet_code, "lines": lines})


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "ok"}


def test_current_order_empty_when_missing(client):
    resp = client.get("/api/v1/order/nobody")

    assert resp.status_code == 200
    assert resp.json() == {}


def test_change_and_read_order(client):
    resp = submit(client, "demo", [{"itemId": 1, "quantity": 2, "unitPrice": 0.01}, {"itemId": 3, "quantity": 1}])

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "PENDING"
    assert [(l["itemId"], Decimal(l["unitPrice"]), Decimal(l["totalPrice"])) for l in body["lines"]] == [
        (1, Decimal("10"), Decimal("20")),
        (3, Decimal("20"), Decimal("20")),
    ]

    current = client.get("/api/v1/order/demo").json()
    assert current["id"] == body["id"]
    assert set(current) == {"id", "status", "createdAt", "lines", "coupons"}


def test_change_with_inactive_item_is_client_error(client):
    resp = submit(client, "demo", [{"itemId": 4, "quantity": 1}])

    assert resp.status_code == 400
    assert resp.json() == {"detail": "One or more items not found or inactive"}


def test_change_with_zero_quantity_names_item(client):
    resp = submit(client, "demo", [{"itemId": 2, "quantity": 0}])

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid quantity for item 2"


def test_bulk_csv_upload(client):
    csv_body = b"walletCode,itemId,quantity\nalice,1,1\nalice,2,2\nbob,99,1\ncarol,3,1\n"

    resp = client.post("/api/v1/order/bulk", files={"file": ("orders.csv", csv_body, "text/csv")})

    assert resp.status_code == 207
    assert resp.json() == {
        "created": 2,
        "errors": [{"walletCode": "bob", "error": "One or more items not found or inactive"}],
    }
    assert len(client.get("/api/v1/order/alice").json()["lines"]) == 2


def test_bulk_rejects_non_csv(client):
    resp = client.post("/api/v1/order/bulk", files={"file": ("orders.exe", b"MZ", "application/octet-stream")})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Rejected: orders.exe"


def test_bulk_rejects_price_columns(client):
    csv_body = b"walletCode,itemId,quantity,unitPrice\nalice,1,1,0.01\n"

    resp = client.post("/api/v1/order/bulk", files={"file": ("orders.csv", csv_body, "text/csv")})

    assert resp.status_code == 400
    assert client.get("/api/v1/order/alice").json() == {}


def test_bulk_json(client):
    payload = {
        "orders": [
            {"walletCode": "alice", "lines": [{"itemId": 1, "quantity": 1}]},
            {"walletCode": "bob", "lines": [{"itemId": 1, "quantity": -1}]},
        ]
    }

    resp = client.post("/api/v1/order/bulk/json", json=payload)

    assert resp.status_code == 207
    assert resp.json() == {"created": 1, "errors": [{"walletCode": "bob", "error": "Invalid quantity for item 1"}]}


def test_redeem_and_remove_coupon(client):
    submit(client, "demo", [{"itemId": 1, "quantity": 1}])

    resp = client.post("/api/v1/order/redeem-coupon", json={"walletCode": "demo", "code": "SAVE10"})
    assert resp.status_code == 201
    assert resp.json() == {"id": resp.json()["id"], "couponCode": "SAVE10", "couponId": 1, "percent": 10}

    again = client.post("/api/v1/order/redeem-coupon", json={"walletCode": "demo", "code": "SAVE10"})
    assert again.status_code == 400
    assert again.json() == {"detail": "Already used"}

    removed = client.post("/api/v1/order/remove-coupon", json={"walletCode": "demo", "couponId": 1})
    assert removed.status_code == 200
    assert removed.json() == {}
    assert client.get("/api/v1/order/demo").json()["coupons"] == []


def test_redeem_without_order(client):
    resp = client.post("/api/v1/order/redeem-coupon", json={"walletCode": "ghost", "code": "SAVE10"})

    assert resp.status_code == 400
    assert resp.json() == {"detail": "No current order"}


@pytest.mark.parametrize("quantity", [True, "2", 1.5], ids=["bool", "string", "float"])
def test_change_rejects_non_integer_quantity(client, quantity):
    resp = submit(client, "demo", [{"itemId": 1, "quantity": quantity}])

    assert resp.status_code == 422
    assert client.get("/api/v1/order/demo").json() == {}


def test_change_rejects_string_item_id(client):
    resp = submit(client, "demo", [{"itemId": "1", "quantity": 1}])

    assert resp.status_code == 422
