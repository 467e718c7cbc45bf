"""HTTP tests for the payment endpoints."""

from datetime import datetime

import pytest


SERVICES_PAYMENT = {
    "amount": 100.50,
    "currency": "USD",
    "senderId": "user123",
    "recipientId": "user456",
    "description": "Payment for services",
}


def create(client, **overrides):
    body = dict(SERVICES_PAYMENT)
    body.update(overrides)
    return client.post("/api/v1/payments", json=body)


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def assert_error_shape(body, status):
    assert set(body) == {"status", "message", "timestamp"}
    assert body["status"] == status
    parse_ts(body["timestamp"])


def test_create_payment(client):
    resp = create(client)

    assert resp.status_code == 201
    body = resp.json()
    assert set(body) == {
        "id",
        "amount",
        "currency",
        "senderId",
        "recipientId",
        "status",
        "description",
        "createdAt",
        "updatedAt",
    }
    assert isinstance(body["id"], int)
    assert body["status"] == "PENDING"
    assert body["amount"] == "100.50"
    assert body["currency"] == "USD"
    assert body["senderId"] == "user123"
    assert body["recipientId"] == "user456"
    assert body["description"] == "Payment for services"
    assert body["createdAt"] == body["updatedAt"]


def test_create_payment_forces_pending(client):
    resp = create(client, status="COMPLETED")

    assert resp.status_code == 201
    assert resp.json()["status"] == "PENDING"


def test_create_payment_without_description(client):
    body = dict(SERVICES_PAYMENT)
    del body["description"]

    resp = client.post("/api/v1/payments", json=body)

    assert resp.status_code == 201
    assert resp.json()["description"] is None


def test_create_payment_validation_failure(client):
    resp = client.post("/api/v1/payments", json={"amount": -10, "currency": "US", "senderId": ""})

    assert resp.status_code == 400
    body = resp.json()
    assert_error_shape(body, 400)
    assert body["message"].startswith("Validation failed: ")
    assert "amount: Amount must be greater than 0" in body["message"]
    assert "currency: Currency must be 3 characters (e.g., USD, EUR)" in body["message"]
    assert "senderId: Sender ID is required" in body["message"]
    assert "recipientId: Recipient ID is required" in body["message"]


@pytest.mark.parametrize("amount", ["0.014", "100.555", "1e20"])
def test_create_payment_rejects_amount_that_cannot_be_stored_exactly(client, amount):
    resp = create(client, amount=amount)

    assert resp.status_code == 400
    assert resp.json()["message"] == (
        "Validation failed: amount: Amount must have at most 17 integer digits and 2 decimals"
    )
    assert client.get("/api/v1/payments").json() == []


def test_create_payment_with_non_numeric_amount(client):
    resp = create(client, amount="lots")

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Validation failed: amount: ")


def test_get_payment(client):
    created = create(client).json()

    resp = client.get(f"/api/v1/payments/{created['id']}")

    assert resp.status_code == 200
    assert resp.json() == created


def test_get_missing_payment(client):
    resp = client.get("/api/v1/payments/999")

    assert resp.status_code == 404
    body = resp.json()
    assert_error_shape(body, 404)
    assert body["message"] == "Payment with ID 999 not found"


def test_list_payments_empty(client):
    resp = client.get("/api/v1/payments")

    assert resp.status_code == 200
    assert resp.json() == []


def test_list_by_status_is_subset_of_all(client):
    ids = [create(client).json()["id"] for _ in range(4)]
    client.patch(f"/api/v1/payments/{ids[1]}/status", params={"status": "COMPLETED"})
    client.patch(f"/api/v1/payments/{ids[2]}/status", params={"status": "FAILED"})
    client.patch(f"/api/v1/payments/{ids[3]}/status", params={"status": "COMPLETED"})

    everything = client.get("/api/v1/payments").json()
    for status in ["PENDING", "PROCESSING", "COMPLETED", "FAILED", "CANCELLED"]:
        filtered = client.get("/api/v1/payments", params={"status": status}).json()
        assert filtered == [p for p in everything if p["status"] == status]


def test_list_by_sender_and_recipient(client):
    mine = create(client, senderId="alice", recipientId="bob").json()
    create(client, senderId="carol", recipientId="dave")

    assert client.get("/api/v1/payments", params={"senderId": "alice"}).json() == [mine]
    assert client.get("/api/v1/payments", params={"recipientId": "bob"}).json() == [mine]


def test_list_rejects_multiple_filters(client):
    resp = client.get("/api/v1/payments", params={"status": "PENDING", "senderId": "alice"})

    assert resp.status_code == 400
    assert resp.json()["message"] == (
        "Validation failed: filter: Only one of status, senderId, recipientId may be given"
    )


def test_list_rejects_unknown_status(client):
    resp = client.get("/api/v1/payments", params={"status": "REFUNDED"})

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Validation failed: status: ")


def test_update_status(client):
    created = create(client).json()

    resp = client.patch(f"/api/v1/payments/{created['id']}/status", params={"status": "COMPLETED"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "COMPLETED"
    assert body["createdAt"] == created["createdAt"]
    assert parse_ts(body["updatedAt"]) > parse_ts(created["updatedAt"])
    assert client.get(f"/api/v1/payments/{created['id']}").json() == body


def test_update_status_allows_any_transition(client):
    created = create(client).json()
    url = f"/api/v1/payments/{created['id']}/status"

    assert client.patch(url, params={"status": "CANCELLED"}).json()["status"] == "CANCELLED"
    assert client.patch(url, params={"status": "PENDING"}).json()["status"] == "PENDING"


def test_update_status_of_missing_payment(client):
    resp = client.patch("/api/v1/payments/999/status", params={"status": "COMPLETED"})

    assert resp.status_code == 404
    assert resp.json()["message"] == "Payment with ID 999 not found"


@pytest.mark.parametrize("params", [{}, {"status": "DONE"}])
def test_update_status_requires_valid_status(client, params):
    created = create(client).json()

    resp = client.patch(f"/api/v1/payments/{created['id']}/status", params=params)

    assert resp.status_code == 400
    assert_error_shape(resp.json(), 400)


def test_delete_payment(client):
    created = create(client).json()

    resp = client.delete(f"/api/v1/payments/{created['id']}")

    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get(f"/api/v1/payments/{created['id']}").status_code == 404
    assert created["id"] not in [p["id"] for p in client.get("/api/v1/payments").json()]


def test_delete_missing_payment(client):
    resp = client.delete("/api/v1/payments/999")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Payment with ID 999 not found"


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/v1/payments/99999999999999999999"),
        ("PATCH", "/api/v1/payments/99999999999999999999/status?status=COMPLETED"),
        ("DELETE", "/api/v1/payments/99999999999999999999"),
        ("GET", "/api/v1/payments/0"),
    ],
)
def test_out_of_range_id_is_not_found(client, method, path):
    resp = client.request(method, path)

    assert resp.status_code == 404
    assert resp.json()["message"].startswith("Payment with ID ")
    assert resp.json()["message"].endswith(" not found")


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/v1/nothing-here")

    assert resp.status_code == 404
    assert_error_shape(resp.json(), 404)


def test_unexpected_error_maps_to_500(client, payment_service, monkeypatch):
    def explode():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(payment_service.store, "list_all", explode)

    resp = client.get("/api/v1/payments")

    assert resp.status_code == 500
    assert resp.json()["message"] == "An unexpected error occurred: database unavailable"


def test_trace_id_is_echoed(client):
    resp = client.get("/health", headers={"x-trace-id": "trace-abc"})

    assert resp.json() == {"ok": True}
    assert resp.headers["x-trace-id"] == "trace-abc"


def test_metrics_endpoint_exposes_payment_counters(client):
    create(client)

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "payments_created_total" in resp.text
    assert "http_requests_total" in resp.text
