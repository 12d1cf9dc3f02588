from __future__ import annotations

from sqlalchemy.exc import OperationalError

from backend import crud


def _payload(**overrides):
    payload = {"title": "Coffee", "amount": 4.5, "category": "food", "date": "2024-03-01"}
    payload.update(overrides)
    return payload


def test_healthcheck(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.text


def test_create_and_retrieve_expense(client):
    create_resp = client.post("/expenses", json=_payload(title="Train ticket", amount="45.10", category="transport"))
    assert create_resp.status_code == 201
    expense_id = create_resp.json()["id"]

    get_resp = client.get(f"/expenses/{expense_id}")
    assert get_resp.status_code == 200
    payload = get_resp.json()
    assert payload["title"] == "Train ticket"
    assert payload["amount"] == "45.10"
    assert payload["category"] == "transport"
    assert payload["date"] == "2024-03-01"


def test_list_expenses_newest_first(client):
    client.post("/expenses", json=_payload(title="March", date="2024-03-01"))
    client.post("/expenses", json=_payload(title="April", date="2024-04-01"))
    titles = [item["title"] for item in client.get("/expenses").json()]
    assert titles == ["April", "March"]


def test_create_rejects_invalid_payload(client):
    assert client.post("/expenses", json=_payload(amount=-1)).status_code == 422
    assert client.post("/expenses", json=_payload(title="   ")).status_code == 422
    assert client.post("/expenses", json=_payload(category="rent")).status_code == 422
    assert client.post("/expenses", json=_payload(date="2024-02-30")).status_code == 422
    assert client.get("/expenses").json() == []


def test_replace_expense(client):
    expense_id = client.post("/expenses", json=_payload()).json()["id"]
    response = client.put(f"/expenses/{expense_id}", json=_payload(title="Tea", category="other"))
    assert response.status_code == 200
    assert response.json()["id"] == expense_id
    assert response.json()["title"] == "Tea"
    assert response.json()["category"] == "other"


def test_replace_missing_expense_returns_404(client):
    response = client.put("/expenses/12345", json=_payload())
    assert response.status_code == 404


def test_delete_is_idempotent(client):
    expense_id = client.post("/expenses", json=_payload()).json()["id"]
    assert client.delete(f"/expenses/{expense_id}").status_code == 204
    assert client.delete(f"/expenses/{expense_id}").status_code == 204
    assert client.get(f"/expenses/{expense_id}").status_code == 404


def test_create_rejects_amount_beyond_column_precision(client):
    assert client.post("/expenses", json=_payload(amount="10000000000")).status_code == 422
    assert client.post("/expenses", json=_payload(amount="9999999999.99")).status_code == 201


def test_database_errors_return_500(client, monkeypatch):
    def broken_list(session):
        raise OperationalError("SELECT expenses", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "list_expenses", broken_list)
    response = client.get("/expenses")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}
