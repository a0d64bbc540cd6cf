from __future__ import annotations

import uuid

from xpenso.models.expense import Expense


def _create(client, headers, **overrides):
    payload = {
        "title": "Lunch",
        "amount": 12.5,
        "category": "Food",
        "date": "2024-03-01T12:00:00Z",
        "userName": "Alice",
    }
    payload.update(overrides)
    resp = client.post("/api/expenses", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["insertedId"]


def test_create_and_get(client, login):
    headers = login()
    expense_id = _create(client, headers)

    resp = client.get(f"/api/expenses/{expense_id}", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == expense_id
    assert body["title"] == "Lunch"
    assert body["amount"] == 12.5
    assert body["category"] == "Food"
    assert body["userEmail"] == "alice@example.com"
    assert body["userName"] == "Alice"
    assert body["date"].startswith("2024-03-01T12:00:00")


def test_owner_comes_from_token_not_body(client, login):
    headers = login()
    expense_id = _create(client, headers, userEmail="mallory@example.com")
    body = client.get(f"/api/expenses/{expense_id}", headers=headers).json()
    assert body["userEmail"] == "alice@example.com"


def test_create_requires_auth(client):
    client.cookies.clear()
    resp = client.post(
        "/api/expenses",
        json={"title": "x", "amount": 1, "category": "Food", "date": "2024-03-01"},
    )
    assert resp.status_code == 401


def test_create_rejects_negative_amount_and_empty_title(client, login):
    headers = login()
    bad = {"title": "x", "amount": -1, "category": "Food", "date": "2024-03-01T00:00:00Z"}
    assert client.post("/api/expenses", json=bad, headers=headers).status_code == 422
    bad = {"title": "", "amount": 1, "category": "Food", "date": "2024-03-01T00:00:00Z"}
    assert client.post("/api/expenses", json=bad, headers=headers).status_code == 422


def test_my_expense_sorted_by_date_desc_and_filtered(client, login):
    headers = login()
    _create(client, headers, title="old", date="2024-01-01T00:00:00Z")
    _create(client, headers, title="new", date="2024-03-01T00:00:00Z", category="Transit")
    _create(client, headers, title="mid", date="2024-02-01T00:00:00Z")

    titles = [e["title"] for e in client.get("/api/my-expense", headers=headers).json()]
    assert titles == ["new", "mid", "old"]

    all_titles = [e["title"] for e in client.get("/api/my-expense?category=All", headers=headers).json()]
    assert all_titles == titles

    food = client.get("/api/my-expense", params={"category": "Food"}, headers=headers).json()
    assert [e["title"] for e in food] == ["mid", "old"]


def test_my_expense_only_returns_own_records(client, login):
    alice = login("alice@example.com")
    bob = login("bob@example.com")
    _create(client, alice, title="alice's")
    _create(client, bob, title="bob's")

    assert [e["title"] for e in client.get("/api/my-expense", headers=alice).json()] == ["alice's"]
    assert [e["title"] for e in client.get("/api/my-expense", headers=bob).json()] == ["bob's"]


def test_get_other_users_expense_is_not_found(client, login):
    alice = login("alice@example.com")
    bob = login("bob@example.com")
    expense_id = _create(client, alice)

    resp = client.get(f"/api/expenses/{expense_id}", headers=bob)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Expense not found"

    missing = client.get(f"/api/expenses/{uuid.uuid4().hex}", headers=alice)
    assert missing.status_code == 404


def test_invalid_id(client, login):
    headers = login()
    for method in ("get", "delete"):
        resp = getattr(client, method)("/api/expenses/not-an-id", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid expense ID"
    resp = client.patch("/api/expenses/not-an-id", json={"title": "x"}, headers=headers)
    assert resp.status_code == 400


def test_update_partial(client, login):
    headers = login()
    expense_id = _create(client, headers)

    resp = client.patch(
        f"/api/expenses/{expense_id}",
        json={"amount": 0, "date": "2024-02-10T08:00:00+02:00"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Expense updated successfully"}

    body = client.get(f"/api/expenses/{expense_id}", headers=headers).json()
    assert body["title"] == "Lunch"
    assert body["category"] == "Food"
    assert body["amount"] == 0
    assert body["date"].startswith("2024-02-10T06:00:00")


def test_update_other_users_expense_is_forbidden(client, login):
    alice = login("alice@example.com")
    bob = login("bob@example.com")
    expense_id = _create(client, alice)

    resp = client.patch(f"/api/expenses/{expense_id}", json={"title": "hacked"}, headers=bob)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Forbidden: cannot update this expense"
    assert client.get(f"/api/expenses/{expense_id}", headers=alice).json()["title"] == "Lunch"


def test_delete(client, login):
    alice = login("alice@example.com")
    bob = login("bob@example.com")
    expense_id = _create(client, alice)

    resp = client.delete(f"/api/expenses/{expense_id}", headers=bob)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Forbidden"

    resp = client.delete(f"/api/expenses/{expense_id}", headers=alice)
    assert resp.json() == {"message": "Expense deleted successfully"}
    assert client.get(f"/api/expenses/{expense_id}", headers=alice).status_code == 404
    assert client.delete(f"/api/expenses/{expense_id}", headers=alice).status_code == 403


def test_recent_expenses_limit(client, login, settings):
    headers = login()
    for day in range(1, 9):
        _create(client, headers, title=f"d{day}", date=f"2024-03-{day:02d}T00:00:00Z")

    rows = client.get("/api/recent-expenses", headers=headers).json()
    assert len(rows) == settings.recent_expenses_limit == 5
    assert [r["title"] for r in rows] == ["d8", "d7", "d6", "d5", "d4"]


def test_amount_with_more_than_two_decimals_is_rejected(client, login):
    headers = login()
    for amount in (0.001, 12.345, "0.004"):
        resp = client.post(
            "/api/expenses",
            json={"title": "x", "amount": amount, "category": "Food", "date": "2024-03-01T00:00:00Z"},
            headers=headers,
        )
        assert resp.status_code == 422, amount
    assert client.get("/api/my-expense", headers=headers).json() == []


def test_amount_too_large_for_the_column_is_rejected(client, login):
    headers = login()
    resp = client.post(
        "/api/expenses",
        json={"title": "x", "amount": 12345678901, "category": "Food", "date": "2024-03-01T00:00:00Z"},
        headers=headers,
    )
    assert resp.status_code == 422

    expense_id = _create(client, headers, amount="9999999999.99")
    assert client.get(f"/api/expenses/{expense_id}", headers=headers).json()["amount"] == 9999999999.99


def test_update_rejects_amount_with_more_than_two_decimals(client, login):
    headers = login()
    expense_id = _create(client, headers)
    resp = client.patch(f"/api/expenses/{expense_id}", json={"amount": 1.005}, headers=headers)
    assert resp.status_code == 422
    assert client.get(f"/api/expenses/{expense_id}", headers=headers).json()["amount"] == 12.5


def test_list_reports_server_fault_when_store_fails(client, login, storage_fault):
    headers = login()
    storage_fault("scalars", Expense)

    resp = client.get("/api/my-expense", headers=headers)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to fetch expenses"

    resp = client.get("/api/recent-expenses", headers=headers)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to fetch recent expenses"


def test_update_reports_server_fault_when_store_fails(client, login, storage_fault):
    headers = login()
    expense_id = _create(client, headers)
    storage_fault("scalar", Expense)

    resp = client.patch(f"/api/expenses/{expense_id}", json={"title": "x"}, headers=headers)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Server error"


def test_delete_reports_server_fault_when_store_fails(client, login, storage_fault):
    headers = login()
    expense_id = _create(client, headers)
    storage_fault("execute")

    resp = client.delete(f"/api/expenses/{expense_id}", headers=headers)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Server error"
