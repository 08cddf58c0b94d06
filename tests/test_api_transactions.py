import pytest


def add(client, **fields):
    payload = {"type": "spending", "name": "Belanja", "amount": 10000, "date": "2025-03-15T10:00:00"}
    payload.update(fields)
    resp = client.post("/api/transactions/", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_create_transaction(client, user_id):
    tx = add(client, type="income", name="Gaji", amount=4500000, notes="Maret")
    assert tx["type"] == "income"
    assert tx["method"] == "manual"
    assert tx["date"] == "2025-03-15T10:00:00"
    assert tx["user_id"] == user_id


def test_expense_is_an_alias_of_spending(client, user_id):
    assert add(client, type="Expense")["type"] == "spending"


@pytest.mark.parametrize("payload, field", [
    ({"type": "spending", "name": "Kopi", "amount": 0}, "amount"),
    ({"type": "spending", "name": "Kopi", "amount": -100}, "amount"),
    ({"type": "transfer", "name": "Kopi", "amount": 100}, "type"),
    ({"type": "spending", "amount": 100}, "name"),
    ({"type": "spending", "name": "Kopi", "amount": 100, "method": "scan"}, "method"),
    ({"type": "spending", "name": "Kopi", "amount": 100, "date": "kemarin"}, "date"),
])
def test_create_transaction_validation(client, user_id, payload, field):
    resp = client.post("/api/transactions/", json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["field"] == field


def test_filter_by_year_and_month(client, user_id):
    add(client, name="Maret", date="2025-03-02T09:00:00")
    add(client, name="April", date="2025-04-20T09:00:00")
    add(client, name="Tahun lalu", date="2024-12-31T23:00:00")

    names = lambda resp: [tx["name"] for tx in resp.get_json()]
    assert names(client.get("/api/transactions/")) == ["April", "Maret", "Tahun lalu"]
    assert names(client.get("/api/transactions/?year=2025")) == ["April", "Maret"]
    assert names(client.get("/api/transactions/?year=2025&month=3")) == ["Maret"]
    assert names(client.get("/api/transactions/?year=all&month=all")) == ["April", "Maret", "Tahun lalu"]
    assert client.get("/api/transactions/?year=2025&month=13").status_code == 400
    assert client.get("/api/transactions/years").get_json() == [2025, 2024]


def test_update_and_delete(client, user_id):
    tx = add(client)

    resp = client.put(f"/api/transactions/{tx['_id']}", json={"amount": 25000, "notes": "koreksi"})
    assert resp.status_code == 200
    assert resp.get_json()["amount"] == 25000
    assert resp.get_json()["name"] == "Belanja"
    assert client.put(f"/api/transactions/{tx['_id']}", json={"amount": 0}).status_code == 400

    assert client.delete(f"/api/transactions/{tx['_id']}").status_code == 204
    assert client.get(f"/api/transactions/{tx['_id']}").status_code == 404
    assert client.get("/api/transactions/").get_json() == []


def test_goals_api(client, user_id):
    resp = client.post("/api/goals/", json={"goal_name": "Laptop", "target_amount": 8000000, "deadline": "2026-06-30"})
    assert resp.status_code == 201
    goal = resp.get_json()
    assert goal["deadline"] == "2026-06-30"

    assert client.post(f"/api/goals/{goal['_id']}/progress", json={"amount": 0}).status_code == 400
    resp = client.post(f"/api/goals/{goal['_id']}/progress", json={"amount": 2000000, "notes": "bonus"})
    assert resp.get_json()["current_amount"] == 2000000
    assert resp.get_json()["progress_pct"] == 25

    history = client.get(f"/api/goals/{goal['_id']}/history").get_json()
    assert history[0]["notes"] == "bonus"

    summary = client.get("/api/goals/").get_json()["summary"]
    assert summary["current_savings"] == 2000000
    assert client.post("/api/goals/", json={"goal_name": "Mobil", "target_amount": 0}).status_code == 400


@pytest.mark.parametrize("bad_date", [10 ** 15, float("nan"), "99999-01-01"])
def test_out_of_range_date_is_rejected_before_saving(client, user_id, bad_date):
    resp = client.post("/api/transactions/", json={
        "type": "spending", "name": "Kopi", "amount": 100, "date": bad_date,
    })
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "date"
    assert client.get("/api/transactions/").get_json() == []
    assert client.get("/api/dashboard/").status_code == 200


def test_year_filter_out_of_range(client, user_id):
    assert client.get("/api/transactions/?year=10000").status_code == 400
    assert client.get("/api/reports/summary?year=10000").status_code == 400
    assert client.get("/api/reports/summary?year=2025&month=13").status_code == 400


def test_update_with_null_date_keeps_timestamp(client, user_id):
    tx = add(client, date="2025-03-15T10:00:00")

    resp = client.put(f"/api/transactions/{tx['_id']}", json={"date": None, "name": "Belanja bulanan"})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Belanja bulanan"
    assert resp.get_json()["timestamp"] == tx["timestamp"]
