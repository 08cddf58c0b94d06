import pytest

from conftest import register


@pytest.fixture
def budget(client, user_id):
    resp = client.post("/api/budgets/", json={"category": "Food", "amount": 500000, "period": "monthly"})
    assert resp.status_code == 201
    return resp.get_json()


def test_create_budget(budget):
    assert budget["category"] == "Food"
    assert budget["period"] == "Monthly"
    assert budget["spent"] == 0
    assert budget["is_over_budget"] is False


@pytest.mark.parametrize("payload, field", [
    ({"amount": 1000}, "category"),
    ({"category": "Food"}, "amount"),
    ({"category": "Food", "amount": 0}, "amount"),
    ({"category": "Food", "amount": -5}, "amount"),
    ({"category": "Food", "amount": "banyak"}, "amount"),
    ({"category": "Food", "amount": 1000, "period": "Daily"}, "period"),
])
def test_create_budget_validation(client, user_id, payload, field):
    resp = client.post("/api/budgets/", json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["field"] == field


def test_spending_updates_budget_and_summary(client, budget):
    resp = client.post("/api/spending/", json={
        "budget_id": budget["_id"], "description": "Makan siang", "amount": 35000,
    })
    assert resp.status_code == 201
    assert resp.get_json()["budget"]["spent"] == 35000

    listing = client.get("/api/budgets/").get_json()
    assert listing["budgets"][0]["spent"] == 35000
    assert listing["summary"]["total_spent"] == 35000
    assert listing["summary"]["remaining"] == 465000


def test_spending_rejects_bad_amount(client, budget):
    resp = client.post("/api/spending/", json={"budget_id": budget["_id"], "description": "Gratis", "amount": 0})
    assert resp.status_code == 400
    assert client.get(f"/api/budgets/{budget['_id']}").get_json()["spent"] == 0


def test_spending_for_unknown_budget(client, user_id):
    resp = client.post("/api/spending/", json={
        "budget_id": "64b7f0c2a1b2c3d4e5f60718", "description": "Kopi", "amount": 1000,
    })
    assert resp.status_code == 404


def test_delete_spending_restores_budget(client, budget):
    row = client.post("/api/spending/", json={
        "budget_id": budget["_id"], "description": "Bensin", "amount": 20000,
    }).get_json()

    assert client.delete(f"/api/spending/{row['_id']}").status_code == 204
    assert client.get(f"/api/budgets/{budget['_id']}").get_json()["spent"] == 0
    assert client.delete(f"/api/spending/{row['_id']}").status_code == 404

    reasons = [h["reason"] for h in client.get(f"/api/budgets/{budget['_id']}/history").get_json()]
    assert reasons == ["spending_removed", "spending_added"]


def test_list_spending_grouped(client, budget):
    client.post("/api/spending/", json={"budget_id": budget["_id"], "description": "Bakso", "amount": 15000})
    client.post("/api/spending/", json={"description": "Parkir", "amount": 2000})

    rows = client.get("/api/spending/").get_json()
    assert len(rows) == 2
    assert {r["budgeting"]["category"] for r in rows} == {"Food", "Other"}

    groups = client.get("/api/spending/?group=category").get_json()
    assert {g["category"]: g["total"] for g in groups} == {"Food": 15000, "Other": 2000}

    only_food = client.get(f"/api/spending/?budget_id={budget['_id']}").get_json()
    assert [r["description"] for r in only_food] == ["Bakso"]


def test_update_budget(client, budget):
    resp = client.put(f"/api/budgets/{budget['_id']}", json={"amount": 250000, "notes": "hemat"})
    assert resp.status_code == 200
    assert resp.get_json()["amount"] == 250000
    assert resp.get_json()["notes"] == "hemat"

    assert client.put(f"/api/budgets/{budget['_id']}", json={}).status_code == 400
    assert client.put(f"/api/budgets/{budget['_id']}", json={"spent": -1}).status_code == 400


def test_other_user_cannot_see_budget(app, client, budget):
    other = app.test_client()
    register(other, username="siti", email="siti@example.com")

    assert other.get(f"/api/budgets/{budget['_id']}").status_code == 404
    assert other.delete(f"/api/budgets/{budget['_id']}").status_code == 404
    assert other.get("/api/budgets/").get_json()["budgets"] == []


def test_delete_budget(client, budget):
    assert client.delete(f"/api/budgets/{budget['_id']}").status_code == 204
    assert client.get(f"/api/budgets/{budget['_id']}").status_code == 404


def test_reconcile_endpoint(client, budget, mongo):
    client.post("/api/spending/", json={"budget_id": budget["_id"], "description": "Nasi", "amount": 10000})
    mongo["jagacuandb"]["budgeting"].update_many({}, {"$set": {"spent": 0}})

    resp = client.post(f"/api/budgets/{budget['_id']}/reconcile")
    assert resp.status_code == 200
    assert resp.get_json()["drift"] == 10000
    assert client.get(f"/api/budgets/{budget['_id']}").get_json()["spent"] == 10000


def test_categories(client, user_id):
    names = [c["name"] for c in client.get("/api/categories/").get_json()]
    assert names[:5] == ["Food", "Transport", "Fun", "Study", "Other"]

    resp = client.post("/api/categories/", json={"name": "Kos", "icon": "home"})
    assert resp.status_code == 201
    category_id = resp.get_json()["_id"]

    assert client.post("/api/categories/", json={"name": "food"}).status_code == 400
    assert client.delete("/api/categories/food").status_code == 400
    assert client.delete(f"/api/categories/{category_id}").status_code == 204
    assert "Kos" not in [c["name"] for c in client.get("/api/categories/").get_json()]
