from datetime import date, datetime

from jagacuan.api.reports import chart_window, generate_expense_chart


def ts(*args):
    return int(datetime(*args).timestamp())


def test_daily_chart_covers_whole_month():
    today = date(2025, 2, 10)
    events = [(ts(2025, 2, 1, 8), 10000), (ts(2025, 2, 1, 20), 5000), (ts(2025, 2, 28, 12), 7000),
              (ts(2025, 1, 31, 12), 99999)]

    chart = generate_expense_chart(events, "daily", today)
    assert len(chart["data"]) == 28
    assert chart["data"][0] == {"name": "1", "amount": 15000, "label": "Rp 15.0K"}
    assert chart["data"][27]["amount"] == 7000
    assert chart["total"] == 22000


def test_weekly_chart_is_last_seven_days():
    today = date(2025, 3, 9)  # Sunday
    events = [(ts(2025, 3, 3, 9), 20000), (ts(2025, 3, 9, 23), 1000), (ts(2025, 3, 2, 9), 50000)]

    chart = generate_expense_chart(events, "weekly", today)
    assert [p["name"] for p in chart["data"]] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert chart["data"][0]["amount"] == 20000
    assert chart["data"][-1]["amount"] == 1000
    assert chart["total"] == 21000


def test_monthly_chart_spans_year_boundary():
    today = date(2025, 2, 14)
    events = [(ts(2024, 9, 5), 100000), (ts(2024, 12, 25), 2500000), (ts(2024, 8, 31), 1)]

    chart = generate_expense_chart(events, "monthly", today)
    assert [p["name"] for p in chart["data"]] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert chart["data"][3]["label"] == "Rp 2.5M"
    assert chart["total"] == 2600000


def test_chart_window_bounds():
    assert chart_window("weekly", date(2025, 3, 9)) == (ts(2025, 3, 3), ts(2025, 3, 10))
    assert chart_window("daily", date(2025, 12, 5)) == (ts(2025, 12, 1), ts(2026, 1, 1))
    assert chart_window("monthly", date(2025, 2, 14)) == (ts(2024, 9, 1), ts(2025, 3, 1))


def test_expense_endpoint_merges_transactions_and_tracked_spending(client, user_id):
    now = datetime.now().replace(microsecond=0).isoformat()
    client.post("/api/transactions/", json={"type": "spending", "name": "Pulsa", "amount": 50000, "date": now})
    client.post("/api/transactions/", json={"type": "income", "name": "Gaji", "amount": 3000000, "date": now})
    client.post("/api/spending/", json={"description": "Makan", "amount": 25000, "date": now})

    chart = client.get("/api/reports/expenses?period=weekly").get_json()
    assert chart["period"] == "weekly"
    assert chart["data"][-1]["amount"] == 75000
    assert client.get("/api/reports/expenses?period=hourly").status_code == 400


def test_summary_and_dashboard(client, user_id):
    today = date.today()
    now = datetime.now().replace(microsecond=0).isoformat()
    client.post("/api/transactions/", json={"type": "income", "name": "Gaji", "amount": 3000000, "date": now})
    client.post("/api/transactions/", json={"type": "spending", "name": "Kos", "amount": 1000000, "date": now})
    budget = client.post("/api/budgets/", json={"category": "Food", "amount": 800000}).get_json()
    client.post("/api/spending/", json={"budget_id": budget["_id"], "description": "Warteg", "amount": 200000, "date": now})
    goal = client.post("/api/goals/", json={"goal_name": "Dana darurat", "target_amount": 1000000}).get_json()
    client.post(f"/api/goals/{goal['_id']}/progress", json={"amount": 400000})

    kpis = client.get(f"/api/reports/summary?year={today.year}&month={today.month}").get_json()["kpis"]
    assert kpis == {"income": 3000000, "spending": 1000000, "tracked_spending": 200000, "net_cashflow": 2000000}

    dashboard = client.get("/api/dashboard/").get_json()
    assert dashboard["user_name"] == "budi"
    assert dashboard["total_budget"] == 800000
    assert dashboard["total_spent"] == 200000
    assert dashboard["budget_remaining"] == 600000
    assert dashboard["budget_progress_pct"] == 25
    assert dashboard["monthly_income"] == 3000000
    assert dashboard["monthly_expenses"] == 1200000
    assert dashboard["current_savings"] == 400000
    assert dashboard["savings_goal"] == 1000000
    assert dashboard["savings_progress_pct"] == 40
    assert len(dashboard["recent_transactions"]) == 2
