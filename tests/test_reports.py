import pytest

from finance_api.reports import budget_plan, budget_report, classify_category, goal_report, transaction_report

TRANSACTIONS = [
    {"type": "income", "category": "salary", "amount": 3000, "date": "2024-01-31"},
    {"type": "expense", "category": "rent", "amount": 1200, "date": "2024-01-02"},
    {"type": "expense", "category": "food", "amount": 0.1, "date": "2024-01-10"},
    {"type": "expense", "category": "food", "amount": 0.2, "date": "2024-02-10"},
    {"type": "income", "category": "salary", "amount": 3000, "date": "2024-02-28"},
]


def test_transaction_report_totals():
    report = transaction_report(TRANSACTIONS)
    assert report["totalIncome"] == 6000.0
    assert report["totalExpense"] == 1200.3
    assert report["netBalance"] == 4799.7
    assert report["transactionCount"] == 5
    assert report["categoryBreakdown"] == {"food": 0.3, "rent": 1200.0, "salary": 6000.0}
    assert list(report["monthlyTrend"]) == ["2024-01", "2024-02"]
    assert report["monthlyData"]["2024-01"] == {"income": 3000.0, "expense": 1200.1, "net": 1799.9}
    assert report["monthlyData"]["2024-02"] == {"income": 3000.0, "expense": 0.2, "net": 2999.8}


def test_transaction_report_is_order_independent():
    assert transaction_report(TRANSACTIONS) == transaction_report(list(reversed(TRANSACTIONS)))


def test_empty_reports():
    assert transaction_report([])["transactionCount"] == 0
    assert budget_report([]) == {"totalBudget": 0.0, "totalSpent": 0.0, "categoryBreakdown": {}, "monthlyTrend": {}}
    assert goal_report([])["overallProgress"] == 0.0


def test_budget_report():
    budgets = [
        {"category": "food", "amount": 200, "spent": 50, "createdAt": "2024-01-03 10:00:00"},
        {"category": "food", "amount": 100, "spent": 25, "createdAt": "2024-02-01 00:00:00"},
        {"category": "rent", "amount": 1000, "spent": 1000, "createdAt": "2024-01-05 00:00:00"},
    ]
    report = budget_report(budgets)
    assert report["totalBudget"] == 1300.0
    assert report["totalSpent"] == 1075.0
    assert report["categoryBreakdown"]["food"] == {"budget": 300.0, "spent": 75.0}
    assert report["monthlyTrend"] == {"2024-01": 1050.0, "2024-02": 25.0}
    assert report == budget_report(list(reversed(budgets)))


def test_goal_report():
    goals = [
        {"goalName": "Car", "targetAmount": 1000, "currentAmount": 250, "deadline": "2025-01-01", "status": "in progress"},
        {"goalName": "Trip", "targetAmount": 500, "currentAmount": 500, "deadline": "2024-06-01", "status": "achieved"},
        {"goalName": "Free", "targetAmount": 0, "currentAmount": 0, "deadline": "2024-07-01", "status": "in progress"},
    ]
    report = goal_report(goals)
    assert report["totalTarget"] == 1500.0
    assert report["totalCurrent"] == 750.0
    assert report["overallProgress"] == 50.0
    assert report["achievedCount"] == 1
    assert report["inProgressCount"] == 2
    assert report["goalCount"] == 3
    progress = {g["goalName"]: g["progress"] for g in report["goals"]}
    assert progress == {"Car": 25.0, "Trip": 100.0, "Free": 0.0}


def test_classify_category():
    assert classify_category("Groceries") == "essential"
    assert classify_category(" rent ") == "essential"
    assert classify_category("movies") == "discretionary"


def test_budget_plan_single_category():
    plan = budget_plan(1000, [{"type": "expense", "category": "groceries", "amount": 100, "date": "2024-01-01"}])
    assert plan["essentials"] == 500.0
    assert plan["discretionary"] == 300.0
    assert plan["savings"] == 200.0
    assert plan["categoryBreakdown"] == [{
        "category": "groceries",
        "totalSpent": 100.0,
        "percentage": 100.0,
        "type": "essential",
        "recommendedBudget": 500.0,
    }]


def test_budget_plan_sorting_and_rounding():
    txs = [
        {"type": "expense", "category": "movies", "amount": 100, "date": "2024-01-01"},
        {"type": "expense", "category": "rent", "amount": 200, "date": "2024-01-01"},
        {"type": "income", "category": "salary", "amount": 5000, "date": "2024-01-01"},
    ]
    plan = budget_plan(900, txs)
    rows = plan["categoryBreakdown"]
    assert [r["category"] for r in rows] == ["rent", "movies"]
    assert rows[0]["percentage"] == 66.7
    assert rows[0]["recommendedBudget"] == 300.0
    assert rows[1]["percentage"] == 33.3
    assert rows[1]["recommendedBudget"] == 90.0


def test_budget_plan_without_expenses():
    plan = budget_plan(1000, [{"type": "income", "category": "salary", "amount": 10, "date": "2024-01-01"}])
    assert plan["categoryBreakdown"] == []


def test_budget_plan_rejects_negative_income():
    with pytest.raises(ValueError):
        budget_plan(-1, [])


# ---------------- HTTP ----------------
def _seed(client, auth):
    for tx in TRANSACTIONS:
        client.post("/api/transactions", json=tx, headers=auth)


def test_transactions_report_endpoint(client, auth):
    _seed(client, auth)
    resp = client.get("/api/reports/transactions", headers=auth)
    assert resp.status_code == 200
    assert resp.get_json()["totalIncome"] == 6000.0


def test_budget_report_is_self_only(client, auth, user_id, other_auth):
    client.post("/api/budgets", json={"category": "food", "title": "Food", "amount": 200}, headers=auth)
    resp = client.get(f"/api/reports/budgets/{user_id}", headers=auth)
    assert resp.status_code == 200
    assert resp.get_json()["totalBudget"] == 200.0
    assert client.get(f"/api/reports/budgets/{user_id}", headers=other_auth).status_code == 403


def test_goal_report_endpoint(client, auth):
    client.post("/api/goals", json={
        "goalName": "Car", "targetAmount": 100, "currentAmount": 100, "deadline": "2025-01-01"
    }, headers=auth)
    report = client.get("/api/reports/goals", headers=auth).get_json()
    assert report["achievedCount"] == 1


def test_budget_plan_defaults_to_recorded_income(client, auth):
    _seed(client, auth)
    plan = client.get("/api/reports/budget-plan", headers=auth).get_json()
    assert plan["monthlyIncome"] == 6000.0
    plan = client.get("/api/reports/budget-plan?income=1000", headers=auth).get_json()
    assert plan["monthlyIncome"] == 1000.0


def test_budget_plan_bad_income(client, auth):
    assert client.get("/api/reports/budget-plan?income=-5", headers=auth).status_code == 400
    assert client.get("/api/reports/budget-plan?income=abc", headers=auth).status_code == 400
