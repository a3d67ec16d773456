from datetime import date

import pytest

from mentor.models.finance import Budget, FinancialGoal, FinancialProfile
from mentor.services import ai
from mentor.services.finance import calculate_health_score, health_status, summarize_budget


class _Expense:
    def __init__(self, amount, category):
        self.amount = amount
        self.category = category


def test_summarize_budget() -> None:
    summary = summarize_budget(50000, [_Expense(10000, "Rent"), _Expense(2500, "Food"), _Expense(500, "Food")])
    assert summary == {
        "monthly_income": 50000,
        "total_expenses": 13000.0,
        "category_totals": {"Rent": 10000.0, "Food": 3000.0},
        "savings": 37000.0,
        "savings_rate": 74.0,
    }
    assert summarize_budget(0, [_Expense(100, "Misc")])["savings_rate"] == 0.0


@pytest.mark.parametrize(
    "savings, expected",
    [(3000, 40), (2000, 30), (1000, 20), (500, 10)],
)
def test_health_score_savings_tiers(savings, expected) -> None:
    budget = Budget(total_income=10000, savings=savings)
    assert calculate_health_score(None, budget, []) == expected


def test_health_score_full_marks_and_cap() -> None:
    profile = FinancialProfile(monthly_income=10000)
    budget = Budget(total_income=10000, savings=5000)
    goals = [FinancialGoal(target_amount=100, current_amount=60), FinancialGoal(target_amount=100, current_amount=50)]
    assert calculate_health_score(profile, budget, goals) == 100


def test_health_score_goals_without_progress() -> None:
    goals = [FinancialGoal(target_amount=1000, current_amount=0)]
    assert calculate_health_score(None, None, goals) == 20


def test_health_status_bands() -> None:
    assert health_status(85) == "Excellent!"
    assert health_status(60) == "Good"
    assert health_status(45) == "Needs Improvement"
    assert health_status(10) == "Critical"


def test_expenses_and_budget_summary(client, auth_headers) -> None:
    client.put("/api/finance/profile", json={"monthly_income": 40000, "age": 30}, headers=auth_headers)

    bad = client.post("/api/finance/expenses", json={"amount": 0, "category": "Food"}, headers=auth_headers)
    assert bad.status_code == 422

    first = client.post("/api/finance/expenses", json={"amount": 1500, "category": "Food"}, headers=auth_headers)
    assert first.status_code == 200
    assert first.json()["date"] == date.today().isoformat()

    client.post(
        "/api/finance/expenses",
        json={"amount": 8500, "category": "Rent", "date": "2024-01-01"},
        headers=auth_headers,
    )

    expenses = client.get("/api/finance/expenses", headers=auth_headers).json()
    assert [e["category"] for e in expenses] == ["Food", "Rent"]

    summary = client.get("/api/finance/budget-summary", headers=auth_headers).json()
    assert summary["total_expenses"] == 10000
    assert summary["savings"] == 30000
    assert summary["savings_rate"] == 75.0

    deleted = client.delete(f"/api/finance/expenses/{first.json()['id']}", headers=auth_headers)
    assert deleted.status_code == 200
    assert client.delete(f"/api/finance/expenses/{first.json()['id']}", headers=auth_headers).status_code == 404


def test_budget_upsert_derives_savings(client, auth_headers) -> None:
    today = date.today()
    resp = client.put(
        f"/api/finance/budgets/{today.year}/{today.month}",
        json={"total_income": 50000, "total_expenses": 30000},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["savings"] == 20000

    updated = client.put(
        f"/api/finance/budgets/{today.year}/{today.month}",
        json={"total_expenses": 45000},
        headers=auth_headers,
    )
    assert updated.json()["id"] == resp.json()["id"]
    assert updated.json()["savings"] == 5000

    current = client.get("/api/finance/budgets/current", headers=auth_headers)
    assert current.status_code == 200
    assert current.json()["total_expenses"] == 45000

    assert client.put("/api/finance/budgets/2025/13", json={}, headers=auth_headers).status_code == 400


def test_goal_progress_completes_goal(client, auth_headers) -> None:
    goal = client.post(
        "/api/finance/goals",
        json={"goal_type": "Emergency Fund", "target_amount": 1000},
        headers=auth_headers,
    ).json()
    assert goal["status"] == "active"
    assert goal["current_amount"] == 0

    partial = client.post(f"/api/finance/goals/{goal['id']}/progress", json={"amount": 400}, headers=auth_headers)
    assert partial.json()["status"] == "active"

    done = client.post(f"/api/finance/goals/{goal['id']}/progress", json={"amount": 600}, headers=auth_headers)
    assert done.json()["current_amount"] == 1000
    assert done.json()["status"] == "completed"


def test_goal_progress_must_be_positive(client, auth_headers) -> None:
    goal = client.post(
        "/api/finance/goals",
        json={"goal_type": "Vacation", "target_amount": 500},
        headers=auth_headers,
    ).json()
    client.post(f"/api/finance/goals/{goal['id']}/progress", json={"amount": 500}, headers=auth_headers)

    for amount in (0, -200):
        resp = client.post(
            f"/api/finance/goals/{goal['id']}/progress", json={"amount": amount}, headers=auth_headers
        )
        assert resp.status_code == 422

    goals = client.get("/api/finance/goals", headers=auth_headers).json()
    assert goals[0]["current_amount"] == 500
    assert goals[0]["status"] == "completed"


def test_health_endpoint(client, auth_headers) -> None:
    today = date.today()
    client.put("/api/finance/profile", json={"monthly_income": 50000}, headers=auth_headers)
    client.put(
        f"/api/finance/budgets/{today.year}/{today.month}",
        json={"total_income": 50000, "total_expenses": 35000},
        headers=auth_headers,
    )
    resp = client.get("/api/finance/health", headers=auth_headers)
    assert resp.json() == {"score": 70, "status": "Good"}


def test_investments_crud(client, auth_headers) -> None:
    created = client.post(
        "/api/finance/investments",
        json={"investment_type": "Index Fund", "amount": 10000, "expected_return": 11.5, "risk_level": "moderate"},
        headers=auth_headers,
    )
    assert created.status_code == 200
    listed = client.get("/api/finance/investments", headers=auth_headers).json()
    assert len(listed) == 1
    assert client.delete(f"/api/finance/investments/{created.json()['id']}", headers=auth_headers).status_code == 200
    assert client.get("/api/finance/investments", headers=auth_headers).json() == []


def test_advisor(client, auth_headers, monkeypatch) -> None:
    async def fake_generate_text(prompt, **kwargs):
        if kwargs.get("json_output"):
            return '```json\n{"expectedReturn": "10-12%", "projectedValue": 150000, "portfolio": [], "advice": "Diversify"}\n```'
        return "  Keep an emergency fund.  "

    monkeypatch.setattr(ai, "generate_text", fake_generate_text)

    investment = client.post(
        "/api/finance/advisor",
        json={"type": "investment", "amount": 100000, "period": 5},
        headers=auth_headers,
    )
    assert investment.status_code == 200
    assert investment.json()["expectedReturn"] == "10-12%"

    budget = client.post(
        "/api/finance/advisor",
        json={"type": "budget", "income": 50000, "expenses": 30000},
        headers=auth_headers,
    )
    assert budget.json() == {"advice": "Keep an emergency fund."}

    unknown = client.post("/api/finance/advisor", json={"type": "crypto"}, headers=auth_headers)
    assert unknown.status_code == 400

    missing = client.post("/api/finance/advisor", json={"type": "investment"}, headers=auth_headers)
    assert missing.status_code == 400


def test_advisor_non_json_investment_reply(client, auth_headers, monkeypatch) -> None:
    async def fake_generate_text(prompt, **kwargs):
        return "Put it all in a savings account."

    monkeypatch.setattr(ai, "generate_text", fake_generate_text)
    resp = client.post(
        "/api/finance/advisor",
        json={"type": "investment", "amount": 1000, "period": 1},
        headers=auth_headers,
    )
    assert resp.json() == {"advice": "Put it all in a savings account."}
