"""
E2E tests for user personas, driven entirely through the HTTP API.

Each persona's history is posted to the per-user transaction store, then
the insights and analytics endpoints are read back.

User personas:
- saver: Salary well above spending, high scores expected
- overspender: Expenses exceed income, warnings but a still-growing forecast
- newcomer: No history at all, floor-plus-boost forecast
- gig_worker: Irregular income, full trend blend
- chatter: Transactions recorded through the chatbot
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient


def post_history(client: TestClient, user_id: str, transactions: list[dict]) -> None:
    for body in transactions:
        response = client.post(f"/api/users/{user_id}/transactions", json=body)
        assert response.status_code == 201


@pytest.mark.integration
def test_saver_scores_high(client: TestClient):
    """
    saver: Salary this month, modest spending across several categories
    Expected: Savings rate above 20%, no warnings, high health score
    """
    month_start = date.today().replace(day=1)
    post_history(
        client,
        "saver",
        [
            {"date": month_start.isoformat(), "type": "income", "amount": 4000, "category": "salary"},
            {"date": month_start.isoformat(), "type": "expense", "amount": 300, "category": "food"},
            {"date": month_start.isoformat(), "type": "expense", "amount": 320, "category": "transport"},
            {"date": month_start.isoformat(), "type": "expense", "amount": 310, "category": "bills"},
        ],
    )

    data = client.get("/api/users/saver/insights", params={"name": "Sam"}).json()

    assert data["analysis"]["score"]["savingsRate"] > 20
    assert data["analysis"]["score"]["financialHealth"] == 100
    assert data["analysis"]["analysis"].startswith("🎉 Excellent!")
    assert data["analysis"]["warnings"].startswith("🎉 No major concerns")


@pytest.mark.integration
def test_overspender_gets_warnings(client: TestClient):
    """
    overspender: Spending more than earned this month
    Expected: Expense warning, forecast still at or above the floor
    """
    month_start = date.today().replace(day=1)
    post_history(
        client,
        "overspender",
        [
            {"date": month_start.isoformat(), "type": "income", "amount": 1000, "category": "salary"},
            {"date": month_start.isoformat(), "type": "expense", "amount": 900, "category": "shopping"},
            {"date": month_start.isoformat(), "type": "expense", "amount": 600, "category": "shopping"},
        ],
    )

    data = client.get("/api/users/overspender/insights").json()
    balance = data["metrics"]["totalBalance"]

    assert balance == -500
    assert "expenses exceed income" in data["analysis"]["warnings"]
    assert data["analysis"]["predictions"]["nextWeekBalance"] >= balance + 100
    assert data["analysis"]["predictions"]["nextMonthBalance"] >= balance + 400


@pytest.mark.integration
def test_newcomer_without_history(client: TestClient):
    """
    newcomer: Nothing recorded yet
    Expected: Zero analytics and the floor-plus-boost forecast
    """
    analytics = client.get("/api/users/newcomer/analytics").json()
    assert analytics["income"] == 0
    assert analytics["categories"] == []
    assert analytics["totalTransactions"] == 0

    insights = client.get("/api/users/newcomer/insights").json()
    assert insights["trend"]["method"] == "insufficient_data"
    assert insights["analysis"]["predictions"]["nextWeekBalance"] == 225
    assert insights["analysis"]["predictions"]["nextMonthBalance"] == 900


@pytest.mark.integration
def test_gig_worker_irregular_income(client: TestClient):
    """
    gig_worker: Payouts of varying size every few days
    Expected: Combined trend over the full history, scores within bounds
    """
    start = date.today() - timedelta(days=45)
    history = []
    for i in range(15):
        day = (start + timedelta(days=i * 3)).isoformat()
        history.append({"date": day, "type": "income", "amount": 80 + (i % 4) * 60, "category": "gig"})
        history.append({"date": day, "type": "expense", "amount": 40 + (i % 3) * 25, "category": "fuel"})
    post_history(client, "gig_worker", history)

    data = client.get("/api/users/gig_worker/insights").json()

    assert data["trend"]["method"] == "combined_weighted"
    assert 0 <= data["analysis"]["score"]["financialHealth"] <= 100
    assert 0 <= data["analysis"]["score"]["spendingDiscipline"] <= 100
    assert data["metrics"]["spendingPattern"] in ("Increasing spending", "Decreasing spending", "Stable spending")


@pytest.mark.integration
def test_chatter_transactions_show_in_analytics(client: TestClient, llm_client):
    """
    chatter: Records an expense by chatting
    Expected: The stored transaction counts toward analytics
    """
    llm_client.reply = (
        '{"tipe": "pengeluaran", "deskripsi": "Lunch", "jumlah": 12.5, '
        '"tanggal": "2024-07-09", "paymentMethod": "wallet", "kategori": "food"}'
    )

    chat = client.post("/api/ai/chatbot", json={"message": "Spent $12.50 on lunch", "userId": "chatter"})
    assert chat.json()["success"] is True

    july = client.get("/api/users/chatter/analytics", params={"month": 7}).json()
    assert july["expense"] == 12.5
    assert july["categories"] == [{"name": "food", "value": 12.5}]

    listed = client.get("/api/users/chatter/transactions").json()["transactions"]
    assert listed[0]["description"] == "Lunch"
