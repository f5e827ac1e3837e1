"""Pytest fixtures for testing"""

import json
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from wealthease.api.dependencies import get_llm_client
from wealthease.api.main import create_app
from wealthease.config import Settings
from wealthease.domain.models import Transaction
from wealthease.infrastructure.store import TransactionStore

VALID_ANALYSIS = {
    "analysis": "Spending is steady and well below income.",
    "recommendations": "Keep automating savings.",
    "predictions": {
        "nextWeekBalance": 2400,
        "nextMonthBalance": 2800,
        "trend": "bullish",
        "summary": "Balance keeps growing.",
    },
    "warnings": "None",
    "score": {
        "financialHealth": 82,
        "spendingDiscipline": 75,
        "savingsRate": 40,
        "volatility": 12,
        "confidence": 70,
    },
}


class ScriptedLLMClient:
    """Deterministic stand-in for the language model"""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, prompt, *, system=None, model=None, max_tokens=None, temperature=None) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


def make_transaction(
    day: date,
    amount: Optional[float],
    type: str = "expense",
    category: str = "food",
    id: str = "",
    description: str = "",
) -> Transaction:
    return Transaction(
        id=id,
        date=day,
        type=type,
        amount=amount,
        category=category,
        description=description,
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(openai_api_key="sk-test", environment="test")


@pytest.fixture
def llm_client() -> ScriptedLLMClient:
    return ScriptedLLMClient(reply=f"Here is your analysis:\n{json.dumps(VALID_ANALYSIS)}\nThanks!")


@pytest.fixture
def store() -> TransactionStore:
    return TransactionStore()


@pytest.fixture
def client(test_settings: Settings, llm_client: ScriptedLLMClient, store: TransactionStore) -> TestClient:
    """Create FastAPI test client backed by the scripted model"""
    app = create_app(test_settings, store=store)
    app.dependency_overrides[get_llm_client] = lambda: llm_client
    return TestClient(app)


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Salary and spending over the last three weeks"""
    base_date = date.today() - timedelta(days=21)
    transactions = [
        make_transaction(base_date, 3000, type="income", category="salary", id="salary"),
    ]

    categories = ["food", "transport", "food", "bills", "food", "shopping"]
    for i, category in enumerate(categories):
        transactions.append(
            make_transaction(
                base_date + timedelta(days=(i + 1) * 3),
                50 + i * 10,
                category=category,
                id=f"expense_{i}",
            )
        )

    return transactions


@pytest.fixture
def sample_payload() -> List[Dict[str, Any]]:
    """Same shape the dashboard posts"""
    base_date = date.today() - timedelta(days=10)
    return [
        {"id": 1, "date": base_date.isoformat(), "type": "income", "amount": 3000, "category": "salary"},
        {
            "id": 2,
            "date": (base_date + timedelta(days=1)).isoformat(),
            "type": "expense",
            "amount": 500,
            "category": "bills",
            "description": "Rent share",
        },
        {
            "id": 3,
            "date": (base_date + timedelta(days=2)).isoformat(),
            "type": "expense",
            "amount": 200,
            "category": "food",
            "paymentMethod": "cash",
        },
    ]
