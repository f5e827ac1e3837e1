"""Pydantic schemas for API request/response validation"""

import math
from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from wealthease.domain.models import (
    CASH,
    EXPENSE,
    INCOME,
    WALLET,
    FinancialMetrics,
    ForecastChart,
    PeriodAnalytics,
    Transaction,
    TrendAnalysis,
)
from wealthease.utils.date_utils import parse_date

TYPE_ALIASES = {
    "income": INCOME,
    "pemasukan": INCOME,
    "expense": EXPENSE,
    "pengeluaran": EXPENSE,
}


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionIn(CamelModel):
    """Transaction as submitted by the dashboard"""

    id: Optional[Union[str, int]] = None
    date: date
    type: str
    amount: Optional[float] = None
    category: str = "other"
    payment_method: str = WALLET
    description: Optional[str] = ""

    @field_validator("date", mode="before")
    @classmethod
    def parse_transaction_date(cls, value: Any) -> date:
        if value is None or value == "":
            raise ValueError("date is required")
        return parse_date(value)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> str:
        normalized = TYPE_ALIASES.get(str(value).strip().lower())
        if normalized is None:
            raise ValueError("type must be 'income' or 'expense'")
        return normalized

    @field_validator("amount", mode="before")
    @classmethod
    def lenient_amount(cls, value: Any) -> Optional[float]:
        """Non-numeric amounts become None so aggregation can skip them"""
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                return None
        else:
            return None
        return number if math.isfinite(number) else None

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, value: Any) -> str:
        return str(value) if value not in (None, "") else "other"

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_payment_method(cls, value: Any) -> str:
        method = str(value).lower() if value else WALLET
        return method if method in (CASH, WALLET) else WALLET

    def to_domain(self) -> Transaction:
        return Transaction(
            id=str(self.id) if self.id is not None else "",
            date=self.date,
            type=self.type,
            amount=abs(self.amount) if self.amount is not None else None,
            category=self.category,
            payment_method=self.payment_method,
            description=self.description or "",
        )


class TransactionOut(CamelModel):
    id: str
    date: date
    type: str
    amount: Optional[float]
    category: str
    payment_method: str
    description: str

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionOut":
        return cls(
            id=t.id,
            date=t.date,
            type=t.type,
            amount=t.amount,
            category=t.category,
            payment_method=t.payment_method,
            description=t.description,
        )


class UserProfileIn(CamelModel):
    """Only the name is taken from the client; figures are recomputed"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: Optional[str] = None


class TransactionsRequest(CamelModel):
    """Request body for the local analysis and chart endpoints"""

    transactions: List[TransactionIn] = Field(default_factory=list)
    user_profile: Optional[UserProfileIn] = None

    @property
    def user_name(self) -> str:
        return (self.user_profile.name if self.user_profile else None) or "User"


class AnalyzeRequest(TransactionsRequest):
    """Request body for POST /api/ai/analyze-transactions"""

    transactions: List[TransactionIn]


class AnalyzeResponse(CamelModel):
    """Response for POST /api/ai/analyze-transactions"""

    success: bool = True
    analysis: Dict[str, Any]
    local_analysis: Dict[str, Any]
    raw_response: str
    timestamp: str


class MetricsSchema(CamelModel):
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    spending_volatility: float
    category_breakdown: Dict[str, float]
    most_frequent_category: str
    transaction_count: int
    average_transaction: float
    largest_expense: float
    spending_pattern: str
    income_vs_expense_ratio: float

    @classmethod
    def from_domain(cls, m: FinancialMetrics) -> "MetricsSchema":
        return cls(
            total_balance=m.total_balance,
            monthly_income=m.monthly_income,
            monthly_expenses=m.monthly_expenses,
            spending_volatility=m.spending_volatility,
            category_breakdown=m.category_breakdown,
            most_frequent_category=m.most_frequent_category,
            transaction_count=m.transaction_count,
            average_transaction=m.average_transaction,
            largest_expense=m.largest_expense,
            spending_pattern=m.spending_pattern,
            income_vs_expense_ratio=m.income_vs_expense_ratio,
        )


class TrendSchema(CamelModel):
    weekly_change: float
    monthly_change: float
    trend_strength: float
    method: str
    sma: float
    ema: float
    linear: float

    @classmethod
    def from_domain(cls, t: TrendAnalysis) -> "TrendSchema":
        return cls(
            weekly_change=t.weekly_change,
            monthly_change=t.monthly_change,
            trend_strength=t.trend_strength,
            method=t.method,
            sma=t.sma,
            ema=t.ema,
            linear=t.linear,
        )


class LocalAnalysisResponse(CamelModel):
    """Forecast engine output with the metrics and trend behind it"""

    success: bool = True
    analysis: Dict[str, Any]
    metrics: MetricsSchema
    trend: TrendSchema
    timestamp: str


class ForecastChartResponse(CamelModel):
    labels: List[str]
    historical: List[Optional[float]]
    forecast: List[Optional[float]]

    @classmethod
    def from_domain(cls, chart: ForecastChart) -> "ForecastChartResponse":
        return cls(labels=chart.labels, historical=chart.historical, forecast=chart.forecast)


class ChatbotRequest(CamelModel):
    """Request body for POST /api/ai/chatbot"""

    message: Optional[str] = None
    user_id: Optional[str] = None


class ChatbotResponse(CamelModel):
    success: bool
    reply: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    transaction: Optional[TransactionOut] = None
    error: Optional[str] = None


class HealthResponse(CamelModel):
    status: str
    timestamp: str
    openai_configured: bool


class TransactionListResponse(CamelModel):
    user_id: str
    transactions: List[TransactionOut]


class CategoryTotalSchema(CamelModel):
    name: str
    value: float


class AnalyticsResponse(CamelModel):
    """Response for GET /api/users/{user_id}/analytics"""

    income: float
    expense: float
    balance: float
    savings_rate: float
    categories: List[CategoryTotalSchema]
    total_transactions: int
    month: Union[int, str]
    last_updated: str

    @classmethod
    def from_domain(cls, a: PeriodAnalytics, last_updated: str) -> "AnalyticsResponse":
        return cls(
            income=a.income,
            expense=a.expense,
            balance=a.balance,
            savings_rate=a.savings_rate,
            categories=[CategoryTotalSchema(name=c.name, value=c.value) for c in a.categories],
            total_transactions=a.total_transactions,
            month=a.month if a.month is not None else "all",
            last_updated=last_updated,
        )


class DeleteResponse(CamelModel):
    success: bool = True
