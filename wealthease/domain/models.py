"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

INCOME = "income"
EXPENSE = "expense"

CASH = "cash"
WALLET = "wallet"


@dataclass(frozen=True)
class Transaction:
    """Single ledger entry; amount is a magnitude, the sign comes from type"""

    id: str
    date: date
    type: str  # "income" or "expense"
    amount: Optional[float]  # None when the submitted amount was not numeric
    category: str = "other"
    payment_method: str = WALLET
    description: str = ""

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    @property
    def magnitude(self) -> float:
        return abs(self.amount) if self.amount is not None else 0.0


@dataclass
class UserProfile:
    """Derived per request from the transaction list, never stored"""

    name: str
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    savings_rate: float


@dataclass
class FinancialMetrics:
    """Metric Aggregator output consumed by the prompt and the local forecast"""

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


@dataclass
class TrendAnalysis:
    """Blended daily trend in currency units per day"""

    weekly_change: float
    monthly_change: float
    trend_strength: float
    method: str
    sma: float = 0.0
    ema: float = 0.0
    linear: float = 0.0


@dataclass
class Boost:
    weekly: float = 0.0
    monthly: float = 0.0


@dataclass
class Predictions:
    next_week_balance: float
    next_month_balance: float
    trend: str  # bullish | bearish | neutral
    summary: str


@dataclass
class Scores:
    financial_health: float
    spending_discipline: float
    savings_rate: float
    volatility: float
    confidence: float


@dataclass
class AnalysisResult:
    """Ephemeral analysis handed to the presentation layer"""

    analysis: str
    recommendations: str
    predictions: Predictions
    warnings: str
    score: Scores

    def to_dict(self) -> Dict[str, Any]:
        """Wire form with the camelCase keys the dashboard expects"""
        return {
            "analysis": self.analysis,
            "recommendations": self.recommendations,
            "predictions": {
                "nextWeekBalance": self.predictions.next_week_balance,
                "nextMonthBalance": self.predictions.next_month_balance,
                "trend": self.predictions.trend,
                "summary": self.predictions.summary,
            },
            "warnings": self.warnings,
            "score": {
                "financialHealth": self.score.financial_health,
                "spendingDiscipline": self.score.spending_discipline,
                "savingsRate": self.score.savings_rate,
                "volatility": self.score.volatility,
                "confidence": self.score.confidence,
            },
        }


@dataclass
class CategoryTotal:
    name: str
    value: float


@dataclass
class PeriodAnalytics:
    """Income/expense summary for the whole history or a single month"""

    income: float
    expense: float
    balance: float
    savings_rate: float
    categories: List[CategoryTotal]
    total_transactions: int
    month: Optional[int] = None


@dataclass
class ForecastChart:
    """30 days of history followed by a 7 day projection"""

    labels: List[str]
    historical: List[Optional[float]]
    forecast: List[Optional[float]]


@dataclass
class ExtractedTransaction:
    """Transaction fields pulled out of a chatbot message by the model"""

    tipe: str
    deskripsi: str
    jumlah: float
    tanggal: str
    payment_method: str = WALLET
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def transaction_type(self) -> str:
        return INCOME if self.tipe.lower() in ("pemasukan", INCOME) else EXPENSE

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.extra,
            "tipe": self.tipe,
            "deskripsi": self.deskripsi,
            "jumlah": self.jumlah,
            "tanggal": self.tanggal,
            "paymentMethod": self.payment_method,
        }
