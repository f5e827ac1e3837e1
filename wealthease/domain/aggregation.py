"""Metric aggregation - balances, monthly figures, categories and volatility"""

import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from wealthease.domain.models import (
    EXPENSE,
    INCOME,
    CategoryTotal,
    FinancialMetrics,
    PeriodAnalytics,
    Transaction,
    UserProfile,
)
from wealthease.utils.date_utils import month_bounds

# Current month first, then the two preceding months
MONTHLY_WEIGHTS: Tuple[float, ...] = (0.5, 0.3, 0.2)

NO_CATEGORY_DATA = "No data"


def _valid(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Drop records whose amount could not be read as a number"""
    return [t for t in transactions if t.amount is not None]


def _expenses(transactions: Iterable[Transaction]) -> List[Transaction]:
    return [t for t in _valid(transactions) if t.is_expense]


def calculate_total_balance(transactions: Iterable[Transaction]) -> float:
    """Income minus expenses over the whole history, using magnitudes only"""
    valid = _valid(transactions)
    total_income = sum(t.magnitude for t in valid if t.is_income)
    total_expenses = sum(t.magnitude for t in valid if t.is_expense)
    return total_income - total_expenses


def _weighted_monthly_total(transactions: Iterable[Transaction], txn_type: str, today: date) -> float:
    valid = [t for t in _valid(transactions) if t.type == txn_type]
    result = 0.0
    for months_back, weight in enumerate(MONTHLY_WEIGHTS):
        start, end = month_bounds(today, months_back)
        month_total = sum(t.magnitude for t in valid if start <= t.date < end)
        result += month_total * weight
    return result


def calculate_monthly_income(transactions: Iterable[Transaction], today: Optional[date] = None) -> float:
    """
    Weighted average income over the current and two previous calendar months.

    Weights 0.5 / 0.3 / 0.2 smooth out a single unusual month instead of
    reporting the raw current-month figure.
    """
    return _weighted_monthly_total(transactions, INCOME, today or date.today())


def calculate_monthly_expenses(transactions: Iterable[Transaction], today: Optional[date] = None) -> float:
    """Weighted average expenses, same windows and weights as income"""
    return _weighted_monthly_total(transactions, EXPENSE, today or date.today())


def calculate_savings_rate(monthly_income: float, monthly_expenses: float) -> float:
    if monthly_income <= 0:
        return 0.0
    return (monthly_income - monthly_expenses) / monthly_income * 100


def calculate_spending_volatility(transactions: Iterable[Transaction]) -> float:
    """
    Coefficient of variation of expense magnitudes, as a percentage.

    Uses the sample standard deviation (n - 1). Returns 0 for fewer than two
    expenses or a zero mean.
    """
    amounts = [t.magnitude for t in _expenses(transactions)]
    if len(amounts) < 2:
        return 0.0

    mean = sum(amounts) / len(amounts)
    if mean == 0:
        return 0.0

    variance = sum((amount - mean) ** 2 for amount in amounts) / (len(amounts) - 1)
    return math.sqrt(variance) / mean * 100


def analyze_spending_categories(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Total expense magnitude per category"""
    categories: Dict[str, float] = {}
    for t in _expenses(transactions):
        categories[t.category] = categories.get(t.category, 0.0) + t.magnitude
    return categories


def sorted_categories(categories: Dict[str, float]) -> List[Tuple[str, float]]:
    """Categories ordered by descending total"""
    return sorted(categories.items(), key=lambda item: item[1], reverse=True)


def find_most_frequent_category(transactions: Iterable[Transaction]) -> str:
    """Category with the most expense records; ties keep the first one seen"""
    counts: Dict[str, int] = {}
    for t in _expenses(transactions):
        counts[t.category] = counts.get(t.category, 0) + 1

    if not counts:
        return NO_CATEGORY_DATA

    best_category, best_count = None, 0
    for category, count in counts.items():
        if count > best_count:
            best_category, best_count = category, count
    return best_category


def count_transactions(transactions: Iterable[Transaction]) -> int:
    """Number of records with a readable amount"""
    return len(_valid(transactions))


def calculate_average_transaction(transactions: Iterable[Transaction]) -> float:
    valid = _valid(transactions)
    if not valid:
        return 0.0
    return sum(t.magnitude for t in valid) / len(valid)


def find_largest_expense(transactions: Iterable[Transaction]) -> float:
    amounts = [t.magnitude for t in _expenses(transactions)]
    return max(amounts) if amounts else 0.0


def analyze_spending_pattern(transactions: Iterable[Transaction]) -> str:
    """Compare the average of the last 10 expenses with the 10 before them"""
    expenses = _expenses(transactions)
    recent = expenses[-10:]
    older = expenses[-20:-10]

    if not recent or not older:
        return "Insufficient data"

    recent_avg = sum(t.magnitude for t in recent) / len(recent)
    older_avg = sum(t.magnitude for t in older) / len(older)

    if older_avg == 0:
        return "Increasing spending" if recent_avg > 0 else "Stable spending"

    change = (recent_avg - older_avg) / older_avg * 100
    if change > 10:
        return "Increasing spending"
    if change < -10:
        return "Decreasing spending"
    return "Stable spending"


def build_user_profile(
    transactions: List[Transaction],
    name: str = "User",
    today: Optional[date] = None,
) -> UserProfile:
    """Recompute the profile from the current transaction list"""
    monthly_income = calculate_monthly_income(transactions, today)
    monthly_expenses = calculate_monthly_expenses(transactions, today)
    return UserProfile(
        name=name or "User",
        total_balance=calculate_total_balance(transactions),
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        savings_rate=calculate_savings_rate(monthly_income, monthly_expenses),
    )


def summarize_transactions(transactions: List[Transaction], today: Optional[date] = None) -> FinancialMetrics:
    """Run every aggregation once and bundle the results"""
    monthly_income = calculate_monthly_income(transactions, today)
    monthly_expenses = calculate_monthly_expenses(transactions, today)

    return FinancialMetrics(
        total_balance=calculate_total_balance(transactions),
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        spending_volatility=calculate_spending_volatility(transactions),
        category_breakdown=analyze_spending_categories(transactions),
        most_frequent_category=find_most_frequent_category(transactions),
        transaction_count=count_transactions(transactions),
        average_transaction=calculate_average_transaction(transactions),
        largest_expense=find_largest_expense(transactions),
        spending_pattern=analyze_spending_pattern(transactions),
        income_vs_expense_ratio=(monthly_expenses / monthly_income * 100) if monthly_income > 0 else 0.0,
    )


def calculate_period_analytics(transactions: List[Transaction], month: Optional[int] = None) -> PeriodAnalytics:
    """
    Income, expense and category totals, optionally restricted to one
    calendar month (1-12, any year).
    """
    selected = [t for t in transactions if month is None or t.date.month == month]
    valid = _valid(selected)

    income = sum(t.magnitude for t in valid if t.is_income)
    expense = sum(t.magnitude for t in valid if t.is_expense)
    balance = income - expense
    savings_rate = round(balance / income * 100, 2) if income > 0 else 0.0

    categories = [
        CategoryTotal(name=name, value=value)
        for name, value in sorted_categories(analyze_spending_categories(selected))
    ]

    return PeriodAnalytics(
        income=income,
        expense=expense,
        balance=balance,
        savings_rate=savings_rate,
        categories=categories,
        total_transactions=len(valid),
        month=month,
    )
