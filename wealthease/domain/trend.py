"""Trend estimation over the derived daily balance series"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from wealthease.domain.aggregation import calculate_total_balance, count_transactions
from wealthease.domain.models import ForecastChart, Transaction, TrendAnalysis
from wealthease.utils.date_utils import generate_date_range, short_label

WINDOW = 7
EMA_ALPHA = 0.3
TREND_WEIGHTS = {"sma": 0.3, "ema": 0.4, "linear": 0.3}

HISTORY_DAYS = 30
FORECAST_DAYS = 7
CHART_WEEKLY_GROWTH = 50.0


def _signed(t: Transaction) -> float:
    if t.amount is None:
        return 0.0
    if t.is_income:
        return t.magnitude
    if t.is_expense:
        return -t.magnitude
    return 0.0


def calculate_balance_up_to(transactions: Sequence[Transaction], day: date) -> float:
    """Running balance including every transaction dated on or before `day`"""
    return sum(_signed(t) for t in transactions if t.date <= day)


def calculate_daily_balances(transactions: Sequence[Transaction]) -> List[float]:
    """
    Running balance for each calendar day from the first to the last
    transaction date, inclusive.

    Net change is indexed by day, then accumulated, giving the same series
    as recomputing the balance up to every day.
    """
    if not transactions:
        return []

    sorted_txns = sorted(transactions, key=lambda t: t.date)
    net_by_date: Dict[date, float] = {}
    for txn in sorted_txns:
        net_by_date[txn.date] = net_by_date.get(txn.date, 0.0) + _signed(txn)

    balances = []
    running = 0.0
    for day in generate_date_range(sorted_txns[0].date, sorted_txns[-1].date):
        running += net_by_date.get(day, 0.0)
        balances.append(running)
    return balances


def _mean_of_window(values: Sequence[float]) -> float:
    # Always divide by the full window, even when fewer values exist
    return sum(values) / WINDOW


def calculate_sma_trend(balances: Sequence[float]) -> float:
    """Mean of the last 7 daily balances minus the mean of the 7 before"""
    if len(balances) < WINDOW:
        return 0.0
    recent = _mean_of_window(balances[-WINDOW:])
    previous = _mean_of_window(balances[-2 * WINDOW:-WINDOW])
    return recent - previous


def calculate_ema_trend(balances: Sequence[float]) -> float:
    """EMA over the whole series compared against the last 7 day mean"""
    if len(balances) < WINDOW:
        return 0.0

    ema = balances[0]
    for value in balances[1:]:
        ema = EMA_ALPHA * value + (1 - EMA_ALPHA) * ema

    return ema - _mean_of_window(balances[-WINDOW:])


def calculate_linear_regression_trend(balances: Sequence[float]) -> float:
    """Ordinary least squares slope of balance against day index"""
    n = len(balances)
    if n < 3:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(balances)
    sum_xy = sum(i * y for i, y in enumerate(balances))
    sum_xx = sum(i * i for i in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def calculate_advanced_trend(transactions: Sequence[Transaction]) -> TrendAnalysis:
    """
    Blend SMA, EMA and linear regression deltas into one daily trend.

    Weights: 30% SMA, 40% EMA, 30% linear regression. Fewer than three readable
    transactions is reported as insufficient data with zero change.
    """
    if count_transactions(transactions) < 3:
        return TrendAnalysis(
            weekly_change=0.0,
            monthly_change=0.0,
            trend_strength=0.0,
            method="insufficient_data",
        )

    balances = calculate_daily_balances(transactions)
    sma = calculate_sma_trend(balances)
    ema = calculate_ema_trend(balances)
    linear = calculate_linear_regression_trend(balances)

    combined = (
        sma * TREND_WEIGHTS["sma"]
        + ema * TREND_WEIGHTS["ema"]
        + linear * TREND_WEIGHTS["linear"]
    )

    return TrendAnalysis(
        weekly_change=combined * 7,
        monthly_change=combined * 30,
        trend_strength=combined,
        method="combined_weighted",
        sma=sma,
        ema=ema,
        linear=linear,
    )


def build_forecast_chart(transactions: Sequence[Transaction], today: Optional[date] = None) -> ForecastChart:
    """
    Chart series: 30 days of historical balance ending today, then a 7 day
    projection growing by a fixed weekly amount.
    """
    today = today or date.today()
    if not transactions:
        return ForecastChart(labels=["No Data"], historical=[0.0], forecast=[0.0])

    current_balance = calculate_total_balance(transactions)

    history_days = [today - timedelta(days=i) for i in range(HISTORY_DAYS - 1, -1, -1)]
    historical = [calculate_balance_up_to(transactions, day) for day in history_days]
    # Last point always matches the dashboard total, including future-dated entries
    historical[-1] = current_balance

    daily_growth = CHART_WEEKLY_GROWTH / FORECAST_DAYS
    forecast_days = [today + timedelta(days=i) for i in range(1, FORECAST_DAYS + 1)]
    projected = [current_balance + daily_growth * i for i in range(1, FORECAST_DAYS + 1)]

    return ForecastChart(
        labels=[short_label(day) for day in history_days + forecast_days],
        historical=historical + [None] * FORECAST_DAYS,
        forecast=[None] * HISTORY_DAYS + projected,
    )
