"""Forecast and scoring engine - balance predictions and 0-100 health scores"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from wealthease.domain.aggregation import (
    analyze_spending_categories,
    build_user_profile,
    calculate_spending_volatility,
    count_transactions,
)
from wealthease.domain.models import (
    AnalysisResult,
    Boost,
    Predictions,
    Scores,
    Transaction,
    UserProfile,
)
from wealthease.domain.narrative import (
    generate_motivational_analysis,
    generate_motivational_recommendations,
    generate_motivational_summary,
    generate_motivational_warnings,
)
from wealthease.domain.trend import calculate_advanced_trend


@dataclass(frozen=True)
class MotivationPolicy:
    """
    Positive-bias business rules applied to the local forecast.

    Predictions never fall below the weekly/monthly floors, boosts are added
    on top regardless of trend sign, and the trend label is fixed. Tiers are
    (threshold, weekly, monthly) checked in order with strict comparison.
    """

    weekly_floor: float = 100.0
    monthly_floor: float = 400.0
    base_boost: Tuple[float, float] = (50.0, 200.0)
    savings_boost_tiers: Tuple[Tuple[float, float, float], ...] = (
        (20.0, 100.0, 400.0),
        (10.0, 50.0, 200.0),
        (0.0, 25.0, 100.0),
    )
    savings_boost_default: Tuple[float, float] = (15.0, 60.0)
    volatility_boost_tiers: Tuple[Tuple[float, float, float], ...] = (
        (20.0, 60.0, 240.0),
        (40.0, 30.0, 120.0),
    )
    volatility_boost_default: Tuple[float, float] = (10.0, 40.0)
    health_offset: float = 15.0
    discipline_offset: float = 10.0
    confidence: float = 90.0
    trend_label: str = "bullish"


DEFAULT_POLICY = MotivationPolicy()


def _clamp(score: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, score))


def calculate_motivational_boost(
    profile: UserProfile,
    volatility: float,
    policy: MotivationPolicy = DEFAULT_POLICY,
) -> Boost:
    """Flat base boost plus savings-rate and volatility tiers"""
    weekly, monthly = policy.base_boost

    for threshold, tier_weekly, tier_monthly in policy.savings_boost_tiers:
        if profile.savings_rate > threshold:
            weekly += tier_weekly
            monthly += tier_monthly
            break
    else:
        weekly += policy.savings_boost_default[0]
        monthly += policy.savings_boost_default[1]

    for threshold, tier_weekly, tier_monthly in policy.volatility_boost_tiers:
        if volatility < threshold:
            weekly += tier_weekly
            monthly += tier_monthly
            break
    else:
        weekly += policy.volatility_boost_default[0]
        monthly += policy.volatility_boost_default[1]

    return Boost(weekly=weekly, monthly=monthly)


def calculate_financial_health_score(profile: UserProfile, volatility: float) -> float:
    """
    Financial health out of 100.

    Components:
    - 40 pts: savings rate (>=20% -> 40, >=10% -> 30, >=0% -> 20)
    - 30 pts: spending volatility (<20% -> 30, <40% -> 20, <60% -> 10)
    - 30 pts: expense/income ratio, only when income exceeds expenses
      (<0.5 -> 30, <0.7 -> 20, <0.9 -> 10, otherwise 5)
    """
    score = 0.0

    if profile.savings_rate >= 20:
        score += 40
    elif profile.savings_rate >= 10:
        score += 30
    elif profile.savings_rate >= 0:
        score += 20

    if volatility < 20:
        score += 30
    elif volatility < 40:
        score += 20
    elif volatility < 60:
        score += 10

    if profile.monthly_income > profile.monthly_expenses:
        ratio = profile.monthly_expenses / profile.monthly_income
        if ratio < 0.5:
            score += 30
        elif ratio < 0.7:
            score += 20
        elif ratio < 0.9:
            score += 10
        else:
            score += 5

    return _clamp(score)


def calculate_spending_discipline_score(profile: UserProfile, volatility: float, category_count: int) -> float:
    """
    Spending discipline out of 100.

    Components:
    - 50 pts: consistency (volatility <15% -> 50, <30% -> 40, <50% -> 30, <70% -> 20, else 10)
    - 30 pts: budget adherence against an 80% of income budget, only when
      income exceeds expenses
    - 20 pts: distinct expense categories (>=5 -> 20, >=3 -> 15, >=2 -> 10, else 5)
    """
    score = 0.0

    if volatility < 15:
        score += 50
    elif volatility < 30:
        score += 40
    elif volatility < 50:
        score += 30
    elif volatility < 70:
        score += 20
    else:
        score += 10

    if profile.monthly_income > profile.monthly_expenses:
        overspend_ratio = (profile.monthly_expenses - profile.monthly_income * 0.8) / profile.monthly_income
        if overspend_ratio <= 0:
            score += 30
        elif overspend_ratio <= 0.1:
            score += 20
        elif overspend_ratio <= 0.2:
            score += 10

    if category_count >= 5:
        score += 20
    elif category_count >= 3:
        score += 15
    elif category_count >= 2:
        score += 10
    else:
        score += 5

    return _clamp(score)


def generate_local_analysis(
    transactions: Sequence[Transaction],
    profile: Optional[UserProfile] = None,
    today: Optional[date] = None,
    policy: MotivationPolicy = DEFAULT_POLICY,
) -> AnalysisResult:
    """
    Build a complete analysis without calling the language model.

    Trend changes are floored, motivational boosts are added, and the
    presentation offsets are applied to the scores before re-clamping.
    """
    txns: List[Transaction] = list(transactions)
    today = today or date.today()
    profile = profile or build_user_profile(txns, today=today)

    trend = calculate_advanced_trend(txns)
    volatility = calculate_spending_volatility(txns)

    weekly_change = max(trend.weekly_change, policy.weekly_floor)
    monthly_change = max(trend.monthly_change, policy.monthly_floor)
    boost = calculate_motivational_boost(profile, volatility, policy)

    next_week_balance = profile.total_balance + weekly_change + boost.weekly
    next_month_balance = profile.total_balance + monthly_change + boost.monthly

    category_count = len(analyze_spending_categories(txns))
    financial_health = calculate_financial_health_score(profile, volatility)
    spending_discipline = calculate_spending_discipline_score(profile, volatility, category_count)

    return AnalysisResult(
        analysis=generate_motivational_analysis(profile, count_transactions(txns)),
        recommendations=generate_motivational_recommendations(profile, txns),
        predictions=Predictions(
            next_week_balance=next_week_balance,
            next_month_balance=next_month_balance,
            trend=policy.trend_label,
            summary=generate_motivational_summary(profile, next_week_balance, next_month_balance),
        ),
        warnings=generate_motivational_warnings(profile, txns, today),
        score=Scores(
            financial_health=_clamp(financial_health + policy.health_offset),
            spending_discipline=_clamp(spending_discipline + policy.discipline_offset),
            savings_rate=profile.savings_rate,
            volatility=volatility,
            confidence=policy.confidence,
        ),
    )
