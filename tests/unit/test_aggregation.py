"""Unit tests for metric aggregation"""

import pytest
from datetime import date, timedelta
from wealthease.domain.models import Transaction
from wealthease.domain.aggregation import (
    analyze_spending_categories,
    analyze_spending_pattern,
    build_user_profile,
    calculate_monthly_expenses,
    calculate_monthly_income,
    calculate_period_analytics,
    calculate_spending_volatility,
    calculate_total_balance,
    find_most_frequent_category,
    sorted_categories,
    summarize_transactions,
)
from wealthease.utils.date_utils import month_bounds


def txn(day, amount, type="expense", category="food"):
    return Transaction(id="", date=day, type=type, amount=amount, category=category)


def test_three_transaction_scenario():
    """Income $3000 then two expenses leaves $2300, both categories sum to $700"""
    base_date = date(2024, 5, 1)
    transactions = [
        txn(base_date, 3000, type="income", category="salary"),
        txn(base_date + timedelta(days=1), 500, category="bills"),
        txn(base_date + timedelta(days=2), 200, category="food"),
    ]

    assert calculate_total_balance(transactions) == 2300

    breakdown = analyze_spending_categories(transactions)
    assert breakdown == {"bills": 500, "food": 200}
    assert sum(breakdown.values()) == 700


def test_total_balance_ignores_stored_sign():
    """Negative amounts are treated as magnitudes"""
    base_date = date(2024, 5, 1)
    transactions = [
        txn(base_date, -1000, type="income"),
        txn(base_date, -250, type="expense"),
        txn(base_date, 100, type="expense"),
    ]

    assert calculate_total_balance(transactions) == 650


def test_empty_transactions_produce_zeros():
    """No NaN and no exceptions on an empty history"""
    metrics = summarize_transactions([], today=date(2024, 5, 15))

    assert metrics.total_balance == 0
    assert metrics.monthly_income == 0
    assert metrics.monthly_expenses == 0
    assert metrics.spending_volatility == 0
    assert metrics.category_breakdown == {}
    assert metrics.transaction_count == 0
    assert metrics.average_transaction == 0
    assert metrics.largest_expense == 0
    assert metrics.income_vs_expense_ratio == 0


def test_non_numeric_amounts_are_excluded_everywhere():
    base_date = date(2024, 5, 1)
    transactions = [
        txn(base_date, 100, category="food"),
        txn(base_date, None, category="travel"),
        txn(base_date, None, category="travel"),
        txn(base_date, 100, category="food"),
        txn(base_date, None, type="income"),
    ]

    assert calculate_total_balance(transactions) == -200
    assert calculate_spending_volatility(transactions) == 0
    assert analyze_spending_categories(transactions) == {"food": 200}
    assert find_most_frequent_category(transactions) == "food"
    assert summarize_transactions(transactions, today=base_date).transaction_count == 2


def test_volatility_identical_expenses_is_zero():
    base_date = date(2024, 5, 1)
    transactions = [txn(base_date + timedelta(days=i), 75) for i in range(5)]

    assert calculate_spending_volatility(transactions) == 0


def test_volatility_uses_sample_standard_deviation():
    """Amounts 100 and 200: mean 150, sample stddev 70.71 -> 47.14%"""
    base_date = date(2024, 5, 1)
    transactions = [txn(base_date, 100), txn(base_date, 200)]

    assert calculate_spending_volatility(transactions) == pytest.approx(47.1405, rel=1e-4)


def test_volatility_needs_two_expenses():
    base_date = date(2024, 5, 1)
    transactions = [txn(base_date, 500), txn(base_date, 9000, type="income")]

    assert calculate_spending_volatility(transactions) == 0


def test_most_frequent_category_counts_not_amounts():
    base_date = date(2024, 5, 1)
    transactions = [txn(base_date, 5, category="food") for _ in range(5)]
    transactions += [txn(base_date, 900, category="transport") for _ in range(2)]

    assert find_most_frequent_category(transactions) == "food"


def test_most_frequent_category_tie_keeps_first_seen():
    base_date = date(2024, 5, 1)
    transactions = [
        txn(base_date, 10, category="transport"),
        txn(base_date, 10, category="food"),
        txn(base_date, 10, category="food"),
        txn(base_date, 10, category="transport"),
    ]

    assert find_most_frequent_category(transactions) == "transport"


def test_most_frequent_category_without_expenses():
    assert find_most_frequent_category([]) == "No data"


def test_monthly_figures_are_weighted_over_three_months():
    """0.5 * March + 0.3 * February + 0.2 * January; December is ignored"""
    today = date(2024, 3, 15)
    transactions = [
        txn(date(2024, 3, 1), 1000, type="income"),
        txn(date(2024, 2, 29), 2000, type="income"),
        txn(date(2024, 1, 31), 3000, type="income"),
        txn(date(2023, 12, 31), 5000, type="income"),
        txn(date(2024, 3, 10), 400),
        txn(date(2024, 2, 10), 100),
    ]

    assert calculate_monthly_income(transactions, today) == pytest.approx(1700)
    assert calculate_monthly_expenses(transactions, today) == pytest.approx(230)


def test_month_bounds_cross_year_boundary():
    today = date(2024, 1, 10)

    assert month_bounds(today, 0) == (date(2024, 1, 1), date(2024, 2, 1))
    assert month_bounds(today, 1) == (date(2023, 12, 1), date(2024, 1, 1))
    assert month_bounds(today, 2) == (date(2023, 11, 1), date(2023, 12, 1))


def test_build_user_profile_savings_rate():
    today = date(2024, 3, 15)
    transactions = [
        txn(date(2024, 3, 1), 4000, type="income"),
        txn(date(2024, 3, 2), 1000),
    ]

    profile = build_user_profile(transactions, name="Dana", today=today)

    assert profile.name == "Dana"
    assert profile.total_balance == 3000
    assert profile.monthly_income == pytest.approx(2000)
    assert profile.monthly_expenses == pytest.approx(500)
    assert profile.savings_rate == pytest.approx(75)


def test_savings_rate_zero_without_income():
    profile = build_user_profile([txn(date(2024, 3, 2), 50)], today=date(2024, 3, 15))

    assert profile.savings_rate == 0
    assert profile.name == "User"


def test_sorted_categories_descending():
    assert sorted_categories({"food": 10, "rent": 900, "fun": 50}) == [
        ("rent", 900),
        ("fun", 50),
        ("food", 10),
    ]


def test_spending_pattern_increasing():
    base_date = date(2024, 1, 1)
    transactions = [txn(base_date + timedelta(days=i), 100) for i in range(10)]
    transactions += [txn(base_date + timedelta(days=10 + i), 150) for i in range(10)]

    assert analyze_spending_pattern(transactions) == "Increasing spending"


def test_spending_pattern_needs_twenty_expenses():
    base_date = date(2024, 1, 1)
    transactions = [txn(base_date + timedelta(days=i), 100) for i in range(10)]

    assert analyze_spending_pattern(transactions) == "Insufficient data"


def test_period_analytics_month_filter():
    transactions = [
        txn(date(2024, 4, 1), 2000, type="income", category="salary"),
        txn(date(2024, 4, 3), 300, category="food"),
        txn(date(2024, 4, 9), 700, category="bills"),
        txn(date(2024, 5, 2), 999, category="travel"),
    ]

    april = calculate_period_analytics(transactions, month=4)

    assert april.income == 2000
    assert april.expense == 1000
    assert april.balance == 1000
    assert april.savings_rate == 50.0
    assert [c.name for c in april.categories] == ["bills", "food"]
    assert april.total_transactions == 3

    everything = calculate_period_analytics(transactions)
    assert everything.total_transactions == 4
    assert everything.categories[0].name == "travel"
