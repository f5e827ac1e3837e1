"""Prompt construction for the language model and templated local narrative"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from wealthease.domain.aggregation import analyze_spending_categories, sorted_categories
from wealthease.domain.models import (
    ExtractedTransaction,
    FinancialMetrics,
    Transaction,
    UserProfile,
)

RECENT_TRANSACTION_LIMIT = 30

ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional financial advisor AI. Analyze transaction data and provide "
    "detailed, actionable insights. Always respond with valid JSON format as requested."
)

RESPONSE_FORMAT = """Please provide a comprehensive analysis in JSON format with these exact keys:
{
    "analysis": "Detailed analysis of spending patterns, financial health, and trends",
    "recommendations": "Specific actionable recommendations for improving financial health",
    "predictions": {
        "nextWeekBalance": estimated_balance_next_week,
        "nextMonthBalance": estimated_balance_next_month,
        "trend": "bullish/bearish/neutral",
        "summary": "Brief summary of future financial outlook"
    },
    "warnings": "Any financial warnings or red flags",
    "score": {
        "financialHealth": score_out_of_100,
        "spendingDiscipline": score_out_of_100,
        "savingsRate": score_out_of_100,
        "volatility": volatility_percentage,
        "confidence": confidence_percentage
    }
}

Focus on:
1. Spending pattern analysis and trends
2. Budget optimization recommendations
3. Financial health assessment
4. Future balance predictions based on current trends
5. Specific actionable advice for improvement
6. Risk assessment and warnings

Be specific, actionable, and provide concrete numbers for predictions."""


def format_currency(amount: float) -> str:
    """US dollar display, e.g. $1,234.56 or -$5.00"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _transaction_line(t: Transaction) -> str:
    amount = f"${t.magnitude:.2f}" if t.amount is not None else "$n/a"
    description = t.description or "No description"
    return f"- {t.date.isoformat()}: {t.type.upper()} {amount} ({t.category}) - {description}"


def build_analysis_prompt(
    transactions: Sequence[Transaction],
    profile: UserProfile,
    metrics: FinancialMetrics,
) -> str:
    """
    Serialize the profile, the last 30 transactions and the aggregated
    metrics into the analysis request sent to the model.

    Currency values use 2 decimals and percentages 1 decimal.
    """
    recent = list(transactions)[-RECENT_TRANSACTION_LIMIT:]

    transaction_lines = "\n".join(_transaction_line(t) for t in recent)
    category_lines = "\n".join(
        f"- {category}: ${amount:.2f}" for category, amount in sorted_categories(metrics.category_breakdown)
    )

    return f"""Analyze this financial data and provide comprehensive insights:

USER PROFILE:
- Name: {profile.name}
- Current Balance: ${profile.total_balance:.2f}
- Monthly Income: ${profile.monthly_income:.2f}
- Monthly Expenses: ${profile.monthly_expenses:.2f}
- Savings Rate: {profile.savings_rate:.1f}%

RECENT TRANSACTIONS (Last {len(recent)}):
{transaction_lines}

FINANCIAL ANALYSIS:
- Total Transactions: {metrics.transaction_count}
- Average Transaction: ${metrics.average_transaction:.2f}
- Income vs Expense Ratio: {metrics.income_vs_expense_ratio:.1f}%
- Largest Single Expense: ${metrics.largest_expense:.2f}
- Most Frequent Category: {metrics.most_frequent_category}
- Spending Pattern: {metrics.spending_pattern}
- Spending Volatility: {metrics.spending_volatility:.1f}%

SPENDING CATEGORIES BREAKDOWN:
{category_lines}

{RESPONSE_FORMAT}"""


def build_extraction_system_prompt(today: Optional[date] = None) -> str:
    """System prompt asking the model to pull one transaction out of a chat message"""
    today_iso = (today or date.today()).isoformat()
    return f"""You are a financial assistant helping to extract transaction data from user messages.
Extract the following information from user messages:
1. Transaction type (income/expense) - detect from context
2. Transaction description
3. Amount in USD (extract numbers, handle formats like: $50, 50, 50 dollars, $1,234.56)
4. Transaction date (use TODAY'S DATE: {today_iso} if not mentioned)
5. Payment method (cash/wallet) - detect from keywords

Important rules:
- Remove all currency symbols and formatting ($ , commas)
- Convert amount to plain number (e.g., "$1,234.56" becomes 1234.56)
- Detect income keywords: salary, bonus, income, received, earned, paid (to me), gift received, got
- Detect expense keywords: bought, paid, spent, bill, purchase, cost, expense
- Default to "expense" if unclear
- ALWAYS use TODAY'S DATE ({today_iso}) unless date is explicitly mentioned

Payment method detection:
- "cash" for: cash, to my cash, in cash, cash payment, physical money, tunai
- "wallet" for: wallet, digital wallet, gopay, ovo, dana, shopeepay, card, debit, credit, online, transfer, bank
- If no payment method is mentioned, default to "wallet"

Return data in JSON format:
{{
    "tipe": "pemasukan" or "pengeluaran",
    "deskripsi": "transaction description in English",
    "jumlah": number_without_currency,
    "tanggal": "YYYY-MM-DD",
    "paymentMethod": "cash" or "wallet"
}}

Examples:
- "Bought coffee $5 with cash" -> {{"tipe": "pengeluaran", "deskripsi": "Bought coffee", "jumlah": 5, "tanggal": "{today_iso}", "paymentMethod": "cash"}}
- "i got bonus $100 to my digital wallet" -> {{"tipe": "pemasukan", "deskripsi": "got bonus", "jumlah": 100, "tanggal": "{today_iso}", "paymentMethod": "wallet"}}

If you cannot extract transaction data, return empty JSON: {{}}"""


def format_extraction_reply(extracted: ExtractedTransaction) -> str:
    label = "Income" if extracted.transaction_type == "income" else "Expense"
    return (
        f'✅ {label} recorded: "{extracted.deskripsi}" '
        f"for {format_currency(extracted.jumlah)} on {extracted.tanggal}."
    )


EXTRACTION_FAILED_MESSAGE = (
    "Sorry, I couldn't extract transaction data from your message. Please provide clearer "
    'details (e.g., "Bought coffee $5" or "Received salary $3,500").'
)


# Local narrative, used when the analysis is produced without the model


def generate_motivational_analysis(profile: UserProfile, transaction_count: int) -> str:
    rate = profile.savings_rate
    if rate > 20:
        return (
            f"🎉 Excellent! You have a {rate:.1f}% savings rate with {transaction_count} transactions. "
            "You're on track for financial success! Your disciplined approach to money management is paying off."
        )
    if rate > 10:
        return (
            f"👍 Good progress! You have a {rate:.1f}% savings rate with {transaction_count} transactions. "
            "You're building solid financial habits. With a few adjustments, you can reach even greater "
            "financial heights!"
        )
    if rate > 0:
        return (
            f"💪 You're making progress! With a {rate:.1f}% savings rate and {transaction_count} transactions, "
            "you're on the right path. Every small step counts toward your financial goals!"
        )
    return (
        f"🚀 Ready for transformation! With {transaction_count} transactions tracked, you have the "
        "foundation to build wealth. Let's turn this into a positive savings journey!"
    )


def generate_motivational_recommendations(profile: UserProfile, transactions: Sequence[Transaction]) -> str:
    recommendations: List[str] = []

    if profile.savings_rate < 20:
        recommendations.append("🎯 Set a goal to increase your savings rate to 20% - you're closer than you think!")

    if profile.monthly_expenses > profile.monthly_income:
        recommendations.append(
            "💡 Focus on one expense category to reduce this month - small changes lead to big results!"
        )
    else:
        recommendations.append(
            "🌟 Great job keeping expenses below income! Consider investing the difference for long-term growth."
        )

    ranked = sorted_categories(analyze_spending_categories(transactions))
    if ranked and ranked[0][1] > profile.monthly_income * 0.3:
        recommendations.append(
            f"📊 Your {ranked[0][0]} spending is significant - try reducing it by 10% for immediate impact!"
        )

    recommendations.append("📈 Track your progress weekly to stay motivated and see your financial growth!")
    return " ".join(recommendations)


def generate_motivational_summary(profile: UserProfile, next_week_balance: float, next_month_balance: float) -> str:
    weekly_growth = next_week_balance - profile.total_balance
    monthly_growth = next_month_balance - profile.total_balance
    return (
        f"🚀 Exciting times ahead! Your balance is projected to grow by ${weekly_growth:.2f} this week "
        f"and ${monthly_growth:.2f} this month. With consistent effort, you're building a strong financial future!"
    )


def generate_motivational_warnings(
    profile: UserProfile,
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> str:
    today = today or date.today()
    warnings: List[str] = []

    if profile.monthly_expenses > profile.monthly_income:
        warnings.append(
            "⚠️ Your expenses exceed income - this is a great opportunity to optimize your spending "
            "and boost your savings!"
        )

    if profile.savings_rate < 0:
        warnings.append("⚠️ Negative savings rate detected - let's turn this around with a positive action plan!")

    week_ago = today - timedelta(days=7)
    recent_expenses = [t for t in transactions if t.is_expense and t.date > week_ago]
    if len(recent_expenses) > 10:
        warnings.append(
            "⚠️ High spending frequency - this is a chance to review and optimize your spending patterns!"
        )

    if not warnings:
        return "🎉 No major concerns detected! You're managing your finances well. Keep up the excellent work!"
    return " ".join(warnings)
