"""
context.py - Render a user's transactions into the assistant's grounding text.

The report has a fixed shape so the same Summary always produces the same
text. Individual transactions beyond the most recent few are left out to keep
the prompt small.
"""

from typing import Optional

import pandas as pd

from finreport.aggregate import format_amount, summarize
from finreport.config import Settings
from finreport.models import Summary

NO_HISTORY = "User has no transaction history available."


def recent_transactions(df: pd.DataFrame, limit: int = 10) -> pd.DataFrame:
    """The ``limit`` most recent transactions, newest first."""
    if df.empty or limit <= 0:
        return df.iloc[0:0]
    return df.sort_values("occurred_at", ascending=False, kind="stable").head(limit)


def format_date(ts, date_format: str = "%d/%m/%Y") -> str:
    if ts is None or pd.isna(ts):
        return "N/A"
    return pd.Timestamp(ts).strftime(date_format)


def format_recent(df: pd.DataFrame, currency: str = "₹", date_format: str = "%d/%m/%Y") -> str:
    """'<Type> - <Category>: <currency><amount> on <date>' joined by '; ', or 'None'."""
    if df.empty:
        return "None"
    return "; ".join(
        f"{r['type']} - {r['category']}: {format_amount(r['amount'], currency)} "
        f"on {format_date(r['occurred_at'], date_format)}"
        for _, r in df.iterrows()
    )


def render_context(summary: Summary, recent: pd.DataFrame, settings: Optional[Settings] = None) -> str:
    """Render a precomputed Summary plus recent transactions into report text."""
    settings = settings or Settings()
    if summary.is_empty:
        return NO_HISTORY

    cur = settings.currency_symbol
    top = ", ".join(summary.top_categories) or "None"
    recent_text = format_recent(recent, cur, settings.date_format)

    return (
        "\nFINANCIAL SUMMARY:\n"
        f"- Total Income: {format_amount(summary.total_income, cur)}\n"
        f"- Total Expenses: {format_amount(summary.total_expenses, cur)}\n"
        f"- Net Savings: {format_amount(summary.net_savings, cur)}\n"
        f"- Number of Transactions: {summary.transaction_count} "
        f"({summary.income_count} income, {summary.expense_count} expenses)\n"
        f"- Average Monthly Income: {format_amount(summary.avg_monthly_income, cur)}\n"
        f"- Average Monthly Expenses: {format_amount(summary.avg_monthly_expenses, cur)}\n"
        f"- Top Expense Categories: {top}\n"
        f"- Recent Transactions: {recent_text}\n"
        f"- Date Range: {format_date(summary.earliest, settings.date_format)} "
        f"to {format_date(summary.latest, settings.date_format)}\n"
    )


def build_financial_context(df: pd.DataFrame, settings: Optional[Settings] = None) -> str:
    """Summarize ``df`` and render the full context string for the assistant."""
    settings = settings or Settings()
    if df.empty:
        return NO_HISTORY
    summary = summarize(df, top_n=settings.top_n, currency=settings.currency_symbol)
    recent = recent_transactions(df, settings.recent_limit)
    return render_context(summary, recent, settings)
