"""
aggregate.py - Totals, category rankings and derived metrics.

Produces:
- Income / expense totals and counts
- Expense totals per category, ranked
- Net savings
- Monthly averages over the span of the data
- The Summary consumed by the context formatter and the dashboard cards

Every function returns a neutral value (0, empty, None) for an empty frame.
"""

from typing import Optional

import pandas as pd

from finreport.models import Summary, TransactionType

DAYS_PER_MONTH = 30


def _of_type(df: pd.DataFrame, tx_type: TransactionType | str) -> pd.DataFrame:
    tx_type = TransactionType(tx_type)
    return df[df["type"] == tx_type.value]


def total_by_type(df: pd.DataFrame, tx_type: TransactionType | str) -> float:
    """Sum of amount over transactions of ``tx_type``."""
    if df.empty:
        return 0.0
    return float(_of_type(df, tx_type)["amount"].sum())


def count_by_type(df: pd.DataFrame, tx_type: TransactionType | str) -> int:
    if df.empty:
        return 0
    return int(len(_of_type(df, tx_type)))


def net_savings(df: pd.DataFrame) -> float:
    return total_by_type(df, TransactionType.INCOME) - total_by_type(df, TransactionType.EXPENSE)


def category_totals(
    df: pd.DataFrame,
    tx_type: TransactionType | str = TransactionType.EXPENSE,
) -> pd.Series:
    """
    Summed amount per category for one transaction type.

    Args:
        df: Transaction frame.
        tx_type: Which side to total (expenses by default).

    Returns:
        Series indexed by category, sorted descending by amount. Categories
        with equal totals keep the order they were first seen in.
    """
    subset = _of_type(df, tx_type) if not df.empty else df
    if subset.empty:
        return pd.Series(dtype=float, name="amount")
    totals = subset.groupby("category", sort=False)["amount"].sum()
    return totals.sort_values(ascending=False, kind="stable")


def format_amount(amount: float, currency: str = "₹") -> str:
    return f"{currency}{amount:.2f}"


def top_categories(df: pd.DataFrame, n: int = 5, currency: str = "₹") -> list[str]:
    """The ``n`` largest expense categories as '<category>: <currency><amount>'."""
    totals = category_totals(df, TransactionType.EXPENSE).head(max(n, 0))
    return [f"{cat}: {format_amount(amt, currency)}" for cat, amt in totals.items()]


def date_span(df: pd.DataFrame) -> tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    """Earliest and latest occurred_at, or (None, None) with no data."""
    if df.empty:
        return None, None
    return df["occurred_at"].min(), df["occurred_at"].max()


def months_spanned(df: pd.DataFrame) -> float:
    """Length of the data in 30-day months, never less than 1."""
    earliest, latest = date_span(df)
    if earliest is None:
        return 1.0
    months = (latest - earliest) / pd.Timedelta(days=DAYS_PER_MONTH)
    return max(1.0, float(months))


def monthly_average(df: pd.DataFrame, tx_type: TransactionType | str) -> float:
    return total_by_type(df, tx_type) / months_spanned(df)


def summarize(df: pd.DataFrame, top_n: int = 5, currency: str = "₹") -> Summary:
    """
    Compute every summary metric for a transaction subset.

    Args:
        df: Transaction frame (already filtered).
        top_n: How many expense categories to rank.
        currency: Symbol used in the rendered top-category strings.

    Returns:
        Summary with totals, counts, averages, top categories and date span.
    """
    if df.empty:
        return Summary()

    total_income = total_by_type(df, TransactionType.INCOME)
    total_expenses = total_by_type(df, TransactionType.EXPENSE)
    months = months_spanned(df)
    earliest, latest = date_span(df)

    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=total_income - total_expenses,
        transaction_count=len(df),
        income_count=count_by_type(df, TransactionType.INCOME),
        expense_count=count_by_type(df, TransactionType.EXPENSE),
        months_spanned=months,
        avg_monthly_income=total_income / months,
        avg_monthly_expenses=total_expenses / months,
        top_categories=top_categories(df, top_n, currency),
        earliest=earliest.to_pydatetime(warn=False),
        latest=latest.to_pydatetime(warn=False),
    )
