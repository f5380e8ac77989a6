"""
charts.py - Build the data payloads the dashboard charts render.

Line chart: income/expense per time bucket for a filter period.
Pie chart:  per-category totals for one transaction type.

Both have a "No Data" fallback so the front end never has to special-case
an empty selection.
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from finreport.aggregate import category_totals, format_amount, net_savings, total_by_type
from finreport.bucketing import (
    Granularity,
    bucket_totals,
    format_bucket_label,
    granularity_for_token,
)
from finreport.config import Settings
from finreport.filters import filter_by_token
from finreport.models import TransactionType

NO_DATA = "No Data"
SERIES = ("income", "expense", "both")


def _colors(n: int, palette: list[str]) -> list[str]:
    return [palette[i % len(palette)] for i in range(n)]


def line_chart_data(
    df: pd.DataFrame,
    period: Optional[str],
    now: datetime | pd.Timestamp,
    series: str = "both",
    settings: Optional[Settings] = None,
    granularity: Granularity | str | None = None,
) -> dict:
    """
    Income/expense totals per bucket for the line chart.

    Args:
        df: All of the user's transactions (unfiltered).
        period: Filter token for the window to plot.
        now: Current instant.
        series: "income", "expense" or "both".
        settings: Colours.
        granularity: Override the bucket size chosen from ``period``.

    Returns:
        {"labels": [...], "keys": [...], "granularity": str,
         "datasets": [{"label", "data", "color"}, ...]}
    """
    settings = settings or Settings()
    series = series if series in SERIES else "both"
    granularity = Granularity(granularity) if granularity else granularity_for_token(period)

    filtered = filter_by_token(df, period, now)
    if filtered.empty:
        return {"labels": [NO_DATA], "keys": [], "granularity": granularity.value, "datasets": []}

    totals = bucket_totals(filtered, granularity)
    keys = totals["bucket"].tolist()

    datasets = []
    if series in ("income", "both"):
        datasets.append({
            "label": "Income",
            "data": totals["income"].round(2).tolist(),
            "color": settings.income_color,
        })
    if series in ("expense", "both"):
        datasets.append({
            "label": "Expenses",
            "data": totals["expenses"].round(2).tolist(),
            "color": settings.expense_color,
        })

    return {
        "labels": [format_bucket_label(k, granularity) for k in keys],
        "keys": keys,
        "granularity": granularity.value,
        "datasets": datasets,
    }


def pie_chart_data(
    df: pd.DataFrame,
    tx_type: TransactionType | str = TransactionType.EXPENSE,
    settings: Optional[Settings] = None,
) -> dict:
    """
    Category breakdown for one transaction type, largest first.

    Returns:
        {"labels": [...], "data": [...], "colors": [...]}; a single grey
        "No Data" slice when there is nothing to show.
    """
    settings = settings or Settings()
    tx_type = TransactionType.parse(tx_type) or TransactionType.EXPENSE
    totals = category_totals(df, tx_type)
    if totals.empty:
        return {"labels": [NO_DATA], "data": [1], "colors": [settings.no_data_color]}

    labels = totals.index.tolist()
    return {
        "labels": labels,
        "data": totals.round(2).tolist(),
        "colors": _colors(len(labels), settings.chart_colors),
    }


def pie_legend(pie: dict, currency: str = "₹") -> list[dict]:
    """Legend rows ('label', 'color', 'value', 'percentage') for a pie payload."""
    if pie["labels"] == [NO_DATA]:
        return []
    total = sum(pie["data"])
    return [
        {
            "label": label,
            "color": color,
            "value": format_amount(value, currency),
            "percentage": round(value / total * 100, 1) if total > 0 else 0.0,
        }
        for label, value, color in zip(pie["labels"], pie["data"], pie["colors"])
    ]


def summary_cards(df: pd.DataFrame, currency: str = "₹") -> dict[str, str]:
    """Formatted totals for the dashboard's summary cards."""
    return {
        "total_income": format_amount(total_by_type(df, TransactionType.INCOME), currency),
        "total_expenses": format_amount(total_by_type(df, TransactionType.EXPENSE), currency),
        "net_savings": format_amount(net_savings(df), currency),
    }
