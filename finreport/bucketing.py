"""
bucketing.py - Group transactions into time buckets for charting.

Bucket keys are plain strings that sort chronologically:

    daily    '2024-06-05'   (the transaction's date)
    weekly   '2024-06-03'   (Monday on/before the date; Sunday is day 6)
    monthly  '2024-06'

Only buckets that contain at least one transaction are produced.
"""

from enum import Enum
from typing import Optional

import pandas as pd

from finreport.timerange import ALL, canonical_token


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def bucket_keys(occurred_at: pd.Series, granularity: Granularity | str) -> pd.Series:
    """Compute the bucket key of each timestamp in ``occurred_at``."""
    granularity = Granularity(granularity)
    days = occurred_at.dt.normalize()
    if granularity is Granularity.DAILY:
        return days.dt.strftime("%Y-%m-%d")
    if granularity is Granularity.WEEKLY:
        # dayofweek: Monday=0 ... Sunday=6
        monday = days - pd.to_timedelta(days.dt.dayofweek, unit="D")
        return monday.dt.strftime("%Y-%m-%d")
    return days.dt.strftime("%Y-%m")


def bucket_key(ts, granularity: Granularity | str) -> str:
    """Bucket key for a single timestamp."""
    return bucket_keys(pd.Series([pd.Timestamp(ts)]), granularity).iloc[0]


def group_by_bucket(df: pd.DataFrame, granularity: Granularity | str) -> dict[str, pd.DataFrame]:
    """
    Split ``df`` into buckets.

    Args:
        df: Transaction frame (already filtered).
        granularity: daily, weekly or monthly.

    Returns:
        Dict of bucket key -> member rows, keys in ascending order. Members
        keep their order from ``df``. Each row lands in exactly one bucket.
    """
    if df.empty:
        return {}
    keys = bucket_keys(df["occurred_at"], granularity)
    return {
        key: group.copy()
        for key, group in df.groupby(keys, sort=True)
    }


def bucket_totals(df: pd.DataFrame, granularity: Granularity | str) -> pd.DataFrame:
    """
    Per-bucket income and expense totals.

    Returns:
        DataFrame with columns: bucket, income, expenses, net, transactions.
    """
    cols = ["bucket", "income", "expenses", "net", "transactions"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    frame = df.assign(bucket=bucket_keys(df["occurred_at"], granularity))
    income = frame[frame["type"] == "Income"].groupby("bucket")["amount"].sum()
    expense = frame[frame["type"] == "Expense"].groupby("bucket")["amount"].sum()
    counts = frame.groupby("bucket").size()
    summary = pd.DataFrame({"transactions": counts})
    summary["income"] = income.reindex(summary.index, fill_value=0.0)
    summary["expenses"] = expense.reindex(summary.index, fill_value=0.0)
    summary["net"] = summary["income"] - summary["expenses"]
    summary = summary.reset_index().sort_values("bucket")
    return summary[cols].reset_index(drop=True)


def granularity_for_token(token: Optional[str]) -> Granularity:
    """Chart granularity for a filter window: monthly for all-time,
    weekly for quarter/half-year, daily otherwise."""
    token = canonical_token(token)
    if token == ALL:
        return Granularity.MONTHLY
    if token in ("3months", "6months"):
        return Granularity.WEEKLY
    return Granularity.DAILY


def format_bucket_label(key: str, granularity: Granularity | str) -> str:
    """Human-readable chart label for a bucket key ('5 Jun', 'Week 3 Jun', 'Jun 2024')."""
    granularity = Granularity(granularity)
    ts = pd.Timestamp(key)
    if granularity is Granularity.DAILY:
        return f"{ts.day} {ts.strftime('%b')}"
    if granularity is Granularity.WEEKLY:
        return f"Week {ts.day} {ts.strftime('%b')}"
    return ts.strftime("%b %Y")
