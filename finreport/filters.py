"""
filters.py - Select the transactions that fall inside a time window.

Both the request layer (server-side pre-filter) and the views (charts, AI
context) go through ``filter_by_token`` so the two never disagree on where
a day starts or ends.
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from finreport.models import TimeRange
from finreport.timerange import resolve_range, to_local


def filter_transactions(df: pd.DataFrame, time_range: Optional[TimeRange]) -> pd.DataFrame:
    """Rows whose occurred_at is within [start, end], inclusive.

    An unbounded range (None) returns ``df`` itself, untouched.
    """
    if time_range is None:
        return df
    if df.empty:
        return df.copy()
    mask = df["occurred_at"].between(time_range.start, time_range.end, inclusive="both")
    return df[mask].copy()


def localize_frame(df: pd.DataFrame, now: datetime | pd.Timestamp) -> pd.DataFrame:
    """``df`` with occurred_at read on ``now``'s clock; ``df`` itself if ``now`` is naive."""
    if pd.Timestamp(now).tzinfo is None or df.empty:
        return df
    out = df.copy()
    out["occurred_at"] = to_local(out["occurred_at"], now)
    return out


def filter_by_token(
    df: pd.DataFrame,
    token: Optional[str],
    now: datetime | pd.Timestamp,
) -> pd.DataFrame:
    """Resolve ``token`` against ``now`` and filter ``df`` to that window.

    With an aware ``now`` the result's occurred_at is local wall time, so
    buckets built from it fall on the user's days.
    """
    return filter_transactions(localize_frame(df, now), resolve_range(token, now))
