"""
timerange.py - Resolve a named filter token into a concrete date window.

Every window ends at the last millisecond of ``now``'s day and starts at
midnight of the day ``now`` is shifted back to. Days are read on ``now``'s
own clock, so an aware ``now`` gives the user's local day, not the UTC one.
``all`` is unbounded. Unknown tokens fall back to ``today`` so newer clients
sending tokens this version has never seen still get a sensible dashboard.
"""

import logging
from datetime import datetime
from typing import Optional

import pandas as pd

from finreport.models import TimeRange

logger = logging.getLogger(__name__)

ALL = "all"
DEFAULT_TOKEN = "today"

# token -> how far back the window starts
_OFFSETS = {
    "today":   pd.DateOffset(days=0),
    "1day":    pd.DateOffset(days=0),
    "7days":   pd.DateOffset(days=7),
    "1week":   pd.DateOffset(days=7),
    "2weeks":  pd.DateOffset(days=14),
    "1month":  pd.DateOffset(months=1),
    "3months": pd.DateOffset(months=3),
    "6months": pd.DateOffset(months=6),
}

FILTER_TOKENS = frozenset(_OFFSETS) | {ALL}

_END_OF_DAY = pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)


def to_naive(ts: datetime | pd.Timestamp | str) -> pd.Timestamp:
    """Coerce to a naive Timestamp, converting aware values to UTC first."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def wall_time(ts: datetime | pd.Timestamp | str) -> pd.Timestamp:
    """Naive Timestamp with the wall-clock reading of ``ts`` in its own zone."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def to_local(occurred_at: pd.Series, now: datetime | pd.Timestamp) -> pd.Series:
    """
    Stored (naive UTC) timestamps as wall times in ``now``'s zone.

    A naive ``now`` carries no zone, so the values are returned unchanged.
    """
    tz = pd.Timestamp(now).tzinfo
    if tz is None:
        return occurred_at
    return occurred_at.dt.tz_localize("UTC").dt.tz_convert(tz).dt.tz_localize(None)


def is_known_token(token: Optional[str]) -> bool:
    return token is not None and str(token).strip().lower() in FILTER_TOKENS


def canonical_token(token: Optional[str]) -> str:
    """Lower-cased token, or the default for anything unrecognised."""
    if not is_known_token(token):
        if token is not None:
            logger.debug("Unknown filter token %r, using %r", token, DEFAULT_TOKEN)
        return DEFAULT_TOKEN
    return str(token).strip().lower()


def end_of_day(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize() + _END_OF_DAY


def resolve_range(token: Optional[str], now: datetime | pd.Timestamp) -> Optional[TimeRange]:
    """
    Map a filter token to an inclusive [start, end] window.

    Args:
        token: One of FILTER_TOKENS. Anything else is treated as "today".
        now: Current instant. Never read from the clock here.

    Returns:
        TimeRange, or None for "all" (no bound).
    """
    token = canonical_token(token)
    if token == ALL:
        return None

    now = wall_time(now)
    start = (now - _OFFSETS[token]).normalize()
    return TimeRange(start=start, end=end_of_day(now))
