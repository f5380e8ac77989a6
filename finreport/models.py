"""
models.py - Domain types shared across the pipeline.

Transactions themselves travel as rows of a pandas DataFrame with the
columns in ``COLUMNS``; the models here cover the small derived values.
"""

from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

import pandas as pd
from pydantic import BaseModel


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value) -> Optional["TransactionType"]:
        """Case-insensitive lookup. Returns None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        v = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == v:
                return member
        return None


COLUMNS = ["id", "user_id", "type", "category", "description", "amount", "occurred_at"]


def empty_frame() -> pd.DataFrame:
    """A zero-row transaction frame with the standard columns and dtypes."""
    return pd.DataFrame(
        {
            "id": pd.Series(dtype=object),
            "user_id": pd.Series(dtype=object),
            "type": pd.Series(dtype=object),
            "category": pd.Series(dtype=object),
            "description": pd.Series(dtype=object),
            "amount": pd.Series(dtype=float),
            "occurred_at": pd.Series(dtype="datetime64[ns]"),
        }
    )


class TimeRange(NamedTuple):
    """Inclusive [start, end] window."""

    start: pd.Timestamp
    end: pd.Timestamp

    def contains(self, ts) -> bool:
        return self.start <= pd.Timestamp(ts) <= self.end


class Summary(BaseModel):
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_savings: float = 0.0
    transaction_count: int = 0
    income_count: int = 0
    expense_count: int = 0
    months_spanned: float = 1.0
    avg_monthly_income: float = 0.0
    avg_monthly_expenses: float = 0.0
    top_categories: list[str] = []
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0


class UserSession(BaseModel):
    """Who the current request is for. Passed explicitly into handlers."""

    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None
