"""
entry.py - Validate new transactions before they are handed to the store.

A new entry must have a positive amount and a known type. An entry is a
duplicate when the same user already recorded the same type, category and
amount within the last ``window_seconds`` (30 by default), which catches
double-submitted forms.
"""

import logging
from datetime import datetime
from typing import Optional

import pandas as pd
from pydantic import BaseModel, Field, ValidationError, field_validator

from finreport.config import Settings
from finreport.errors import DuplicateTransactionError, InvalidTransactionError
from finreport.models import TransactionType
from finreport.timerange import to_naive

logger = logging.getLogger(__name__)


class NewTransaction(BaseModel):
    user_id: str
    type: TransactionType
    category: str = Field(min_length=1)
    description: Optional[str] = None
    amount: float = Field(gt=0)
    occurred_at: datetime

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_str(cls, v):
        if v is None or str(v).strip() == "":
            raise ValueError("user_id is required")
        return str(v).strip()

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v):
        parsed = TransactionType.parse(v)
        if parsed is None:
            raise ValueError(f"type must be one of {[t.value for t in TransactionType]}")
        return parsed

    @field_validator("category", mode="before")
    @classmethod
    def _strip_category(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator("amount", mode="before")
    @classmethod
    def _reject_bool(cls, v):
        if isinstance(v, bool):
            raise ValueError("amount must be a number")
        return v


def validate_entry(payload: dict, now: datetime | pd.Timestamp) -> NewTransaction:
    """
    Validate a raw entry payload.

    Accepts the store's field names (``transaction_type``, ``transaction_date``)
    as well as the standard ones. A missing date defaults to ``now``.

    Raises:
        InvalidTransactionError: On any missing or invalid field.
    """
    data = dict(payload or {})
    if "type" not in data and "transaction_type" in data:
        data["type"] = data.pop("transaction_type")
    if "occurred_at" not in data:
        data["occurred_at"] = data.pop("transaction_date", None)
    if not data.get("occurred_at"):
        data["occurred_at"] = now

    try:
        entry = NewTransaction(**data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidTransactionError(f"Invalid transaction ({fields}): {e}") from e

    return entry.model_copy(update={"occurred_at": to_naive(entry.occurred_at).to_pydatetime()})


def find_duplicates(
    existing: pd.DataFrame,
    entry: NewTransaction,
    now: datetime | pd.Timestamp,
    window_seconds: int = 30,
) -> pd.DataFrame:
    """Rows of ``existing`` that match ``entry`` within the duplicate window."""
    if existing.empty:
        return existing.iloc[0:0]
    cutoff = to_naive(now) - pd.Timedelta(seconds=window_seconds)
    mask = (
        (existing["user_id"].astype(str) == entry.user_id)
        & (existing["type"] == entry.type.value)
        & (existing["category"] == entry.category)
        & ((existing["amount"] - entry.amount).abs() < 1e-9)
        & (existing["occurred_at"] >= cutoff)
    )
    return existing[mask]


def check_duplicate(
    existing: pd.DataFrame,
    entry: NewTransaction,
    now: datetime | pd.Timestamp,
    window_seconds: int = 30,
) -> None:
    """Raise DuplicateTransactionError if ``entry`` repeats a recent one."""
    matches = find_duplicates(existing, entry, now, window_seconds)
    if not matches.empty:
        logger.info("Rejected duplicate %s for user %s", entry.type.value, entry.user_id)
        raise DuplicateTransactionError(
            "Duplicate transaction detected. Please wait before adding the same transaction again.",
            matches=len(matches),
        )


def accept_entry(
    payload: dict,
    existing: pd.DataFrame,
    now: datetime | pd.Timestamp,
    settings: Optional[Settings] = None,
) -> NewTransaction:
    """Validate ``payload`` and reject it if it repeats a recent transaction.

    Raises:
        InvalidTransactionError: On missing or invalid fields.
        DuplicateTransactionError: If it matches a transaction in the window.
    """
    settings = settings or Settings()
    entry = validate_entry(payload, now)
    check_duplicate(existing, entry, now, settings.duplicate_window_seconds)
    return entry


def available_categories(df: pd.DataFrame, settings: Optional[Settings] = None) -> list[str]:
    """Default categories followed by the user's own, with "Other" kept last."""
    settings = settings or Settings()
    defaults = [c for c in settings.default_categories if c != "Other"]
    seen = set(defaults) | {"Other", settings.uncategorized_label}
    custom = []
    if not df.empty:
        for cat in df["category"]:
            if cat not in seen:
                seen.add(cat)
                custom.append(cat)
    tail = ["Other"] if "Other" in settings.default_categories else []
    return defaults + custom + tail
