"""
ingest.py - Normalize raw transaction records into the standard frame.

Records come from the external store as dicts (or a JSON/CSV export of the
same). Field names vary between store versions, so columns are matched by
alias. Malformed rows degrade locally rather than failing the whole load:

- an unparseable or non-positive amount becomes 0.0
- a row with no recognisable type or date is dropped (and logged)
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from finreport.config import Settings
from finreport.models import COLUMNS, TransactionType, empty_frame

logger = logging.getLogger(__name__)

# Standard column -> accepted source names, first match wins
COLUMN_ALIASES = {
    "id": ["id", "transaction_id", "_id"],
    "user_id": ["user_id", "userId", "user"],
    "type": ["type", "transaction_type", "transactionType"],
    "category": ["category", "category_name"],
    "description": ["description", "desc", "memo", "note"],
    "amount": ["amount", "value"],
    "occurred_at": ["occurred_at", "occurredAt", "transaction_date", "date"],
}


def _parse_amount(value) -> float:
    """Convert an amount to float. Anything unparseable is 0.0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    s = str(value).strip().replace(",", "").replace(" ", "")
    s = s.lstrip("$₹€£")
    try:
        return float(s)
    except ValueError:
        return 0.0


def parse_timestamps(values) -> pd.Series:
    """Parse ISO-8601 strings / datetimes into naive timestamps.

    Offset-aware values are converted to UTC first; the filter step rebases
    them onto the caller's clock. Unparseable values are NaT.
    """
    series = pd.Series(values, dtype=object) if not isinstance(values, pd.Series) else values
    parsed = pd.to_datetime(series, errors="coerce", utc=True, format="ISO8601")
    return parsed.dt.tz_localize(None)


def _clean_text(value, fallback: str) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return fallback
    s = str(value).strip()
    return s or fallback


def _pick_column(raw: pd.DataFrame, name: str) -> Optional[str]:
    for alias in COLUMN_ALIASES[name]:
        if alias in raw.columns:
            return alias
    return None


def normalize(raw: pd.DataFrame, settings: Optional[Settings] = None) -> pd.DataFrame:
    """
    Map a raw frame onto the standard transaction schema.

    Standard schema:
        id          - store id (object, may be None)
        user_id     - owning user (object)
        type        - "Income" | "Expense"
        category    - str, missing -> settings.uncategorized_label
        description - str, missing -> settings.description_placeholder
        amount      - float
        occurred_at - naive pd.Timestamp

    Args:
        raw: Frame with any of the aliased column names.
        settings: Placeholders for missing text fields.

    Returns:
        Normalized frame in input order, with a fresh RangeIndex.
    """
    settings = settings or Settings()
    if raw.empty:
        return empty_frame()

    cols = {name: _pick_column(raw, name) for name in COLUMN_ALIASES}
    out = pd.DataFrame(index=raw.index)

    out["id"] = raw[cols["id"]] if cols["id"] else None
    out["user_id"] = raw[cols["user_id"]] if cols["user_id"] else None

    if cols["type"]:
        parsed_types = raw[cols["type"]].map(TransactionType.parse)
        out["type"] = parsed_types.map(lambda t: t.value if t is not None else None)
    else:
        out["type"] = None

    def _text(col: Optional[str], fallback: str) -> pd.Series:
        if not col:
            return pd.Series(fallback, index=raw.index, dtype=object)
        return raw[col].map(lambda v: _clean_text(v, fallback)).astype(object)

    out["category"] = _text(cols["category"], settings.uncategorized_label)
    out["description"] = _text(cols["description"], settings.description_placeholder)

    if cols["amount"]:
        amounts = raw[cols["amount"]].map(_parse_amount).astype(float).to_numpy()
        valid = np.isfinite(amounts) & (amounts > 0)
        if not valid.all():
            logger.warning("Zeroing %d non-positive or unparseable amount(s)", int((~valid).sum()))
        out["amount"] = np.where(valid, amounts, 0.0)
    else:
        out["amount"] = 0.0

    if cols["occurred_at"]:
        out["occurred_at"] = parse_timestamps(raw[cols["occurred_at"]])
    else:
        out["occurred_at"] = pd.NaT

    bad = out["type"].isna() | out["occurred_at"].isna()
    if bad.any():
        logger.warning("Dropping %d malformed transaction(s) with no usable type or date", int(bad.sum()))
        out = out[~bad]

    out = out[COLUMNS].reset_index(drop=True)
    out["amount"] = out["amount"].astype(float)
    out["occurred_at"] = out["occurred_at"].astype("datetime64[ns]")
    return out


def load_records(records: Iterable[dict], settings: Optional[Settings] = None) -> pd.DataFrame:
    """Normalize a list of store records (dicts) into a transaction frame."""
    records = list(records or [])
    if not records:
        return empty_frame()
    raw = pd.DataFrame.from_records(records)
    df = normalize(raw, settings)
    logger.debug("Loaded %d of %d records", len(df), len(records))
    return df


def load_file(filepath: str | Path, settings: Optional[Settings] = None) -> pd.DataFrame:
    """
    Load transactions from a JSON or CSV export.

    JSON may be a list of records or an API envelope ``{"data": [...]}``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is unsupported or the JSON shape is wrong.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix == ".json":
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("data")
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of transactions in {filepath.name}")
        return load_records(data, settings)

    if suffix == ".csv":
        try:
            raw = pd.read_csv(filepath, encoding="utf-8", dtype=str, skip_blank_lines=True)
        except UnicodeDecodeError:
            raw = pd.read_csv(filepath, encoding="latin-1", dtype=str, skip_blank_lines=True)
        raw.columns = raw.columns.str.strip().str.lstrip("\ufeff")
        return normalize(raw, settings)

    raise ValueError(f"Unsupported file type '{suffix}' (expected .json or .csv)")
