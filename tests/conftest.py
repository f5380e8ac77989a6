import pandas as pd
import pytest

from finreport.config import Settings
from finreport.ingest import load_records


NOW = pd.Timestamp("2024-06-15T10:00:00")


def make_tx(tx_type, amount, when, category="Other", user_id="u1", description=None, tx_id=None):
    return {
        "id": tx_id,
        "user_id": user_id,
        "transaction_type": tx_type,
        "category": category,
        "description": description,
        "amount": amount,
        "transaction_date": when,
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def scenario_records():
    return [
        make_tx("Income", 1000, "2024-06-01T09:00:00", category="Salary", tx_id=1),
        make_tx("Expense", 300, "2024-06-02T12:30:00", category="Food", tx_id=2),
        make_tx("Expense", 200, "2024-06-10T19:15:00", category="Food", tx_id=3),
    ]


@pytest.fixture
def scenario_df(scenario_records):
    return load_records(scenario_records)


@pytest.fixture
def mixed_df():
    """A couple of months of data across several categories."""
    return load_records([
        make_tx("Income", 50000, "2024-04-01T09:00:00", category="Salary"),
        make_tx("Expense", 1200.50, "2024-04-03T13:00:00", category="Food"),
        make_tx("Expense", 800, "2024-04-20T18:00:00", category="Travel"),
        make_tx("Expense", 450, "2024-05-05T20:00:00", category="Entertainment"),
        make_tx("Income", 50000, "2024-05-01T09:00:00", category="Salary"),
        make_tx("Expense", 2300, "2024-05-18T11:00:00", category="Rent"),
        make_tx("Expense", 640.25, "2024-06-09T08:00:00", category="Food"),
        make_tx("Income", 1500, "2024-06-12T15:00:00", category="Freelance"),
        make_tx("Expense", 99.99, "2024-06-15T07:45:00", category="Travel"),
    ])
