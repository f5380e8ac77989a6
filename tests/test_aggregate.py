import warnings

import pandas as pd
import pytest

from finreport.aggregate import (
    category_totals,
    count_by_type,
    date_span,
    monthly_average,
    months_spanned,
    net_savings,
    summarize,
    top_categories,
    total_by_type,
)
from finreport.ingest import load_records
from finreport.models import Summary, TransactionType, empty_frame
from tests.conftest import make_tx


def test_scenario(scenario_df):
    assert category_totals(scenario_df).to_dict() == {"Food": 500.0}
    assert net_savings(scenario_df) == 500.0
    # 9 days of data is floored to one month
    assert months_spanned(scenario_df) == 1.0
    assert monthly_average(scenario_df, TransactionType.EXPENSE) == 500.0
    assert monthly_average(scenario_df, "Income") == 1000.0


def test_totals_and_counts(mixed_df):
    assert total_by_type(mixed_df, "Income") == pytest.approx(101500.0)
    assert total_by_type(mixed_df, TransactionType.EXPENSE) == pytest.approx(5490.74)
    assert count_by_type(mixed_df, "Income") == 3
    assert count_by_type(mixed_df, "Expense") == 6


def test_net_savings_identity(mixed_df):
    assert net_savings(mixed_df) == total_by_type(mixed_df, "Income") - total_by_type(mixed_df, "Expense")


def test_category_totals_sorted_descending(mixed_df):
    totals = category_totals(mixed_df)
    assert totals.index.tolist() == ["Rent", "Food", "Travel", "Entertainment"]
    values = totals.tolist()
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_category_totals_can_total_income(mixed_df):
    assert category_totals(mixed_df, "Income").index.tolist() == ["Salary", "Freelance"]


def test_ties_keep_first_seen_order():
    df = load_records([
        make_tx("Expense", 100, "2024-06-01", category="Travel"),
        make_tx("Expense", 50, "2024-06-02", category="Food"),
        make_tx("Expense", 100, "2024-06-03", category="Bills"),
        make_tx("Expense", 50, "2024-06-04", category="Food"),
    ])
    assert category_totals(df).index.tolist() == ["Travel", "Food", "Bills"]


def test_top_categories_format(mixed_df):
    assert top_categories(mixed_df, 2) == ["Rent: ₹2300.00", "Food: ₹1840.75"]
    assert top_categories(mixed_df, 2, currency="$") == ["Rent: $2300.00", "Food: $1840.75"]
    assert len(top_categories(mixed_df, 10)) == 4
    assert top_categories(mixed_df, 0) == []


def test_months_spanned_is_fractional_past_one_month():
    df = load_records([
        make_tx("Expense", 90, "2024-01-01"),
        make_tx("Expense", 90, "2024-02-15"),
    ])
    assert months_spanned(df) == pytest.approx(1.5)
    assert monthly_average(df, "Expense") == pytest.approx(120.0)


def test_date_span(scenario_df):
    earliest, latest = date_span(scenario_df)
    assert earliest == pd.Timestamp("2024-06-01T09:00:00")
    assert latest == pd.Timestamp("2024-06-10T19:15:00")


def test_empty_input_is_neutral():
    df = empty_frame()
    assert total_by_type(df, "Income") == 0.0
    assert total_by_type(df, "Expense") == 0.0
    assert count_by_type(df, "Expense") == 0
    assert net_savings(df) == 0.0
    assert category_totals(df).empty
    assert top_categories(df, 5) == []
    assert date_span(df) == (None, None)
    assert months_spanned(df) == 1.0
    assert monthly_average(df, "Expense") == 0.0
    assert summarize(df) == Summary()


def test_unparseable_amount_counts_as_zero():
    df = load_records([
        make_tx("Expense", "not-a-number", "2024-06-01", category="Food"),
        make_tx("Expense", "25.50", "2024-06-02", category="Food"),
    ])
    assert total_by_type(df, "Expense") == 25.5
    assert count_by_type(df, "Expense") == 2


def test_summarize(scenario_df):
    s = summarize(scenario_df)
    assert s.total_income == 1000.0
    assert s.total_expenses == 500.0
    assert s.net_savings == 500.0
    assert (s.transaction_count, s.income_count, s.expense_count) == (3, 1, 2)
    assert s.avg_monthly_expenses == 500.0
    assert s.top_categories == ["Food: ₹500.00"]
    assert s.earliest.date().isoformat() == "2024-06-01"
    assert s.latest.date().isoformat() == "2024-06-10"
    assert not s.is_empty


def test_summarize_tolerates_nanosecond_timestamps():
    df = load_records([make_tx("Expense", 10, "2024-06-01T08:00:00")])
    df.loc[0, "occurred_at"] = pd.Timestamp("2024-06-01T08:00:00.000000001")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        s = summarize(df)
    assert s.earliest.isoformat() == "2024-06-01T08:00:00"
