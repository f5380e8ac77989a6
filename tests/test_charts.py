from finreport.charts import NO_DATA, line_chart_data, pie_chart_data, pie_legend, summary_cards
from finreport.config import Settings
from finreport.ingest import load_records
from finreport.models import empty_frame
from tests.conftest import NOW, make_tx


def test_pie_chart_expense(mixed_df, settings):
    pie = pie_chart_data(mixed_df, "Expense", settings)
    assert pie["labels"] == ["Rent", "Food", "Travel", "Entertainment"]
    assert pie["data"] == [2300.0, 1840.75, 899.99, 450.0]
    assert pie["colors"] == settings.chart_colors[:4]


def test_pie_chart_no_data_fallback(settings):
    pie = pie_chart_data(empty_frame(), "Income", settings)
    assert pie == {"labels": [NO_DATA], "data": [1], "colors": [settings.no_data_color]}
    assert pie_legend(pie) == []


def test_pie_chart_type_with_no_rows(scenario_df, settings):
    only_income = scenario_df[scenario_df["type"] == "Income"]
    assert pie_chart_data(only_income, "Expense", settings)["labels"] == [NO_DATA]


def test_pie_colors_cycle():
    settings = Settings(chart_colors=["#111111", "#222222"])
    df = load_records([
        make_tx("Expense", 30, "2024-06-01", category="A"),
        make_tx("Expense", 20, "2024-06-01", category="B"),
        make_tx("Expense", 10, "2024-06-01", category="C"),
    ])
    assert pie_chart_data(df, "Expense", settings)["colors"] == ["#111111", "#222222", "#111111"]


def test_pie_legend():
    df = load_records([
        make_tx("Expense", 75, "2024-06-01", category="Food"),
        make_tx("Expense", 25, "2024-06-01", category="Travel"),
    ])
    legend = pie_legend(pie_chart_data(df, "Expense"))
    assert [(r["label"], r["value"], r["percentage"]) for r in legend] == [
        ("Food", "₹75.00", 75.0),
        ("Travel", "₹25.00", 25.0),
    ]


def test_line_chart_daily(mixed_df, settings):
    chart = line_chart_data(mixed_df, "7days", NOW, "both", settings)
    assert chart["granularity"] == "daily"
    assert chart["keys"] == ["2024-06-09", "2024-06-12", "2024-06-15"]
    assert chart["labels"] == ["9 Jun", "12 Jun", "15 Jun"]
    income, expense = chart["datasets"]
    assert income["label"] == "Income" and income["color"] == settings.income_color
    assert income["data"] == [0.0, 1500.0, 0.0]
    assert expense["data"] == [640.25, 0.0, 99.99]


def test_line_chart_monthly_for_all(mixed_df):
    chart = line_chart_data(mixed_df, "all", NOW)
    assert chart["labels"] == ["Apr 2024", "May 2024", "Jun 2024"]


def test_line_chart_single_series(mixed_df):
    chart = line_chart_data(mixed_df, "all", NOW, series="expense")
    assert [d["label"] for d in chart["datasets"]] == ["Expenses"]


def test_line_chart_granularity_override(mixed_df):
    chart = line_chart_data(mixed_df, "all", NOW, granularity="weekly")
    assert chart["granularity"] == "weekly"
    assert chart["labels"][0] == "Week 1 Apr"


def test_line_chart_no_data(mixed_df):
    chart = line_chart_data(mixed_df, "today", "2030-01-01T00:00:00")
    assert chart["labels"] == [NO_DATA]
    assert chart["datasets"] == []


def test_summary_cards(scenario_df):
    assert summary_cards(scenario_df) == {
        "total_income": "₹1000.00",
        "total_expenses": "₹500.00",
        "net_savings": "₹500.00",
    }
    assert summary_cards(empty_frame(), "$")["net_savings"] == "$0.00"
