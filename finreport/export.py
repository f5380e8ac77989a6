"""
export.py - Write pipeline results to CSV, JSON and plain text.
"""

import json
from pathlib import Path

from finreport.charts import pie_legend


# ---------------------------------------------------------------------------
# CSV exports
# ---------------------------------------------------------------------------

def export_csvs(results: dict, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    txns = results["transactions"].copy()
    if not txns.empty:
        txns = txns.sort_values("occurred_at", ascending=False, kind="stable")
    exports = {
        "transactions.csv": txns,
        "buckets.csv":      results["buckets"],
    }
    for filename, df in exports.items():
        path = output_dir / filename
        df.to_csv(path, index=False)
        print(f"  Saved {filename} ({len(df)} rows)")


# ---------------------------------------------------------------------------
# JSON / text
# ---------------------------------------------------------------------------

def _j(v) -> str:
    return json.dumps(v, default=str, ensure_ascii=False, indent=2)


def _range_dict(time_range) -> dict | None:
    if time_range is None:
        return None
    return {"start": time_range.start.isoformat(), "end": time_range.end.isoformat()}


def export_json(results: dict, output_dir: Path, currency: str = "₹") -> None:
    output_dir.mkdir(parents=True, exist_ok=True)

    charts = {
        "line": results["line_chart"],
        "pie_expense": results["pie_chart_expense"],
        "pie_income": results["pie_chart_income"],
        "pie_expense_legend": pie_legend(results["pie_chart_expense"], currency),
    }
    summary = {
        "filter": results["token"],
        "range": _range_dict(results["range"]),
        "granularity": results["granularity"].value,
        "cards": results["cards"],
        **results["summary"].model_dump(mode="json"),
    }

    (output_dir / "charts.json").write_text(_j(charts), encoding="utf-8")
    print("  Saved charts.json")
    (output_dir / "summary.json").write_text(_j(summary), encoding="utf-8")
    print("  Saved summary.json")


def export_context(results: dict, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "context.txt").write_text(results["context"], encoding="utf-8")
    print("  Saved context.txt")


def export(results: dict, output_dir: str | Path, currency: str = "₹") -> None:
    """
    Write every output file for a pipeline run.

    Args:
        results: Dict from pipeline.build_report().
        output_dir: Directory to write into (created if missing).
        currency: Symbol used in the pie legend.
    """
    output_dir = Path(output_dir)
    print("Exporting results...")
    export_csvs(results, output_dir)
    export_json(results, output_dir, currency)
    export_context(results, output_dir)
