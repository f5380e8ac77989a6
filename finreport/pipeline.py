"""
pipeline.py - Run the full reporting pipeline for one user and one filter.

    records -> resolve range -> filter -> bucket / aggregate -> format

The returned dict is what both the dashboard and the assistant consume.
"""

import logging
from datetime import datetime
from typing import Optional

import pandas as pd

from finreport.aggregate import summarize
from finreport.bucketing import Granularity, bucket_totals, granularity_for_token
from finreport.charts import line_chart_data, pie_chart_data, summary_cards
from finreport.config import Settings
from finreport.context import recent_transactions, render_context
from finreport.filters import filter_by_token
from finreport.models import TransactionType
from finreport.timerange import canonical_token, resolve_range

logger = logging.getLogger(__name__)


def build_report(
    df: pd.DataFrame,
    token: Optional[str],
    now: datetime | pd.Timestamp,
    settings: Optional[Settings] = None,
    granularity: Granularity | str | None = None,
) -> dict:
    """
    Run range resolution, filtering, bucketing, aggregation and formatting.

    Args:
        df: All of the user's transactions (from ingest).
        token: Filter token; unknown tokens mean "today".
        now: Current instant.
        settings: Presentation settings.
        granularity: Override the bucket size chosen from the token.

    Returns:
        Dict with keys:
            'token'             - the token actually applied
            'range'             - TimeRange or None (all)
            'transactions'      - filtered frame
            'granularity'       - Granularity used for buckets
            'buckets'           - per-bucket income/expense totals
            'summary'           - Summary
            'context'           - assistant grounding text
            'line_chart'        - line chart payload
            'pie_chart_expense' - expense pie payload
            'pie_chart_income'  - income pie payload
            'cards'             - formatted summary card values
    """
    settings = settings or Settings()
    token = canonical_token(token)
    time_range = resolve_range(token, now)
    granularity = Granularity(granularity) if granularity else granularity_for_token(token)

    filtered = filter_by_token(df, token, now)
    logger.info("Filter %r kept %d of %d transactions", token, len(filtered), len(df))

    summary = summarize(filtered, top_n=settings.top_n, currency=settings.currency_symbol)
    context = render_context(summary, recent_transactions(filtered, settings.recent_limit), settings)

    return {
        "token": token,
        "range": time_range,
        "transactions": filtered,
        "granularity": granularity,
        "buckets": bucket_totals(filtered, granularity),
        "summary": summary,
        "context": context,
        "line_chart": line_chart_data(df, token, now, "both", settings, granularity),
        "pie_chart_expense": pie_chart_data(filtered, TransactionType.EXPENSE, settings),
        "pie_chart_income": pie_chart_data(filtered, TransactionType.INCOME, settings),
        "cards": summary_cards(filtered, settings.currency_symbol),
    }
