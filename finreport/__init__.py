"""
finreport - Transaction reporting pipeline for a personal-finance tracker.

Resolves date-range filter tokens, filters and buckets a user's transactions,
aggregates them into a summary, and renders the grounding context handed to
the AI assistant.
"""

__version__ = "0.1.0"
