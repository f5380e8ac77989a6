"""
errors.py - Exceptions raised at the edges of the reporting pipeline.

The core (range resolution, filtering, bucketing, aggregation, formatting)
never raises on well-typed input. These are only used by entry validation
and configuration loading.
"""


class FinreportError(Exception):
    """Base class for all finreport errors."""


class SettingsError(FinreportError):
    """The settings file exists but could not be parsed or validated."""


class InvalidTransactionError(FinreportError, ValueError):
    """A new transaction entry failed validation."""


class DuplicateTransactionError(FinreportError):
    """An identical transaction was recorded within the duplicate window."""

    def __init__(self, message: str, matches: int = 1):
        super().__init__(message)
        self.matches = matches
