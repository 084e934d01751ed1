# analytics/services/exceptions.py


class AnalyticsServiceError(Exception):
    """Base error for analytics / reporting."""


class InvalidPeriodError(AnalyticsServiceError):
    """Unknown period keyword or malformed date range."""


class UnsupportedExportFormatError(AnalyticsServiceError):
    """Export format other than csv / json."""
