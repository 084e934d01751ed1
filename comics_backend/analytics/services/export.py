# analytics/services/export.py

"""
REPORT EXPORT (CSV / JSON)

CSV layout: one row per metric -> Section, Metric, Value, Date
- platform metrics (dated with generated_at)
- daily revenue + daily transactions
- realtime metrics

JSON is the full comprehensive report.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from analytics.services.exceptions import UnsupportedExportFormatError

FORMAT_CSV = "csv"
FORMAT_JSON = "json"
FORMATS = (FORMAT_CSV, FORMAT_JSON)

CONTENT_TYPES = {
    FORMAT_CSV: "text/csv",
    FORMAT_JSON: "application/json",
}

CSV_HEADER = ["Section", "Metric", "Value", "Date"]


def _label(key: str) -> str:
    return key.replace("_", " ").title()


def report_rows(report: dict) -> list[list]:
    summary = report.get("summary", {})
    generated_at = summary.get("generated_at", "")

    rows = [CSV_HEADER]
    for key, value in summary.get("platform_metrics", {}).items():
        rows.append(["Platform", _label(key), value, generated_at])

    for row in report.get("revenue_analytics", {}).get("daily_revenue", []):
        rows.append(["Revenue", "Daily Revenue", row["revenue"], row["date"]])
        rows.append(["Revenue", "Daily Transactions", row["transactions"], row["date"]])

    realtime = report.get("realtime_metrics", {})
    for key, value in realtime.items():
        if key == "last_updated":
            continue
        rows.append(["Realtime", _label(key), value, realtime.get("last_updated", generated_at)])

    return rows


def to_csv(report: dict) -> str:
    buffer = io.StringIO()
    csv.writer(buffer).writerows(report_rows(report))
    return buffer.getvalue()


def to_json(report: dict) -> str:
    return json.dumps(report, cls=DjangoJSONEncoder, indent=2)


def default_filename(fmt: str) -> str:
    return f"analytics_report_{timezone.now():%Y_%m_%d_%H_%M_%S}.{fmt}"


def render_report(report: dict, fmt: str) -> tuple[str, str]:
    """Returns (content, content_type)."""
    fmt = (fmt or FORMAT_CSV).lower()
    if fmt == FORMAT_CSV:
        return to_csv(report), CONTENT_TYPES[FORMAT_CSV]
    if fmt == FORMAT_JSON:
        return to_json(report), CONTENT_TYPES[FORMAT_JSON]
    raise UnsupportedExportFormatError(f"Unsupported export format '{fmt}'. Use csv or json.")


def write_report(report: dict, fmt: str, *, directory, filename: str | None = None) -> Path:
    content, _ = render_report(report, fmt)
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)

    path = folder / (filename or default_filename(fmt.lower()))
    path.write_text(content, encoding="utf-8")
    return path
