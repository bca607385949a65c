"""Report generation: ranking, footer totals, column layouts and CSV export."""

from .formatters import (
    LAYOUT_COLUMNS,
    build_report,
    rank_rows,
    render_table,
    report_headers,
    resolve_name,
    table_to_csv,
    to_csv,
)
from .models import ReportRow, ReportTable

__all__ = [
    "LAYOUT_COLUMNS",
    "ReportRow",
    "ReportTable",
    "build_report",
    "rank_rows",
    "render_table",
    "report_headers",
    "resolve_name",
    "table_to_csv",
    "to_csv",
]
