"""Data models for rendered reports."""

from dataclasses import dataclass

from ..constants import GroupBy, ReportLayout
from ..models import FinalizedRow


@dataclass(frozen=True)
class ReportRow:
    """One ranked report line."""

    rank: int | None  # None for the footer row
    name: str
    metrics: FinalizedRow


@dataclass
class ReportTable:
    """Ranked rows plus the synthesized footer, with the column layout to render them in."""

    group_by: GroupBy
    layout: ReportLayout
    rows: list[ReportRow]
    total: ReportRow
