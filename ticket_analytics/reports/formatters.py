"""Ranking, footer synthesis and cell rendering for sales conversion reports."""

import csv
from collections.abc import Callable, Iterable, Mapping

import pandas as pd

from ..aggregator import finalize, merge_accumulators
from ..classifier import DEFAULT_OPTIONS, RuleOptions
from ..constants import (
    NO_DATA,
    TOTAL_LABEL,
    CustomerSegment,
    GroupBy,
    HandlingBucket,
    NameLabel,
    ReportColumn,
    ReportLayout,
    UnknownName,
)
from ..models import FinalizedRow, GroupAccumulator, Person
from ..timeutils import format_duration
from .models import ReportRow, ReportTable

_CONVERSION_COLUMNS: tuple[ReportColumn, ...] = (
    ReportColumn.RANK,
    ReportColumn.NAME,
    ReportColumn.SALES,
    ReportColumn.NON_SALES,
    ReportColumn.TOTAL_AMOUNT,
    ReportColumn.QTY_SOLD,
    ReportColumn.CONVERTED,
    ReportColumn.CONVERSION_RATE,
    ReportColumn.NEW_CLIENT,
    ReportColumn.NEW_NON_BUYING,
    ReportColumn.EXISTING_ACTIVE,
    ReportColumn.EXISTING_INACTIVE,
    ReportColumn.NEW_CLIENT_CONVERTED,
    ReportColumn.NEW_NON_BUYING_CONVERTED,
    ReportColumn.EXISTING_ACTIVE_CONVERTED,
    ReportColumn.EXISTING_INACTIVE_CONVERTED,
)

_HANDLING_COLUMNS: tuple[ReportColumn, ...] = (
    ReportColumn.RESPONSE_TIME,
    ReportColumn.NON_QUOTATION_HT,
    ReportColumn.QUOTATION_HT,
    ReportColumn.SPF_HT,
)

LAYOUT_COLUMNS: dict[ReportLayout, tuple[ReportColumn, ...]] = {
    ReportLayout.CONVERSION: _CONVERSION_COLUMNS,
    ReportLayout.HANDLING: (ReportColumn.RANK, ReportColumn.NAME, *_HANDLING_COLUMNS),
    ReportLayout.WEEKLY: (
        ReportColumn.RANK,
        ReportColumn.NAME,
        ReportColumn.SALES,
        ReportColumn.NON_SALES,
        ReportColumn.QTY_SOLD,
        ReportColumn.CONVERTED,
        ReportColumn.WEEK_1,
        ReportColumn.WEEK_2,
        ReportColumn.WEEK_3,
        ReportColumn.WEEK_4,
        ReportColumn.TOTAL_AMOUNT,
    ),
    ReportLayout.FULL: (
        *_CONVERSION_COLUMNS,
        ReportColumn.AVG_UNIT_VALUE,
        ReportColumn.AVG_TRANSACTION_VALUE,
        *_HANDLING_COLUMNS,
    ),
}


def format_count(value: float) -> str:
    return str(int(value))


def format_quantity(value: float) -> str:
    """Whole quantities without a decimal point, fractional ones as-is."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_amount(value: float) -> str:
    return f"{value:.2f}"


def format_rate(value: float) -> str:
    return f"{value:.2f}%"


def _duration(bucket: HandlingBucket) -> Callable[[FinalizedRow], str]:
    return lambda row: format_duration(row.avg_seconds[bucket])


def _segment_count(segment: CustomerSegment) -> Callable[[FinalizedRow], str]:
    return lambda row: format_count(row.segment_counts[segment])


def _segment_amount(segment: CustomerSegment) -> Callable[[FinalizedRow], str]:
    return lambda row: format_amount(row.segment_amounts[segment])


def _week(index: int) -> Callable[[FinalizedRow], str]:
    return lambda row: format_amount(row.week_amounts[index])


METRIC_CELLS: dict[ReportColumn, Callable[[FinalizedRow], str]] = {
    ReportColumn.SALES: lambda row: format_count(row.sales_count),
    ReportColumn.NON_SALES: lambda row: format_count(row.non_sales_count),
    ReportColumn.TOTAL_AMOUNT: lambda row: format_amount(row.total_amount),
    ReportColumn.QTY_SOLD: lambda row: format_quantity(row.total_qty),
    ReportColumn.CONVERTED: lambda row: format_count(row.converted_count),
    ReportColumn.CONVERSION_RATE: lambda row: format_rate(row.conversion_rate),
    ReportColumn.NEW_CLIENT: _segment_count(CustomerSegment.NEW_CLIENT),
    ReportColumn.NEW_NON_BUYING: _segment_count(CustomerSegment.NEW_NON_BUYING),
    ReportColumn.EXISTING_ACTIVE: _segment_count(CustomerSegment.EXISTING_ACTIVE),
    ReportColumn.EXISTING_INACTIVE: _segment_count(CustomerSegment.EXISTING_INACTIVE),
    ReportColumn.NEW_CLIENT_CONVERTED: _segment_amount(CustomerSegment.NEW_CLIENT),
    ReportColumn.NEW_NON_BUYING_CONVERTED: _segment_amount(CustomerSegment.NEW_NON_BUYING),
    ReportColumn.EXISTING_ACTIVE_CONVERTED: _segment_amount(CustomerSegment.EXISTING_ACTIVE),
    ReportColumn.EXISTING_INACTIVE_CONVERTED: _segment_amount(
        CustomerSegment.EXISTING_INACTIVE
    ),
    ReportColumn.AVG_UNIT_VALUE: lambda row: format_amount(row.avg_unit_value),
    ReportColumn.AVG_TRANSACTION_VALUE: lambda row: format_amount(row.avg_transaction_value),
    ReportColumn.RESPONSE_TIME: _duration(HandlingBucket.RESPONSE),
    ReportColumn.NON_QUOTATION_HT: _duration(HandlingBucket.NON_QUOTATION),
    ReportColumn.QUOTATION_HT: _duration(HandlingBucket.QUOTATION),
    ReportColumn.SPF_HT: _duration(HandlingBucket.SPF),
    ReportColumn.WEEK_1: _week(0),
    ReportColumn.WEEK_2: _week(1),
    ReportColumn.WEEK_3: _week(2),
    ReportColumn.WEEK_4: _week(3),
}


def resolve_name(key: str, people: Mapping[str, Person], group_by: GroupBy) -> str:
    """Display name for a grouping key, or the unknown placeholder for its role."""
    person = people.get(key)
    if person is not None and person.full_name:
        return person.full_name
    return str(UnknownName[group_by.name])


def rank_rows(rows: Iterable[FinalizedRow]) -> list[FinalizedRow]:
    """Order rows by total amount, highest first. Ties keep their input order."""
    return sorted(rows, key=lambda row: row.total_amount, reverse=True)


def build_report(
    accumulators: Mapping[str, GroupAccumulator],
    group_by: GroupBy,
    *,
    people: Mapping[str, Person] | None = None,
    layout: ReportLayout = ReportLayout.CONVERSION,
    options: RuleOptions = DEFAULT_OPTIONS,
) -> ReportTable:
    """Finalize, rank and name every group, and synthesize the footer.

    The footer sums every running total across groups and derives its
    rates and averages from those sums, so it is never an average of
    averages.

    Args:
        accumulators: Output of ``aggregate``.
        group_by: Grouping key the accumulators were built with.
        people: Directory keyed by reference id, for display names.
        layout: Column layout to render.
        options: Rule switches, used for the conversion rate base.

    Returns:
        ReportTable: Ranked rows and the footer.
    """
    people = people or {}
    ranked = rank_rows(finalize(accumulator, options) for accumulator in accumulators.values())
    rows = [
        ReportRow(rank=index, name=resolve_name(row.key, people, group_by), metrics=row)
        for index, row in enumerate(ranked, 1)
    ]

    total = ReportRow(
        rank=None,
        name=TOTAL_LABEL,
        metrics=finalize(merge_accumulators(accumulators.values(), TOTAL_LABEL), options),
    )

    return ReportTable(group_by=group_by, layout=layout, rows=rows, total=total)


def report_headers(layout: ReportLayout, group_by: GroupBy) -> list[str]:
    """Column headers for a layout, with the name column labelled per role."""
    return [
        str(NameLabel[group_by.name] if column == ReportColumn.NAME else column)
        for column in LAYOUT_COLUMNS[layout]
    ]


def render_row(row: ReportRow, layout: ReportLayout) -> list[str]:
    cells: list[str] = []
    for column in LAYOUT_COLUMNS[layout]:
        if column == ReportColumn.RANK:
            cells.append(NO_DATA if row.rank is None else str(row.rank))
        elif column == ReportColumn.NAME:
            cells.append(row.name)
        else:
            cells.append(METRIC_CELLS[column](row.metrics))
    return cells


def render_table(table: ReportTable) -> list[list[str]]:
    """Rendered body rows followed by the footer row."""
    rendered = [render_row(row, table.layout) for row in table.rows]
    rendered.append(render_row(table.total, table.layout))
    return rendered


def to_csv(headers: list[str], rows: list[list[str]]) -> str:
    """Serialize rows as CSV with every field quoted and embedded quotes doubled."""
    frame = pd.DataFrame(rows, columns=headers, dtype=str)
    return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def table_to_csv(table: ReportTable) -> str:
    return to_csv(report_headers(table.layout, table.group_by), render_table(table))
