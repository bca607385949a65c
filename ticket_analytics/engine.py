"""Sales conversion engine: date filter, grouping, aggregation and report assembly."""

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from .aggregator import aggregate, filter_date
from .classifier import DEFAULT_OPTIONS, RuleOptions
from .constants import GroupBy, LogMessage, ReportLayout
from .models import Activity, DateRange, Person
from .reports import ReportTable, build_report
from .timeutils import parse_safe


def to_activities(records: Iterable[Activity | dict[str, Any]]) -> list[Activity]:
    """Convert raw ticket dictionaries to Activity objects; Activities pass through."""
    return [
        record if isinstance(record, Activity) else Activity.from_dict(data=record)
        for record in records
    ]


class SalesConversionEngine:
    """Builds ranked per-operator sales conversion reports from activity records.

    Each call to ``run`` owns its accumulators, so an engine can be reused
    across date ranges and groupings without any shared state.

    Attributes:
        options: Rule switches applied to every run.
    """

    def __init__(self, *, options: RuleOptions = DEFAULT_OPTIONS):
        """Initialize the SalesConversionEngine.

        Args:
            options: Rule switches for classification and finalization.
        """
        self.options = options

    def run(
        self,
        *,
        activities: Iterable[Activity | dict[str, Any]],
        group_by: GroupBy,
        date_range: DateRange | None = None,
        people: Mapping[str, Person] | None = None,
        layout: ReportLayout = ReportLayout.CONVERSION,
    ) -> ReportTable:
        """Aggregate activities and assemble the ranked report.

        Args:
            activities: Activity objects or raw ticket dictionaries.
            group_by: Operator key to group by.
            date_range: Inclusive range; None keeps every activity.
            people: Directory keyed by reference id, for display names.
            layout: Column layout of the report.

        Returns:
            ReportTable: Ranked rows and the footer.
        """
        logger.info(LogMessage.AGGREGATION_HEADER)

        records = to_activities(activities)
        groups = aggregate(records, date_range, group_by, self.options)

        self._print_summary(
            records=records, groups=groups, group_by=group_by, date_range=date_range
        )

        return build_report(
            groups, group_by, people=people, layout=layout, options=self.options
        )

    def _print_summary(
        self,
        *,
        records: list[Activity],
        groups: Mapping[str, Any],
        group_by: GroupBy,
        date_range: DateRange | None,
    ) -> None:
        """Log how many records survived filtering and how many groups were built."""
        included = sum(
            accumulator.sales_count + accumulator.non_sales_count
            for accumulator in groups.values()
        )
        logger.info(LogMessage.FILTERED.format(included, len(records), group_by))
        logger.info(LogMessage.GROUPS_BUILT.format(len(groups), group_by))

        if date_range is not None:
            undated = sum(
                1
                for record in records
                if parse_safe(filter_date(record, self.options.date_basis)) is None
            )
            if undated:
                logger.debug(LogMessage.UNPARSEABLE_DATES.format(undated))

        if not groups:
            logger.warning(LogMessage.NO_DATA)
