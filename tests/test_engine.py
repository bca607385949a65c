from datetime import date

from ticket_analytics import RuleOptions, SalesConversionEngine
from ticket_analytics.constants import ConversionBase, GroupBy, ReportLayout
from ticket_analytics.engine import to_activities
from ticket_analytics.models import Activity, DateRange
from ticket_analytics.storage import index_people


def test_to_activities_accepts_dicts_and_activities(raw_activities):
    existing = Activity(agent_ref="Z")
    activities = to_activities([raw_activities[0], existing])

    assert activities[0].agent_ref == "A1"
    assert activities[1] is existing


def test_run_builds_ranked_report(raw_activities, people_records):
    table = SalesConversionEngine().run(
        activities=raw_activities,
        group_by=GroupBy.AGENT,
        date_range=DateRange(from_=date(2024, 3, 1), to=date(2024, 3, 31)),
        people=index_people(people_records),
    )

    assert [row.name for row in table.rows] == ["Jose Reyes", "Maria Santos"]
    assert table.total.metrics.total_amount == 5500.0
    assert table.layout is ReportLayout.CONVERSION


def test_run_with_no_matches_returns_footer_only(raw_activities):
    table = SalesConversionEngine().run(
        activities=raw_activities,
        group_by=GroupBy.AGENT,
        date_range=DateRange(from_=date(2030, 1, 1)),
    )

    assert table.rows == []
    assert table.total.metrics.sales_count == 0


def test_runs_are_independent(raw_activities):
    engine = SalesConversionEngine(options=RuleOptions(conversion_base=ConversionBase.ALL_INQUIRIES))

    first = engine.run(activities=raw_activities, group_by=GroupBy.MANAGER)
    second = engine.run(activities=raw_activities, group_by=GroupBy.MANAGER)

    assert first.total.metrics == second.total.metrics
    assert first.rows[0].metrics.conversion_rate == 2 / 3 * 100
