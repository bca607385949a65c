import math
from datetime import date

import pytest

from ticket_analytics.aggregator import aggregate, finalize, merge_accumulators
from ticket_analytics.classifier import RuleOptions
from ticket_analytics.constants import (
    ConversionBase,
    CustomerSegment,
    DateBasis,
    GroupBy,
    HandlingBucket,
)
from ticket_analytics.models import Activity, DateRange, GroupAccumulator

MARCH = DateRange(from_=date(2024, 3, 1), to=date(2024, 3, 31))


@pytest.fixture
def activities(raw_activities) -> list[Activity]:
    return [Activity.from_dict(data=record) for record in raw_activities]


def converted(amount, **fields) -> Activity:
    return Activity(
        agent_ref="A1",
        traffic="Sales",
        status="Converted into Sales",
        so_amount=amount,
        date_created="2024-03-05T10:00:00",
        **fields,
    )


def test_unparseable_amount_counts_as_conversion_with_zero_revenue():
    groups = aggregate([converted("1500"), converted("abc")], None, GroupBy.AGENT)

    assert groups["A1"].converted_count == 2
    assert groups["A1"].total_amount == 1500.0


def test_empty_input_gives_no_groups():
    assert aggregate([], MARCH, GroupBy.AGENT) == {}


def test_groups_preserve_first_seen_order_and_skip_blank_keys(activities):
    groups = aggregate(activities, None, GroupBy.AGENT)
    assert list(groups) == ["A1", "A2", "A3"]


def test_keys_are_trimmed():
    groups = aggregate([Activity(agent_ref=" A1 "), Activity(agent_ref="A1")], None, GroupBy.AGENT)

    assert list(groups) == ["A1"]
    assert groups["A1"].non_sales_count == 2


def test_date_range_filters_on_date_created(activities):
    groups = aggregate(activities, MARCH, GroupBy.AGENT)

    assert list(groups) == ["A1", "A2"]
    assert sum(group.sales_count + group.non_sales_count for group in groups.values()) == 3


def test_records_without_date_are_dropped_when_range_given():
    groups = aggregate([Activity(agent_ref="A1", traffic="Sales")], MARCH, GroupBy.AGENT)
    assert groups == {}


def test_first_available_date_basis_prefers_ticket_received():
    activity = Activity(
        agent_ref="A1",
        ticket_received="2024-03-10T08:00:00",
        date_created="2024-05-01T08:00:00",
    )
    options = RuleOptions(date_basis=DateBasis.FIRST_AVAILABLE)

    assert list(aggregate([activity], MARCH, GroupBy.AGENT, options)) == ["A1"]
    assert aggregate([activity], MARCH, GroupBy.AGENT) == {}


def test_group_by_manager(activities):
    groups = aggregate(activities, None, GroupBy.MANAGER)

    assert list(groups) == ["M1"]
    assert groups["M1"].converted_count == 2
    assert groups["M1"].total_amount == 5500.0


def test_group_key_may_be_a_callable(activities):
    groups = aggregate(activities, None, lambda activity: activity.customer_status)
    assert set(groups) == {"New Client", "Existing Active"}


def test_accumulated_sums_for_one_agent(activities):
    a1 = aggregate(activities, MARCH, GroupBy.AGENT)["A1"]

    assert (a1.sales_count, a1.non_sales_count, a1.converted_count) == (1, 1, 1)
    assert a1.total_amount == 1500.0
    assert a1.total_qty == 3.0
    assert a1.segment_amounts[CustomerSegment.NEW_CLIENT] == 1500.0
    assert a1.week_amounts == [0.0, 1500.0, 0.0, 0.0]
    assert a1.bucket_seconds[HandlingBucket.RESPONSE] == 600
    assert a1.bucket_seconds[HandlingBucket.QUOTATION] == 3600
    assert a1.bucket_seconds[HandlingBucket.NON_QUOTATION] == 1800


def test_segments_are_gated_on_sales_by_default(activities):
    gated = aggregate(activities, MARCH, GroupBy.AGENT)["A1"]
    ungated = aggregate(
        activities, MARCH, GroupBy.AGENT, RuleOptions(gate_segments_on_sales=False)
    )["A1"]

    assert gated.segment_counts[CustomerSegment.EXISTING_ACTIVE] == 0
    assert ungated.segment_counts[CustomerSegment.EXISTING_ACTIVE] == 1
    assert gated.segment_counts[CustomerSegment.NEW_CLIENT] == 1


def test_bucket_average_uses_floor_division():
    activities = [
        Activity(
            agent_ref="A1",
            remarks="Sold",
            ticket_received="2024-03-01T09:00:00",
            tsa_handling_time=handled,
        )
        for handled in ("2024-03-01T09:00:10", "2024-03-01T09:00:15")
    ]
    row = finalize(aggregate(activities, None, GroupBy.AGENT)["A1"])

    assert row.avg_seconds[HandlingBucket.QUOTATION] == 12
    assert row.avg_seconds[HandlingBucket.SPF] is None


def test_finalize_empty_accumulator_has_no_nan():
    row = finalize(GroupAccumulator(key="A1"))

    assert row.conversion_rate == 0.0
    assert row.avg_unit_value == 0.0
    assert row.avg_transaction_value == 0.0
    assert all(value is None for value in row.avg_seconds.values())
    assert all(math.isfinite(value) for value in (row.total_amount, row.total_qty))


def test_conversion_rate_base(activities):
    a1 = aggregate(activities, MARCH, GroupBy.AGENT)["A1"]

    assert finalize(a1).conversion_rate == 100.0
    assert finalize(a1, RuleOptions(conversion_base=ConversionBase.ALL_INQUIRIES)).conversion_rate == 50.0


def test_conversion_rate_without_sales_base_is_zero():
    accumulator = GroupAccumulator(key="A1", non_sales_count=3, converted_count=1)
    assert finalize(accumulator).conversion_rate == 0.0


def test_averages_per_converted_sale(activities):
    row = finalize(aggregate(activities, None, GroupBy.MANAGER)["M1"])

    assert row.avg_unit_value == 2.5
    assert row.avg_transaction_value == 2750.0
    assert row.week_amounts == (0.0, 1500.0, 0.0, 4000.0)


def test_aggregate_does_not_mutate_inputs(activities):
    before = [activity.to_dict() for activity in activities]
    aggregate(activities, MARCH, GroupBy.AGENT)
    assert [activity.to_dict() for activity in activities] == before


def test_merge_accumulators_sums_everything(activities):
    groups = aggregate(activities, None, GroupBy.AGENT)
    merged = merge_accumulators(groups.values(), "Total")

    assert merged.key == "Total"
    assert merged.sales_count == 3
    assert merged.non_sales_count == 1
    assert merged.converted_count == 3
    assert merged.total_amount == 6499.0
    assert merged.bucket_counts[HandlingBucket.RESPONSE] == 1
    assert merged.week_amounts == [0.0, 1500.0, 0.0, 4000.0]


def test_out_of_range_timestamps_and_amounts_do_not_raise():
    activities = [
        Activity(
            agent_ref="A1",
            remarks="Sold",
            ticket_received="0001-01-01T00:00:00+14:00",
            tsa_handling_time="2024-03-01T10:00:00",
        ),
        converted(10**400, date_updated="9999-12-31T23:59:59-14:00"),
        converted("250"),
    ]

    a1 = aggregate(activities, None, GroupBy.AGENT)["A1"]

    assert a1.converted_count == 2
    assert a1.total_amount == 250.0
    assert a1.bucket_counts[HandlingBucket.QUOTATION] == 0
    assert a1.week_amounts == [0.0, 0.0, 0.0, 0.0]
