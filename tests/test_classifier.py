import itertools

import pytest

from ticket_analytics.classifier import (
    RuleOptions,
    classify,
    is_sales_inquiry,
    response_time,
    route_handling_time,
)
from ticket_analytics.constants import CustomerSegment, HandlingBucket
from ticket_analytics.models import Activity

RECEIVED = "2024-03-01T09:00:00"
HANDLED = "2024-03-01T10:00:00"


def timed(**fields) -> Activity:
    return Activity(ticket_received=RECEIVED, tsa_handling_time=HANDLED, **fields)


def test_po_received_is_never_a_sale():
    activity = Activity(
        traffic="Sales", status="Converted into Sales", remarks="PO Received", so_amount=500
    )
    result = classify(activity)

    assert not result.is_sales_inquiry
    assert result.is_non_sales_inquiry
    assert not result.is_converted_sale


def test_non_sales_wrapup_beats_sales_traffic():
    activity = Activity(traffic="sales", wrap_up="Non Sales", status="Converted into Sales")
    result = classify(activity)

    assert result.is_non_sales_inquiry
    assert not result.is_converted_sale


def test_converted_sale_requires_exact_status():
    assert classify(Activity(traffic="Sales", status=" converted INTO sales ")).is_converted_sale
    assert not classify(Activity(traffic="Sales", status="Converted")).is_converted_sale
    assert not classify(Activity(traffic="Non-Sales", status="Converted into Sales")).is_converted_sale


@pytest.mark.parametrize(
    "traffic, remarks, wrap_up, override",
    list(
        itertools.product(
            ["Sales", "Non-Sales", None],
            ["PO Received", "Sold", None],
            ["Customer Order", "Non Sales", "Prank Call", None],
            [False, True],
        )
    ),
)
def test_every_record_is_exactly_one_of_sales_or_non_sales(traffic, remarks, wrap_up, override):
    activity = Activity(traffic=traffic, remarks=remarks, wrap_up=wrap_up)
    result = classify(activity, RuleOptions(sales_wrapup_override=override))

    assert result.is_sales_inquiry != result.is_non_sales_inquiry
    if result.is_converted_sale:
        assert result.is_sales_inquiry


def test_sales_wrapup_override():
    activity = Activity(traffic="Non-Sales", wrap_up="Follow Up Sales")

    assert not is_sales_inquiry(activity)
    assert is_sales_inquiry(activity, RuleOptions(sales_wrapup_override=True))


def test_sales_wrapup_override_does_not_beat_po_received():
    activity = Activity(traffic="Non-Sales", wrap_up="Customer Order", remarks="po received")
    assert not is_sales_inquiry(activity, RuleOptions(sales_wrapup_override=True))


def test_excluded_wrapup_has_no_response_or_handling_time():
    activity = Activity(
        traffic="Sales",
        wrap_up="Job Applicants",
        remarks="Sold",
        ticket_received=RECEIVED,
        tsa_handling_time=HANDLED,
        ticket_endorsed=RECEIVED,
        tsa_acknowledge_date=HANDLED,
    )
    result = classify(activity)

    assert result.handling_bucket is HandlingBucket.NONE
    assert result.handling_seconds is None
    assert result.response_seconds is None


@pytest.mark.parametrize(
    "remarks, bucket",
    [
        ("Sold", HandlingBucket.QUOTATION),
        ("Quotation For Approval", HandlingBucket.QUOTATION),
        ("Assisted", HandlingBucket.NON_QUOTATION),
        ("Disapproved Quotation", HandlingBucket.NON_QUOTATION),
        ("Dissaproved Quotation", HandlingBucket.NON_QUOTATION),
        ("PO Received", HandlingBucket.NON_QUOTATION),
        ("For SPF processing", HandlingBucket.SPF),
        ("spf", HandlingBucket.SPF),
    ],
)
def test_route_handling_time_buckets(remarks, bucket):
    assert route_handling_time(timed(remarks=remarks)) == (bucket, 3600)


def test_unlisted_remark_keeps_seconds_without_bucket():
    assert route_handling_time(timed(remarks="Escalated")) == (HandlingBucket.NONE, 3600)
    assert route_handling_time(timed()) == (HandlingBucket.NONE, 3600)


def test_out_of_order_timestamps_produce_no_duration():
    activity = Activity(
        remarks="Sold",
        ticket_received=HANDLED,
        tsa_handling_time=RECEIVED,
        ticket_endorsed=HANDLED,
        tsa_acknowledge_date=RECEIVED,
    )

    assert route_handling_time(activity) == (HandlingBucket.NONE, None)
    assert response_time(activity) is None


def test_response_time_is_independent_of_handling_bucket():
    activity = Activity(
        remarks="Sold",
        ticket_endorsed="2024-03-01T09:05:00",
        tsa_acknowledge_date="2024-03-01T09:15:00",
    )
    result = classify(activity)

    assert result.response_seconds == 600
    assert result.handling_bucket is HandlingBucket.NONE
    assert result.handling_seconds is None


def test_segment_is_reported_for_non_sales_too():
    result = classify(Activity(traffic="Non-Sales", customer_status="Existing Inactive"))
    assert result.customer_segment is CustomerSegment.EXISTING_INACTIVE


def test_classify_does_not_mutate_activity():
    activity = timed(traffic="Sales", remarks="Sold", so_amount="12")
    before = activity.to_dict()
    classify(activity)
    assert activity.to_dict() == before
