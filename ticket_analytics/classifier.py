"""Ticket classification: sales partition, conversion, segment and handling-time routing."""

from dataclasses import dataclass

from .constants import ConversionBase, DateBasis, HandlingBucket
from .models import Activity, Classification
from .rules import (
    CONVERTED_STATUS,
    NON_QUOTATION_REMARKS,
    QUOTATION_REMARKS,
    SALES_TRAFFIC,
    SPF_MARKER,
    is_excluded_wrapup,
    is_non_sales_wrapup,
    is_po_received,
    is_sales_wrapup,
    normalize,
    segment_for,
)
from .timeutils import elapsed_seconds


@dataclass(frozen=True)
class RuleOptions:
    """Switches for the rules that differ between the legacy dashboards.

    Attributes:
        gate_segments_on_sales: Count customer segments only for sales inquiries.
        sales_wrapup_override: A sales wrap-up makes a record a sales inquiry
            even when traffic says otherwise. PO-received and explicit
            non-sales wrap-ups still win.
        conversion_base: Denominator of the conversion rate.
        date_basis: Timestamp the date range filter reads.
    """

    gate_segments_on_sales: bool = True
    sales_wrapup_override: bool = False
    conversion_base: ConversionBase = ConversionBase.SALES
    date_basis: DateBasis = DateBasis.DATE_CREATED


DEFAULT_OPTIONS = RuleOptions()


def is_sales_inquiry(activity: Activity, options: RuleOptions = DEFAULT_OPTIONS) -> bool:
    """Whether a record lands in the sales side of the sales/non-sales partition."""
    if is_po_received(activity.remarks) or is_non_sales_wrapup(activity.wrap_up):
        return False
    if normalize(activity.traffic) == SALES_TRAFFIC:
        return True
    return options.sales_wrapup_override and is_sales_wrapup(activity.wrap_up)


def route_handling_time(activity: Activity) -> tuple[HandlingBucket, int | None]:
    """Pick the handling-time bucket for a record.

    Buckets are mutually exclusive and checked in order: excluded wrap-up,
    missing elapsed time, non-quotation remark, quotation remark, SPF remark.

    Args:
        activity: Record to route.

    Returns:
        tuple[HandlingBucket, int | None]: The bucket and the received-to-handled
        seconds. Seconds are reported even for the NONE bucket when computable,
        and are None for excluded wrap-ups.
    """
    if is_excluded_wrapup(activity.wrap_up):
        return HandlingBucket.NONE, None

    seconds = elapsed_seconds(activity.ticket_received, activity.tsa_handling_time)
    if seconds is None:
        return HandlingBucket.NONE, None

    remark = normalize(activity.remarks)
    if remark in NON_QUOTATION_REMARKS:
        return HandlingBucket.NON_QUOTATION, seconds
    if remark in QUOTATION_REMARKS:
        return HandlingBucket.QUOTATION, seconds
    if SPF_MARKER in remark:
        return HandlingBucket.SPF, seconds
    return HandlingBucket.NONE, seconds


def response_time(activity: Activity) -> int | None:
    """Endorsed-to-acknowledged seconds, independent of the handling bucket."""
    if is_excluded_wrapup(activity.wrap_up):
        return None
    return elapsed_seconds(activity.ticket_endorsed, activity.tsa_acknowledge_date)


def classify(activity: Activity, options: RuleOptions = DEFAULT_OPTIONS) -> Classification:
    """Classify one activity.

    Args:
        activity: Record to classify. Never mutated.
        options: Rule switches.

    Returns:
        Classification: Sales partition, conversion, segment and timing.
    """
    sales = is_sales_inquiry(activity, options)
    bucket, handling_seconds = route_handling_time(activity)

    return Classification(
        is_sales_inquiry=sales,
        is_non_sales_inquiry=not sales,
        is_converted_sale=sales and normalize(activity.status) == CONVERTED_STATUS,
        customer_segment=segment_for(activity.customer_status),
        handling_bucket=bucket,
        handling_seconds=handling_seconds,
        response_seconds=response_time(activity),
    )
