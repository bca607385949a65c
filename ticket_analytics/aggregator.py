"""Fold classified activities into per-operator accumulators and derive metrics."""

from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from .classifier import DEFAULT_OPTIONS, RuleOptions, classify
from .constants import (
    COUNTED_SEGMENTS,
    PERCENT,
    TIMED_BUCKETS,
    ConversionBase,
    CustomerSegment,
    DateBasis,
    GroupBy,
    HandlingBucket,
)
from .models import Activity, Classification, DateRange, FinalizedRow, GroupAccumulator
from .rules import coerce_number
from .timeutils import in_range, parse_safe, week_of_month

GroupKeyFn = Callable[[Activity], str | None]

GROUP_KEY_FUNCTIONS: dict[GroupBy, GroupKeyFn] = {
    GroupBy.AGENT: lambda activity: activity.agent_ref,
    GroupBy.TSA: lambda activity: activity.tsa_ref,
    GroupBy.MANAGER: lambda activity: activity.manager_ref,
    GroupBy.DEPARTMENT_HEAD: lambda activity: activity.department_head_ref,
}


def key_function(group_by: GroupBy | GroupKeyFn) -> GroupKeyFn:
    """Resolve a GroupBy value to its key function; callables pass through."""
    if callable(group_by):
        return group_by
    return GROUP_KEY_FUNCTIONS[GroupBy(group_by)]


def filter_date(activity: Activity, basis: DateBasis) -> Any:
    """Timestamp the date range filter reads for ``basis``."""
    if basis == DateBasis.TICKET_RECEIVED:
        return activity.ticket_received
    if basis == DateBasis.FIRST_AVAILABLE:
        return (
            activity.ticket_received
            or activity.ticket_endorsed
            or activity.date_updated
            or activity.date_created
        )
    return activity.date_created


def _clean_key(raw: Any) -> str | None:
    if raw is None:
        return None
    key = str(raw).strip()
    return key or None


def aggregate(
    activities: Iterable[Activity],
    date_range: DateRange | None,
    group_key: GroupBy | GroupKeyFn,
    options: RuleOptions = DEFAULT_OPTIONS,
) -> dict[str, GroupAccumulator]:
    """Group activities by operator and accumulate their metrics.

    Activities outside ``date_range`` or without a grouping key are skipped.
    Accumulators are created lazily, so the result preserves first-seen
    order of the keys.

    Args:
        activities: Records to fold. Never mutated.
        date_range: Inclusive range applied to the configured date basis.
        group_key: GroupBy value or a function returning the key.
        options: Rule switches.

    Returns:
        dict[str, GroupAccumulator]: Accumulators keyed by trimmed group key.
    """
    key_of = key_function(group_key)
    groups: dict[str, GroupAccumulator] = {}

    for activity in activities:
        if not in_range(filter_date(activity, options.date_basis), date_range):
            continue
        key = _clean_key(key_of(activity))
        if key is None:
            continue

        accumulator = groups.get(key)
        if accumulator is None:
            accumulator = groups[key] = GroupAccumulator(key=key)

        accumulate(accumulator, activity, classify(activity, options), options)

    logger.debug(f"Aggregated {len(groups)} groups")
    return groups


def accumulate(
    accumulator: GroupAccumulator,
    activity: Activity,
    classification: Classification,
    options: RuleOptions = DEFAULT_OPTIONS,
) -> None:
    """Apply one classified activity to an accumulator."""
    if classification.is_sales_inquiry:
        accumulator.sales_count += 1
    else:
        accumulator.non_sales_count += 1

    segment = classification.customer_segment
    counts_segment = classification.is_sales_inquiry or not options.gate_segments_on_sales
    if segment != CustomerSegment.NONE and counts_segment:
        accumulator.segment_counts[segment] += 1

    if classification.is_converted_sale:
        amount = coerce_number(activity.so_amount)
        accumulator.converted_count += 1
        accumulator.total_amount += amount
        accumulator.total_qty += coerce_number(activity.qty_sold)
        if segment != CustomerSegment.NONE:
            accumulator.segment_amounts[segment] += amount

        updated = parse_safe(activity.date_updated)
        if updated is not None:
            accumulator.week_amounts[week_of_month(updated) - 1] += amount

    if classification.response_seconds is not None:
        accumulator.add_elapsed(HandlingBucket.RESPONSE, classification.response_seconds)

    if (
        classification.handling_bucket != HandlingBucket.NONE
        and classification.handling_seconds is not None
    ):
        accumulator.add_elapsed(classification.handling_bucket, classification.handling_seconds)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def finalize(
    accumulator: GroupAccumulator, options: RuleOptions = DEFAULT_OPTIONS
) -> FinalizedRow:
    """Derive rates and averages from an accumulator's running sums.

    Zero denominators give 0 for rates and None for handling-time averages,
    so no NaN, infinity or negative duration can come out.
    """
    if options.conversion_base == ConversionBase.ALL_INQUIRIES:
        base = accumulator.sales_count + accumulator.non_sales_count
    else:
        base = accumulator.sales_count

    converted = accumulator.converted_count
    conversion_rate = 0.0 if converted == 0 else _ratio(converted, base) * PERCENT

    avg_seconds: dict[HandlingBucket, int | None] = {}
    for bucket in TIMED_BUCKETS:
        count = accumulator.bucket_counts[bucket]
        avg_seconds[bucket] = (
            None if count == 0 else accumulator.bucket_seconds[bucket] // count
        )

    return FinalizedRow(
        key=accumulator.key,
        sales_count=accumulator.sales_count,
        non_sales_count=accumulator.non_sales_count,
        converted_count=converted,
        total_amount=accumulator.total_amount,
        total_qty=accumulator.total_qty,
        conversion_rate=conversion_rate,
        avg_unit_value=0.0 if converted == 0 else accumulator.total_qty / converted,
        avg_transaction_value=0.0 if converted == 0 else accumulator.total_amount / converted,
        segment_counts=dict(accumulator.segment_counts),
        segment_amounts=dict(accumulator.segment_amounts),
        avg_seconds=avg_seconds,
        week_amounts=tuple(accumulator.week_amounts),
    )


def merge_accumulators(
    accumulators: Iterable[GroupAccumulator], key: str
) -> GroupAccumulator:
    """Sum every running total of several accumulators into a new one."""
    merged = GroupAccumulator(key=key)
    for accumulator in accumulators:
        merged.sales_count += accumulator.sales_count
        merged.non_sales_count += accumulator.non_sales_count
        merged.converted_count += accumulator.converted_count
        merged.total_amount += accumulator.total_amount
        merged.total_qty += accumulator.total_qty
        for segment in COUNTED_SEGMENTS:
            merged.segment_counts[segment] += accumulator.segment_counts[segment]
            merged.segment_amounts[segment] += accumulator.segment_amounts[segment]
        for bucket in TIMED_BUCKETS:
            merged.bucket_seconds[bucket] += accumulator.bucket_seconds[bucket]
            merged.bucket_counts[bucket] += accumulator.bucket_counts[bucket]
        for index, amount in enumerate(accumulator.week_amounts):
            merged.week_amounts[index] += amount
    return merged
