"""Data models for ticket sales conversion analytics."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    COUNTED_SEGMENTS,
    EMPTY_STRING,
    TIMED_BUCKETS,
    WEEKS_PER_MONTH,
    ActivityKey,
    ApiResponseKey,
    CustomerSegment,
    HandlingBucket,
)

# Accepted keys per field, camelCase first, then the ticket store's raw key
_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "agent_ref": ("agentRef", ActivityKey.AGENT_REF),
    "tsa_ref": ("tsaRef", ActivityKey.TSA_REF),
    "manager_ref": ("managerRef", "tsmRef", ActivityKey.MANAGER_REF, ActivityKey.TSM_REF),
    "department_head_ref": ("departmentHeadRef", ActivityKey.DEPARTMENT_HEAD_REF),
    "traffic": ("traffic", ActivityKey.TRAFFIC),
    "status": ("status", ActivityKey.STATUS),
    "remarks": ("remarks", ActivityKey.REMARKS),
    "wrap_up": ("wrapUp", ActivityKey.WRAP_UP),
    "customer_status": ("customerStatus", ActivityKey.CUSTOMER_STATUS),
    "so_amount": ("soAmount", ActivityKey.SO_AMOUNT),
    "qty_sold": ("qtySold", ActivityKey.QTY_SOLD),
    "date_created": ("dateCreated", ActivityKey.DATE_CREATED),
    "date_updated": ("dateUpdated", ActivityKey.DATE_UPDATED),
    "ticket_received": ("ticketReceived", ActivityKey.TICKET_RECEIVED),
    "ticket_endorsed": ("ticketEndorsed", ActivityKey.TICKET_ENDORSED),
    "tsa_acknowledge_date": ("tsaAcknowledgeDate", ActivityKey.TSA_ACKNOWLEDGE_DATE),
    "tsa_handling_time": ("tsaHandlingTime", ActivityKey.TSA_HANDLING_TIME),
    "tsm_acknowledge_date": ("tsmAcknowledgeDate", ActivityKey.TSM_ACKNOWLEDGE_DATE),
    "tsm_handling_time": ("tsmHandlingTime", ActivityKey.TSM_HANDLING_TIME),
    "company_name": ("companyName", ActivityKey.COMPANY_NAME),
    "contact_person": ("contactPerson", ActivityKey.CONTACT_PERSON),
}


@dataclass(frozen=True)
class Activity:
    """A single ticket record, the unit of analysis.

    Every attribute is optional and kept exactly as received. Interpretation
    (normalization, date parsing, numeric coercion) happens in the rules,
    time utilities and classifier, never here.

    Attributes:
        agent_ref: Reference id of the CSR agent who logged the ticket.
        tsa_ref: Reference id of the territory sales associate it was endorsed to.
        manager_ref: Reference id of the territory sales manager.
        department_head_ref: Reference id of the department head.
        traffic: "Sales" or "Non-Sales", free text.
        status: Free-text status label, e.g. "Converted into Sales".
        remarks: Free-text outcome remark, drives handling-time routing.
        wrap_up: Free-text wrap-up tag, drives exclusions and the sales override.
        customer_status: Customer status label, drives segment bucketing.
        so_amount: Sales order amount, number or numeric string.
        qty_sold: Quantity sold, number or numeric string.
    """

    agent_ref: str | None = None
    tsa_ref: str | None = None
    manager_ref: str | None = None
    department_head_ref: str | None = None
    traffic: str | None = None
    status: str | None = None
    remarks: str | None = None
    wrap_up: str | None = None
    customer_status: str | None = None
    so_amount: Any = None
    qty_sold: Any = None
    date_created: Any = None
    date_updated: Any = None
    ticket_received: Any = None
    ticket_endorsed: Any = None
    tsa_acknowledge_date: Any = None
    tsa_handling_time: Any = None
    tsm_acknowledge_date: Any = None
    tsm_handling_time: Any = None
    company_name: str | None = None
    contact_person: str | None = None

    @classmethod
    def from_dict(cls, *, data: dict[str, Any]) -> "Activity":
        """Create an Activity from a raw ticket dictionary.

        Handles both camelCase keys and the ticket store's snake_case keys.
        Empty values under one key fall through to the next accepted key.

        Args:
            data: Dictionary containing ticket data.

        Returns:
            Activity: A new Activity populated from the dictionary.
        """
        values: dict[str, Any] = {}
        for name, keys in _FIELD_KEYS.items():
            values[name] = next(
                (data[key] for key in keys if data.get(key) not in (None, EMPTY_STRING)),
                None,
            )
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range; either bound may be open."""

    from_: date | None = None
    to: date | None = None


class Person(BaseModel):
    """Directory entry used only to resolve display names."""

    model_config = ConfigDict(
        populate_by_name=True, frozen=True, coerce_numbers_to_str=True
    )

    reference_id: str = Field(alias=ApiResponseKey.REFERENCE_ID.value)
    first_name: str | None = Field(default=None, alias=ApiResponseKey.FIRST_NAME.value)
    last_name: str | None = Field(default=None, alias=ApiResponseKey.LAST_NAME.value)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one activity.

    Attributes:
        is_sales_inquiry: Counts toward the sales column.
        is_non_sales_inquiry: Counts toward the non-sales column. Always the
            negation of ``is_sales_inquiry``.
        is_converted_sale: A sales inquiry that converted into a sale.
        customer_segment: Segment from the customer status, or NONE.
        handling_bucket: QUOTATION, NON_QUOTATION, SPF or NONE.
        handling_seconds: Received-to-handled time; set whenever computable,
            even when the bucket is NONE.
        response_seconds: Endorsed-to-acknowledged time, or None.
    """

    is_sales_inquiry: bool
    is_non_sales_inquiry: bool
    is_converted_sale: bool
    customer_segment: CustomerSegment
    handling_bucket: HandlingBucket
    handling_seconds: int | None = None
    response_seconds: int | None = None


def _segment_zeros() -> dict[CustomerSegment, int]:
    return {segment: 0 for segment in COUNTED_SEGMENTS}


def _segment_amounts() -> dict[CustomerSegment, float]:
    return {segment: 0.0 for segment in COUNTED_SEGMENTS}


def _bucket_zeros() -> dict[HandlingBucket, int]:
    return {bucket: 0 for bucket in TIMED_BUCKETS}


def _week_amounts() -> list[float]:
    return [0.0] * WEEKS_PER_MONTH


@dataclass
class GroupAccumulator:
    """Running sums for one grouping key.

    Only sums and counts are stored; ratios and averages are derived once
    by ``finalize``.
    """

    key: str
    sales_count: int = 0
    non_sales_count: int = 0
    converted_count: int = 0
    total_amount: float = 0.0
    total_qty: float = 0.0
    segment_counts: dict[CustomerSegment, int] = field(default_factory=_segment_zeros)
    segment_amounts: dict[CustomerSegment, float] = field(default_factory=_segment_amounts)
    bucket_seconds: dict[HandlingBucket, int] = field(default_factory=_bucket_zeros)
    bucket_counts: dict[HandlingBucket, int] = field(default_factory=_bucket_zeros)
    week_amounts: list[float] = field(default_factory=_week_amounts)

    def add_elapsed(self, bucket: HandlingBucket, seconds: int) -> None:
        self.bucket_seconds[bucket] += seconds
        self.bucket_counts[bucket] += 1


@dataclass(frozen=True)
class FinalizedRow:
    """Derived metrics for one group, ready for formatting.

    Attributes:
        conversion_rate: Converted count as a percentage of the configured base.
        avg_unit_value: Quantity sold per converted sale.
        avg_transaction_value: Revenue per converted sale.
        avg_seconds: Average seconds per timed bucket; None when the bucket
            has no samples.
    """

    key: str
    sales_count: int
    non_sales_count: int
    converted_count: int
    total_amount: float
    total_qty: float
    conversion_rate: float
    avg_unit_value: float
    avg_transaction_value: float
    segment_counts: dict[CustomerSegment, int]
    segment_amounts: dict[CustomerSegment, float]
    avg_seconds: dict[HandlingBucket, int | None]
    week_amounts: tuple[float, ...]
