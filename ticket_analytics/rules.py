"""Normalization of free-text classification fields and business-rule lookup sets.

Every lookup set is stored in normalized form (trimmed, lowercase). Compare
against ``normalize(value)``, never against the raw field.
"""

import math
from typing import Any, Final

from .constants import EMPTY_STRING, CustomerSegment

SALES_TRAFFIC: Final[str] = "sales"
CONVERTED_STATUS: Final[str] = "converted into sales"
PO_RECEIVED: Final[str] = "po received"
SPF_MARKER: Final[str] = "spf"

SALES_WRAPUPS: Final[frozenset[str]] = frozenset(
    {
        "customer order",
        "customer inquiry sales",
        "follow up sales",
    }
)

NON_SALES_WRAPUPS: Final[frozenset[str]] = frozenset(
    {
        "customer inquiry non-sales",
        "non sales",
    }
)

# Excluded from every response and handling-time computation
EXCLUDED_WRAPUPS: Final[frozenset[str]] = frozenset(
    {
        "customerfeedback/recommendation",
        "job inquiry",
        "job applicants",
        "supplier/vendor product offer",
        "internal whistle blower",
        "threats / extortion / intimidation",
        "prank call",
    }
)

NON_QUOTATION_REMARKS: Final[frozenset[str]] = frozenset(
    {
        "no stocks / insufficient stocks",
        "item not carried",
        "unable to contact customer",
        "customer request cancellation",
        "accreditation / partnership",
        "no response for client",
        "assisted",
        "disapproved quotation",
        "dissaproved quotation",  # spelling used by older ticket forms
        "for site visit",
        "non standard item",
        PO_RECEIVED,
        "not converted to sales",
        "for occular inspection",
        "waiting for client confirmation",
        "pending quotation",
    }
)

QUOTATION_REMARKS: Final[frozenset[str]] = frozenset(
    {
        "quotation for approval",
        "sold",
    }
)

CUSTOMER_SEGMENTS: Final[dict[str, CustomerSegment]] = {
    "new client": CustomerSegment.NEW_CLIENT,
    "new non-buying": CustomerSegment.NEW_NON_BUYING,
    "existing active": CustomerSegment.EXISTING_ACTIVE,
    "existing inactive": CustomerSegment.EXISTING_INACTIVE,
}


def normalize(value: Any) -> str:
    """Trim and lowercase a free-text field; missing values become ``""``."""
    if value is None:
        return EMPTY_STRING
    return str(value).strip().lower()


def is_excluded_wrapup(wrap_up: Any) -> bool:
    return normalize(wrap_up) in EXCLUDED_WRAPUPS


def is_sales_wrapup(wrap_up: Any) -> bool:
    return normalize(wrap_up) in SALES_WRAPUPS


def is_non_sales_wrapup(wrap_up: Any) -> bool:
    return normalize(wrap_up) in NON_SALES_WRAPUPS


def is_po_received(remarks: Any) -> bool:
    return normalize(remarks) == PO_RECEIVED


def segment_for(customer_status: Any) -> CustomerSegment:
    """Map a customer status label to its segment; unknown labels map to NONE."""
    return CUSTOMER_SEGMENTS.get(normalize(customer_status), CustomerSegment.NONE)


def coerce_number(value: Any) -> float:
    """Coerce a numeric-or-string field to a finite float.

    Missing, blank, unparseable, non-finite and out-of-range values all
    become ``0.0`` so they can never poison a running sum.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0
