"""Constants and enumerations for ticket sales conversion analytics."""

from enum import StrEnum
from typing import Final


# API Configuration
DEFAULT_API_BASE_URL: Final[str] = "http://localhost:3000"
API_ACTIVITIES_ENDPOINT: Final[str] = "/api/act-fetch-agent-sales"
API_AGENTS_ENDPOINT: Final[str] = "/api/fetch-agent"
API_MANAGERS_ENDPOINT: Final[str] = "/api/fetch-manager"
API_BASE_URL_ENV: Final[str] = "TICKET_ANALYTICS_API_URL"

# Default Values
DEFAULT_FETCH_MAX_RETRIES: Final[int] = 4
DEFAULT_FETCH_TIMEOUT_SECONDS: Final[float] = 30.0
SERVER_ERROR_STATUS: Final[int] = 500
DEFAULT_ACTIVITIES_OUTPUT: Final[str] = "activities.json"
DEFAULT_PEOPLE_OUTPUT: Final[str] = "people.json"
DEFAULT_REPORT_OUTPUT: Final[str] = "sales_conversion.csv"

# JSON Serialization
JSON_INDENT: Final[int] = 2

# Empty Values
EMPTY_STRING: Final[str] = ""
NO_DATA: Final[str] = "-"

# Numeric Constants
EXIT_CODE_ERROR: Final[int] = 1
SECONDS_PER_MINUTE: Final[int] = 60
MINUTES_PER_HOUR: Final[int] = 60
PERCENT: Final[int] = 100
WEEKS_PER_MONTH: Final[int] = 4
DAYS_PER_WEEK: Final[int] = 7

# Report labels
TOTAL_LABEL: Final[str] = "Total"
DATE_INPUT_FORMAT: Final[str] = "%Y-%m-%d"


class ActivityKey(StrEnum):
    """Raw ticket record keys as stored by the ticket store."""

    AGENT_REF = "referenceid"
    TSA_REF = "agent"
    MANAGER_REF = "manager"
    TSM_REF = "tsm"
    DEPARTMENT_HEAD_REF = "department_head"
    TRAFFIC = "traffic"
    STATUS = "status"
    REMARKS = "remarks"
    WRAP_UP = "wrap_up"
    CUSTOMER_STATUS = "customer_status"
    SO_AMOUNT = "so_amount"
    QTY_SOLD = "qty_sold"
    DATE_CREATED = "date_created"
    DATE_UPDATED = "date_updated"
    TICKET_RECEIVED = "ticket_received"
    TICKET_ENDORSED = "ticket_endorsed"
    TSA_ACKNOWLEDGE_DATE = "tsa_acknowledge_date"
    TSA_HANDLING_TIME = "tsa_handling_time"
    TSM_ACKNOWLEDGE_DATE = "tsm_acknowledge_date"
    TSM_HANDLING_TIME = "tsm_handling_time"
    COMPANY_NAME = "company_name"
    CONTACT_PERSON = "contact_person"


class ApiResponseKey(StrEnum):
    """API response dictionary keys."""

    DATA = "data"
    REFERENCE_ID = "ReferenceID"
    FIRST_NAME = "Firstname"
    LAST_NAME = "Lastname"


class CustomerSegment(StrEnum):
    """Customer segment buckets derived from the customer status field."""

    NEW_CLIENT = "NewClient"
    NEW_NON_BUYING = "NewNonBuying"
    EXISTING_ACTIVE = "ExistingActive"
    EXISTING_INACTIVE = "ExistingInactive"
    NONE = "None"


class HandlingBucket(StrEnum):
    """Handling-time categories a ticket can contribute to."""

    RESPONSE = "Response"
    QUOTATION = "Quotation"
    NON_QUOTATION = "NonQuotation"
    SPF = "SPF"
    NONE = "None"


# Buckets that accumulate elapsed time, in report order
TIMED_BUCKETS: Final[tuple[HandlingBucket, ...]] = (
    HandlingBucket.RESPONSE,
    HandlingBucket.NON_QUOTATION,
    HandlingBucket.QUOTATION,
    HandlingBucket.SPF,
)

# Segments that are counted, in report order
COUNTED_SEGMENTS: Final[tuple[CustomerSegment, ...]] = (
    CustomerSegment.NEW_CLIENT,
    CustomerSegment.NEW_NON_BUYING,
    CustomerSegment.EXISTING_ACTIVE,
    CustomerSegment.EXISTING_INACTIVE,
)


class GroupBy(StrEnum):
    """Operator key a report is grouped by."""

    AGENT = "agent"
    TSA = "tsa"
    MANAGER = "manager"
    DEPARTMENT_HEAD = "department_head"


class ConversionBase(StrEnum):
    """Denominator used for the conversion rate."""

    SALES = "sales"
    ALL_INQUIRIES = "all_inquiries"


class DateBasis(StrEnum):
    """Timestamp the date range filter is evaluated against."""

    DATE_CREATED = "date_created"
    TICKET_RECEIVED = "ticket_received"
    FIRST_AVAILABLE = "first_available"


class ReportLayout(StrEnum):
    """Named column layouts for rendered reports."""

    CONVERSION = "conversion"
    HANDLING = "handling"
    WEEKLY = "weekly"
    FULL = "full"


class ReportColumn(StrEnum):
    """Report column headers. Header text is part of the CSV contract."""

    RANK = "Rank"
    NAME = "Name"
    SALES = "Sales"
    NON_SALES = "Non-Sales"
    TOTAL_AMOUNT = "Total Amount"
    QTY_SOLD = "QTY Sold"
    CONVERTED = "Converted Sales"
    CONVERSION_RATE = "% Conversion Inquiry to Sales"
    NEW_CLIENT = "New Client"
    NEW_NON_BUYING = "New Non-Buying"
    EXISTING_ACTIVE = "Existing Active"
    EXISTING_INACTIVE = "Existing Inactive"
    NEW_CLIENT_CONVERTED = "New Client (Converted To Sales)"
    NEW_NON_BUYING_CONVERTED = "New Non-Buying (Converted To Sales)"
    EXISTING_ACTIVE_CONVERTED = "Existing Active (Converted To Sales)"
    EXISTING_INACTIVE_CONVERTED = "Existing Inactive (Converted To Sales)"
    AVG_UNIT_VALUE = "Avg Unit Value"
    AVG_TRANSACTION_VALUE = "Avg Transaction Value"
    RESPONSE_TIME = "TSA Response Time"
    NON_QUOTATION_HT = "Non-Quotation HT"
    QUOTATION_HT = "Quotation HT"
    SPF_HT = "SPF HT"
    WEEK_1 = "Week 1"
    WEEK_2 = "Week 2"
    WEEK_3 = "Week 3"
    WEEK_4 = "Week 4"


class NameLabel(StrEnum):
    """Header used for the name column, per grouping key."""

    AGENT = "Agent Name"
    TSA = "TSA Name"
    MANAGER = "TSM Name"
    DEPARTMENT_HEAD = "Head"


class UnknownName(StrEnum):
    """Placeholder shown when a grouping key is not in the directory."""

    AGENT = "(Unknown Agent)"
    TSA = "(Unknown TSA)"
    MANAGER = "(Unknown Manager)"
    DEPARTMENT_HEAD = "(Unknown Head)"


class LogMessage(StrEnum):
    """Log message templates."""

    FETCHING_ACTIVITIES = "Fetching activities from {}..."
    FETCHED_ACTIVITIES = "Fetched {} activities"
    FETCHED_PEOPLE = "Fetched {} directory entries from {}"
    LOADED_ACTIVITIES = "Loaded {} activities from {}"
    LOADED_PEOPLE = "Loaded {} directory entries from {}"
    SAVED_ACTIVITIES = "Saved {} activities to {}"
    SAVED_PEOPLE = "Saved {} directory entries to {}"
    SAVED_REPORT = "Saved report with {} rows to {}"
    AGGREGATION_HEADER = "=== SALES CONVERSION AGGREGATION ==="
    FILTERED = "{} of {} activities within range and grouped by {}"
    GROUPS_BUILT = "Built {} {} groups"
    UNPARSEABLE_DATES = "{} activities skipped for a missing or unparseable date"
    NO_DATA = "No activities matched; report contains only the footer row"
    SKIPPED_PERSON = "Skipping directory entry without reference id: {}"
    ERROR_OCCURRED = "Error occurred: {}"


class CliHelp(StrEnum):
    """CLI help messages."""

    APP = "Ticket sales and handling-time conversion analytics"
    INPUT = "Activities file (JSON list, JSON with a 'data' key, or CSV). Fetches from the API when omitted."
    PEOPLE = "Directory file with ReferenceID/Firstname/Lastname entries for display names."
    API_URL = "Base URL of the ticket API."
    DATE_FROM = "Inclusive start date (YYYY-MM-DD)."
    DATE_TO = "Inclusive end date (YYYY-MM-DD)."
    GROUP_BY = "Operator key to group activities by."
    LAYOUT = "Column layout of the rendered report."
    OUTPUT = "Output CSV path."
    SEGMENT_GATING = "Count customer segments only for sales inquiries."
    SALES_WRAPUP_OVERRIDE = "Treat sales wrap-ups as sales inquiries regardless of traffic."
    CONVERSION_BASE = "Denominator for the conversion rate."
    DATE_BASIS = "Timestamp used for the date range filter."
    ACTIVITIES_OUTPUT = "Output JSON path for fetched activities."
    PEOPLE_OUTPUT = "Output JSON path for the fetched agent and manager directory."
