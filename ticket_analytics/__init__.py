"""Ticket sales and handling-time conversion analytics package."""

from .aggregator import aggregate, finalize
from .classifier import RuleOptions, classify
from .engine import SalesConversionEngine
from .fetcher import ActivityFetcher
from .models import Activity, DateRange, FinalizedRow, GroupAccumulator, Person
from .storage import ActivityStorage
from .timeutils import elapsed_seconds, format_duration, in_range, parse_safe

__all__ = [
    "Activity",
    "ActivityFetcher",
    "ActivityStorage",
    "DateRange",
    "FinalizedRow",
    "GroupAccumulator",
    "Person",
    "RuleOptions",
    "SalesConversionEngine",
    "aggregate",
    "classify",
    "elapsed_seconds",
    "finalize",
    "format_duration",
    "in_range",
    "parse_safe",
]
