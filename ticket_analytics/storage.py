"""Loading activity snapshots and saving reports."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger
from pydantic import ValidationError

from .constants import (
    DEFAULT_ACTIVITIES_OUTPUT,
    DEFAULT_PEOPLE_OUTPUT,
    DEFAULT_REPORT_OUTPUT,
    JSON_INDENT,
    LogMessage,
)
from .fetcher import extract_records
from .models import Activity, Person
from .reports import ReportTable, table_to_csv


def index_people(records: Iterable[dict[str, Any]]) -> dict[str, Person]:
    """Build a reference-id lookup from raw directory entries.

    Entries that fail validation (typically a missing ReferenceID) are
    skipped with a warning. Later duplicates win.
    """
    people: dict[str, Person] = {}
    for record in records:
        try:
            person = Person.model_validate(record)
        except ValidationError:
            logger.warning(LogMessage.SKIPPED_PERSON.format(record))
            continue
        people[person.reference_id.strip()] = person
    return people


class ActivityStorage:
    """Handles reading activity and directory snapshots and writing reports."""

    def load_records(self, *, filepath: Path | str) -> list[dict[str, Any]]:
        """Load raw records from a JSON or CSV file.

        JSON may be a list of records or an object with a ``data`` list. CSV
        columns are read as text so amounts and timestamps arrive untouched.

        Args:
            filepath: Path of the snapshot to read.

        Returns:
            list[dict[str, Any]]: Raw records.

        Raises:
            ValueError: If the file extension is neither .json nor .csv.
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix == ".json":
            with filepath.open("r") as f:
                return extract_records(json.load(f))

        if suffix == ".csv":
            return pl.read_csv(filepath, infer_schema_length=0).to_dicts()

        raise ValueError(f"Unsupported snapshot format: {filepath.suffix or filepath.name}")

    def load_activities(self, *, filepath: Path | str) -> list[Activity]:
        records = self.load_records(filepath=filepath)
        activities = [Activity.from_dict(data=record) for record in records]
        logger.info(LogMessage.LOADED_ACTIVITIES.format(len(activities), filepath))
        return activities

    def load_people(self, *, filepath: Path | str) -> dict[str, Person]:
        people = index_people(self.load_records(filepath=filepath))
        logger.info(LogMessage.LOADED_PEOPLE.format(len(people), filepath))
        return people

    def _write_json(self, *, records: list[dict[str, Any]], filepath: Path) -> None:
        with filepath.open("w") as f:
            json.dump(records, f, indent=JSON_INDENT, default=str)

    def save_activities(
        self,
        *,
        records: list[dict[str, Any]],
        filepath: Path | str = DEFAULT_ACTIVITIES_OUTPUT,
    ) -> None:
        """Save raw activity records to a JSON file.

        Uses default string conversion for non-serializable types.

        Args:
            records: Raw activity records to save.
            filepath: Path where the JSON file should be saved.
        """
        filepath = Path(filepath)
        self._write_json(records=records, filepath=filepath)
        logger.success(LogMessage.SAVED_ACTIVITIES.format(len(records), filepath))

    def save_people(
        self,
        *,
        records: list[dict[str, Any]],
        filepath: Path | str = DEFAULT_PEOPLE_OUTPUT,
    ) -> None:
        filepath = Path(filepath)
        self._write_json(records=records, filepath=filepath)
        logger.success(LogMessage.SAVED_PEOPLE.format(len(records), filepath))

    def save_report(
        self,
        *,
        table: ReportTable,
        filepath: Path | str = DEFAULT_REPORT_OUTPUT,
    ) -> None:
        """Save a rendered report, footer included, as a fully quoted CSV file.

        Args:
            table: Report to serialize.
            filepath: Path where the CSV file should be saved.
        """
        filepath = Path(filepath)
        filepath.write_text(table_to_csv(table))
        logger.success(LogMessage.SAVED_REPORT.format(len(table.rows), filepath))
