"""CLI interface for ticket sales conversion analytics."""

import asyncio
from datetime import datetime
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .classifier import RuleOptions
from .constants import (
    API_BASE_URL_ENV,
    DATE_INPUT_FORMAT,
    DEFAULT_ACTIVITIES_OUTPUT,
    DEFAULT_API_BASE_URL,
    DEFAULT_PEOPLE_OUTPUT,
    DEFAULT_REPORT_OUTPUT,
    EXIT_CODE_ERROR,
    CliHelp,
    ConversionBase,
    DateBasis,
    GroupBy,
    LogMessage,
    ReportLayout,
)
from .engine import SalesConversionEngine
from .fetcher import ActivityFetcher
from .models import DateRange
from .reports import ReportTable, render_table, report_headers
from .storage import ActivityStorage, index_people

app = typer.Typer(help=CliHelp.APP)
console = Console()


def _print_table(table: ReportTable) -> None:
    """Print the ranked rows with the footer row emphasised."""
    rendered = render_table(table)
    output = Table(title=f"Sales conversion by {table.group_by}")
    for header in report_headers(table.layout, table.group_by):
        output.add_column(header)
    for index, cells in enumerate(rendered):
        output.add_row(*cells, style="bold" if index == len(rendered) - 1 else None)
    console.print(output)


def _date_range(date_from: datetime | None, date_to: datetime | None) -> DateRange | None:
    if date_from is None and date_to is None:
        return None
    return DateRange(
        from_=date_from.date() if date_from else None,
        to=date_to.date() if date_to else None,
    )


@app.command()
def report(
    input_path: Path = typer.Option(None, "--input", "-i", help=CliHelp.INPUT),
    people_path: Path = typer.Option(None, "--people", "-p", help=CliHelp.PEOPLE),
    api_url: str = typer.Option(
        DEFAULT_API_BASE_URL, "--api-url", envvar=API_BASE_URL_ENV, help=CliHelp.API_URL
    ),
    date_from: datetime = typer.Option(
        None, "--from", formats=[DATE_INPUT_FORMAT], help=CliHelp.DATE_FROM
    ),
    date_to: datetime = typer.Option(
        None, "--to", formats=[DATE_INPUT_FORMAT], help=CliHelp.DATE_TO
    ),
    group_by: GroupBy = typer.Option(GroupBy.AGENT, "--group-by", "-g", help=CliHelp.GROUP_BY),
    layout: ReportLayout = typer.Option(
        ReportLayout.CONVERSION, "--layout", "-l", help=CliHelp.LAYOUT
    ),
    output: Path = typer.Option(DEFAULT_REPORT_OUTPUT, "--output", "-o", help=CliHelp.OUTPUT),
    gate_segments: bool = typer.Option(
        True, "--segment-gating/--no-segment-gating", help=CliHelp.SEGMENT_GATING
    ),
    sales_wrapup_override: bool = typer.Option(
        False, "--sales-wrapup-override", help=CliHelp.SALES_WRAPUP_OVERRIDE
    ),
    conversion_base: ConversionBase = typer.Option(
        ConversionBase.SALES, "--conversion-base", help=CliHelp.CONVERSION_BASE
    ),
    date_basis: DateBasis = typer.Option(
        DateBasis.DATE_CREATED, "--date-basis", help=CliHelp.DATE_BASIS
    ),
) -> None:
    """Aggregate activities into a ranked sales conversion report.

    Groups activities by operator, counts sales and non-sales inquiries,
    conversions and revenue by customer segment, averages handling times,
    prints the ranked table and writes it to CSV.
    """
    try:
        storage = ActivityStorage()

        if input_path is not None:
            activities = storage.load_activities(filepath=input_path)
            people = storage.load_people(filepath=people_path) if people_path else {}
        else:
            fetcher = ActivityFetcher(base_url=api_url)
            records, people_records = asyncio.run(fetcher.fetch_all())
            activities = records
            people = index_people(people_records)
            if people_path is not None:
                people.update(storage.load_people(filepath=people_path))

        engine = SalesConversionEngine(
            options=RuleOptions(
                gate_segments_on_sales=gate_segments,
                sales_wrapup_override=sales_wrapup_override,
                conversion_base=conversion_base,
                date_basis=date_basis,
            )
        )
        table = engine.run(
            activities=activities,
            group_by=group_by,
            date_range=_date_range(date_from, date_to),
            people=people,
            layout=layout,
        )

        _print_table(table)
        storage.save_report(table=table, filepath=output)
    except Exception as e:
        logger.exception(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)


@app.command()
def fetch(
    api_url: str = typer.Option(
        DEFAULT_API_BASE_URL, "--api-url", envvar=API_BASE_URL_ENV, help=CliHelp.API_URL
    ),
    activities_output: Path = typer.Option(
        DEFAULT_ACTIVITIES_OUTPUT, "--activities-output", "-a", help=CliHelp.ACTIVITIES_OUTPUT
    ),
    people_output: Path = typer.Option(
        DEFAULT_PEOPLE_OUTPUT, "--people-output", "-p", help=CliHelp.PEOPLE_OUTPUT
    ),
) -> None:
    """Download activities and the agent/manager directory to local JSON snapshots."""
    try:
        fetcher = ActivityFetcher(base_url=api_url)
        records, people_records = asyncio.run(fetcher.fetch_all())

        storage = ActivityStorage()
        storage.save_activities(records=records, filepath=activities_output)
        storage.save_people(records=people_records, filepath=people_output)
    except Exception as e:
        logger.exception(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)
