# -*- coding: utf-8 -*-
import json
import logging
import os
import typing as t
from collections import Counter
from pathlib import Path

import click
import requests
from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from calendar_server.google_calendar import CalendarAuthExpiredError, CalendarRequestError, GoogleCalendarSync
from calendar_server.ics import encode_calendar
from calendar_server.models import BearerCredential
from orchestrator.utils import err_console, expand_source_paths
from syllabus_server import config
from syllabus_server.completion import create_completion
from syllabus_server.extraction import SyllabusExtractor
from syllabus_server.models import CourseInfo, Event, SyllabusResult
from syllabus_server.pdf_utils import extract_text
from syllabus_server.pipeline import process_syllabus


console = Console()
logger = logging.getLogger("orchestrator")

TYPE_STYLES = {
    "reading": "green",
    "assignment": "red",
    "exam": "yellow",
    "presentation": "magenta",
    "conference": "cyan",
    "other": "white",
}


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def truncate_title(title: str, max_length: int = 50) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def create_events_table(result: SyllabusResult) -> Table:
    """Create a table of the events, sorted by date."""
    info = result.syllabus.course_info
    table = Table(title=f"📅 {info.title}", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="yellow", no_wrap=True)
    table.add_column("Type")
    table.add_column("Title", style="white")
    table.add_column("Time", style="dim")
    table.add_column("Req.", justify="center")

    for event in sorted(result.syllabus.assignments, key=lambda e: (e.date, e.time_start or "")):
        time_range = " - ".join(v for v in (event.time_start, event.time_end) if v)
        table.add_row(
            event.date,
            Text(event.type, style=TYPE_STYLES.get(event.type, "white")),
            truncate_title(event.title),
            time_range,
            "✓" if event.is_required else "",
        )
    return table


def create_stats_panel(result: SyllabusResult) -> Panel:
    info = result.syllabus.course_info
    counts = Counter(event.type for event in result.syllabus.assignments)

    stats_text = Text()
    stats_text.append("Professor: ", style="white")
    stats_text.append(f"{info.professor}\n", style="bold")
    stats_text.append("Semester: ", style="white")
    stats_text.append(f"{info.semester}\n", style="bold")
    stats_text.append("Total events: ", style="white")
    stats_text.append(f"{len(result.syllabus.assignments)}\n", style="bold green")
    for event_type, count in sorted(counts.items()):
        stats_text.append(f"  {event_type}: ", style=TYPE_STYLES.get(event_type, "white"))
        stats_text.append(f"{count}\n")
    stats_text.append("Source: ", style="white")
    stats_text.append(result.origin.value, style="bold")
    return Panel(stats_text, title="📊 Statistics", border_style="green")


def display_result(source: str, result: SyllabusResult, verbose: bool) -> None:
    if not result.syllabus.success:
        err_console.print(f"[red]Error:[/red] {os.path.basename(source)}: {result.syllabus.error}")
        return
    if result.is_fallback:
        title = "⚠️  Sample data" if result.is_mock_data else "⚠️  Basic parser"
        console.print(Panel(result.message or "", title=title, border_style="yellow"))
    console.print(create_stats_panel(result))
    console.print(create_events_table(result))
    if verbose:
        console.print(Panel(JSON(json.dumps(result.to_dict(), indent=2)), title=f"📄 {os.path.basename(source)}",
                            border_style="blue"))


def _build_extractor(use_ai: bool, year: int) -> t.Optional[SyllabusExtractor]:
    if not use_ai:
        return None
    completion = create_completion()
    if completion is None:
        console.print("[yellow]OPENAI_API_KEY is not set; using the basic date parser.[/yellow]")
        return None
    return SyllabusExtractor(completion, academic_year=year)


def _process_source(source: str, extractor: t.Optional[SyllabusExtractor], year: int) -> SyllabusResult:
    try:
        text = extract_text(source)
    except (OSError, ValueError, requests.RequestException) as e:
        err_console.print(f"[red]Error:[/red] Could not read '{source}': {e}")
        raise SystemExit(1)
    return process_syllabus(text, extractor=extractor, academic_year=year)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def main() -> None:
    """Turn course syllabi into calendar events."""


@main.command()
@click.argument("sources", nargs=-1, type=click.Path())
@click.option("--year", type=int, default=None, help="Year for dates that do not state one.")
@click.option("--no-ai", is_flag=True, help="Skip AI extraction and use the basic date parser.")
@click.option("--json", "json_out", type=click.Path(dir_okay=False), help="Write the parsed syllabi as JSON.")
@click.option("--ics", "ics_out", type=click.Path(dir_okay=False), help="Write all events as an .ics file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def parse(sources: tuple[str, ...], year: t.Optional[int], no_ai: bool, json_out: t.Optional[str],
          ics_out: t.Optional[str], verbose: bool) -> None:
    """Parse syllabi into dated calendar events.

    SOURCES: Syllabus PDF or text files, or directories containing them.
    """
    setup_logging(verbose)
    if not sources:
        err_console.print("[red]Error:[/red] Provide one or more syllabus files.")
        raise SystemExit(1)

    paths = expand_source_paths(sources)
    academic_year = year or config.ACADEMIC_YEAR
    extractor = _build_extractor(not no_ai, academic_year)

    console.print(
        Panel.fit(
            f"[bold blue]📚 Syllabus Calendar[/bold blue]\n"
            f"Processing [bold]{len(paths)}[/bold] syllabus file(s) for {academic_year}",
            border_style="blue"
        )
    )

    results: list[SyllabusResult] = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        parse_task = progress.add_task("Parsing syllabi...", total=len(paths))
        for path in paths:
            progress.update(parse_task, description=f"Parsing {os.path.basename(path)}...")
            results.append(_process_source(path, extractor, academic_year))
            progress.update(parse_task, advance=1)

    for path, result in zip(paths, results):
        display_result(path, result, verbose)

    if json_out:
        payload = [result.to_dict() for result in results]
        Path(json_out).write_text(json.dumps(payload if len(payload) > 1 else payload[0], indent=2),
                                  encoding="utf-8")
        console.print(f"   ✓ JSON written to {json_out}")

    if ics_out:
        events: list[Event] = [event for result in results for event in result.syllabus.assignments]
        course_info = results[0].syllabus.course_info if len(results) == 1 else CourseInfo(title="Syllabus Calendar")
        # newline="" keeps the CRLF line endings intact
        with open(ics_out, "w", encoding="utf-8", newline="") as f:
            f.write(encode_calendar(events, course_info))
        console.print(f"   ✓ {len(events)} events written to {ics_out}")

    if not any(result.syllabus.success for result in results):
        raise SystemExit(1)


@main.command()
@click.argument("source", type=click.Path())
@click.option("--token", envvar="GOOGLE_ACCESS_TOKEN", required=True,
              help="Google OAuth access token (or set GOOGLE_ACCESS_TOKEN).")
@click.option("--calendar-id", default=None, help="Target calendar id (defaults to GOOGLE_CALENDAR_ID).")
@click.option("--new-calendar", is_flag=True, help="Create a dedicated calendar for the course.")
@click.option("--year", type=int, default=None, help="Year for dates that do not state one.")
@click.option("--no-ai", is_flag=True, help="Skip AI extraction and use the basic date parser.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def sync(source: str, token: str, calendar_id: t.Optional[str], new_calendar: bool, year: t.Optional[int],
         no_ai: bool, verbose: bool) -> None:
    """Parse a syllabus and create its events in Google Calendar.

    SOURCE: Syllabus PDF or text file.
    """
    setup_logging(verbose)
    academic_year = year or config.ACADEMIC_YEAR
    result = _process_source(source, _build_extractor(not no_ai, academic_year), academic_year)
    display_result(source, result, verbose)
    if not result.syllabus.success:
        raise SystemExit(1)

    credential = BearerCredential(token)
    google = GoogleCalendarSync()
    if calendar_id:
        google.calendar_id = calendar_id

    try:
        if new_calendar:
            google.calendar_id = google.create_calendar(result.syllabus.course_info, credential)
            console.print(f"   ✓ Created calendar {google.calendar_id}")
        with console.status("[bold green]Creating Google Calendar events..."):
            sync_result = google.create_events(result.syllabus.assignments, credential, result.syllabus.course_info)
    except CalendarAuthExpiredError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(2)
    except CalendarRequestError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    finally:
        google.close()

    stats_text = Text()
    stats_text.append("Created: ", style="white")
    stats_text.append(f"{sync_result.created}\n", style="bold green")
    stats_text.append("Failed: ", style="white")
    stats_text.append(f"{sync_result.failed}\n", style="bold red" if sync_result.failed else "bold")
    stats_text.append("Skipped: ", style="white")
    stats_text.append(f"{sync_result.skipped}", style="bold yellow" if sync_result.skipped else "bold")
    console.print(Panel(stats_text, title="☁️  Google Calendar", border_style="green"))
    if verbose:
        for error in sync_result.errors:
            console.print(f"   [red]✗[/red] {error}")

    if sync_result.auth_expired:
        err_console.print(f"[red]Error:[/red] {sync_result.message}")
        raise SystemExit(2)
    if sync_result.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
