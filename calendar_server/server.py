from __future__ import annotations

import typing as t

from fastmcp import FastMCP

from syllabus_server import config
from syllabus_server.validation import normalize_course_info, normalize_event, normalize_syllabus

from .google_calendar import CalendarAuthExpiredError, CalendarRequestError, GoogleCalendarSync
from .ics import encode_calendar, encode_event
from .models import BearerCredential, SyncResult


mcp = FastMCP("CalendarServer")


def export_calendar_fn(syllabus: dict[str, t.Any]) -> str:
    parsed = normalize_syllabus(syllabus, config.ACADEMIC_YEAR)
    return encode_calendar(parsed.assignments, parsed.course_info)


def export_event_fn(event: dict[str, t.Any], course_info: t.Optional[dict[str, t.Any]] = None) -> str:
    info = normalize_course_info(course_info) if course_info else None
    return encode_event(normalize_event(event, 1, config.ACADEMIC_YEAR, id_prefix="event"), info)


def sync_google_calendar_fn(
    syllabus: dict[str, t.Any],
    access_token: str,
    calendar_id: t.Optional[str] = None,
    new_calendar: bool = False,
) -> dict[str, t.Any]:
    parsed = normalize_syllabus(syllabus, config.ACADEMIC_YEAR)
    credential = BearerCredential(access_token)
    sync = GoogleCalendarSync()
    if calendar_id:
        sync.calendar_id = calendar_id
    try:
        if new_calendar:
            sync.calendar_id = sync.create_calendar(parsed.course_info, credential)
        result = sync.create_events(parsed.assignments, credential, parsed.course_info)
    except CalendarAuthExpiredError as e:
        result = SyncResult(skipped=len(parsed.assignments), auth_expired=True, errors=[str(e)])
    except CalendarRequestError as e:
        # The course calendar could not be created, so no event was attempted
        result = SyncResult(failed=len(parsed.assignments), errors=[str(e)])
    finally:
        sync.close()

    data = result.to_dict()
    data["calendarId"] = sync.calendar_id
    if result.errors:
        data["errors"] = result.errors
    return data


# -----------------------------
# MCP Tool Implementation
# -----------------------------

@mcp.tool()
def export_calendar(syllabus: dict[str, t.Any]) -> str:
    """
    Export every event of a parsed syllabus as iCalendar (.ics) text.

    Args:
        syllabus: Output of parse_syllabus / process_syllabus_text

    Returns:
        The .ics document, importable into Google Calendar, Outlook or Apple Calendar
    """
    return export_calendar_fn(syllabus)


@mcp.tool()
def export_event(event: dict[str, t.Any], course_info: t.Optional[dict[str, t.Any]] = None) -> str:
    """Export a single syllabus event as iCalendar (.ics) text."""
    return export_event_fn(event, course_info)


@mcp.tool()
def sync_google_calendar(
    syllabus: dict[str, t.Any],
    access_token: str,
    calendar_id: t.Optional[str] = None,
    new_calendar: bool = False,
) -> dict[str, t.Any]:
    """
    Create the syllabus events in Google Calendar.

    Args:
        syllabus: Output of parse_syllabus / process_syllabus_text
        access_token: Google OAuth access token with calendar scope
        calendar_id: Target calendar (defaults to GOOGLE_CALENDAR_ID)
        new_calendar: Create a dedicated calendar for the course first

    Returns:
        Counts of created, failed and skipped events and whether the token expired
    """
    return sync_google_calendar_fn(syllabus, access_token, calendar_id, new_calendar)


if __name__ == "__main__":
    # Run as an MCP server over stdio
    mcp.run()
