"""
iCalendar (.ics) export.

Events are exported as all-day entries that can be imported into Google
Calendar, Outlook or Apple Calendar. Time-of-day fields are not encoded.
"""
from __future__ import annotations

import re
import typing as t
from datetime import date, datetime, timedelta, timezone

from syllabus_server.models import CourseInfo, Event


PRODID = "-//Syllabus Calendar//Syllabus to Calendar//EN"
UID_DOMAIN = "syllabus-calendar"
CRLF = "\r\n"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS TEXT values.
    Backslash goes first so later escapes are not doubled.
    """
    return (
        text.replace("\\", "\\\\").replace(",", "\\,").replace(";", "\\;").replace("\r\n", "\\n").replace("\n", "\\n")
    )


def _ics_date(value: str) -> str:
    return value.replace("-", "")


def next_day(value: str) -> str:
    """ISO date of the day after ``value`` (exclusive end of an all-day event)."""
    return (date.fromisoformat(value) + timedelta(days=1)).isoformat()


def _dtstamp(now: t.Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _event_lines(event: Event, dtstamp: str) -> list[str]:
    lines = [
        "BEGIN:VEVENT",
        f"UID:{event.id}@{UID_DOMAIN}",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART;VALUE=DATE:{_ics_date(event.date)}",
        f"DTEND;VALUE=DATE:{_ics_date(next_day(event.date))}",
        f"SUMMARY:{_ics_escape(event.title)}",
        f"DESCRIPTION:{_ics_escape(event.description or '')}",
        f"CATEGORIES:{event.type.upper()}",
        f"STATUS:{'CONFIRMED' if event.is_required else 'TENTATIVE'}",
        "END:VEVENT",
    ]
    return lines


def _calendar_lines(events: t.Iterable[Event], course_info: t.Optional[CourseInfo],
                    now: t.Optional[datetime]) -> list[str]:
    title = (course_info or CourseInfo()).title
    dtstamp = _dtstamp(now)
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{_ics_escape(title)}",
        f"X-WR-CALDESC:{_ics_escape(f'Generated from {title}')}",
    ]
    for event in events:
        lines.extend(_event_lines(event, dtstamp))
    lines.append("END:VCALENDAR")
    return lines


def encode_calendar(events: t.Iterable[Event], course_info: t.Optional[CourseInfo] = None,
                    now: t.Optional[datetime] = None) -> str:
    """
    Encode a batch of events as one VCALENDAR document.

    :param events: Validated events.
    :param course_info: Supplies the calendar name and description.
    :param now: DTSTAMP time; defaults to the current UTC time.
    :return: CRLF-terminated iCalendar text.
    """
    return CRLF.join(_calendar_lines(events, course_info, now)) + CRLF


def encode_event(event: Event, course_info: t.Optional[CourseInfo] = None,
                 now: t.Optional[datetime] = None) -> str:
    """Encode a single event, wrapped in its own calendar container."""
    return encode_calendar([event], course_info, now)


def calendar_filename(course_info: t.Optional[CourseInfo] = None, suffix: str = "calendar") -> str:
    title = (course_info or CourseInfo()).title
    safe = _UNSAFE_FILENAME_CHARS.sub("", title).strip().strip(".") or "syllabus"
    return f"{safe}-{suffix}.ics"
