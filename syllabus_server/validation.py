"""
Normalization and validation of extracted syllabus data.

Both extraction paths (the language model and the heuristic parser) end up
here. Every event leaving this module has a unique id, a real calendar date,
a non-empty title, a type from the closed enumeration and a boolean
``is_required``. Broken fields are repaired rather than dropped so that no
syllabus content silently disappears.
"""
from __future__ import annotations

import calendar
import logging
import re
import time
import typing as t
from dataclasses import replace
from datetime import date, datetime

from .models import (EVENT_TYPES, UNKNOWN, UNKNOWN_COURSE_TITLE, CourseInfo, Event, ProcessedSyllabus)


logger = logging.getLogger(__name__)

TYPE_SYNONYMS: dict[str, str] = {
    "readings": "reading",
    "assignments": "assignment",
    "homework": "assignment",
    "hw": "assignment",
    "problem set": "assignment",
    "project": "assignment",
    "paper": "assignment",
    "essay": "assignment",
    "exams": "exam",
    "quiz": "exam",
    "test": "exam",
    "midterm": "exam",
    "final": "exam",
    "final exam": "exam",
    "presentations": "presentation",
    "oral argument": "presentation",
    "conferences": "conference",
    "meeting": "conference",
    "office hours": "conference",
}

_FALSE_WORDS = {"false", "no", "n", "0", "optional", "not required"}
_TRUE_WORDS = {"true", "yes", "y", "1", "required", "mandatory"}

_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_ORDINAL = re.compile(r"(\d)(st|nd|rd|th)\b", re.IGNORECASE)
_SEPT = re.compile(r"\bsept\b", re.IGNORECASE)
_TIME = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?(?::\d{2})?\s*([ap])?\.?\s*(m\.?)?$", re.IGNORECASE)

_DATED_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
)
# Parsed with the academic year appended so that Feb 29 survives strptime.
_YEARLESS_FORMATS = (
    "%B %d",
    "%b %d",
    "%m/%d",
    "%A, %B %d",
    "%A %B %d",
    "%a, %b %d",
    "%a %b %d",
)


def generate_event_id(prefix: str, sequence: int) -> str:
    """Unique id: prefix, position in the batch and a millisecond timestamp."""
    return f"{prefix}_{sequence}_{int(time.time() * 1000)}"


def normalize_type(value: t.Any) -> str:
    """Map any category label onto the six-value enumeration."""
    if not isinstance(value, str):
        return "other"
    key = " ".join(value.strip().lower().split())
    if key in EVENT_TYPES:
        return key
    return TYPE_SYNONYMS.get(key, "other")


def parse_bool(value: t.Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _FALSE_WORDS:
            return False
        if key in _TRUE_WORDS:
            return True
    return default


def _clamped_date(year: int, month: int, day: int) -> t.Optional[date]:
    if not (1 <= month <= 12) or day < 1 or year < 1:
        return None
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def parse_event_date(value: t.Any, academic_year: int) -> t.Optional[str]:
    """
    Parse a date in any of the common syllabus/LLM formats.

    Yearless dates get ``academic_year``. An ISO date with an impossible
    day (``2025-09-31``) is clamped to the last day of its month.

    :return: ``YYYY-MM-DD`` or None when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    match = _ISO_PREFIX.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        clamped = _clamped_date(year, month, day)
        return clamped.isoformat() if clamped else None

    text = _SEPT.sub("Sep", _ORDINAL.sub(r"\1", " ".join(text.split())))
    for fmt in _DATED_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    for fmt in _YEARLESS_FORMATS:
        try:
            return datetime.strptime(f"{text} {academic_year}", f"{fmt} %Y").date().isoformat()
        except ValueError:
            continue
    return None


def normalize_time(value: t.Any) -> t.Optional[str]:
    """
    Convert ``"14:30"``, ``"2:30 PM"``, ``"2pm"`` ... to ``HH:MM``.

    :return: 24-hour ``HH:MM`` or None if the value is missing or invalid.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    match = _TIME.match(value.strip())
    if not match:
        return None
    hour_s, minute_s, meridiem, m_suffix = match.groups()
    if meridiem is None and m_suffix is not None:
        return None
    if minute_s is None and meridiem is None:
        # A bare number is not a time
        return None
    hour = int(hour_s)
    minute = int(minute_s or 0)
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower() == "p" else 0)
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def _clean_text(value: t.Any) -> t.Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _synthesize_title(description: t.Optional[str], event_type: str, event_date: str) -> str:
    if description:
        first_line = description.splitlines()[0].strip()
        if first_line:
            return first_line[:60].strip()
    return f"{event_type.capitalize()} on {event_date}"


def normalize_event(
    raw: t.Mapping[str, t.Any],
    sequence: int,
    academic_year: int,
    id_prefix: str = "assignment",
    previous_date: t.Optional[str] = None,
) -> Event:
    """
    Build a valid Event from loosely-typed data, repairing what is broken.

    :param raw: camelCase event data (LLM output, heuristic output, API input).
    :param sequence: 1-based position in the batch, used for generated ids.
    :param academic_year: Year for dates that do not carry one.
    :param id_prefix: Prefix for generated ids.
    :param previous_date: Date of the preceding event, used when this
        event's date cannot be repaired any other way.
    """
    event_type = normalize_type(raw.get("type"))
    description = _clean_text(raw.get("description"))

    raw_date = raw.get("date")
    event_date = parse_event_date(raw_date, academic_year)
    if event_date is None:
        event_date = previous_date or date(academic_year, 1, 1).isoformat()
        logger.warning("Unparseable event date %r at position %d; using %s", raw_date, sequence, event_date)
        if raw_date not in (None, ""):
            note = f"Original date: {raw_date}"
            description = f"{description}\n\n{note}" if description else note

    title = _clean_text(raw.get("title"))
    if title is None:
        title = _synthesize_title(description, event_type, event_date)
        logger.warning("Event at position %d has no title; using %r", sequence, title)

    event_id = _clean_text(raw.get("id")) or generate_event_id(id_prefix, sequence)

    return Event(
        id=event_id,
        date=event_date,
        title=title,
        type=event_type,  # type: ignore[arg-type]
        description=description,
        is_required=parse_bool(raw.get("isRequired"), default=True),
        time_start=normalize_time(raw.get("timeStart")),
        time_end=normalize_time(raw.get("timeEnd")),
    )


def normalize_events(
    raw_events: t.Iterable[t.Any],
    academic_year: int,
    id_prefix: str = "assignment",
) -> tuple[Event, ...]:
    """Normalize a batch of events and make their ids unique within it."""
    events: list[Event] = []
    seen_ids: set[str] = set()
    previous_date: t.Optional[str] = None

    for index, item in enumerate(raw_events, 1):
        if isinstance(item, str) and item.strip():
            item = {"title": item}
        if not isinstance(item, t.Mapping):
            logger.warning("Skipping event at position %d: expected an object, got %r", index, item)
            continue

        event = normalize_event(item, index, academic_year, id_prefix, previous_date)
        event_id = event.id
        # A suffixed id can itself be taken by an earlier event
        while event_id in seen_ids:
            event_id = f"{event_id}_{index}"
        if event_id != event.id:
            event = replace(event, id=event_id)
        seen_ids.add(event.id)
        previous_date = event.date
        events.append(event)

    return tuple(events)


def normalize_course_info(raw: t.Any) -> CourseInfo:
    """Required fields fall back to the Unknown placeholders."""
    if not isinstance(raw, t.Mapping):
        return CourseInfo()
    return CourseInfo(
        title=_clean_text(raw.get("title")) or UNKNOWN_COURSE_TITLE,
        professor=_clean_text(raw.get("professor")) or UNKNOWN,
        semester=_clean_text(raw.get("semester")) or UNKNOWN,
        class_time=_clean_text(raw.get("classTime")),
        room=_clean_text(raw.get("room")),
    )


def normalize_syllabus(
    raw: t.Mapping[str, t.Any],
    academic_year: int,
    id_prefix: str = "assignment",
) -> ProcessedSyllabus:
    """Normalize a ``{courseInfo, assignments}`` mapping into a ProcessedSyllabus."""
    return ProcessedSyllabus(
        course_info=normalize_course_info(raw.get("courseInfo")),
        assignments=normalize_events(raw.get("assignments") or [], academic_year, id_prefix),
        success=parse_bool(raw.get("success"), default=True),
        error=_clean_text(raw.get("error")),
    )


def validate_syllabus(syllabus: ProcessedSyllabus, academic_year: int) -> ProcessedSyllabus:
    """Re-run the normalization rules over an already-built syllabus."""
    return normalize_syllabus(syllabus.to_dict(), academic_year)
