"""
Rule-based syllabus parser used when the language model is unavailable.

The parser works line by line: it looks for a date token, classifies the
line from the words around it, and turns each qualifying line into an Event.
Both the date patterns and the keyword rules are ordered tables; the first
entry that matches wins, so precedence is visible in the data below rather
than hidden in branches.

It never returns an empty schedule. When no dated line qualifies, the
built-in sample schedule is returned and tagged ``Origin.CANNED_SAMPLE``.
"""
from __future__ import annotations

import logging
import re
import typing as t
from dataclasses import dataclass
from datetime import date

from .models import UNKNOWN, UNKNOWN_COURSE_TITLE, CourseInfo, Event, Origin, ProcessedSyllabus
from .sample_schedule import DEFAULT_KNOWN_COURSE, KnownCourse, build_sample_syllabus
from .validation import generate_event_id


logger = logging.getLogger(__name__)

MONTHS: dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

_MONTH = (
    r"(?P<month>jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
_WEEKDAY = (
    r"(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday"
    r"|mon|tues?|wed|thu(?:rs?)?|fri|sat|sun)\.?"
)
_DAY = r"(?P<day>\d{1,2})(?:st|nd|rd|th)?"

# Tried in this order on every line; the first one yielding a real date wins.
DATE_PATTERNS: tuple[tuple[str, t.Pattern[str]], ...] = (
    ("iso", re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b")),
    ("weekday_month_day", re.compile(rf"\b{_WEEKDAY},?\s+{_MONTH}\s+{_DAY}\b", re.IGNORECASE)),
    ("month_day", re.compile(rf"\b{_MONTH}\s+{_DAY}\b(?:,?\s+(?P<year>\d{{4}})\b)?", re.IGNORECASE)),
    ("month_slash_day", re.compile(r"(?<![\d/])(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{4}|\d{2}))?(?![\d/])")),
    ("month_dash_day", re.compile(r"(?<![\d:\-])(?P<month>\d{1,2})-(?P<day>\d{1,2})(?![\d:\-])")),
    ("day_month_year", re.compile(rf"\b{_DAY}\s+{_MONTH}\s+(?P<year>\d{{4}})\b", re.IGNORECASE)),
)

# (cues, type) evaluated top to bottom against the lower-cased context window.
CLASSIFICATION_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("reading", "chapter"), "reading"),
    (("assignment", "homework", "project"), "assignment"),
    (("exam", "quiz", "midterm", "final"), "exam"),
    (("presentation",), "presentation"),
    (("lecture", "class"), "reading"),
)

# Lines mentioning these are kept as "other" even when short.
DEADLINE_CUES: tuple[str, ...] = ("due", "submit", "deadline", "lab", "problem set", "discussion")

MIN_UNCLASSIFIED_LINE_LENGTH = 10
MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 60
CONTEXT_RADIUS = 2
COURSE_INFO_SCAN_LINES = 60


@dataclass(frozen=True)
class DateMatch:
    """A date token found in a line and its ISO form."""
    token: str
    iso_date: str
    pattern: str


def _to_month(value: str) -> t.Optional[int]:
    if value.isdigit():
        return int(value)
    return MONTHS.get(value.lower().rstrip("."))


def _to_year(value: t.Optional[str], default_year: int) -> int:
    if not value:
        return default_year
    year = int(value)
    return year + 2000 if year < 100 else year


def find_date(line: str, year: int) -> t.Optional[DateMatch]:
    """
    Return the highest-priority date token in ``line``.

    Numeric tokens are read month first (US style). Tokens that do not form
    a real calendar date (``13/45``) are skipped in favour of the next pattern.
    """
    for name, pattern in DATE_PATTERNS:
        match = pattern.search(line)
        if not match:
            continue
        month = _to_month(match.group("month"))
        day = int(match.group("day"))
        groups = match.groupdict()
        try:
            iso = date(_to_year(groups.get("year"), year), month or 0, day).isoformat()
        except ValueError:
            continue
        return DateMatch(token=match.group(0).strip(), iso_date=iso, pattern=name)
    return None


def classify(context: str) -> t.Optional[str]:
    """First rule whose cue occurs in ``context`` decides the type."""
    lowered = context.lower()
    for cues, event_type in CLASSIFICATION_RULES:
        if any(cue in lowered for cue in cues):
            return event_type
    return None


def _context_window(lines: list[str], index: int) -> str:
    start = max(0, index - CONTEXT_RADIUS)
    end = min(len(lines), index + CONTEXT_RADIUS + 1)
    return " ".join(lines[start:end]).lower()


def _make_title(text: str, token: str) -> str:
    title = text[:MAX_TITLE_LENGTH].strip()
    if len(title) < MIN_TITLE_LENGTH:
        title = f"Class on {token}"
    return title


def _split_activities(line: str) -> list[tuple[str, str]]:
    """
    Split a ``;``-separated line listing several kinds of activity.

    :return: (segment, type) pairs, or an empty list when the line does not
        name at least two different activity types.
    """
    segments = [s.strip() for s in line.split(";") if s.strip()]
    if len(segments) < 2:
        return []
    typed = [(segment, classify(segment)) for segment in segments]
    if len({event_type for _, event_type in typed if event_type}) < 2:
        return []
    return [(segment, event_type) for segment, event_type in typed if event_type]


_COURSE_INFO_PATTERNS: tuple[tuple[str, t.Pattern[str]], ...] = (
    ("title", re.compile(r"^course(?:\s+title|\s+name)?\s*[:\-]\s*(.+)$", re.IGNORECASE)),
    ("professor", re.compile(r"^(?:professor|instructor|lecturer|faculty)\s*[:\-]\s*(.+)$", re.IGNORECASE)),
    ("professor", re.compile(r"^((?:[Pp]rof\.?|[Pp]rofessor|[Dd]r\.?)\s+[A-Z][\w.\-]*(?:\s+[A-Z][\w.\-]*)*)$")),
    ("class_time", re.compile(r"^(?:class\s+time|meeting\s+times?|class\s+meets|time)\s*[:\-]\s*(.*\d.*)$", re.IGNORECASE)),
    ("room", re.compile(r"^(?:room|location|classroom)\s*[:\-]\s*(.+)$", re.IGNORECASE)),
)
_SEMESTER = re.compile(r"\b(spring|summer|fall|autumn|winter)\s+(\d{4})\b", re.IGNORECASE)
_COURSE_CODE = re.compile(r"^[A-Z]{2,5}\s?-?\d{3}")


def guess_course_info(lines: list[str]) -> CourseInfo:
    """Pick course header fields out of labelled lines near the top."""
    found: dict[str, str] = {}
    head = lines[:COURSE_INFO_SCAN_LINES]

    for line in head:
        for field_name, pattern in _COURSE_INFO_PATTERNS:
            if field_name in found:
                continue
            match = pattern.match(line)
            if match:
                found[field_name] = match.group(1).strip()
        if "semester" not in found:
            semester = _SEMESTER.search(line)
            if semester:
                found["semester"] = f"{semester.group(1).capitalize()} {semester.group(2)}"

    if "title" not in found:
        for line in head:
            if _COURSE_CODE.match(line) and len(line) <= 100:
                found["title"] = line
                break

    return CourseInfo(
        title=found.get("title", UNKNOWN_COURSE_TITLE),
        professor=found.get("professor", UNKNOWN),
        semester=found.get("semester", UNKNOWN),
        class_time=found.get("class_time"),
        room=found.get("room"),
    )


def parse_syllabus_text(
    text: str,
    year: int,
    known_course: KnownCourse = DEFAULT_KNOWN_COURSE,
) -> tuple[ProcessedSyllabus, Origin]:
    """
    Extract dated events from syllabus text without any external service.

    :param text: Normalized syllabus text.
    :param year: Year given to dates that do not state one.
    :param known_course: Course whose sample schedule is returned when no
        event can be found.
    :return: The syllabus and the origin of its events.
    """
    lines = [line.strip() for line in (text or "").splitlines()]
    events: list[Event] = []

    def add(event_date: str, title: str, event_type: str, description: str) -> None:
        events.append(
            Event(
                id=generate_event_id("heuristic", len(events) + 1),
                date=event_date,
                title=title,
                type=event_type,  # type: ignore[arg-type]
                description=description,
                is_required=True,
            )
        )

    for index, line in enumerate(lines):
        if not line:
            continue
        found = find_date(line, year)
        if found is None:
            continue

        activities = _split_activities(line)
        if activities:
            for segment, event_type in activities:
                add(found.iso_date, _make_title(segment, found.token), event_type, segment)
            continue

        context = _context_window(lines, index)
        event_type = classify(context)
        if event_type is None:
            if len(line) > MIN_UNCLASSIFIED_LINE_LENGTH or any(cue in context for cue in DEADLINE_CUES):
                event_type = "other"
            else:
                continue
        add(found.iso_date, _make_title(line, found.token), event_type, line)

    if events:
        logger.info("Heuristic parser found %d dated events", len(events))
        return ProcessedSyllabus(course_info=guess_course_info(lines), assignments=tuple(events)), \
            Origin.HEURISTIC_FALLBACK

    logger.warning("No dated events found in text; returning sample schedule for %s",
                   known_course.course_info.title)
    return build_sample_syllabus(year, known_course), Origin.CANNED_SAMPLE
