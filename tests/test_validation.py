# -*- coding: utf-8 -*-
"""Tests for event normalization and repair."""
import pytest

from syllabus_server.models import EVENT_TYPES, CourseInfo, Event, ProcessedSyllabus
from syllabus_server.validation import (normalize_course_info, normalize_event, normalize_events, normalize_time,
                                        normalize_type, parse_bool, parse_event_date, validate_syllabus)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("reading", "reading"),
        ("Exam", "exam"),
        ("Homework", "assignment"),
        ("QUIZ", "exam"),
        ("Office Hours", "conference"),
        ("lecture notes", "other"),
        ("", "other"),
        (None, "other"),
        (42, "other"),
    ],
)
def test_normalize_type(label, expected: str) -> None:
    assert normalize_type(label) == expected
    assert normalize_type(label) in EVENT_TYPES


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2025-09-15", "2025-09-15"),
        ("2025-09-31", "2025-09-30"),
        ("2024-02-30", "2024-02-29"),
        ("September 5", "2025-09-05"),
        ("Oct 3rd", "2025-10-03"),
        ("Sept 9", "2025-09-09"),
        ("Feb 29", None),
        ("10/15/2026", "2026-10-15"),
        ("9/1", "2025-09-01"),
        ("tomorrow", None),
        ("2025-13-01", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_event_date(value, expected) -> None:
    """Common formats are reparsed; yearless dates get the academic year."""
    assert parse_event_date(value, 2025) == expected


def test_parse_event_date_yearless_leap_day() -> None:
    assert parse_event_date("Feb 29", 2024) == "2024-02-29"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("14:30", "14:30"),
        ("9:05", "09:05"),
        ("2:30 PM", "14:30"),
        ("2pm", "14:00"),
        ("12 PM", "12:00"),
        ("12am", "00:00"),
        ("25:00", None),
        ("13:00 pm", None),
        ("noon", None),
        ("9", None),
        (None, None),
    ],
)
def test_normalize_time(value, expected) -> None:
    assert normalize_time(value) == expected


def test_parse_bool() -> None:
    assert parse_bool("false") is False
    assert parse_bool("Optional") is False
    assert parse_bool("yes") is True
    assert parse_bool(0) is False
    assert parse_bool(None) is True
    assert parse_bool("maybe", default=False) is False


def test_unparseable_date_uses_previous_date_and_keeps_original() -> None:
    """A broken date is repaired, not dropped, and the original text survives in the description."""
    event = normalize_event(
        {"date": "week of midterms", "title": "", "description": "Essay on ethics", "type": "Paper"},
        sequence=2,
        academic_year=2025,
        previous_date="2025-09-10",
    )

    assert event.date == "2025-09-10"
    assert event.title == "Essay on ethics"
    assert event.type == "assignment"
    assert "Original date: week of midterms" in event.description
    assert event.is_required is True


def test_first_event_without_date_uses_january_first() -> None:
    event = normalize_event({"title": "Syllabus quiz", "type": "quiz"}, 1, 2025)
    assert event.date == "2025-01-01"
    assert event.type == "exam"


def test_title_synthesized_from_type_and_date() -> None:
    event = normalize_event({"date": "2025-10-01", "type": "exam"}, 1, 2025)
    assert event.title == "Exam on 2025-10-01"


def test_generated_ids_are_unique_within_batch() -> None:
    events = normalize_events(
        [{"date": "2025-09-01", "title": "A"}, {"date": "2025-09-02", "title": "B"}],
        2025,
        id_prefix="assignment",
    )
    ids = [e.id for e in events]
    assert len(set(ids)) == 2
    assert ids[0].startswith("assignment_1_")
    assert ids[1].startswith("assignment_2_")


def test_duplicate_ids_get_sequence_suffix() -> None:
    events = normalize_events(
        [{"id": "a", "date": "2025-09-01", "title": "x"}, {"id": "a", "date": "2025-09-02", "title": "y"}],
        2025,
    )
    assert [e.id for e in events] == ["a", "a_2"]


def test_duplicate_id_suffix_does_not_collide_with_existing_id() -> None:
    events = normalize_events(
        [
            {"id": "a_3", "date": "2025-09-01", "title": "x"},
            {"id": "a", "date": "2025-09-02", "title": "y"},
            {"id": "a", "date": "2025-09-03", "title": "z"},
        ],
        2025,
    )
    ids = [e.id for e in events]
    assert ids == ["a_3", "a", "a_3_3"]
    assert len(set(ids)) == 3


def test_strings_become_titles_and_junk_is_skipped() -> None:
    events = normalize_events(["Read chapter 1", 42], 2025)

    assert len(events) == 1
    assert events[0].title == "Read chapter 1"
    assert events[0].date == "2025-01-01"


def test_times_are_normalized_independently() -> None:
    event = normalize_event(
        {"date": "2025-09-01", "title": "Lab", "timeStart": "2:30 PM", "timeEnd": "later"}, 1, 2025
    )
    assert event.time_start == "14:30"
    assert event.time_end is None


def test_course_info_defaults() -> None:
    assert normalize_course_info(None) == CourseInfo()
    info = normalize_course_info({"title": "  Torts ", "professor": "", "classTime": "MW 9-10"})
    assert info.title == "Torts"
    assert info.professor == "Unknown"
    assert info.semester == "Unknown"
    assert info.class_time == "MW 9-10"


def test_validate_syllabus_keeps_valid_events() -> None:
    syllabus = ProcessedSyllabus(
        course_info=CourseInfo(title="Torts"),
        assignments=[Event(id="e1", date="2025-09-01", title="Read pp. 1-20", type="reading", is_required=False)],
    )

    validated = validate_syllabus(syllabus, 2025)

    assert validated == syllabus
