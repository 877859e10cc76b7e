# -*- coding: utf-8 -*-
"""Tests for the rule-based syllabus parser."""
import pytest

from syllabus_server.heuristic import find_date, guess_course_info, parse_syllabus_text
from syllabus_server.models import EVENT_TYPES, Origin


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("2025-10-01 Project proposal", "2025-10-01"),
        ("Mon, Sep 8 - Lecture: Introduction", "2025-09-08"),
        ("September 10: Read Chapter 1", "2025-09-10"),
        ("December 8, 2026 Final exam", "2026-12-08"),
        ("12/1 Guest speaker from industry", "2025-12-01"),
        ("12/10/2026 Final project due", "2026-12-10"),
        ("10-15 Lab report", "2025-10-15"),
        ("Exam on 3 November 2025", "2025-11-03"),
    ],
)
def test_find_date_formats(line: str, expected: str) -> None:
    """Every supported token shape converts to an ISO date."""
    found = find_date(line, 2025)
    assert found is not None
    assert found.iso_date == expected


def test_find_date_rejects_non_dates() -> None:
    """Chapter numbers, clock times and impossible dates are not dates."""
    assert find_date("Chapter 3 covers processes", 2025) is None
    assert find_date("MW 10:50-12:00", 2025) is None
    assert find_date("Due 2/30", 2024) is None


def test_find_date_leap_day() -> None:
    found = find_date("Due 2/29", 2024)
    assert found is not None
    assert found.iso_date == "2024-02-29"


@pytest.mark.parametrize(
    ("line", "expected_type"),
    [
        ("September 10: Read Chapter 1", "reading"),
        ("Sep 25 Homework 2 due", "assignment"),
        ("Oct 21 Midterm Exam", "exam"),
        ("Nov 4 Group presentation", "presentation"),
        ("Mon, Sep 8 - Lecture: Introduction", "reading"),
        ("12/1 Guest speaker from industry", "other"),
    ],
)
def test_single_line_classification(line: str, expected_type: str) -> None:
    syllabus, origin = parse_syllabus_text(line, 2025)

    assert origin is Origin.HEURISTIC_FALLBACK
    assert len(syllabus.assignments) == 1
    assert syllabus.assignments[0].type == expected_type


def test_short_title_is_synthesized_from_date_token() -> None:
    """Lines shorter than 10 characters get a 'Class on <token>' title."""
    syllabus, _ = parse_syllabus_text("9/9 Quiz", 2025)

    event = syllabus.assignments[0]
    assert event.title == "Class on 9/9"
    assert event.type == "exam"
    assert event.date == "2025-09-09"


def test_short_line_kept_when_deadline_cue_present() -> None:
    syllabus, origin = parse_syllabus_text("9/5 Lab", 2025)

    assert origin is Origin.HEURISTIC_FALLBACK
    assert syllabus.assignments[0].type == "other"
    assert syllabus.assignments[0].title == "Class on 9/5"


def test_multi_activity_line_is_split() -> None:
    """A ';'-separated line naming different activity kinds yields one event per activity."""
    syllabus, _ = parse_syllabus_text("Sep 22: Read Chapter 4; Homework 1 due", 2025)

    assert [(e.date, e.type) for e in syllabus.assignments] == [
        ("2025-09-22", "reading"),
        ("2025-09-22", "assignment"),
    ]
    assert syllabus.assignments[1].title == "Homework 1 due"


def test_same_kind_activities_stay_one_event() -> None:
    syllabus, _ = parse_syllabus_text("Sep 22: Read Chapter 4; Chapter 5", 2025)
    assert len(syllabus.assignments) == 1


def test_schedule_with_course_header() -> None:
    text = "\n".join([
        "CSE 305 - Algorithms",
        "Instructor: Dr. Jane Smith",
        "Fall 2025",
        "",
        "Schedule",
        "Sep 3 Introduction and course overview",
        "Sep 10 Read Chapter 2",
        "Sep 17 Homework 1 due",
    ])

    syllabus, origin = parse_syllabus_text(text, 2025)

    assert origin is Origin.HEURISTIC_FALLBACK
    assert [e.date for e in syllabus.assignments] == ["2025-09-03", "2025-09-10", "2025-09-17"]
    assert syllabus.course_info.title == "CSE 305 - Algorithms"
    assert syllabus.course_info.professor == "Dr. Jane Smith"
    assert all(e.id.startswith("heuristic_") for e in syllabus.assignments)
    assert len({e.id for e in syllabus.assignments}) == 3
    assert all(e.type in EVENT_TYPES for e in syllabus.assignments)


def test_no_dates_returns_sample_schedule() -> None:
    """Text with no dated lines falls back to the canned semester schedule."""
    syllabus, origin = parse_syllabus_text("Welcome to the course.\nChapter 3 covers processes.", 2026)

    assert origin is Origin.CANNED_SAMPLE
    assert syllabus.success
    assert len(syllabus.assignments) >= 24
    assert all(e.date.startswith("2026-") for e in syllabus.assignments)
    assert syllabus.course_info.semester == "Fall 2026"


def test_guess_course_info_from_labelled_lines() -> None:
    info = guess_course_info([
        "CSE 305 - Algorithms",
        "Instructor: Dr. Jane Smith",
        "Fall 2025",
        "Time: TR 2:00-3:15 pm",
        "Room: Knox 110",
    ])

    assert info.title == "CSE 305 - Algorithms"
    assert info.professor == "Dr. Jane Smith"
    assert info.semester == "Fall 2025"
    assert info.class_time == "TR 2:00-3:15 pm"
    assert info.room == "Knox 110"


def test_guess_course_info_defaults() -> None:
    info = guess_course_info(["Welcome!"])
    assert (info.title, info.professor, info.semester) == ("Unknown Course", "Unknown", "Unknown")
