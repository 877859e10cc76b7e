"""
Data models for syllabus extraction and representation.

This module contains the dataclasses shared by every stage of the pipeline:
the canonical Event record, the CourseInfo header, the ProcessedSyllabus
aggregate and the SyllabusResult returned at the pipeline boundary.

All of them are frozen: a syllabus is built once per upload and only read
(exported, synced, serialized) afterwards. ``to_dict`` produces the camelCase
JSON shape used on the wire.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from enum import Enum


# Type literals for commonly used values
EventType = t.Literal["reading", "assignment", "exam", "presentation", "conference", "other"]
EVENT_TYPES: tuple[str, ...] = ("reading", "assignment", "exam", "presentation", "conference", "other")

UNKNOWN_COURSE_TITLE = "Unknown Course"
UNKNOWN = "Unknown"


class Origin(str, Enum):
    """Which component produced the events of a result."""
    REAL_EXTRACTION = "real_extraction"
    HEURISTIC_FALLBACK = "heuristic_fallback"
    CANNED_SAMPLE = "canned_sample"


@dataclass(frozen=True)
class Event:
    """
    One dated academic activity.

    ``date`` is an all-day ``YYYY-MM-DD`` value; ``time_start``/``time_end``
    are informational ``HH:MM`` strings and independent of each other.
    """
    id: str
    date: str
    title: str
    type: EventType = "other"
    description: t.Optional[str] = None
    is_required: bool = True
    time_start: t.Optional[str] = None  # "HH:MM" 24h
    time_end: t.Optional[str] = None    # "HH:MM" 24h

    def to_dict(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "type": self.type,
            "isRequired": self.is_required,
        }
        if self.description:
            data["description"] = self.description
        if self.time_start:
            data["timeStart"] = self.time_start
        if self.time_end:
            data["timeEnd"] = self.time_end
        return data


@dataclass(frozen=True)
class CourseInfo:
    """Course header information found at the top of most syllabi."""
    title: str = UNKNOWN_COURSE_TITLE
    professor: str = UNKNOWN
    semester: str = UNKNOWN
    class_time: t.Optional[str] = None  # e.g. "MW 9:00-10:50 am"
    room: t.Optional[str] = None

    def to_dict(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {
            "title": self.title,
            "professor": self.professor,
            "semester": self.semester,
        }
        if self.class_time:
            data["classTime"] = self.class_time
        if self.room:
            data["room"] = self.room
        return data


@dataclass(frozen=True)
class ProcessedSyllabus:
    """
    Aggregate passed between pipeline stages and to exporters.
    """
    course_info: CourseInfo = field(default_factory=CourseInfo)
    assignments: tuple[Event, ...] = ()
    success: bool = True
    error: t.Optional[str] = None

    def __post_init__(self) -> None:
        # Accept any iterable of events but always store a tuple.
        if not isinstance(self.assignments, tuple):
            object.__setattr__(self, "assignments", tuple(self.assignments))

    def to_dict(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {
            "courseInfo": self.course_info.to_dict(),
            "assignments": [event.to_dict() for event in self.assignments],
            "success": self.success,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class SyllabusResult:
    """
    Pipeline output: the syllabus plus where its events came from.

    ``message`` explains a fallback to the end user; it is None for a
    genuine extraction.
    """
    syllabus: ProcessedSyllabus
    origin: Origin
    message: t.Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.origin is not Origin.REAL_EXTRACTION

    @property
    def is_mock_data(self) -> bool:
        return self.origin is Origin.CANNED_SAMPLE

    def to_dict(self) -> dict[str, t.Any]:
        data = self.syllabus.to_dict()
        data["origin"] = self.origin.value
        data["isFallback"] = self.is_fallback
        data["isMockData"] = self.is_mock_data
        if self.message:
            data["message"] = self.message
        return data
