"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models in
syllabus_server.models. Field names are snake_case in Python and camelCase on
the wire, matching ``to_dict`` on the dataclasses.

Request payloads are loosely typed: ``to_core`` runs them through
syllabus_server.validation, so client dates such as ``"Sep 10"`` and labels
such as ``"homework"`` are repaired the same way extracted data is.
"""
from __future__ import annotations

import typing as t

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from syllabus_server import models as core
from syllabus_server.validation import normalize_course_info, normalize_event, normalize_syllabus


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, t.Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Event(ApiModel):
    """
    One all-day syllabus event.
    """
    id: t.Optional[str] = None
    date: t.Optional[str] = None          # "YYYY-MM-DD" once validated
    title: t.Optional[str] = None
    type: str = "other"                   # reading | assignment | exam | presentation | conference | other
    description: t.Optional[str] = None
    is_required: bool = True
    time_start: t.Optional[str] = None    # "HH:MM" 24h
    time_end: t.Optional[str] = None      # "HH:MM" 24h

    def to_core(self, academic_year: int, id_prefix: str = "event") -> core.Event:
        return normalize_event(self.to_wire(), 1, academic_year, id_prefix=id_prefix)


class CourseInfo(ApiModel):
    title: str = core.UNKNOWN_COURSE_TITLE
    professor: str = core.UNKNOWN
    semester: str = core.UNKNOWN
    class_time: t.Optional[str] = None
    room: t.Optional[str] = None

    def to_core(self) -> core.CourseInfo:
        return normalize_course_info(self.to_wire())


class ProcessedSyllabus(ApiModel):
    course_info: CourseInfo = Field(default_factory=CourseInfo)
    assignments: list[Event] = Field(default_factory=list)
    success: bool = True
    error: t.Optional[str] = None

    def to_core(self, academic_year: int) -> core.ProcessedSyllabus:
        return normalize_syllabus(self.to_wire(), academic_year)


class SyllabusResult(ProcessedSyllabus):
    """
    Parse response: the syllabus plus where its events came from.
    """
    origin: str
    is_fallback: bool
    is_mock_data: bool
    message: t.Optional[str] = None


class ParseSyllabusRequest(ApiModel):
    """Exactly one of ``text`` and ``pdf_content_base64`` must be given."""
    text: t.Optional[str] = None
    pdf_content_base64: t.Optional[str] = None
    year: t.Optional[int] = None
    use_ai: bool = True


class ExportEventRequest(ApiModel):
    event: Event
    course_info: t.Optional[CourseInfo] = None


class SyncRequest(ApiModel):
    syllabus: ProcessedSyllabus
    access_token: str
    calendar_id: t.Optional[str] = None
    new_calendar: bool = False


class SyncResponse(ApiModel):
    created: int = 0
    failed: int = 0
    skipped: int = 0
    auth_expired: bool = False
    message: str = ""
    calendar_id: t.Optional[str] = None
