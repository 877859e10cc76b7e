# -*- coding: utf-8 -*-
"""Tests for the MCP tool implementations."""
from pathlib import Path

import httpx
import pytest

from calendar_server import server as calendar_server
from calendar_server.google_calendar import GoogleCalendarSync
from syllabus_server import server as syllabus_server


SYLLABUS = {
    "courseInfo": {"title": "Torts", "professor": "Prof. Lee", "semester": "Fall 2025"},
    "assignments": [
        {"id": "e1", "date": "2025-09-03", "title": "Read pp. 1-20", "type": "reading"},
        {"id": "e2", "date": "Sept 10", "title": "Memo 1", "type": "homework"},
    ],
}


@pytest.fixture(autouse=True)
def no_openai(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(syllabus_server, "completion", None)


def test_process_syllabus_text_tool() -> None:
    result = syllabus_server.process_syllabus_text_fn("Sep 3 Read Chapter 1\nSep 10 Homework 1 due", 2025)

    assert result["success"] is True
    assert result["origin"] == "heuristic_fallback"
    assert [a["date"] for a in result["assignments"]] == ["2025-09-03", "2025-09-10"]


def test_parse_syllabus_tool_reads_text_file(tmp_path: Path) -> None:
    path = tmp_path / "syllabus.txt"
    path.write_text("No dates in here at all.", encoding="utf-8")

    result = syllabus_server.parse_syllabus_fn(str(path), 2025)

    assert result["isMockData"] is True
    assert len(result["assignments"]) >= 24


def test_export_calendar_tool_repairs_loose_input() -> None:
    """Tool input is validated the same way extracted data is."""
    text = calendar_server.export_calendar_fn(SYLLABUS)

    assert text.count("BEGIN:VEVENT") == 2
    assert "CATEGORIES:ASSIGNMENT" in text
    assert f"DTSTART;VALUE=DATE:{calendar_server.config.ACADEMIC_YEAR}0910" in text


def test_export_event_tool() -> None:
    text = calendar_server.export_event_fn(SYLLABUS["assignments"][0], SYLLABUS["courseInfo"])
    assert "UID:e1@syllabus-calendar" in text
    assert "X-WR-CALNAME:Torts" in text


def test_sync_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "g"})))
    monkeypatch.setattr(calendar_server, "GoogleCalendarSync",
                        lambda: GoogleCalendarSync(http_client=client, delay_seconds=0.0))

    result = calendar_server.sync_google_calendar_fn(SYLLABUS, "tok")

    assert result["created"] == 2
    assert result["authExpired"] is False
    assert result["calendarId"] == "primary"


def test_sync_tool_reports_expired_token_when_creating_calendar(monkeypatch: pytest.MonkeyPatch) -> None:
    client = httpx.Client(transport=httpx.MockTransport(
        lambda request: httpx.Response(401, json={"error": {"message": "Invalid Credentials"}})
    ))
    monkeypatch.setattr(calendar_server, "GoogleCalendarSync",
                        lambda: GoogleCalendarSync(http_client=client, delay_seconds=0.0))

    result = calendar_server.sync_google_calendar_fn(SYLLABUS, "tok", new_calendar=True)

    assert result["authExpired"] is True
    assert (result["created"], result["failed"], result["skipped"]) == (0, 0, 2)
    assert result["errors"]


def test_sync_tool_reports_failed_calendar_creation(monkeypatch: pytest.MonkeyPatch) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="backend error")))
    monkeypatch.setattr(calendar_server, "GoogleCalendarSync",
                        lambda: GoogleCalendarSync(http_client=client, delay_seconds=0.0))

    result = calendar_server.sync_google_calendar_fn(SYLLABUS, "tok", new_calendar=True)

    assert result["authExpired"] is False
    assert (result["created"], result["failed"]) == (0, 2)
    assert "backend error" in result["errors"][0]
