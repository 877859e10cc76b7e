# -*- coding: utf-8 -*-
"""Tests for the syllabus-calendar command line."""
import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from calendar_server.google_calendar import GoogleCalendarSync
from orchestrator import run


SYLLABUS_TEXT = "\n".join([
    "CSE 305 - Algorithms",
    "Instructor: Dr. Jane Smith",
    "Fall 2025",
    "",
    "Sep 3 Introduction and course overview",
    "Sep 10 Read Chapter 2",
    "Sep 17 Homework 1 due",
])


@pytest.fixture
def syllabus_file(tmp_path: Path) -> Path:
    path = tmp_path / "algorithms.txt"
    path.write_text(SYLLABUS_TEXT, encoding="utf-8")
    return path


def test_parse_writes_json_and_ics(tmp_path: Path, syllabus_file: Path) -> None:
    json_out = tmp_path / "out.json"
    ics_out = tmp_path / "out.ics"

    result = CliRunner().invoke(
        run.main,
        ["parse", str(syllabus_file), "--no-ai", "--year", "2025", "--json", str(json_out), "--ics", str(ics_out)],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(json_out.read_text(encoding="utf-8"))
    assert data["origin"] == "heuristic_fallback"
    assert [a["date"] for a in data["assignments"]] == ["2025-09-03", "2025-09-10", "2025-09-17"]
    ics = ics_out.read_bytes()
    assert ics.count(b"BEGIN:VEVENT") == 3
    assert b"\r\n" in ics


def test_parse_directory(tmp_path: Path, syllabus_file: Path) -> None:
    json_out = tmp_path / "out.json"
    result = CliRunner().invoke(run.main, ["parse", str(tmp_path), "--no-ai", "--json", str(json_out)])

    assert result.exit_code == 0, result.output
    assert json.loads(json_out.read_text(encoding="utf-8"))["courseInfo"]["title"] == "CSE 305 - Algorithms"


def test_parse_missing_path_exits_with_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(run.main, ["parse", str(tmp_path / "missing.pdf"), "--no-ai"])
    assert result.exit_code == 1


def test_parse_without_sources_exits_with_error() -> None:
    result = CliRunner().invoke(run.main, ["parse"])
    assert result.exit_code == 1


def test_sync_exits_2_on_expired_token(syllabus_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    client = httpx.Client(transport=httpx.MockTransport(
        lambda request: httpx.Response(401, json={"error": {"message": "Invalid Credentials"}})
    ))
    monkeypatch.setattr(run, "GoogleCalendarSync",
                        lambda: GoogleCalendarSync(http_client=client, delay_seconds=0.0))

    result = CliRunner().invoke(run.main, ["sync", str(syllabus_file), "--token", "tok", "--no-ai"])

    assert result.exit_code == 2


def test_sync_reports_created_events(syllabus_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "g"})))
    monkeypatch.setattr(run, "GoogleCalendarSync",
                        lambda: GoogleCalendarSync(http_client=client, delay_seconds=0.0))

    result = CliRunner().invoke(run.main, ["sync", str(syllabus_file), "--token", "tok", "--no-ai"])

    assert result.exit_code == 0, result.output
    assert "Created" in result.output
