# -*- coding: utf-8 -*-
"""Tests for syllabus text normalization."""
from syllabus_server.text_utils import normalize_text


def test_empty_and_whitespace_only_input() -> None:
    """Nothing to normalize yields an empty string."""
    assert normalize_text("") == ""
    assert normalize_text("   \n\t \r\n ") == ""


def test_line_endings_and_inner_whitespace() -> None:
    """CRLF/CR become LF and runs of spaces/tabs collapse inside a line."""
    raw = "Line  one\r\nLine\ttwo  \rThree"
    assert normalize_text(raw) == "Line one\nLine two\nThree"


def test_blank_line_runs_collapse_to_one() -> None:
    raw = "Week 1\n\n\n\n\nWeek 2\n \n\t\nWeek 3"
    assert normalize_text(raw) == "Week 1\n\nWeek 2\n\nWeek 3"


def test_form_feed_page_breaks_become_newlines() -> None:
    assert normalize_text("\fPage 1\fPage 2") == "Page 1\nPage 2"


def test_line_structure_is_preserved() -> None:
    """Each schedule row stays on its own line."""
    raw = "Sep 3   Intro\nSep 10  Read Chapter 2\nSep 17  Homework 1 due"
    assert normalize_text(raw).splitlines() == ["Sep 3 Intro", "Sep 10 Read Chapter 2", "Sep 17 Homework 1 due"]
