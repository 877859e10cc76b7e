# -*- coding: utf-8 -*-
"""Tests for document text extraction."""
from pathlib import Path

import pytest

from syllabus_server.pdf_utils import extract_text, extract_text_from_content


def test_extract_text_from_plain_text_file(tmp_path: Path) -> None:
    """Text syllabi are read as-is."""
    path = tmp_path / "syllabus.txt"
    path.write_text("CSE 305 - Algorithms\nSep 10 Read Chapter 2\n", encoding="utf-8")

    text = extract_text(str(path))

    assert "CSE 305 - Algorithms" in text
    assert "Sep 10 Read Chapter 2" in text


def test_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        extract_text("does/not/exist.pdf")


def test_empty_upload_is_rejected() -> None:
    with pytest.raises(ValueError):
        extract_text_from_content(b"")
