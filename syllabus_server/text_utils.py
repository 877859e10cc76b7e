# -*- coding: utf-8 -*-
"""Lexical cleanup of text extracted from syllabus documents."""
import re

_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_BLANK_RUNS = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """
    Normalize line endings and whitespace without dropping content.

    :param text: Raw text as returned by a PDF/text extractor.
    :return: Text with ``\\n`` line endings, single spaces inside lines,
        trimmed lines, at most one blank line in a row, trimmed overall.
    """
    if not text:
        return ""
    # Form feeds separate PDF pages
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    lines = [_HORIZONTAL_WS.sub(" ", line).strip() for line in text.split("\n")]
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()
