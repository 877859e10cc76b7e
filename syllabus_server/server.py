from __future__ import annotations

import logging
import typing as t

from fastmcp import FastMCP

from . import config
from .completion import create_completion
from .extraction import SyllabusExtractor
from .pdf_utils import extract_text
from .pipeline import process_syllabus


logger = logging.getLogger(__name__)

mcp = FastMCP("SyllabusServer")

# None when OPENAI_API_KEY is unset; parsing then uses the heuristic parser only.
completion = create_completion()


def _extractor(year: int) -> t.Optional[SyllabusExtractor]:
    if completion is None:
        return None
    return SyllabusExtractor(completion, academic_year=year)


# -----------------------------
# MCP Tool Implementation
# -----------------------------

def process_syllabus_text_fn(text: str, year: t.Optional[int] = None) -> dict[str, t.Any]:
    academic_year = year or config.ACADEMIC_YEAR
    result = process_syllabus(text, extractor=_extractor(academic_year), academic_year=academic_year)
    return result.to_dict()


def parse_syllabus_fn(path_or_url: str, year: t.Optional[int] = None) -> dict[str, t.Any]:
    text = extract_text(path_or_url)
    logger.info("Read %d characters from %s", len(text), path_or_url)
    return process_syllabus_text_fn(text, year)


@mcp.tool()
def parse_syllabus(path_or_url: str, year: t.Optional[int] = None) -> dict[str, t.Any]:
    """
    Parse a syllabus PDF (local path or URL) or text file into dated calendar events.

    The result carries ``courseInfo``, ``assignments``, ``success`` and the
    ``origin`` / ``isFallback`` / ``isMockData`` flags telling whether the
    events came from AI extraction, the basic date parser or the sample schedule.
    """
    return parse_syllabus_fn(path_or_url, year)


@mcp.tool()
def process_syllabus_text(text: str, year: t.Optional[int] = None) -> dict[str, t.Any]:
    """
    Extract dated calendar events from raw syllabus text.

    Args:
        text: The syllabus text
        year: Year for dates that do not state one (defaults to SYLLABUS_ACADEMIC_YEAR)
    """
    return process_syllabus_text_fn(text, year)


if __name__ == "__main__":
    # Run as an MCP server over stdio
    mcp.run()
