"""
End-to-end syllabus processing: normalize, extract, fall back, validate.
"""
from __future__ import annotations

import logging
import typing as t

from . import config
from .extraction import ExtractionOk, SyllabusExtractor
from .heuristic import parse_syllabus_text
from .models import Origin, ProcessedSyllabus, SyllabusResult
from .sample_schedule import DEFAULT_KNOWN_COURSE, KnownCourse
from .text_utils import normalize_text
from .validation import validate_syllabus


logger = logging.getLogger(__name__)

EMPTY_TEXT_ERROR = "No text could be extracted from the syllabus"

FALLBACK_MESSAGES = {
    Origin.HEURISTIC_FALLBACK: "AI extraction was unavailable; events were found with the basic date parser. "
                               "Please review them before exporting.",
    Origin.CANNED_SAMPLE: "No dated events could be found; a sample course schedule is shown instead.",
}


def process_syllabus(
    text: str,
    extractor: t.Optional[SyllabusExtractor] = None,
    academic_year: int = config.ACADEMIC_YEAR,
    known_course: KnownCourse = DEFAULT_KNOWN_COURSE,
) -> SyllabusResult:
    """
    Convert raw syllabus text into a validated syllabus.

    :param text: Raw text as extracted from the document.
    :param extractor: Language-model extractor; None skips straight to the
        heuristic parser.
    :param academic_year: Year for dates that do not carry one.
    :param known_course: Course used for the sample schedule of last resort.
    :return: SyllabusResult whose origin says which component produced the events.
    """
    normalized = normalize_text(text)
    if not normalized:
        logger.warning("Empty syllabus text")
        return SyllabusResult(
            syllabus=ProcessedSyllabus(success=False, error=EMPTY_TEXT_ERROR),
            origin=Origin.HEURISTIC_FALLBACK,
            message=EMPTY_TEXT_ERROR,
        )

    if extractor is not None:
        result = extractor.extract(normalized)
        if isinstance(result, ExtractionOk) and result.syllabus.assignments:
            return SyllabusResult(
                syllabus=validate_syllabus(result.syllabus, academic_year),
                origin=Origin.REAL_EXTRACTION,
            )
        if isinstance(result, ExtractionOk):
            logger.warning("AI extraction returned no events; falling back to heuristic parser")
        else:
            logger.warning("AI extraction failed (%s): %s; falling back to heuristic parser",
                           type(result).__name__, result.reason)
    else:
        logger.info("No extraction capability configured; using heuristic parser")

    syllabus, origin = parse_syllabus_text(normalized, academic_year, known_course)
    return SyllabusResult(
        syllabus=validate_syllabus(syllabus, academic_year),
        origin=origin,
        message=FALLBACK_MESSAGES[origin],
    )
