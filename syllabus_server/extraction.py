"""
Language-model extraction of syllabus events.

``SyllabusExtractor`` renders the extraction prompt, calls a text completion
capability and turns the response into a ProcessedSyllabus. Every way this
can go wrong is reported as a tagged result instead of an exception, so the
pipeline can decide on the fallback with a single ``isinstance`` check.
"""
from __future__ import annotations

import json
import logging
import re
import typing as t
from dataclasses import dataclass

import httpx
import openai

from prompts import render_prompt

from . import config
from .completion import CompletionError, CompletionLengthError, TextCompletion
from .models import ProcessedSyllabus
from .validation import generate_event_id, normalize_syllabus


logger = logging.getLogger(__name__)

PROMPT_NAME = "syllabus_extraction_prompt"

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionOk:
    syllabus: ProcessedSyllabus


@dataclass(frozen=True)
class SchemaViolation:
    """Valid JSON that does not have the ``{courseInfo, assignments}`` shape."""
    reason: str


@dataclass(frozen=True)
class ParseFailure:
    """The response holds no readable JSON object."""
    reason: str


@dataclass(frozen=True)
class ExtractionFailure:
    """The capability call itself failed (network, auth, timeout, API error)."""
    reason: str


@dataclass(frozen=True)
class LengthLimitFailure:
    """The prompt or the response hit the capability's size limit."""
    reason: str


ExtractionError = t.Union[SchemaViolation, ParseFailure, ExtractionFailure, LengthLimitFailure]
ExtractionResult = t.Union[ExtractionOk, ExtractionError]


def _isolate_json(raw: str) -> t.Optional[str]:
    text = _FENCE.sub("", raw or "")
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def parse_completion(raw: str, academic_year: int) -> ExtractionResult:
    """
    Turn a raw model response into a validated syllabus.

    Markdown fences are stripped and everything outside the outermost braces
    is ignored, since models like to wrap JSON in prose.

    :param raw: Text returned by the completion capability.
    :param academic_year: Year for dates that do not carry one.
    :return: ExtractionOk, or ParseFailure / SchemaViolation.
    """
    payload = _isolate_json(raw)
    if payload is None:
        return ParseFailure("No JSON object found in response")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        return ParseFailure(f"Invalid JSON in response: {e}")

    if not isinstance(data, dict):
        return SchemaViolation(f"Expected a JSON object, got {type(data).__name__}")
    course_info = data.get("courseInfo")
    if not isinstance(course_info, dict):
        return SchemaViolation("'courseInfo' is missing or not an object")
    assignments = data.get("assignments")
    if not isinstance(assignments, list):
        return SchemaViolation("'assignments' is missing or not an array")

    prepared: list[t.Any] = []
    for index, item in enumerate(assignments, 1):
        if isinstance(item, dict):
            item = dict(item)
            if not item.get("id"):
                item["id"] = generate_event_id("assignment", index)
            item.setdefault("isRequired", True)
        prepared.append(item)

    syllabus = normalize_syllabus(
        {"courseInfo": course_info, "assignments": prepared},
        academic_year,
        id_prefix="assignment",
    )
    return ExtractionOk(syllabus)


class SyllabusExtractor:
    """Extract a syllabus with a ``prompt -> text`` completion capability."""

    def __init__(
        self,
        complete: TextCompletion,
        academic_year: int = config.ACADEMIC_YEAR,
        max_input_chars: int = config.SYLLABUS_MAX_INPUT_CHARS,
    ) -> None:
        self.complete = complete
        self.academic_year = academic_year
        self.max_input_chars = max_input_chars

    def build_prompt(self, text: str) -> str:
        if len(text) > self.max_input_chars:
            logger.warning("Syllabus text truncated from %d to %d characters", len(text), self.max_input_chars)
            text = text[:self.max_input_chars]
        return render_prompt(PROMPT_NAME, academic_year=self.academic_year, syllabus_text=text)

    def extract(self, text: str) -> ExtractionResult:
        prompt = self.build_prompt(text)
        try:
            raw = self.complete(prompt)
        except CompletionLengthError as e:
            return LengthLimitFailure(str(e))
        except (CompletionError, openai.OpenAIError, httpx.HTTPError, TimeoutError, ConnectionError) as e:
            return ExtractionFailure(f"{type(e).__name__}: {e}")

        result = parse_completion(raw, self.academic_year)
        if isinstance(result, ExtractionOk):
            logger.info("Extracted %d events for %s",
                        len(result.syllabus.assignments), result.syllabus.course_info.title)
        return result
