# -*- coding: utf-8 -*-
"""Environment-driven settings shared by the syllabus and calendar servers."""
import os
from datetime import date


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


# Extraction capability
SYLLABUS_MODEL = os.getenv("SYLLABUS_MODEL", "gpt-4o-mini")
SYLLABUS_TEMPERATURE = _float_env("SYLLABUS_TEMPERATURE", 0.1)
SYLLABUS_MAX_TOKENS = _int_env("SYLLABUS_MAX_TOKENS", 4000)
SYLLABUS_MAX_INPUT_CHARS = _int_env("SYLLABUS_MAX_INPUT_CHARS", 30000)
SYLLABUS_REQUEST_TIMEOUT = _float_env("SYLLABUS_REQUEST_TIMEOUT", 60.0)

# Year used for dates that do not state one
ACADEMIC_YEAR = _int_env("SYLLABUS_ACADEMIC_YEAR", date.today().year)

# Google Calendar
GOOGLE_CALENDAR_API_BASE_URL = "https://www.googleapis.com/calendar/v3"
GOOGLE_CALENDAR_ID = os.getenv("GOOGLE_CALENDAR_ID", "primary")
GOOGLE_CALENDAR_TIMEZONE = os.getenv("GOOGLE_CALENDAR_TIMEZONE", "America/New_York")
GOOGLE_SYNC_DELAY_SECONDS = _float_env("GOOGLE_SYNC_DELAY_SECONDS", 0.1)
CALENDAR_REQUEST_TIMEOUT = _float_env("CALENDAR_REQUEST_TIMEOUT", 30.0)
