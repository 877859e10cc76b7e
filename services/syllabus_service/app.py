"""
FastAPI service for syllabus parsing and calendar export.

This service exposes the syllabus pipeline and the calendar exporters as REST
endpoints: parse a syllabus (text or PDF upload), download the events as an
.ics file, and push them to Google Calendar.
"""
from __future__ import annotations

import base64
import binascii
import logging
import typing as t
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from calendar_server.google_calendar import CalendarAuthExpiredError, CalendarRequestError, GoogleCalendarSync
from calendar_server.ics import calendar_filename, encode_calendar, encode_event
from calendar_server.models import BearerCredential
from services.shared.models import (
    ExportEventRequest,
    ParseSyllabusRequest,
    ProcessedSyllabus,
    SyllabusResult,
    SyncRequest,
    SyncResponse,
)
from syllabus_server import config
from syllabus_server.completion import TextCompletion, create_completion
from syllabus_server.extraction import SyllabusExtractor
from syllabus_server.pdf_utils import extract_text_from_content
from syllabus_server.pipeline import process_syllabus


logger = logging.getLogger(__name__)

# Initialized on startup; None means parsing uses the heuristic parser only.
completion: t.Optional[TextCompletion] = None
# Shared client for Google Calendar calls; None creates one per request.
calendar_http_client: t.Optional[httpx.Client] = None
sync_delay_seconds: float = config.GOOGLE_SYNC_DELAY_SECONDS


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup and cleanup on shutdown."""
    global completion, calendar_http_client

    completion = create_completion()
    if completion is None:
        logger.warning("OPENAI_API_KEY is not set; syllabus parsing will use the heuristic parser only")
    calendar_http_client = httpx.Client(timeout=config.CALENDAR_REQUEST_TIMEOUT)

    yield

    calendar_http_client.close()
    calendar_http_client = None


app = FastAPI(
    title="Syllabus Calendar Service",
    description="REST API for turning syllabi into calendar events",
    version="1.0.0",
    lifespan=lifespan,
)


def _ics_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "syllabus-calendar-service", "ai": completion is not None}


@app.post("/syllabus:parse", response_model=SyllabusResult, response_model_by_alias=True,
          response_model_exclude_none=True)
def parse_syllabus(request: ParseSyllabusRequest) -> SyllabusResult:
    """
    Parse syllabus text or a base64-encoded PDF into calendar events.

    This endpoint can take 30-60 seconds for long syllabi when AI extraction is enabled.
    Declared without async so the blocking model call runs in the threadpool.
    """
    if (request.text is None) == (request.pdf_content_base64 is None):
        raise HTTPException(status_code=400, detail="Provide exactly one of 'text' or 'pdfContentBase64'")

    if request.pdf_content_base64 is not None:
        try:
            content = base64.b64decode(request.pdf_content_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid base64 PDF content: {e}")
        try:
            text = extract_text_from_content(content)
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Could not read PDF: {e}")
    else:
        text = request.text or ""

    year = request.year or config.ACADEMIC_YEAR
    extractor = SyllabusExtractor(completion, academic_year=year) if request.use_ai and completion else None
    result = process_syllabus(text, extractor=extractor, academic_year=year)
    return SyllabusResult.model_validate(result.to_dict())


@app.post("/calendar:export")
async def export_calendar(syllabus: ProcessedSyllabus) -> Response:
    """Download every event of a syllabus as one .ics file."""
    core = syllabus.to_core(config.ACADEMIC_YEAR)
    return _ics_response(encode_calendar(core.assignments, core.course_info), calendar_filename(core.course_info))


@app.post("/calendar:export-event")
async def export_event(request: ExportEventRequest) -> Response:
    """Download a single event as an .ics file."""
    event = request.event.to_core(config.ACADEMIC_YEAR)
    course_info = request.course_info.to_core() if request.course_info else None
    return _ics_response(encode_event(event, course_info), f"{event.id}.ics")


@app.post("/calendar:sync", response_model=SyncResponse, response_model_by_alias=True)
def sync_calendar(request: SyncRequest) -> SyncResponse:
    """
    Create the syllabus events in Google Calendar.

    Returns 401 when the access token has expired before any event was created.
    """
    syllabus = request.syllabus.to_core(config.ACADEMIC_YEAR)
    credential = BearerCredential(request.access_token)
    sync = GoogleCalendarSync(http_client=calendar_http_client, delay_seconds=sync_delay_seconds)
    if request.calendar_id:
        sync.calendar_id = request.calendar_id

    try:
        if request.new_calendar:
            sync.calendar_id = sync.create_calendar(syllabus.course_info, credential)
        result = sync.create_events(syllabus.assignments, credential, syllabus.course_info)
    except CalendarAuthExpiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except CalendarRequestError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        sync.close()

    if result.auth_expired and result.created == 0:
        raise HTTPException(status_code=401, detail=result.message)

    return SyncResponse(
        created=result.created,
        failed=result.failed,
        skipped=result.skipped,
        auth_expired=result.auth_expired,
        message=result.message,
        calendar_id=sync.calendar_id,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
