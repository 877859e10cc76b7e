"""
Google Calendar sync for validated syllabus events.

Events are created one at a time with a short pause between calls to stay
under the API rate limit. The access token is passed explicitly on every
call as a ``BearerCredential``; a 401 invalidates it and ends the batch.
"""
from __future__ import annotations

import logging
import time
import typing as t
from urllib.parse import quote

import httpx

from syllabus_server import config
from syllabus_server.models import CourseInfo, Event

from .ics import next_day
from .models import BearerCredential, SyncResult


logger = logging.getLogger(__name__)

# Google Calendar event colour ids keyed by event type
EVENT_COLORS: dict[str, str] = {
    "reading": "2",       # sage
    "assignment": "11",   # tomato
    "exam": "5",          # banana
    "presentation": "6",  # tangerine
    "conference": "10",   # basil
    "other": "1",         # lavender
}


class CalendarError(RuntimeError):
    """Base error raised by the Google Calendar adapter."""


class CalendarAuthExpiredError(CalendarError):
    """Raised when the bearer credential is missing, invalidated or rejected with 401."""

    def __init__(self, message: str = "Authentication expired. Please sign in to Google Calendar again.") -> None:
        super().__init__(message)


class CalendarRequestError(CalendarError):
    """Raised when a Google Calendar API request fails."""

    def __init__(self, *, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Google Calendar API request failed ({status_code}): {message}")


def _safe_google_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error_payload = payload.get("error")
        if isinstance(error_payload, dict):
            message = error_payload.get("message")
            if isinstance(message, str) and message.strip():
                return " ".join(message.split())[:200]
        if isinstance(error_payload, str) and error_payload.strip():
            return " ".join(error_payload.split())[:200]

    raw_text = response.text.strip()
    if raw_text:
        return " ".join(raw_text.split())[:200]
    return "Request failed without an error payload"


def compose_description(event: Event, course_info: t.Optional[CourseInfo] = None) -> str:
    """Event description followed by course context, type and required marker."""
    parts: list[str] = []
    if event.description:
        parts.append(event.description)
    if course_info is not None:
        parts.append(f"Course: {course_info.title}")
        parts.append(f"Professor: {course_info.professor}")
    parts.append(f"Type: {event.type.capitalize()}")
    parts.append("Required" if event.is_required else "Optional")
    return "\n\n".join(parts)


def to_google_event(
    event: Event,
    course_info: t.Optional[CourseInfo] = None,
    timezone: str = config.GOOGLE_CALENDAR_TIMEZONE,
) -> dict[str, t.Any]:
    """Map an Event onto the Google Calendar all-day event resource."""
    return {
        "summary": event.title,
        "description": compose_description(event, course_info),
        "start": {"date": event.date, "timeZone": timezone},
        "end": {"date": next_day(event.date), "timeZone": timezone},
        "colorId": EVENT_COLORS.get(event.type, EVENT_COLORS["other"]),
        "visibility": "private",
        "transparency": "opaque",
    }


class GoogleCalendarSync:
    """Creates syllabus events in a Google calendar."""

    def __init__(
        self,
        http_client: t.Optional[httpx.Client] = None,
        calendar_id: str = config.GOOGLE_CALENDAR_ID,
        timezone: str = config.GOOGLE_CALENDAR_TIMEZONE,
        delay_seconds: float = config.GOOGLE_SYNC_DELAY_SECONDS,
        sleep: t.Callable[[float], None] = time.sleep,
        base_url: str = config.GOOGLE_CALENDAR_API_BASE_URL,
    ) -> None:
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=config.CALENDAR_REQUEST_TIMEOUT)
        self.calendar_id = calendar_id
        self.timezone = timezone
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.base_url = base_url.rstrip("/")

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.http_client.close()

    def _post(self, path: str, body: dict[str, t.Any], credential: BearerCredential) -> dict[str, t.Any]:
        if not credential.is_valid:
            raise CalendarAuthExpiredError("No valid Google Calendar access token. Please sign in again.")
        try:
            response = self.http_client.post(
                f"{self.base_url}{path}",
                json=body,
                headers={"Authorization": f"Bearer {credential.token}"},
            )
        except httpx.HTTPError as e:
            raise CalendarRequestError(status_code=0, message=f"Request failed: {e}") from e

        if response.status_code == 401:
            credential.invalidate()
            raise CalendarAuthExpiredError()
        if response.status_code < 200 or response.status_code >= 300:
            raise CalendarRequestError(
                status_code=response.status_code,
                message=_safe_google_error_message(response),
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise CalendarRequestError(status_code=response.status_code,
                                       message="Invalid JSON in successful response") from e
        if not isinstance(payload, dict):
            raise CalendarRequestError(status_code=response.status_code, message="Unexpected response payload")
        return payload

    def to_google_event(self, event: Event, course_info: t.Optional[CourseInfo] = None) -> dict[str, t.Any]:
        return to_google_event(event, course_info, self.timezone)

    def create_event(
        self,
        event: Event,
        credential: BearerCredential,
        course_info: t.Optional[CourseInfo] = None,
    ) -> str:
        """
        Create one event.

        :return: The Google id of the created event.
        :raises CalendarAuthExpiredError: The credential is missing or was rejected.
        :raises CalendarRequestError: Any other failed request.
        """
        payload = self._post(f"/calendars/{quote(self.calendar_id, safe='')}/events",
                             self.to_google_event(event, course_info), credential)
        return str(payload.get("id", ""))

    def create_events(
        self,
        events: t.Sequence[Event],
        credential: BearerCredential,
        course_info: t.Optional[CourseInfo] = None,
    ) -> SyncResult:
        """
        Create events sequentially.

        A failed event is counted and the batch continues. Expired
        authentication stops the batch; the remaining events are reported
        as skipped.
        """
        result = SyncResult()
        for index, event in enumerate(events):
            if index and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            try:
                result.event_ids.append(self.create_event(event, credential, course_info))
                result.created += 1
            except CalendarAuthExpiredError as e:
                result.auth_expired = True
                result.skipped = len(events) - index
                result.errors.append(str(e))
                logger.warning("Google Calendar credential expired; skipping %d remaining events", result.skipped)
                break
            except (CalendarRequestError, ValueError) as e:
                # ValueError: an event whose date cannot be mapped onto a Google resource
                result.failed += 1
                result.errors.append(f"{event.title}: {e}")
                logger.warning("Failed to create event %r: %s", event.title, e)

        logger.info("Google Calendar sync: %d created, %d failed, %d skipped",
                    result.created, result.failed, result.skipped)
        return result

    def create_calendar(self, course_info: CourseInfo, credential: BearerCredential) -> str:
        """
        Create a dedicated calendar for a course.

        :return: The id of the new calendar.
        """
        payload = self._post(
            "/calendars",
            {
                "summary": f"{course_info.title} - Syllabus Calendar",
                "description": f"Calendar for {course_info.title} with Professor {course_info.professor}",
                "timeZone": self.timezone,
            },
            credential,
        )
        calendar_id = payload.get("id")
        if not calendar_id:
            raise CalendarRequestError(status_code=200, message="Calendar created without an id")
        logger.info("Created Google calendar %s for %s", calendar_id, course_info.title)
        return str(calendar_id)
