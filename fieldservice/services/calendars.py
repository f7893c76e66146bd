"""Calendar administration: availability updates and public form sharing."""

import logging
from html import escape
from typing import Optional
from urllib.parse import urlencode

from fieldservice.config import settings
from fieldservice.schemas.availability_schema import DailyAvailability
from fieldservice.schemas.state_schema import AppState, Calendar
from fieldservice.services.backend import BackendError, BackendService

logger = logging.getLogger(__name__)

PUBLIC_FORM_PAGE = "public-form.html"


def find_calendar(state: AppState, calendar_id: str) -> Optional[Calendar]:
    return next((c for c in state.calendars if c.id == calendar_id), None)


def find_active_calendar(state: AppState, calendar_id: str) -> Optional[Calendar]:
    """Return the calendar only if it exists and is explicitly active."""
    calendar = find_calendar(state, calendar_id)
    if calendar is None or not calendar.active:
        return None
    return calendar


async def update_calendar_availability(
    backend: BackendService,
    calendar_id: str,
    availability: list[DailyAvailability],
) -> Calendar:
    """
    Replace a calendar's weekly availability.

    Raises:
        BackendError: If the system state is missing.
        KeyError: If the calendar does not exist.
    """
    state = await backend.get_initial_state()
    if state is None:
        raise BackendError("App state document does not exist")
    calendar = find_calendar(state, calendar_id)
    if calendar is None:
        raise KeyError(f"Calendar {calendar_id} not found")

    updated = calendar.model_copy(update={"availability": list(availability)})
    await backend.save_state(state.model_copy(update={
        "calendars": [updated if c.id == calendar_id else c for c in state.calendars],
    }))
    logger.info("Availability updated for calendar %s (%d days)", calendar_id, len(availability))
    return updated


def embed_url(calendar_id: str, base_url: Optional[str] = None) -> str:
    """Direct link to the public form for one calendar."""
    base = (base_url or settings.form.public_base_url).rstrip("/")
    return f"{base}/{PUBLIC_FORM_PAGE}?{urlencode({'calendarId': calendar_id})}"


def embed_code(calendar: Calendar, base_url: Optional[str] = None) -> str:
    """Iframe snippet for embedding the public form in another site."""
    return (
        f'<iframe src="{embed_url(calendar.id, base_url)}" '
        f'style="width: 100%; height: {settings.form.embed_height_px}px; border: none;" '
        f'allow="geolocation" title="Appointment Form - {escape(calendar.name)}"></iframe>'
    )
