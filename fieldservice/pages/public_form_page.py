"""
Standalone public form page, as embedded through an iframe.

The hosting URL carries a single ``calendarId`` query parameter. Loading
resolves that calendar from the backend; any configuration problem is
terminal for this page load. Once the form is showing, submission
failures are shown as a dismissible error over the still-filled form.

Usage:
    page = PublicFormPage(backend, resolver=resolver)
    await page.load("?calendarId=cal_tech1")
    page.form.update_fields(...)
    await page.submit()
"""

from enum import Enum
from typing import Mapping, Optional, Union
from urllib.parse import parse_qs

from fieldservice.booking.address import AddressResolver
from fieldservice.booking.public_form import (
    SUBMIT_FAILED_MESSAGE,
    PublicBookingForm,
    SubmissionResult,
)
from fieldservice.config import AppConfig, settings
from fieldservice.logging_context import get_session_logger, new_session_id, set_session_id
from fieldservice.schemas.state_schema import Calendar, CompanyInfo
from fieldservice.services.backend import BackendError, BackendService
from fieldservice.services.calendars import find_active_calendar

logger = get_session_logger(__name__)

CALENDAR_QUERY_PARAM = "calendarId"


class PageState(str, Enum):
    LOADING = "loading"
    FORM = "form"
    SUCCESS = "success"
    ERROR = "error"


class ConfigurationError(Exception):
    """Raised when the page cannot be shown because setup is incomplete."""


def _calendar_id_from_query(query: Union[str, Mapping[str, str], None]) -> Optional[str]:
    if query is None:
        return None
    if isinstance(query, str):
        values = parse_qs(query.lstrip("?")).get(CALENDAR_QUERY_PARAM)
        value = values[0] if values else None
    else:
        value = query.get(CALENDAR_QUERY_PARAM)
    if value is None or not value.strip():
        return None
    return value.strip()


class PublicFormPage:
    """Page controller for the embeddable appointment-request form."""

    def __init__(
        self,
        backend: BackendService,
        config: Optional[AppConfig] = None,
        resolver: Optional[AddressResolver] = None,
    ) -> None:
        self._backend = backend
        self._config = config or settings
        self._resolver = resolver
        self.state = PageState.LOADING
        self.error_message: Optional[str] = None
        self.form: Optional[PublicBookingForm] = None
        self.calendar: Optional[Calendar] = None
        self.company_info: Optional[CompanyInfo] = None

    @property
    def title(self) -> str:
        if self.company_info and self.company_info.name:
            return self.company_info.name
        return self._config.business.default_form_title

    @property
    def subtitle(self) -> Optional[str]:
        if self.state == PageState.FORM and self.calendar is not None:
            return f"Scheduling for: {self.calendar.name}"
        return None

    @property
    def loading_message(self) -> str:
        return "Sending your request..." if self.calendar else "Loading form..."

    async def _resolve_calendar(self, query) -> Calendar:
        if not self._config.maps.api_key:
            raise ConfigurationError("The map could not be loaded: the API key is missing.")

        calendar_id = _calendar_id_from_query(query)
        if calendar_id is None:
            raise ConfigurationError("No calendar was specified. The link may be incorrect.")

        state = await self._backend.get_initial_state()
        if state is None:
            raise ConfigurationError(
                "System configuration was not found. The form cannot be shown."
            )

        calendar = find_active_calendar(state, calendar_id)
        if calendar is None:
            raise ConfigurationError("The requested calendar was not found or is not active.")
        self.company_info = state.company_info
        return calendar
    async def load(self, query: Union[str, Mapping[str, str], None]) -> PageState:
        """Resolve the calendar named in the query and show its form."""
        session_id = new_session_id()
        set_session_id(session_id)
        self.state = PageState.LOADING
        try:
            self.calendar = await self._resolve_calendar(query)
        except (ConfigurationError, BackendError) as e:
            logger.error("Public form unavailable: %s", e)
            self.error_message = str(e)
            self.state = PageState.ERROR
            return self.state

        self.form = PublicBookingForm(
            self.calendar.id,
            self.calendar.availability or [],
            self._backend,
            resolver=self._resolver,
            session_id=session_id,
        )
        self.state = PageState.FORM
        logger.info("Public form loaded for calendar %s", self.calendar.id)
        return self.state

    async def submit(self) -> SubmissionResult:
        """
        Submit the form, showing the loading panel while the backend works.

        Raises:
            RuntimeError: If no form is showing or the page was closed.
        """
        if self.state != PageState.FORM or self.form is None:
            raise RuntimeError(f"No form to submit in page state '{self.state.value}'")
        if self.form.is_closed:
            raise RuntimeError("The form was closed; reload the page to start again")

        self.state = PageState.LOADING
        try:
            result = await self.form.submit()
        except Exception:
            self.error_message = SUBMIT_FAILED_MESSAGE
            self.state = PageState.FORM
            raise

        if result.success:
            self.error_message = None
            self.state = PageState.SUCCESS
        else:
            self.error_message = result.message
            self.state = PageState.FORM
        return result

    def dismiss_error(self) -> None:
        self.error_message = None
        if self.form is not None:
            self.form.clear_error()

    def close(self) -> None:
        """Visitor navigated away; the draft is discarded."""
        if self.form is not None and not self.form.is_closed:
            self.form.cancel()
