"""Per-visitor log correlation for the public form.

Each page load opens a form session with a short id. The page and the form
set it as the current session before they log, and ``load_config`` installs
``SessionIdFilter`` on the root handlers so every line printed carries the
id of the session it belongs to. Records logged outside any session show
``-``.

Usage:
    session_id = new_session_id()       # "FORM-3f2a9c"
    set_session_id(session_id)
    logger = get_session_logger(__name__)
    logger.info("Date selected")        # ... [FORM-3f2a9c] INFO: Date selected
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Union

NO_SESSION = "-"

SESSION_LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"

_current_session: ContextVar[str] = ContextVar("form_session_id", default=NO_SESSION)


def new_session_id() -> str:
    return f"FORM-{uuid.uuid4().hex[:6]}"


def set_session_id(session_id: str) -> None:
    _current_session.set(session_id)


def get_session_id() -> str:
    return _current_session.get()


class SessionIdFilter(logging.Filter):
    """Stamps the current form session onto records that lack one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _current_session.get()  # type: ignore[attr-defined]
        return True


def install_session_filter(target: Union[logging.Logger, logging.Handler]) -> None:
    """Attach a SessionIdFilter once; handlers need it for SESSION_LOG_FORMAT."""
    if not any(isinstance(f, SessionIdFilter) for f in target.filters):
        target.addFilter(SessionIdFilter())


def get_session_logger(name: str) -> logging.Logger:
    """Module logger whose records carry the form session id."""
    logger = logging.getLogger(name)
    install_session_filter(logger)
    return logger
