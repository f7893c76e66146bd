"""Tests for shared utility functions and the session logging context."""

import contextvars
import io
import logging

from fieldservice.logging_context import (
    NO_SESSION,
    SESSION_LOG_FORMAT,
    SessionIdFilter,
    get_session_id,
    get_session_logger,
    install_session_filter,
    new_session_id,
    set_session_id,
)
from fieldservice.utils import format_order_number, is_blank


class TestIsBlank:
    def test_none(self):
        assert is_blank(None)

    def test_empty(self):
        assert is_blank("")

    def test_whitespace(self):
        assert is_blank(" \t\n")

    def test_text(self):
        assert not is_blank(" Ana ")


class TestFormatOrderNumber:
    def test_pads_to_width(self):
        assert format_order_number(7) == "OS-0007"

    def test_wider_numbers_unpadded(self):
        assert format_order_number(12345) == "OS-12345"

    def test_custom_prefix_and_width(self):
        assert format_order_number(3, prefix="WO", width=2) == "WO-03"


class TestSessionLogging:
    def test_new_session_id_format(self):
        session_id = new_session_id()
        assert session_id.startswith("FORM-")
        assert len(session_id) == len("FORM-") + 6

    def test_set_and_get(self):
        set_session_id("FORM-abc123")
        assert get_session_id() == "FORM-abc123"

    def test_filter_injects_session_id(self):
        set_session_id("FORM-feed01")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert SessionIdFilter().filter(record)
        assert record.session_id == "FORM-feed01"

    def test_logger_gets_single_filter(self):
        logger = get_session_logger("fieldservice.test_session")
        get_session_logger("fieldservice.test_session")
        filters = [f for f in logger.filters if isinstance(f, SessionIdFilter)]
        assert len(filters) == 1

    def test_default_outside_any_session(self):
        assert contextvars.Context().run(get_session_id) == NO_SESSION

    def test_filter_keeps_existing_session_id(self):
        set_session_id("FORM-222222")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        record.session_id = "FORM-111111"
        SessionIdFilter().filter(record)
        assert record.session_id == "FORM-111111"

    def test_handler_prints_session_id(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(SESSION_LOG_FORMAT))
        install_session_filter(handler)
        install_session_filter(handler)
        plain = logging.getLogger("fieldservice.test_plain_handler")
        plain.addHandler(handler)
        plain.setLevel(logging.INFO)
        try:
            set_session_id("FORM-c0ffee")
            plain.info("hello")
        finally:
            plain.removeHandler(handler)

        assert "[FORM-c0ffee] INFO: hello" in stream.getvalue()
        assert len(handler.filters) == 1
