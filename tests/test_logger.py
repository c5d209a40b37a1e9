"""
Logging System Test Suite

Coverage:
  - TerminalSafeFormatter sanitisation of caller-supplied text
  - Log/date format validation with fallback to defaults
  - LogManager singleton and get_logger
  - Engine log output for accepted and rejected operations
"""

import logging
import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from evote.constants import LOG_DATE_FORMAT, LOG_FORMAT
from evote.election import ElectionEngine, ManualClock
from evote.exceptions import NotAuthorizedError
from evote.logger import LogManager, TerminalSafeFormatter, get_logger


class TestTerminalSafeFormatter:

    def test_strips_ansi(self):
        assert TerminalSafeFormatter.sanitize("\x1b[31mred\x1b[0m") == "red"

    def test_strips_control_and_carriage_return(self):
        assert TerminalSafeFormatter.sanitize("a\rb\x00c\x07d") == "abcd"

    def test_keeps_tab_and_newline(self):
        assert TerminalSafeFormatter.sanitize("a\tb\nc") == "a\tb\nc"

    def test_empty(self):
        assert TerminalSafeFormatter.sanitize("") == ""

    def test_format_sanitizes_record(self):
        formatter = TerminalSafeFormatter(fmt="%(message)s")
        record = logging.LogRecord(
            name="t", level=logging.INFO, pathname="", lineno=0,
            msg="voter \x1b[2Jevil", args=(), exc_info=None,
        )
        assert formatter.format(record) == "voter evil"


class TestFormatValidation:

    def test_valid_log_format(self):
        fmt = "%(levelname)s %(message)s"
        assert LogManager.validate_log_format(fmt) == fmt

    def test_missing_percent_falls_back(self):
        assert LogManager.validate_log_format("(message)s") == LOG_FORMAT.default()

    def test_unknown_field_falls_back(self):
        assert LogManager.validate_log_format("%(nope)s") == LOG_FORMAT.default()

    def test_empty_log_format(self):
        assert LogManager.validate_log_format("") == LOG_FORMAT.default()

    def test_valid_date_format(self):
        assert LogManager.validate_date_format("%Y-%m-%d") == "%Y-%m-%d"

    def test_invalid_date_format(self):
        assert LogManager.validate_date_format("year!") == LOG_DATE_FORMAT.default()


class TestLogManager:

    def test_singleton(self):
        assert LogManager() is LogManager()

    def test_configured_on_import(self):
        assert LogManager().is_configured

    def test_get_logger(self):
        log = get_logger("evote.test")
        assert isinstance(log, logging.Logger)
        assert log.name == "evote.test"


class TestEngineLogging:

    def test_state_changes_logged(self, caplog):
        engine = ElectionEngine("admin", clock=ManualClock(0.0))
        with caplog.at_level(logging.INFO, logger="evote.election.engine"):
            engine.register_voter("admin", "alice")
            engine.advance_phase("admin")
        messages = [r.getMessage() for r in caplog.records]
        assert any("Registered voter alice" in m for m in messages)
        assert any("REGISTERING_VOTERS → PROPOSALS_REGISTRATION_STARTED" in m for m in messages)

    def test_rejections_logged_as_warning(self, caplog):
        engine = ElectionEngine("admin", clock=ManualClock(0.0))
        with caplog.at_level(logging.WARNING, logger="evote.election.engine"):
            with pytest.raises(NotAuthorizedError):
                engine.register_voter("mallory", "alice")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "not the administrator" in warnings[0].getMessage()
