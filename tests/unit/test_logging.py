"""Unit tests for logging functionality."""

import logging

import pytest

from porkbun_webhook._logging import (
    Timer,
    configure_logging,
    get_challenge_extra,
    get_logger,
    reset_challenge,
    set_challenge,
)


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_logger_with_package_namespace(self) -> None:
        logger = get_logger("porkbun_webhook.solver")
        assert logger.name == "porkbun_webhook.solver"

    def test_logger_hierarchy(self) -> None:
        parent = logging.getLogger("porkbun_webhook")
        child = get_logger("porkbun_webhook.solver")
        assert child.parent is parent


class TestChallengeContext:
    """Tests for per-challenge log context."""

    def test_no_challenge_returns_only_fields(self) -> None:
        assert get_challenge_extra() == {}
        assert get_challenge_extra(domain="example.com") == {"domain": "example.com"}

    def test_active_challenge_merged(self) -> None:
        token = set_challenge("uid-1", "_acme-challenge.example.com.")
        try:
            extra = get_challenge_extra(record_id="42")
        finally:
            reset_challenge(token)

        assert extra == {
            "challenge_uid": "uid-1",
            "fqdn": "_acme-challenge.example.com.",
            "record_id": "42",
        }

    def test_reset_restores_previous(self) -> None:
        token = set_challenge("uid-1", "a.example.com.")
        reset_challenge(token)

        assert get_challenge_extra() == {}


class TestTimer:
    """Tests for the Timer context manager."""

    def test_measures_elapsed_time(self) -> None:
        import time

        with Timer() as t:
            time.sleep(0.01)

        assert t.elapsed_ms >= 9
        assert t.elapsed_ms < 1000

    def test_elapsed_starts_at_zero(self) -> None:
        timer = Timer()
        assert timer.elapsed_ms == 0


class TestNullHandler:
    """Tests for NullHandler setup."""

    def test_root_logger_has_null_handler(self) -> None:
        import porkbun_webhook._logging  # noqa: F401

        root = logging.getLogger("porkbun_webhook")
        handler_types = [type(h).__name__ for h in root.handlers]
        assert "NullHandler" in handler_types

    def test_library_silent_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("porkbun_webhook.test")
        logger.info("This should not appear")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestConfigureLogging:
    """Tests for process-level logging setup."""

    def test_adds_stream_handler_and_level(self) -> None:
        root = logging.getLogger("porkbun_webhook")
        original_handlers = list(root.handlers)
        original_level = root.level
        try:
            configure_logging("debug")

            added = [h for h in root.handlers if h not in original_handlers]
            assert len(added) == 1
            assert isinstance(added[0], logging.StreamHandler)
            assert root.level == logging.DEBUG
        finally:
            root.handlers = original_handlers
            root.setLevel(original_level)


class TestLogCapture:
    """Tests for the log_capture fixture."""

    def test_captures_debug_messages(self, log_capture) -> None:
        get_logger("porkbun_webhook.test").debug("Debug message")

        assert "Debug message" in log_capture.get_messages(logging.DEBUG)

    def test_captures_error_messages(self, log_capture) -> None:
        get_logger("porkbun_webhook.test").error("Error message")

        assert "Error message" in log_capture.get_messages(logging.ERROR)

    def test_filter_by_logger_name(self, log_capture) -> None:
        get_logger("porkbun_webhook.solver").info("Solver message")
        get_logger("porkbun_webhook.providers.porkbun").info("Provider message")

        solver_messages = log_capture.get_messages(name="porkbun_webhook.solver")
        assert "Solver message" in solver_messages
        assert "Provider message" not in solver_messages

    def test_clear(self, log_capture) -> None:
        get_logger("porkbun_webhook.test").info("Info message")
        log_capture.clear()

        assert log_capture.records == []
