"""Tests for threat_submissions.logging."""

from __future__ import annotations

import io
import json
import logging
import sys

import structlog

from threat_submissions.logging import bind_run_context, setup_logging


class TestSetupLogging:
    def test_console_mode(self):
        setup_logging(json=False, level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_level_case_insensitive(self):
        setup_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_defaults_to_stderr(self):
        setup_logging()
        assert logging.getLogger().handlers[0].stream is sys.stderr

    def test_replaces_existing_handlers(self):
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())
        setup_logging()
        assert len(root.handlers) == 1

    def test_http_libraries_quiet_below_debug(self):
        setup_logging(level="INFO")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_json_lines_carry_run_context(self):
        stream = io.StringIO()
        setup_logging(json=True, level="INFO", stream=stream)
        bind_run_context(days_back=30, category="phishing")
        try:
            structlog.get_logger("test").info("submissions_page_fetched", count=5)
        finally:
            structlog.contextvars.clear_contextvars()

        line = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert line["event"] == "submissions_page_fetched"
        assert line["count"] == 5
        assert line["days_back"] == 30
        assert line["category"] == "phishing"
        assert line["level"] == "info"
