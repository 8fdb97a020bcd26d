"""Tests for logging setup and formatters."""
from __future__ import annotations

import json
import logging
import sys

import pytest

from src.shared.constants import LOGGER_NAMESPACE
from src.shared.logging import (
    JSONFormatter,
    TeamCityFormatter,
    new_run_id,
    run_id_var,
    setup_logging,
    teamcity_escape,
)


def _record(level: int, message: str, *args) -> logging.LogRecord:
    return logging.LogRecord(
        name="src.coherence.verifier",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )


class TestTeamCityEscape:

    def test_plain_text_unchanged(self):
        assert teamcity_escape("A depends on B v1.0") == "A depends on B v1.0"

    def test_special_characters(self):
        assert teamcity_escape("a|b'c[d]e") == "a||b|'c|[d|]e"

    def test_newlines(self):
        assert teamcity_escape("one\r\ntwo") == "one|r|ntwo"

    def test_pipe_escaped_once(self):
        assert teamcity_escape("[") == "|["


class TestTeamCityFormatter:

    def test_error_becomes_service_message(self):
        line = TeamCityFormatter().format(_record(logging.ERROR, "A depends on B v[1.0, 2.0)"))
        assert line == "##teamcity[message text='A depends on B v|[1.0, 2.0)' status='ERROR']"

    def test_warning_status(self):
        line = TeamCityFormatter().format(_record(logging.WARNING, "partner mismatch"))
        assert line == "##teamcity[message text='partner mismatch' status='WARNING']"

    def test_info_passes_through(self):
        line = TeamCityFormatter().format(_record(logging.INFO, "Processing package %s", "A 1.0"))
        assert line == "Processing package A 1.0"

    def test_multiline_error(self):
        line = TeamCityFormatter().format(_record(logging.ERROR, "first\nsecond"))
        assert "first|nsecond" in line


class TestJSONFormatter:

    def test_fields(self):
        payload = json.loads(
            JSONFormatter(service_name="coherence-build").format(_record(logging.INFO, "hello"))
        )
        assert payload["level"] == "INFO"
        assert payload["service_name"] == "coherence-build"
        assert payload["logger"] == "src.coherence.verifier"
        assert payload["message"] == "hello"
        assert "timestamp" in payload
        assert "exception" not in payload

    def test_run_id_included(self):
        token = run_id_var.set("")
        try:
            run_id = new_run_id()
            payload = json.loads(JSONFormatter().format(_record(logging.INFO, "hello")))
            assert payload["run_id"] == run_id
        finally:
            run_id_var.reset(token)

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(logging.ERROR, "failed")
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert payload["exception"] == "boom"


class TestSetupLogging:

    def test_text_format(self):
        logger = setup_logging("coherence-build", level="debug")
        assert logger.name == LOGGER_NAMESPACE
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert type(logger.handlers[0].formatter) is logging.Formatter

    def test_json_format(self):
        logger = setup_logging("coherence-build", log_format="json")
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_teamcity_overrides_format(self):
        logger = setup_logging("coherence-build", log_format="json", teamcity=True)
        assert isinstance(logger.handlers[0].formatter, TeamCityFormatter)

    def test_repeated_setup_replaces_handler(self):
        setup_logging("coherence-build")
        logger = setup_logging("coherence-build")
        assert len(logger.handlers) == 1

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging("coherence-build", log_format="xml")

    def test_writes_to_stderr(self, capsys):
        setup_logging("coherence-build", log_format="text")
        logging.getLogger("src.coherence.verifier").warning("mismatch found")
        assert "WARNING mismatch found" in capsys.readouterr().err
