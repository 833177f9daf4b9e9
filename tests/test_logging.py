"""
Tests for core.logging - tags, the render id filter and error details.

Run with: python -m pytest tests/test_logging.py
"""

import logging

from core.logging import LOGGER_NAME, get_current_log_path, get_logger, log_error, set_render_id, tagged


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestLogging:
    def setup_method(self):
        self.logger = get_logger()
        self.handler = _ListHandler()
        self.logger.addHandler(self.handler)

    def teardown_method(self):
        self.logger.removeHandler(self.handler)
        set_render_id("")

    def test_logger_name(self):
        assert self.logger.name == LOGGER_NAME

    def test_tagged_extra(self):
        self.logger.debug("tagged line", extra=tagged("layer"))
        assert self.handler.records[-1].log_tag == "layer"

    def test_render_id_injected(self):
        set_render_id("maidr-plot-1-abcdef01")
        self.logger.info("with id")
        assert self.handler.records[-1].render_id == "maidr-plot-1-abcdef01"

    def test_untagged_defaults(self):
        set_render_id("")
        self.logger.info("plain")
        record = self.handler.records[-1]
        assert record.render_id == "-"
        assert record.log_tag == ""

    def test_log_error_includes_trace_and_context(self):
        try:
            raise KeyError("fill")
        except KeyError as exc:
            log_error("Layer 2 failed", exc, context={"panel": 1})
        record = self.handler.records[-1]
        message = record.getMessage()
        assert record.levelno == logging.ERROR
        assert record.log_tag == "error"
        assert "panel: 1" in message
        assert "Exception type: KeyError" in message
        assert "Stack trace:" in message

    def test_no_log_file_by_default(self):
        # File logging is opt-in through the "log_file" config key
        assert get_current_log_path() is None or get_current_log_path().suffix == ".log"
