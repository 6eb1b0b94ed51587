"""
tests/test_logging.py
Logger naming, context propagation, and handler setup.
Run: pytest tests/test_logging.py -v
"""

import json
import logging

from ctlapi.core.logger import (
    ColoredFormatter,
    LogContext,
    StructuredFormatter,
    get_logger,
    setup_logging,
)


def make_record(msg="hello", level=logging.INFO):
    return logging.LogRecord("ctlapi.test", level, __file__, 1, msg, None, None)


class TestGetLogger:

    def test_prefix_and_cache(self):
        log = get_logger("executor")
        assert log.logger.name == "ctlapi.executor"
        assert get_logger("ctlapi.executor") is log

    def test_log_context_restores_previous(self):
        log = get_logger("ctx-test")
        log.set_context(request="outer")
        with LogContext(log, request="inner", url="https://x"):
            assert log.context == {"request": "inner", "url": "https://x"}
        assert log.context == {"request": "outer"}
        log.clear_context()

    def test_context_attached_to_records(self, caplog):
        log = get_logger("ctx-records")
        with caplog.at_level(logging.DEBUG, logger="ctlapi"):
            with LogContext(log, url="https://nx.local"):
                log.info("posting")
        record = caplog.records[-1]
        assert record.context == {"url": "https://nx.local"}


class TestFormatters:

    def test_structured_output_is_json(self):
        record = make_record()
        record.context = {"url": "https://nx.local"}
        data = json.loads(StructuredFormatter().format(record))
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["context"] == {"url": "https://nx.local"}

    def test_colored_does_not_mutate_record(self):
        record = make_record(level=logging.WARNING)
        output = ColoredFormatter(use_colors=True).format(record)
        assert "\033[33m" in output
        assert record.levelname == "WARNING"


class TestSetupLogging:

    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "ctlapi.log"
        root = setup_logging(level="DEBUG", log_file=log_file, use_colors=False, force=True)
        try:
            get_logger("setup-test").debug("to file")
            for handler in root.handlers:
                handler.flush()
            line = log_file.read_text().strip().splitlines()[-1]
            assert json.loads(line)["message"] == "to file"
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()

    def test_second_call_is_noop_without_force(self):
        root = setup_logging(level="INFO", force=True)
        handlers = list(root.handlers)
        assert setup_logging(level="DEBUG").handlers == handlers
        assert root.level == logging.INFO
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
