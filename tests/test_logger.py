# File: tests/test_logger.py
"""Project logger: stderr output, handler replacement, optional log file."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from webgrep.logger import LOGGER_NAME, configure, logger


def test_module_logger_is_the_project_logger():
    assert logger is logging.getLogger(LOGGER_NAME)
    assert logger.propagate is False


def test_reconfigure_replaces_handlers():
    configure(level="DEBUG")
    lg = configure(level="INFO")
    assert lg.level == logging.INFO
    assert len(lg.handlers) == 1
    assert isinstance(lg.handlers[0], logging.StreamHandler)


def test_records_go_to_stderr_not_stdout(capsys):
    configure(level="INFO", log_format="%(levelname)s %(message)s")
    logger.info("crawl started")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "INFO crawl started" in captured.err


def test_log_file_gets_a_rotating_handler(tmp_path):
    log_file = tmp_path / "webgrep.log"
    lg = configure(level="DEBUG", log_file=log_file, log_format="%(message)s")
    lg.debug("written to file")
    for handler in lg.handlers:
        handler.flush()

    assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)
    assert log_file.read_text(encoding="utf-8").strip() == "written to file"
