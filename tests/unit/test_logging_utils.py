"""Unit tests for logging setup."""

import logging

from reactAgent.config import ObservabilitySettings
from reactAgent.utils.logging_utils import ROOT_LOGGER_NAME, configure_logging, log_step


def test_file_and_console_handlers(tmp_path):
    logger = configure_logging(ObservabilitySettings(log_level="INFO", log_dir=str(tmp_path)))

    assert logger.name == ROOT_LOGGER_NAME
    assert {type(h) for h in logger.handlers} == {logging.FileHandler, logging.StreamHandler}
    log_step(logging.getLogger("reactAgent.test"), "t1", 0, 1, "thought", "hello")
    for handler in logger.handlers:
        handler.flush()

    log_files = list(tmp_path.glob("reactagent_*.log"))
    assert len(log_files) == 1
    assert "hello" in log_files[0].read_text(encoding="utf-8")


def test_console_only_without_log_dir():
    logger = configure_logging(ObservabilitySettings(log_level="bogus", log_dir=None))

    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]
    assert logger.handlers[0].level == logging.WARNING
