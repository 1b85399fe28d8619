import sys
import os
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from udon.logging_setup import SESSION_ID, setup_logging
from udon.settings import APP_NAME


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(APP_NAME)
    saved = logger.handlers[:]
    logger.handlers.clear()
    yield logger
    for h in logger.handlers:
        h.close()
    logger.handlers[:] = saved
    logger.propagate = True


def test_records_carry_session_id(clean_logger, tmp_path):
    log_path = tmp_path / "logs" / "udon.log"
    setup_logging(log_path=log_path)

    logging.getLogger("udon.vault.store").info("saved something")
    for h in clean_logger.handlers:
        h.flush()

    text = log_path.read_text(encoding="utf-8")
    assert "saved something" in text
    assert f"sid={SESSION_ID}" in text


def test_setup_is_idempotent(clean_logger, tmp_path):
    log_path = tmp_path / "udon.log"
    setup_logging(log_path=log_path)
    setup_logging(log_path=log_path)
    assert len(clean_logger.handlers) == 2


def test_console_level_is_configurable(clean_logger, tmp_path):
    setup_logging(log_path=tmp_path / "udon.log", console_level=logging.INFO)

    levels = {type(h).__name__: h.level for h in clean_logger.handlers}
    assert levels == {"RotatingFileHandler": logging.DEBUG, "StreamHandler": logging.INFO}
