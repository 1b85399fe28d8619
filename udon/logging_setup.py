from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from udon.settings import APP_NAME, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"


class EnsureSessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("session", SESSION_ID)
        return msg, kwargs


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(EnsureSessionFilter())
    return handler


def setup_logging(
    *,
    log_path: Path | None = None,
    console_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Configure the "udon" logger tree once per process.

    ``log_path`` defaults to ~/.udon/logs/udon.log. The console handler
    writes to stderr at WARNING unless asked otherwise, so that the
    full-screen UI is not painted over by routine messages.
    """
    log_path = Path(log_path) if log_path is not None else LOG_PATH
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if logger.handlers:
        return logger

    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.addHandler(_handler(
        RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"),
        logging.DEBUG,
    ))
    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), console_level))

    logger.info(
        "Logging initialized. log_file=%s console_level=%s",
        log_path, logging.getLevelName(console_level),
    )
    return logger


log = SessionAdapter(logging.getLogger(APP_NAME), {})


def install_global_exception_hooks() -> None:
    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook
