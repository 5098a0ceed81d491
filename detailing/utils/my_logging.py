# detailing/utils/my_logging.py
"""Logging configuration with per-request correlation ids"""
import logging
import sys
from contextvars import ContextVar

from detailing.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Set by the HTTP middleware for the lifetime of one request
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

# Libraries that log every query/connection at INFO
QUIET_LOGGERS = (
    "sqlalchemy",
    "alembic",
    "celery",
    "uvicorn",
    "uvicorn.access",
    "twilio.http_client",
)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the correlation id of the request that produced it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = correlation_id_var.get()
        return True


def setup_logging(verbose=True):
    """
    Configure the root logger to write to stdout.

    verbose=False drops to WARNING and mutes the library loggers.
    """
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO) if verbose else logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)

    if not verbose:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.ERROR)
