"""
Logging configuration.

Every record carries the trace id of the request that produced it. The id
lives in a ContextVar so it follows the request through awaits without being
passed around explicitly.

    setup_logging()            # once, at app import
    set_trace_id(request_id)   # per request, in the API layer
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(trace_id)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NO_TRACE = "-"

TRACE_ID: ContextVar[str] = ContextVar("trace_id", default=NO_TRACE)

_configured = False


def set_trace_id(trace_id: str) -> None:
    """Bind trace_id to the current context."""
    TRACE_ID.set(trace_id)


def get_trace_id() -> str:
    """Trace id of the current context, "-" outside a request."""
    return TRACE_ID.get()


class TraceIdFilter(logging.Filter):
    """Copies the context trace id onto each record as record.trace_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


def setup_logging(log_level: Optional[str] = None, force: bool = False) -> None:
    """
    Install a stdout handler on the root logger.

    Args:
        log_level: Level name, defaults to settings.LOG_LEVEL
        force: Replace existing root handlers and configure again
    """
    global _configured

    if _configured and not force:
        return

    if log_level is None:
        from appointment_ai.core.config import settings
        log_level = settings.LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if force:
        root.handlers.clear()

    # Leave handlers installed by a host (e.g. pytest, uvicorn) alone
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.addFilter(TraceIdFilter())
        root.addHandler(handler)

    _configured = True
    logging.getLogger(__name__).info(f"Logging configured at {log_level.upper()}")
