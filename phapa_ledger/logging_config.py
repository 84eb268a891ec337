"""
Structured Logging

Every module logs through structlog so events come out as JSON lines
with a timestamp, level and logger name. Event names are snake_case
and carry their context as key-value pairs.

Logging is for diagnostics only. The ledger never shows log output
to the user.
"""

import logging
import sys
from typing import Optional

import structlog

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Safe to call more than once; only the first call takes effect.
    If level is None it is read from AppSettings.
    """
    global _configured
    if _configured:
        return

    if level is None:
        from phapa_ledger.config import get_settings
        level = get_settings().app.log_level

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(name)
