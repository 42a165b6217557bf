"""
Structured logging configuration.

Services log through `structlog.get_logger(__name__)` or an injected
logger; this module only wires the processor chain once per process.
"""

import logging
import sys
from typing import Optional

import structlog

from config import settings

_LOGGING_CONFIGURED = False


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog once.

    JSON lines in production, console rendering everywhere else.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    resolved_level = (level or settings.log_level).upper()
    use_json = settings.is_production if json_output is None else json_output

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=resolved_level,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if use_json
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True
