"""Root logger configuration for the service process."""

import logging
import sys
from typing import TYPE_CHECKING

from .context import RideContextFilter
from .filters import CorrelationFilter, RedactionFilter
from .formatters import JSONFormatter, TextFormatter

if TYPE_CHECKING:
    from ridebook.settings import LogSettings

# Request-level chatter from these is covered by our own route logging.
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging(log_settings: "LogSettings") -> None:
    formatter: logging.Formatter
    if log_settings.format == "json":
        formatter = JSONFormatter(log_settings.environment)
    else:
        formatter = TextFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    # Redaction runs last so it sees the final message.
    for record_filter in (RideContextFilter(), CorrelationFilter(), RedactionFilter()):
        handler.addFilter(record_filter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_settings.level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
