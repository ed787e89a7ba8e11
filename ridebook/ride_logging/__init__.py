from .context import RideContextFilter, current_log_fields, log_context, log_ride_context
from .filters import CorrelationFilter, RedactionFilter, current_correlation_id, redact
from .formatters import JSONFormatter, TextFormatter
from .setup import setup_logging

__all__ = [
    "CorrelationFilter",
    "JSONFormatter",
    "RedactionFilter",
    "RideContextFilter",
    "TextFormatter",
    "current_correlation_id",
    "current_log_fields",
    "log_context",
    "log_ride_context",
    "redact",
    "setup_logging",
]
