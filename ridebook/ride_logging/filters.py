"""Record filters: redaction of rider contact details and request correlation."""

import logging
import re
from contextvars import ContextVar

current_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Order matters: API keys contain digit runs the phone pattern would otherwise eat.
REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"AIza[0-9A-Za-z_-]{35}"), "[API_KEY]"),
    (re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+"), "[EMAIL]"),
    (
        re.compile(r"(?<![\d.])(?:\+?1[\s.-])?\(?\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}(?![\d.])"),
        "[PHONE]",
    ),
)


def redact(text: str) -> str:
    for pattern, replacement in REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


class RedactionFilter(logging.Filter):
    """Masks rider emails, phone numbers and provider API keys.

    The message is rendered with its args first, so values passed as
    `%s` arguments are masked as well.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class CorrelationFilter(logging.Filter):
    """Stamps the request correlation ID, or "-" outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = current_correlation_id.get() or "-"
        return True
