"""JSON lines for deployed environments, a compact text line for local runs."""

import json
import logging
from datetime import UTC, datetime

RIDE_FIELDS = ("ride_id", "rider_id", "driver_id", "correlation_id")


class JSONFormatter(logging.Formatter):
    def __init__(self, environment: str = "development", service: str = "ridebook"):
        super().__init__()
        self.environment = environment
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "env": self.environment,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in RIDE_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """`12:00:01 INFO  ridebook.rides.service [ride=abc corr=xyz] Ride accepted`"""

    def __init__(self) -> None:
        super().__init__(datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        tags = " ".join(
            f"{label}={getattr(record, name)}"
            for label, name in (("ride", "ride_id"), ("corr", "correlation_id"))
            if getattr(record, name, None) not in (None, "-")
        )
        line = (
            f"{self.formatTime(record, self.datefmt)} {record.levelname:<5} {record.name} "
            f"{f'[{tags}] ' if tags else ''}{record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
