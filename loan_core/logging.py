"""Logging setup for loan-core: a text or JSON handler on the root logger."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from loan_core.exceptions import ConfigurationError
from loan_core.sinks.serialization import serialize_value

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FORMAT_TYPES = ("standard", "json")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Route loan-core logs to stdout.

    Parameters
    ----------
    level : str
        Log level name; unknown names mean INFO.
    format_type : str
        "standard" for text lines, "json" for one JSON object per record.

    Raises
    ------
    ConfigurationError
        If ``format_type`` is not a known format.
    """
    if format_type not in FORMAT_TYPES:
        raise ConfigurationError(f"Unknown LOG_FORMAT: {format_type!r}")

    log_level = getattr(logging, level.upper(), logging.INFO)
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers[:] = [handler]

    logging.getLogger("loan_core").setLevel(log_level)
    # Faker logs every provider lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Loan context passed as ``extra={"extra": {...}}`` is merged into the
    payload, with ``Decimal`` amounts, dates and enums rendered the same way
    the JSON sinks render them.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra"):
            log_data.update(serialize_value(record.extra))

        return json.dumps(log_data, default=str)
