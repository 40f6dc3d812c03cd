"""Logging setup.

Development gets a human-readable line format; every other environment
gets one ``key=value`` line per record so logs can be grepped and shipped
without a JSON parser.
"""

import logging
import sys
from typing import Any

from app.core.config import settings

DEV_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Record attributes copied into structured lines when set via ``extra=``
CONTEXT_FIELDS = ("request_id", "anonymous_id", "test_name", "action")

# Third-party loggers kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


class StructuredFormatter(logging.Formatter):
    """Render records as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields.update(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return " ".join(f"{key}={value}" for key, value in fields.items())


def setup_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Overrides ``LOG_LEVEL`` when given
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(DEV_FORMAT) if settings.is_dev else StructuredFormatter()
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class AuditLogger:
    """Writes one audit line per stored submission.

    Only the anonymous ID and test name are logged; answers and scores stay
    in the database.
    """

    def __init__(self, name: str = "audit") -> None:
        self.logger = logging.getLogger(name)

    def log(
        self,
        action: str,
        anonymous_id: str,
        test_name: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.logger.info(
            f"AUDIT: action={action} actor=anonymous:{anonymous_id} "
            f"test={test_name} metadata={metadata or {}}",
            extra={"anonymous_id": anonymous_id, "test_name": test_name, "action": action},
        )


audit_logger = AuditLogger()
