import logging
from logging.handlers import RotatingFileHandler
import io
import sys
from pathlib import Path
from contextvars import ContextVar
from typing import Optional
from uuid import uuid4
from community_messaging.config.settings import Config

NO_CORRELATION_ID = "NO Correlation ID"

# Context variable to store correlation ID across async/thread boundaries.
# HTTP requests set it in CorrelationIdMiddleware, WebSocket connections in
# the realtime router; feed reader tasks inherit it from the subscriber.
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=NO_CORRELATION_ID
)

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "prisma",
    "redis",
    "uvicorn.access",
    "asyncio",
]


def bind_correlation_id(correlation_id: Optional[str] = None, prefix: str = "req") -> str:
    """Set the correlation ID for the current context, generating one if missing."""
    value = correlation_id or f"{prefix}-{uuid4().hex[:12]}"
    correlation_id_var.set(value)
    return value


class CorrelationIdFilter(logging.Filter):
    """Logging filter to add correlation ID to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that ensures correlation_id always exists."""

    def format(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = NO_CORRELATION_ID
        return super().format(record)


def _with_format(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())
    handler._community_messaging = True  # marks handlers installed here
    return handler


def setup_logging(level: str = "INFO", log_file: str | None = None):
    root = logging.getLogger()
    root.setLevel(logging.WARNING)  # Set root to WARNING to avoid too much noise

    # Re-running (reload, tests) replaces our handlers instead of stacking them
    for handler in list(root.handlers):
        if getattr(handler, "_community_messaging", False):
            root.removeHandler(handler)
            handler.close()

    formatter = SafeFormatter(Config.LOG_FORMAT)
    root.addHandler(
        _with_format(
            logging.StreamHandler(io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")),
            formatter,
        )
    )

    # Set up file logging if log_file provided with rotation
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(
            _with_format(
                RotatingFileHandler(
                    log_file,
                    maxBytes=Config.LOG_MAX_BYTES,
                    backupCount=Config.LOG_BACKUP_COUNT,
                ),
                formatter,
            )
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Only our own package logs below WARNING
    package_logger = logging.getLogger("community_messaging")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.info(f"Logging is set up: level={level}, log_file={log_file}")

    return root
