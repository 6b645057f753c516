"""Structured JSON logging for the Car Rental API.

Every record is written as one JSON document carrying the service name and the
correlation id of the HTTP request that produced it. Keyword arguments passed
to the ``log_*`` helpers end up under the ``extra`` key of the document.
"""

import json
import logging
import logging.handlers
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


SERVICE_NAME = "car-rental-api"
NO_CORRELATION_ID = "unknown"

# Set by the request logging middleware, read by every handler
correlation_id_context: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    'message', 'asctime', 'correlation_id'
}

NOISY_LOGGERS = (
    'sqlalchemy.engine',
    'sqlalchemy.pool',
    'uvicorn.access',
    'python_multipart',
)


class CorrelationIDFilter(logging.Filter):
    """Stamp records with the correlation id of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_context.get() or NO_CORRELATION_ID
        return True


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', NO_CORRELATION_ID),
        }

        if record.exc_info and record.exc_info[0] is not None:
            document["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        if extra:
            document["extra"] = extra

        return json.dumps(document, default=str, ensure_ascii=False)


class LoggingConfig:
    """Installs JSON handlers on the root logger."""

    def __init__(self,
                 log_level: str = "INFO",
                 service_name: str = SERVICE_NAME,
                 log_dir: Optional[str] = None,
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 enable_file: bool = False):
        """
        Args:
            log_level: name of the root level (DEBUG, INFO, WARNING, ERROR)
            service_name: value of the "service" field and prefix of log file names
            log_dir: directory for rotating log files, logs/ under the working directory if unset
            max_file_size: bytes per file before rotation
            backup_count: rotated files kept per log
            enable_file: also write to files besides stdout
        """
        self.log_level = logging.getLevelName(log_level.upper())
        if not isinstance(self.log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")

        self.service_name = service_name
        self.log_dir = Path(log_dir) if log_dir else Path.cwd() / "logs"
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.enable_file = enable_file

    def setup_logging(self) -> None:
        """Replace the root handlers; safe to call again on app restart."""
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        root_logger.setLevel(self.log_level)

        correlation_filter = CorrelationIDFilter()
        formatter = JSONFormatter(service_name=self.service_name)
        for handler in self._build_handlers():
            handler.addFilter(correlation_filter)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _build_handlers(self) -> List[logging.Handler]:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(self.log_level)
        handlers: List[logging.Handler] = [console]

        if self.enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(self._rotating_handler(f"{self.service_name}.log", self.log_level))
            # ERROR and above also go to their own file
            handlers.append(self._rotating_handler(f"{self.service_name}-errors.log", logging.ERROR))
        return handlers

    def _rotating_handler(self, filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(level)
        return handler


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_context.set(correlation_id)


def clear_correlation_id() -> None:
    correlation_id_context.set(None)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def mask_email(email: str) -> str:
    """Keep only the first character of the local part: jane@example.com -> j***@example.com."""
    local, at, domain = email.partition("@")
    if not at:
        return "***"
    return f"{local[:1]}***@{domain}"


def log_with_extra(logger: logging.Logger, level: int, message: str, **extra) -> None:
    """Log a message with structured fields."""
    logger.log(level, message, extra=extra)


def log_database_operation(logger: logging.Logger, operation: str, table: str, **extra) -> None:
    log_with_extra(
        logger,
        logging.DEBUG,
        f"Database {operation}: {table}",
        db_operation=operation,
        db_table=table,
        **extra
    )


def log_authentication_attempt(logger: logging.Logger, email: str, success: bool, **extra) -> None:
    """Log a login attempt; the email is masked."""
    log_with_extra(
        logger,
        logging.INFO if success else logging.WARNING,
        f"Login {'succeeded' if success else 'failed'} for {mask_email(email)}",
        auth_email=mask_email(email),
        auth_success=success,
        **extra
    )


def log_booking_event(logger: logging.Logger, event: str, booking_id, **extra) -> None:
    """Log a booking lifecycle event (created, cancelled, approved)."""
    log_with_extra(
        logger,
        logging.INFO,
        f"Booking {booking_id} {event}",
        booking_event=event,
        booking_id=str(booking_id),
        **extra
    )


def log_business_rule_violation(logger: logging.Logger, rule: str, details: str, **extra) -> None:
    log_with_extra(
        logger,
        logging.WARNING,
        f"Business rule violation: {rule}: {details}",
        business_rule=rule,
        violation_details=details,
        **extra
    )
