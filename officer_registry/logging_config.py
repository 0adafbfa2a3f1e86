"""
Logging configuration for the Officer Registry.

Provides structured JSON logging and an audit logger for registry
transitions and rejected write attempts.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable tying log records to one host-side call
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'event_fields'):
            log_data.update(record.event_fields)

        return json.dumps(log_data, default=str)


class RegistryAuditLogger:
    """
    Audit logger for registry events.

    Successful transitions log at INFO, rejections at WARNING. A write by a
    non-owner is additionally reported as a security event.
    """

    def __init__(self, name: str = "officer_registry.audit"):
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return

        fields = {"event_type": event_type, **kwargs}
        message = fields.pop("message", "")
        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(audit)",
            0,
            f"{event_type}: {message}",
            (),
            None
        )
        record.event_fields = fields
        self._logger.handle(record)

    def officer_registered(self, officer_id: int, principal: str) -> None:
        self._log(
            logging.INFO,
            "OFFICER_REGISTERED",
            officer_id=officer_id,
            principal=principal,
            message=f"Officer {officer_id} registered for {principal}"
        )

    def officer_verified(self, officer_id: int, verified_at: int, reverified: bool = False) -> None:
        self._log(
            logging.INFO,
            "OFFICER_VERIFIED",
            officer_id=officer_id,
            verified_at=verified_at,
            reverified=reverified,
            message=f"Officer {officer_id} verified"
        )

    def registration_rejected(self, caller: str, reason: str) -> None:
        self._log(
            logging.WARNING,
            "REGISTRATION_REJECTED",
            caller=caller,
            reason=reason,
            message=f"Registration rejected: {reason}"
        )

    def verification_rejected(self, caller: str, officer_id: int, reason: str) -> None:
        self._log(
            logging.WARNING,
            "VERIFICATION_REJECTED",
            caller=caller,
            officer_id=officer_id,
            reason=reason,
            message=f"Verification of officer {officer_id} rejected: {reason}"
        )

    def security_event(
        self,
        event: str,
        severity: str = "medium",
        **details
    ) -> None:
        """Log a security-relevant event."""
        level = {
            "low": logging.INFO,
            "medium": logging.WARNING,
            "high": logging.ERROR,
            "critical": logging.CRITICAL
        }.get(severity, logging.WARNING)

        self._log(
            level,
            "SECURITY_EVENT",
            security_event=event,
            severity=severity,
            **details,
            message=f"Security event: {event}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the registry host process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set the correlation ID for the current context.

    Returns:
        The correlation ID that was set (generated when None is passed)
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    return correlation_id_var.get()


audit_log = RegistryAuditLogger()
