"""
Module: logger.py
Description: Structured logging configuration for gmail-subscriber.

Configures structlog for JSON output on stdout, which Cloud Run forwards
to Cloud Logging. The level is reported under the "severity" key so
Cloud Logging classifies entries correctly.

Key Components:
- JSON output for Cloud Logging compatibility
- Timestamp and severity processors
- Level filtering driven by settings.log_level
- get_logger() helper function

Dependencies: structlog, logging, datetime
"""

import logging
from datetime import datetime, timezone

import structlog

from gmail_subscriber.config.settings import settings


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_severity(logger, method_name, event_dict):
    """
    Add Cloud Logging severity to event dictionary.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with severity
    """
    if method_name == "warn":
        method_name = "warning"
    elif method_name == "exception":
        method_name = "error"
    event_dict["severity"] = method_name.upper()
    return event_dict


structlog.configure(
    processors=[
        _add_timestamp,
        _add_severity,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.WriteLoggerFactory(),
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
    cache_logger_on_first_use=True,
)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Pub/Sub push received", message_id="123")
        {"message_id": "123", "event": "Pub/Sub push received", "timestamp": "...", "severity": "INFO"}
    """
    return structlog.get_logger(name)
