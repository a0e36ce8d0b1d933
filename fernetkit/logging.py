"""
Structured logging configuration using structlog.

Log format:
{
    "ts": "2026-10-17T04:30:00.123456Z",
    "level": "debug",
    "service": "fernetkit",
    "event": "token.rejected",
    "reason": "token_expired",
    "module": "fernetkit.crypto.validator",
    "func_name": "validate_and_decrypt",
    "lineno": 106
}

Key material, token text and payloads never belong in a log entry; the
redaction processor masks them if a caller binds them by mistake.
"""
import structlog
import logging
from typing import Any, Callable

SENSITIVE_FIELDS = frozenset({"key", "keys", "token", "payload", "plaintext"})


def add_service_name(service_name: str) -> Callable[[Any, str, dict], dict]:
    """Build a processor that adds the service name to all log entries."""
    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict["service"] = service_name
        return event_dict
    return processor


def redact_sensitive_fields(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Mask values bound under names that may carry secrets."""
    for field in SENSITIVE_FIELDS & event_dict.keys():
        event_dict[field] = "***"
    return event_dict


def setup_logging(json_output: bool = True, service_name: str = "fernetkit", level: int = logging.INFO):
    """
    Configure structured logging with standardized fields.

    Args:
        json_output: If True, output JSON logs. If False, use console format.
        service_name: Name of the service (for multi-service deployments).
        level: Minimum log level.
    """
    shared_processors = [
        # Add contextvars bound by the caller
        structlog.contextvars.merge_contextvars,
        add_service_name(service_name),
        redact_sensitive_fields,
        # Add timestamp as 'ts'
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors = shared_processors + [structlog.processors.JSONRenderer()]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
    )

    # uvicorn logs through its own handlers; keep them from duplicating ours
    logging.getLogger("uvicorn.error").handlers = []
    logging.getLogger("uvicorn.access").handlers = []


def get_logger():
    """Get a configured structlog logger."""
    return structlog.get_logger()
