"""
Structured Logger Module

Configures structlog for JSON-formatted structured logging with correlation IDs.
Parser, AI fallback and coaching components all log through this module so a
single upload can be traced end to end.

Example Usage:
    from strengths_coach.utils.logger import get_logger

    logger = get_logger(
        correlation_id="a1b2c3d4-e5f6-7890-abcd-ef1234567890",
        phase="pdf_parse",
        component="strengths_extractor",
    )

    logger.info("Strengths extracted", strength_count=34, method="regex")
    logger.warning("AI fallback unavailable", reason="API key missing")

Log Levels:
    - DEBUG: Pattern matches, prompts and raw model output (verbose)
    - INFO: Parse outcome, extraction method, coaching calls
    - WARNING: Degraded paths (AI fallback failed, placeholder name, unknown theme)
    - ERROR: Unreadable PDFs, provider errors
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional
import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger

# Longest string value written to a log line; PDF text and model output are clipped
MAX_LOGGED_VALUE_LENGTH = 500


def mask_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to mask sensitive credentials in log output.

    Masks password, api_key, token, secret, credential and auth fields using
    word boundary matching (separated by underscore/hyphen).
    """
    sensitive_fields = {"password", "api_key", "token", "secret", "credential", "auth"}

    for key in list(event_dict.keys()):
        key_lower = key.lower()
        for sensitive in sensitive_fields:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.endswith(f"-{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
                or key_lower.startswith(f"{sensitive}-")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def truncate_long_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to clip long string values (extracted PDF text, LLM responses).

    The event message itself is never clipped.
    """
    for key, value in event_dict.items():
        if key == "event" or not isinstance(value, str):
            continue
        if len(value) > MAX_LOGGED_VALUE_LENGTH:
            event_dict[key] = (
                value[:MAX_LOGGED_VALUE_LENGTH]
                + f"...[{len(value) - MAX_LOGGED_VALUE_LENGTH} chars truncated]"
            )

    return event_dict


def configure_logging(log_file: Optional[str] = None, log_level: str = "INFO") -> None:
    """
    Configure structlog with JSON output, optionally mirrored to a file.

    Args:
        log_file: Path to log file; stderr only when None
        log_level: Logging level (default: "INFO")

    Log Format (JSON):
        {
            "timestamp": "2025-08-08T10:30:45Z",
            "level": "info",
            "correlation_id": "a1b2c3d4-...",
            "phase": "pdf_parse",
            "component": "pdf_parser",
            "event": "PDF parsed",
            "strength_count": 34
        }
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_credentials,
            truncate_long_values,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    correlation_id: Optional[str] = None,
    phase: Optional[str] = None,
    component: Optional[str] = None,
) -> BindableLogger:
    """
    Get structured logger with bound context.

    Args:
        correlation_id: Correlation ID for request tracing (generates UUID if not provided)
        phase: Pipeline phase (e.g., "pdf_parse", "coaching")
        component: Component name (e.g., "pdf_parser", "coaching_service")

    Returns:
        BoundLogger with correlation_id, phase, and component bound to context
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    logger = structlog.get_logger()

    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    if phase:
        logger = logger.bind(phase=phase)
    if component:
        logger = logger.bind(component=component)

    return logger


# Initialize logging on module import with default settings
configure_logging()
