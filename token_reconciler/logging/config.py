"""
Centralized logging configuration for the token reconciler.

This module provides standardized logging configuration using structlog
for all components. Token state transitions and grace-window changes are
logged as audit records so that every classification change can be
traced back to the action that caused it.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

from ..config.defaults import LoggingParams


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )



def setup_logging(params: Optional[LoggingParams] = None) -> None:
    """Configure structlog from the `logging` section of the loaded config."""
    params = params or LoggingParams()
    configure_logging(level=params.level, format_json=params.format_json)

def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for token state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="token_state",
        audit_trail=True
    )


def get_store_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for secret store and settings access."""
    return get_logger(name).bind(subsystem="token_store")


def log_state_transition(
    logger: FilteringBoundLogger,
    session_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a token state transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: Label of the state machine instance
        from_state: Previously derived state
        to_state: Newly derived state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Token state transition")


def log_window_change(
    logger: FilteringBoundLogger,
    session_id: str,
    action: str,
    secure_assume_until: int,
    legacy_override: str,
    legacy_until: int
) -> None:
    """
    Log a grace-window change issued by a recorder.

    Args:
        logger: Structlog logger instance
        session_id: Label of the state machine instance
        action: Recorder that changed the windows
        secure_assume_until: New secure-assume expiry (epoch ms, 0 = closed)
        legacy_override: Kind of the legacy override now in place
        legacy_until: Expiry of the legacy override (epoch ms, 0 = none)
    """
    logger.bind(
        session_id=session_id,
        action=action,
        secure_assume_until=secure_assume_until,
        legacy_override=legacy_override,
        legacy_until=legacy_until,
    ).info("Grace windows updated")
