"""
Logging configuration for dbcontainers using structlog.

This module provides structured logging configuration so container launches
can be followed in CI output and log aggregators alike.
"""

import logging
import socket
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

from .config import get_config


def _add_service_metadata(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add service metadata for easier filtering."""
    config = get_config()

    event_dict.update(
        {
            "service_name": "dbcontainers",
            "environment": config.environment.value,
            "hostname": _get_hostname(),
        }
    )

    return event_dict


def _get_hostname() -> str:
    """Get hostname for logging."""
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Set up structured logging for dbcontainers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        json_output: Whether to output JSON logs, defaults to the configured value
    """
    config = get_config()

    log_level = level or config.logging.level
    if json_output is None:
        json_output = config.logging.json_output
    if log_file is None and config.logging.log_file:
        log_file = Path(config.logging.log_file)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_service_metadata,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Human-readable format for local runs
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.debug(
        "Logging initialized",
        level=log_level,
        json_output=json_output,
        log_file=str(log_file) if log_file else None,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def log_container_event(
    module: str,
    action: str,
    status: str = "started",
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a container lifecycle event with structured data.

    Args:
        module: Name of the service module (influxdb, neo4j, ...)
        action: Action being performed (launch, stop, ...)
        status: Status of the action (started, completed, failed)
        details: Additional details about the action
    """
    logger = structlog.get_logger("container_activity")

    log_data = {
        "module": module,
        "action": action,
        "status": status,
        "event_type": "container_activity",
    }

    if details:
        log_data.update(details)

    if status == "started":
        logger.info("Container activity started", **log_data)
    elif status == "completed":
        logger.info("Container activity completed", **log_data)
    elif status == "failed":
        logger.error("Container activity failed", **log_data)
    else:
        logger.info("Container activity status", **log_data)
