"""
Core module for dbcontainers.

This module contains the fundamental components shared by every service module:
configuration management, logging setup, error types, request descriptors,
waiting strategies and container launch.
"""

from .config import DbContainersConfig, get_config
from .container import Container, run_container
from .errors import (
    ConnectionInfoError,
    ContainerStartError,
    CustomizeError,
    DbContainersError,
    ErrorDetails,
    ErrorType,
    InvalidOptionError,
    create_error_details,
)
from .logging import get_logger, setup_logging
from .request import (
    ContainerFile,
    Request,
    RequestCustomizer,
    apply_customizers,
    with_cmd,
    with_env,
    with_exposed_ports,
    with_files,
    with_image,
    with_waiting_for,
)
from .wait import (
    DEFAULT_STRATEGIES,
    AllOf,
    LogMatch,
    PortOpen,
    RegexLogMatch,
    Strategy,
    StrategyFactory,
)

__all__ = [
    "DbContainersConfig",
    "get_config",
    "setup_logging",
    "get_logger",
    "ErrorType",
    "ErrorDetails",
    "create_error_details",
    "DbContainersError",
    "InvalidOptionError",
    "CustomizeError",
    "ContainerStartError",
    "ConnectionInfoError",
    "ContainerFile",
    "Request",
    "RequestCustomizer",
    "apply_customizers",
    "with_cmd",
    "with_env",
    "with_exposed_ports",
    "with_files",
    "with_image",
    "with_waiting_for",
    "Strategy",
    "StrategyFactory",
    "LogMatch",
    "RegexLogMatch",
    "PortOpen",
    "AllOf",
    "DEFAULT_STRATEGIES",
    "Container",
    "run_container",
]
