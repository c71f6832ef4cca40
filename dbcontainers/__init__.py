"""
dbcontainers - Ephemeral service containers for integration testing

Per-service modules (InfluxDB, SurrealDB, Neo4j, GCloud emulators) that turn
domain options into container requests, launch them and return handles with
connection helpers.
"""

__version__ = "0.1.0"
__description__ = "Ephemeral service containers for integration testing"

# Core imports
from .core.config import DbContainersConfig
from .core.logging import setup_logging

# Initialize logging
setup_logging()

__all__ = [
    "__version__",
    "__description__",
    "DbContainersConfig",
    "setup_logging",
]
