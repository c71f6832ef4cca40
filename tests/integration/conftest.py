"""
Integration test configuration and fixtures for dbcontainers.

These tests start real containers and are skipped when no Docker daemon is
reachable.
"""

import docker
import pytest
from docker.errors import DockerException


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except DockerException:
        return False
    return True


@pytest.fixture(scope="session", autouse=True)
def require_docker():
    """Skip the integration suite without Docker."""
    if not _docker_available():
        pytest.skip("Docker daemon not available")
