"""
Pytest configuration and fixtures for dbcontainers tests.

This module provides common test fixtures that are used across all test types.
Unit tests never talk to Docker; the container client is mocked.
"""

from unittest.mock import MagicMock, patch

import pytest

from dbcontainers.core.config import DbContainersConfig, get_config, set_config
from dbcontainers.core.request import ContainerFile, Request
from dbcontainers.core.wait import PortOpen


@pytest.fixture
def request_factory():
    """Create InfluxDB-like requests with a port-open default strategy."""

    def make(image="influxdb:1.8", files=None):
        return Request(
            image=image,
            exposed_ports=["8086/tcp"],
            env={"INFLUXDB_HTTP_AUTH_ENABLED": "false"},
            files=list(files or []),
            waiting_for=PortOpen("8086/tcp"),
        )

    return make


@pytest.fixture
def init_script_mount():
    """File mount of an init script directory at the container root."""
    return ContainerFile("/tmp/testdata/docker-entrypoint-initdb.d", "/", 0o755)


@pytest.fixture
def mock_docker_container():
    """Patch the testcontainers DockerContainer used by the launcher."""
    with patch("dbcontainers.core.container.DockerContainer") as mock_cls:
        instance = MagicMock(name="DockerContainer()")
        instance.get_container_host_ip.return_value = "localhost"
        instance.get_exposed_port.return_value = 32771
        mock_cls.return_value = instance
        yield mock_cls


@pytest.fixture
def isolated_config():
    """Swap in a fresh configuration for the duration of a test."""
    previous = get_config()
    fresh = DbContainersConfig()
    set_config(fresh)
    yield fresh
    set_config(previous)


# Test markers
def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
