"""
InfluxDB module.

Builds InfluxDB 1.x/2.x containers. Readiness depends on the image version and
on whether init scripts are mounted: with init scripts the server starts, runs
them, shuts down and starts again, so a single port check would succeed too
early.
"""

import os
import re
from typing import Callable, Dict, Optional, Union

from ..core.container import Container, run_container as launch
from ..core.logging import get_logger
from ..core.request import ContainerFile, Request, RequestCustomizer, apply_customizers
from ..core.wait import DEFAULT_STRATEGIES, Strategy, StrategyFactory

logger = get_logger(__name__)

DEFAULT_IMAGE = "influxdb:1.8"
HTTP_PORT = "8086/tcp"
RPC_PORT = "8088/tcp"

CONFIG_FILE_PATH = "/etc/influxdb/influxdb.conf"
INIT_DB_DIR = "docker-entrypoint-initdb.d"

INIT_PROCESS_LOG = "influxdb init process in progress..."
SHUTDOWN_COMPLETED_LOG = "Server shutdown completed"
SHARD_OPENED_LOG = "Opened shard"
LISTENING_FOR_SIGNALS_LOG = "Listening for signals"
LISTENING_PATTERN = (
    r"Listening log_id=[0-9a-zA-Z_~]+ service=tcp-listener transport=http"
)

LATEST_TAG = "latest"

_MAJOR_VERSION = re.compile(r"^(\d+)")

StrategyBuilder = Callable[[StrategyFactory, Optional[Strategy]], Optional[Strategy]]


class InfluxDbContainer(Container):
    """Handle to a running InfluxDB container."""

    def connection_url(self) -> str:
        """Get the HTTP API URL, e.g. ``http://localhost:32771``."""
        return f"http://{self.endpoint(HTTP_PORT)}"


def _structured_log(
    strategies: StrategyFactory, default: Optional[Strategy]
) -> Optional[Strategy]:
    return strategies.for_regex_log(LISTENING_PATTERN)


def _keep_default(
    strategies: StrategyFactory, default: Optional[Strategy]
) -> Optional[Strategy]:
    return default


# Tags and major versions whose readiness log differs from the 1.x default.
# Anything not listed keeps the configured default strategy.
VERSION_POLICIES: Dict[Union[str, int], StrategyBuilder] = {
    LATEST_TAG: _structured_log,
    2: _structured_log,
}


def image_tag(image: str) -> Optional[str]:
    """
    Extract the tag of an image reference.

    The tag is everything after the last ``:``. Returns None only when the
    reference contains no ``:`` at all.
    """
    _, sep, tag = image.rpartition(":")
    if not sep:
        return None
    return tag


def major_version(tag: str) -> Optional[int]:
    """Parse the leading major version of a tag, None when it has none."""
    match = _MAJOR_VERSION.match(tag)
    if match is None:
        return None
    return int(match.group(1))


def resolve_version_policy(tag: str) -> StrategyBuilder:
    """Look up the strategy builder for an image tag."""
    if tag in VERSION_POLICIES:
        return VERSION_POLICIES[tag]
    major = major_version(tag)
    if major is None:
        return _keep_default
    return VERSION_POLICIES.get(major, _keep_default)


def has_init_scripts(request: Request) -> bool:
    """Check whether an init script directory is mounted at the container root."""
    return any(
        f.container_file_path == "/" and f.host_file_path.endswith(INIT_DB_DIR)
        for f in request.files
    )


def select_readiness_strategy(
    request: Request, strategies: StrategyFactory = DEFAULT_STRATEGIES
) -> None:
    """
    Install the waiting strategy matching the request's image and mounts.

    Must run once, after all other customization and before launch. Only
    ``request.waiting_for`` is changed.

    Args:
        request: Request to update
        strategies: Factory used to build the strategies
    """
    default = request.waiting_for

    if has_init_scripts(request):
        # Init scripts restart the server; wait for the restart to open its shards.
        request.waiting_for = strategies.for_all(
            default,  # type: ignore[arg-type]
            strategies.for_log(INIT_PROCESS_LOG),
            strategies.for_log(SHUTDOWN_COMPLETED_LOG),
            strategies.for_log(SHARD_OPENED_LOG),
        )
        logger.debug("Waiting for init scripts", image=request.image)
        return

    tag = image_tag(request.image)
    if tag is None:
        request.waiting_for = strategies.for_log(LISTENING_FOR_SIGNALS_LOG)
    else:
        request.waiting_for = resolve_version_policy(tag)(strategies, default)

    logger.debug(
        "Readiness strategy selected",
        image=request.image,
        tag=tag,
        strategy=repr(request.waiting_for),
    )


def default_request(strategies: StrategyFactory = DEFAULT_STRATEGIES) -> Request:
    """Build the request InfluxDB containers start from."""
    return Request(
        image=DEFAULT_IMAGE,
        exposed_ports=[HTTP_PORT, RPC_PORT],
        env={
            "INFLUXDB_BIND_ADDRESS": ":8088",
            "INFLUXDB_HTTP_BIND_ADDRESS": ":8086",
            "INFLUXDB_REPORTING_DISABLED": "true",
            "INFLUXDB_MONITOR_STORE_ENABLED": "false",
            "INFLUXDB_HTTP_HTTPS_ENABLED": "false",
            "INFLUXDB_HTTP_AUTH_ENABLED": "false",
        },
        waiting_for=strategies.for_listening_port(HTTP_PORT),
    )


def build_request(
    *customizers: RequestCustomizer, strategies: StrategyFactory = DEFAULT_STRATEGIES
) -> Request:
    """Build a customized request with its readiness strategy selected."""
    request = default_request(strategies)
    apply_customizers(request, customizers)
    select_readiness_strategy(request, strategies)
    return request


def run_container(*customizers: RequestCustomizer) -> InfluxDbContainer:
    """
    Start an InfluxDB container.

    Args:
        *customizers: Request customizers, applied in order

    Returns:
        Handle to the running container

    Raises:
        CustomizeError: If a customizer fails
        ContainerStartError: If the container does not become ready
    """
    return launch(build_request(*customizers), InfluxDbContainer, module="influxdb")


def with_username(username: str) -> RequestCustomizer:
    """Set the user created on first start."""

    def customize(request: Request) -> None:
        request.env["INFLUXDB_USER"] = username

    return customize


def with_password(password: str) -> RequestCustomizer:
    """Set the password of the user created on first start."""

    def customize(request: Request) -> None:
        request.env["INFLUXDB_PASSWORD"] = password

    return customize


def with_database(database: str) -> RequestCustomizer:
    """Set the database created on first start."""

    def customize(request: Request) -> None:
        request.env["INFLUXDB_DATABASE"] = database

    return customize


def with_config_file(config_file: str) -> RequestCustomizer:
    """Mount a host ``influxdb.conf`` as the server configuration."""

    def customize(request: Request) -> None:
        request.files.append(ContainerFile(config_file, CONFIG_FILE_PATH, 0o755))

    return customize


def with_init_db(src_path: str) -> RequestCustomizer:
    """
    Copy ``<src_path>/docker-entrypoint-initdb.d`` to the container root.

    The scripts in it run on first start, after which the server restarts.
    """

    def customize(request: Request) -> None:
        request.files.append(
            ContainerFile(os.path.join(src_path, INIT_DB_DIR), "/", 0o755)
        )

    return customize
