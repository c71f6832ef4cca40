"""
Neo4j module.

Neo4j is configured entirely through environment variables. Configuration
settings such as ``dbms.tx_log.rotation.size`` are translated into the
``NEO4J_*`` form the official image expects.
"""

import json
from enum import Enum
from typing import Dict

from ..core.container import Container, run_container as launch
from ..core.errors import InvalidOptionError
from ..core.logging import get_logger
from ..core.request import Request, RequestCustomizer, apply_customizers, with_env
from ..core.wait import DEFAULT_STRATEGIES, StrategyFactory

logger = get_logger(__name__)

DEFAULT_IMAGE = "neo4j:4.4"
BOLT_PORT = "7687/tcp"
HTTP_PORT = "7474/tcp"
HTTPS_PORT = "7473/tcp"

DEFAULT_ADMIN_PASSWORD = "password"
AUTH_ENV = "NEO4J_AUTH"


class LabsPlugin(str, Enum):
    """Neo4j Labs plugins the image can download on startup."""

    APOC = "apoc"
    APOC_CORE = "apoc-core"
    BLOOM = "bloom"
    GRAPH_DATA_SCIENCE = "graph-data-science"
    NEO_SEMANTICS = "n10s"
    STREAMS = "streams"


class Neo4jContainer(Container):
    """Handle to a running Neo4j container."""

    def bolt_url(self) -> str:
        """Get the Bolt URL, e.g. ``neo4j://localhost:32771``."""
        return f"neo4j://{self.endpoint(BOLT_PORT)}"

    def http_url(self) -> str:
        """Get the HTTP browser URL."""
        return f"http://{self.endpoint(HTTP_PORT)}"


def default_request(strategies: StrategyFactory = DEFAULT_STRATEGIES) -> Request:
    """Build the request Neo4j containers start from."""
    return Request(
        image=DEFAULT_IMAGE,
        exposed_ports=[BOLT_PORT, HTTP_PORT, HTTPS_PORT],
        env={AUTH_ENV: f"neo4j/{DEFAULT_ADMIN_PASSWORD}"},
        waiting_for=strategies.for_all(
            strategies.for_log("Bolt enabled"),
            strategies.for_listening_port(HTTP_PORT),
        ),
    )


def run_container(*customizers: RequestCustomizer) -> Neo4jContainer:
    """
    Start a Neo4j container.

    Raises:
        CustomizeError: If a customizer fails
        InvalidOptionError: If a setting would overwrite the credentials
        ContainerStartError: If the container does not become ready
    """
    request = apply_customizers(default_request(), customizers)
    return launch(request, Neo4jContainer, module="neo4j")


def format_setting_name(name: str) -> str:
    """
    Translate a Neo4j setting name into its environment variable.

    ``dbms.tx_log.rotation.size`` becomes ``NEO4J_dbms_tx__log_rotation_size``.
    """
    return "NEO4J_" + name.replace("_", "__").replace(".", "_")


def with_admin_password(admin_password: str) -> RequestCustomizer:
    """
    Set the password of the ``neo4j`` account.

    An empty password disables authentication.
    """

    def customize(request: Request) -> None:
        request.env[AUTH_ENV] = (
            f"neo4j/{admin_password}" if admin_password else "none"
        )

    return customize


def without_authentication() -> RequestCustomizer:
    """Disable authentication."""
    return with_admin_password("")


def with_labs_plugin(*plugins: LabsPlugin) -> RequestCustomizer:
    """
    Download and enable Neo4j Labs plugins on startup.

    Some plugins are not available for every Neo4j version.
    """

    def customize(request: Request) -> None:
        if plugins:
            request.env["NEO4JLABS_PLUGINS"] = json.dumps(
                [LabsPlugin(p).value for p in plugins], separators=(",", ":")
            )

    return customize


def _add_setting(request: Request, key: str, value: str) -> None:
    env_name = format_setting_name(key)
    if env_name in request.env:
        if key == "AUTH":
            raise InvalidOptionError(
                f"setting {env_name!r} is not permitted, "
                "with_admin_password has already been set",
                context={"setting": key},
            )
        logger.warning(
            "Neo4j setting overwritten",
            setting=key,
            old_value=request.env[env_name],
            new_value=value,
        )

    request.env[env_name] = value


def with_neo4j_setting(key: str, value: str) -> RequestCustomizer:
    """
    Add a single Neo4j configuration setting.

    Use the name from the Neo4j configuration reference, e.g.
    ``dbms.tx_log.rotation.size``. Credentials must be set with
    ``with_admin_password``.
    """

    def customize(request: Request) -> None:
        _add_setting(request, key, value)

    return customize


def with_neo4j_settings(settings: Dict[str, str]) -> RequestCustomizer:
    """Add several Neo4j configuration settings, see ``with_neo4j_setting``."""

    def customize(request: Request) -> None:
        for key, value in settings.items():
            _add_setting(request, key, value)

    return customize


def with_accept_commercial_license_agreement() -> RequestCustomizer:
    """
    Accept the Neo4j Enterprise Edition commercial license agreement.

    See https://neo4j.com/terms/licensing/.
    """
    return with_env({"NEO4J_ACCEPT_LICENSE_AGREEMENT": "yes"})


def with_accept_evaluation_license_agreement() -> RequestCustomizer:
    """
    Accept the Neo4j Enterprise Edition evaluation agreement.

    See https://neo4j.com/terms/enterprise_us/.
    """
    return with_env({"NEO4J_ACCEPT_LICENSE_AGREEMENT": "eval"})
