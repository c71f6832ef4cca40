"""SurrealDB module."""

from ..core.container import Container, run_container as launch
from ..core.request import Request, RequestCustomizer, apply_customizers
from ..core.wait import DEFAULT_STRATEGIES, StrategyFactory

DEFAULT_IMAGE = "surrealdb/surrealdb:v1.1.1"
RPC_PORT = "8000/tcp"


class SurrealDbContainer(Container):
    """Handle to a running SurrealDB container."""

    def url(self) -> str:
        """Get the websocket RPC URL, e.g. ``ws://localhost:32771/rpc``."""
        return f"ws://{self.endpoint(RPC_PORT)}/rpc"


def default_request(strategies: StrategyFactory = DEFAULT_STRATEGIES) -> Request:
    """Build the request SurrealDB containers start from."""
    return Request(
        image=DEFAULT_IMAGE,
        exposed_ports=[RPC_PORT],
        env={
            "SURREAL_USER": "root",
            "SURREAL_PASS": "root",
            "SURREAL_AUTH": "false",
            "SURREAL_STRICT": "false",
            "SURREAL_CAPS_ALLOW_ALL": "false",
            "SURREAL_PATH": "memory",
        },
        cmd=["start"],
        waiting_for=strategies.for_all(strategies.for_log("Started web server on ")),
    )


def run_container(*customizers: RequestCustomizer) -> SurrealDbContainer:
    """
    Start a SurrealDB container with an in-memory datastore.

    Raises:
        CustomizeError: If a customizer fails
        ContainerStartError: If the container does not become ready
    """
    request = apply_customizers(default_request(), customizers)
    return launch(request, SurrealDbContainer, module="surrealdb")


def with_username(username: str) -> RequestCustomizer:
    """
    Set the initial root username.

    Use together with ``with_password``; the user is created with superuser
    rights.
    """

    def customize(request: Request) -> None:
        request.env["SURREAL_USER"] = username

    return customize


def with_password(password: str) -> RequestCustomizer:
    """Set the password of the initial root user."""

    def customize(request: Request) -> None:
        request.env["SURREAL_PASS"] = password

    return customize


def with_authentication() -> RequestCustomizer:
    """Enable authentication."""

    def customize(request: Request) -> None:
        request.env["SURREAL_AUTH"] = "true"

    return customize


def with_strict_mode() -> RequestCustomizer:
    """Enable strict mode."""

    def customize(request: Request) -> None:
        request.env["SURREAL_STRICT"] = "true"

    return customize


def with_allow_all_caps() -> RequestCustomizer:
    """Allow all capabilities."""

    def customize(request: Request) -> None:
        request.env["SURREAL_CAPS_ALLOW_ALL"] = "true"

    return customize
