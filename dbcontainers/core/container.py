"""
Container launch and handles.

``run_container`` turns a finished ``Request`` into a started testcontainers
``DockerContainer`` and wraps it in a ``Container`` handle. Modules subclass
``Container`` to add their connection helpers.
"""

import os
import posixpath
from typing import Any, Tuple, Type, TypeVar, Union

from testcontainers.core.container import DockerContainer

from .config import get_config
from .errors import ConnectionInfoError, ContainerStartError, InvalidOptionError
from .logging import get_logger, log_container_event
from .request import ContainerFile, Request
from .wait import port_number, to_wait_strategy

logger = get_logger(__name__)

C = TypeVar("C", bound="Container")


class Container:
    """Handle to a started container."""

    def __init__(self, container: DockerContainer, request: Request):
        """
        Initialize the handle.

        Args:
            container: The started testcontainers container
            request: The request the container was launched from
        """
        self._container = container
        self.request = request

    @property
    def wrapped(self) -> DockerContainer:
        """The underlying testcontainers container."""
        return self._container

    @property
    def image(self) -> str:
        return self.request.image

    def host(self) -> str:
        """
        Get the host on which the container ports are reachable.

        Raises:
            ConnectionInfoError: If the host cannot be resolved
        """
        try:
            return str(self._container.get_container_host_ip())
        except Exception as e:
            raise ConnectionInfoError(
                f"host: {e}", context={"image": self.image}
            ) from e

    def mapped_port(self, port: Union[str, int]) -> int:
        """
        Get the host port mapped to a container port.

        Args:
            port: Container port spec, e.g. ``"8086/tcp"``

        Raises:
            ConnectionInfoError: If the port is not mapped
        """
        try:
            return int(self._container.get_exposed_port(port_number(port)))
        except Exception as e:
            raise ConnectionInfoError(
                f"mapped port {port}: {e}",
                context={"image": self.image, "port": str(port)},
            ) from e

    def endpoint(self, port: Union[str, int]) -> str:
        """Get ``host:port`` for a container port, bracketing IPv6 hosts."""
        host = self.host()
        if ":" in host:
            host = f"[{host}]"
        return f"{host}:{self.mapped_port(port)}"

    def logs(self) -> Tuple[bytes, bytes]:
        """Get the container stdout and stderr."""
        return self._container.get_logs()  # type: ignore[no-any-return]

    def stop(self) -> None:
        """Stop and remove the container."""
        self._container.stop()
        log_container_event("core", "stop", "completed", {"image": self.image})

    def __enter__(self: C) -> C:
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()


def mount_target(file: ContainerFile) -> str:
    """
    Resolve where a file mount lands inside the container.

    Copying into a directory (``/`` or a path ending in ``/``) places the host
    file or directory under its own base name.
    """
    target = file.container_file_path
    if target.endswith("/"):
        name = posixpath.basename(file.host_file_path.rstrip("/\\"))
        return posixpath.join(target, name)
    return target


def build_docker_container(request: Request) -> DockerContainer:
    """
    Translate a request into an unstarted testcontainers container.

    Args:
        request: Finished request

    Returns:
        Configured ``DockerContainer``
    """
    container_config = get_config().container

    container = DockerContainer(request.image)
    for key, value in request.env.items():
        container.with_env(key, value)
    if request.exposed_ports:
        container.with_exposed_ports(*(port_number(p) for p in request.exposed_ports))
    if request.cmd:
        container.with_command(request.cmd)
    for file in request.files:
        container.with_volume_mapping(
            os.path.abspath(file.host_file_path), mount_target(file), "ro"
        )
    if request.waiting_for is not None:
        container.waiting_for(
            to_wait_strategy(
                request.waiting_for,
                startup_timeout=container_config.startup_timeout,
                poll_interval=container_config.poll_interval,
            )
        )

    return container


def run_container(
    request: Request,
    handle_cls: Type[C] = Container,  # type: ignore[assignment]
    module: str = "core",
    **handle_kwargs: Any,
) -> C:
    """
    Launch a container from a request.

    Args:
        request: Finished request, consumed by this call
        handle_cls: Handle class wrapping the started container
        module: Module name used in log events
        **handle_kwargs: Extra keyword arguments for the handle class

    Returns:
        Handle to the running container

    Raises:
        InvalidOptionError: If the request cannot be translated for the client
        ContainerStartError: If the container fails to start or become ready
    """
    details = {
        "image": request.image,
        "exposed_ports": list(request.exposed_ports),
        "files": len(request.files),
    }
    log_container_event(module, "launch", "started", details)

    try:
        container = build_docker_container(request)
    except (TypeError, ValueError) as e:
        log_container_event(
            module,
            "launch",
            "failed",
            {**details, "error_type": type(e).__name__, "error_message": str(e)},
        )
        raise InvalidOptionError(
            f"build {request.image}: {e}", context=details, source=module
        ) from e

    if request.started:
        try:
            container.start()
        except Exception as e:
            log_container_event(
                module,
                "launch",
                "failed",
                {**details, "error_type": type(e).__name__, "error_message": str(e)},
            )
            _cleanup(container, request)
            raise ContainerStartError(
                f"start {request.image}: {e}", context=details, source=module
            ) from e

    log_container_event(module, "launch", "completed", details)
    return handle_cls(container, request, **handle_kwargs)


def _cleanup(container: DockerContainer, request: Request) -> None:
    """Stop a container that failed to start, logging any stop error."""
    if not get_config().container.stop_on_failure:
        return
    try:
        container.stop()
    except Exception as e:
        logger.warning(
            "Failed to stop container after startup failure",
            image=request.image,
            error_type=type(e).__name__,
            error_message=str(e),
        )
