"""
Container request descriptors and generic customizers.

A ``Request`` describes how to launch a container. Modules create one with
their defaults, apply the caller's customizers to it in order and hand it to
``run_container``.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from .errors import CustomizeError, DbContainersError
from .logging import get_logger
from .wait import Strategy, port_number

logger = get_logger(__name__)

DEFAULT_FILE_MODE = 0o755


@dataclass
class ContainerFile:
    """A host file or directory copied into the container before it starts."""

    host_file_path: str
    container_file_path: str
    file_mode: int = DEFAULT_FILE_MODE


@dataclass
class Request:
    """Mutable description of a container to launch."""

    image: str
    exposed_ports: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    files: List[ContainerFile] = field(default_factory=list)
    cmd: List[str] = field(default_factory=list)
    waiting_for: Optional[Strategy] = None
    started: bool = True


RequestCustomizer = Callable[[Request], None]


def apply_customizers(
    request: Request, customizers: Iterable[RequestCustomizer]
) -> Request:
    """
    Apply customizers to a request in order.

    Args:
        request: Request to mutate
        customizers: Callables taking the request

    Returns:
        The same request, for chaining

    Raises:
        CustomizeError: If a customizer fails with a foreign exception
    """
    for customizer in customizers:
        try:
            customizer(request)
        except DbContainersError:
            raise
        except Exception as e:
            logger.error(
                "Request customization failed",
                image=request.image,
                customizer=getattr(customizer, "__name__", repr(customizer)),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise CustomizeError(
                f"customize: {e}", context={"image": request.image}
            ) from e

    return request


def with_env(env: Dict[str, str]) -> RequestCustomizer:
    """Merge environment variables into the request."""

    def customize(request: Request) -> None:
        request.env.update(env)

    return customize


def with_files(*files: ContainerFile) -> RequestCustomizer:
    """Append file mounts to the request."""

    def customize(request: Request) -> None:
        request.files.extend(files)

    return customize


def with_cmd(*args: str) -> RequestCustomizer:
    """Replace the container command."""

    def customize(request: Request) -> None:
        request.cmd = list(args)

    return customize


def with_image(image: str) -> RequestCustomizer:
    """Replace the image reference."""

    def customize(request: Request) -> None:
        request.image = image

    return customize


def with_exposed_ports(*ports: str) -> RequestCustomizer:
    """Expose additional ports, skipping ones already exposed."""

    def customize(request: Request) -> None:
        for port in ports:
            port_number(port)
        for port in ports:
            if port not in request.exposed_ports:
                request.exposed_ports.append(port)

    return customize


def with_waiting_for(strategy: Strategy) -> RequestCustomizer:
    """Replace the default waiting strategy."""

    def customize(request: Request) -> None:
        request.waiting_for = strategy

    return customize
