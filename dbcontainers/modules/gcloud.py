"""
GCloud emulator module.

Runs the Cloud SDK emulators. The emulator command depends on settings such as
the project id, so it is built after all options have been applied.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple, Union

from testcontainers.core.container import DockerContainer

from ..core.container import Container, run_container as launch
from ..core.request import Request, RequestCustomizer, apply_customizers
from ..core.wait import DEFAULT_STRATEGIES, StrategyFactory

EMULATORS_IMAGE = "gcr.io/google.com/cloudsdktool/cloud-sdk:367.0.0-emulators"
FIRESTORE_PORT = "8080/tcp"
DEFAULT_PROJECT_ID = "test-project"


@dataclass
class GCloudSettings:
    """Emulator settings that are not part of the container request."""

    project_id: str = DEFAULT_PROJECT_ID


class SettingsOption:
    """
    Option changing ``GCloudSettings``.

    It can be passed alongside request customizers; applied to a request it
    does nothing.
    """

    def __init__(self, apply: Callable[[GCloudSettings], None]):
        self._apply = apply

    def apply_settings(self, settings: GCloudSettings) -> None:
        self._apply(settings)

    def __call__(self, request: Request) -> None:
        pass


Option = Union[SettingsOption, RequestCustomizer]


class GCloudContainer(Container):
    """Handle to a running GCloud emulator."""

    def __init__(
        self,
        container: DockerContainer,
        request: Request,
        settings: GCloudSettings,
        port: str,
    ):
        super().__init__(container, request)
        self.settings = settings
        self._port = port

    @property
    def project_id(self) -> str:
        return self.settings.project_id

    @property
    def uri(self) -> str:
        """Emulator address as ``host:port``, e.g. for ``FIRESTORE_EMULATOR_HOST``."""
        return self.endpoint(self._port)


def with_project_id(project_id: str) -> SettingsOption:
    """Set the project id the emulator serves."""

    def apply(settings: GCloudSettings) -> None:
        settings.project_id = project_id

    return SettingsOption(apply)


def apply_options(
    request: Request, options: Iterable[Option]
) -> Tuple[Request, GCloudSettings]:
    """
    Apply settings options and request customizers.

    Returns:
        The customized request and the resulting settings
    """
    options = list(options)
    settings = GCloudSettings()
    for option in options:
        if isinstance(option, SettingsOption):
            option.apply_settings(settings)

    apply_customizers(request, options)
    return request, settings


def firestore_request(strategies: StrategyFactory = DEFAULT_STRATEGIES) -> Request:
    """Build the request Firestore emulator containers start from."""
    return Request(
        image=EMULATORS_IMAGE,
        exposed_ports=[FIRESTORE_PORT],
        waiting_for=strategies.for_log("running"),
    )


def firestore_command(settings: GCloudSettings) -> List[str]:
    return [
        "/bin/sh",
        "-c",
        "gcloud beta emulators firestore start --host-port 0.0.0.0:8080 "
        f"--project={settings.project_id}",
    ]


def build_firestore_request(*options: Option) -> Tuple[Request, GCloudSettings]:
    """Build a customized Firestore emulator request and its settings."""
    request, settings = apply_options(firestore_request(), options)
    request.cmd = firestore_command(settings)
    return request, settings


def run_firestore_container(*options: Option) -> GCloudContainer:
    """
    Start a Firestore emulator.

    Args:
        *options: Settings options and request customizers

    Raises:
        CustomizeError: If a customizer fails
        ContainerStartError: If the emulator does not become ready
    """
    request, settings = build_firestore_request(*options)
    return launch(
        request,
        GCloudContainer,
        module="gcloud",
        settings=settings,
        port=FIRESTORE_PORT,
    )
