"""
Tests for InfluxDB readiness strategy selection.
"""

import pytest

from dbcontainers.core.request import ContainerFile
from dbcontainers.core.wait import AllOf, LogMatch, PortOpen, RegexLogMatch
from dbcontainers.modules.influxdb import (
    LISTENING_PATTERN,
    VERSION_POLICIES,
    has_init_scripts,
    image_tag,
    major_version,
    resolve_version_policy,
    select_readiness_strategy,
)


class RecordingStrategies:
    """Strategy factory returning plain tuples so composition can be asserted."""

    def for_log(self, text):
        return ("log", text)

    def for_regex_log(self, pattern):
        return ("regex", pattern)

    def for_listening_port(self, port):
        return ("port", port)

    def for_all(self, *strategies):
        return ("all", strategies)


@pytest.mark.unit
class TestImageTag:
    """Test image reference parsing."""

    @pytest.mark.parametrize(
        "image, expected",
        [
            ("influxdb:1.8", "1.8"),
            ("influxdb:2.7.1", "2.7.1"),
            ("influxdb:latest", "latest"),
            ("influxdb", None),
            ("influxdb:", ""),
            ("registry.local:5000/influxdb", "5000/influxdb"),
            ("registry.local:5000/influxdb:2.6", "2.6"),
            ("influxdb@sha256:2abcdef", "2abcdef"),
        ],
    )
    def test_image_tag(self, image, expected) -> None:
        """Test tags are taken after the last separator."""
        assert image_tag(image) == expected

    def test_major_version(self) -> None:
        """Test major version parsing."""
        assert major_version("2.7.1") == 2
        assert major_version("2-alpine") == 2
        assert major_version("1.8") == 1
        assert major_version("alpine") is None
        assert major_version("") is None

    def test_version_policy_table(self) -> None:
        """Test the policy table covers latest and 2.x only."""
        assert set(VERSION_POLICIES) == {"latest", 2}
        assert resolve_version_policy("latest") is VERSION_POLICIES["latest"]
        assert resolve_version_policy("2.0") is VERSION_POLICIES[2]
        assert resolve_version_policy("1.8") is not VERSION_POLICIES[2]


@pytest.mark.unit
class TestSelectReadinessStrategy:
    """Test the readiness strategy selector."""

    def test_old_version_keeps_default(self, request_factory) -> None:
        """Test 1.x images keep the port-open default."""
        request = request_factory("influxdb:1.8")

        select_readiness_strategy(request)

        assert request.waiting_for == PortOpen("8086/tcp")

    @pytest.mark.parametrize("image", ["influxdb:2.6", "influxdb:2.0", "influxdb:2.7.1"])
    def test_v2_uses_structured_log(self, request_factory, image) -> None:
        """Test 2.x images wait for the structured listening log line."""
        request = request_factory(image)

        select_readiness_strategy(request)

        assert request.waiting_for == RegexLogMatch(LISTENING_PATTERN)

    def test_latest_uses_structured_log(self, request_factory) -> None:
        """Test the latest tag is treated as 2.x."""
        request = request_factory("influxdb:latest")

        select_readiness_strategy(request)

        assert request.waiting_for == RegexLogMatch(LISTENING_PATTERN)

    def test_untagged_image_waits_for_signals(self, request_factory) -> None:
        """Test images without a tag wait for the generic log line."""
        request = request_factory("influxdb")

        select_readiness_strategy(request)

        assert request.waiting_for == LogMatch("Listening for signals")

    @pytest.mark.parametrize("image", ["influxdb:", "influxdb:alpine", "influxdb:1.11"])
    def test_empty_or_unparseable_tag_keeps_default(
        self, request_factory, image
    ) -> None:
        """Test malformed tags fall back to the default without raising."""
        request = request_factory(image)

        select_readiness_strategy(request)

        assert request.waiting_for == PortOpen("8086/tcp")

    def test_registry_port_keeps_default(self, request_factory) -> None:
        """Test a registry port after the last separator is read as an old tag."""
        request = request_factory("localhost:5000/influxdb")

        select_readiness_strategy(request)

        assert request.waiting_for == PortOpen("8086/tcp")

    def test_digest_starting_with_two_uses_structured_log(
        self, request_factory
    ) -> None:
        """Test the text after the last separator of a digest is used as the tag."""
        request = request_factory("influxdb@sha256:2abcdef")

        select_readiness_strategy(request)

        assert request.waiting_for == RegexLogMatch(LISTENING_PATTERN)

    def test_init_scripts_build_conjunction(
        self, request_factory, init_script_mount
    ) -> None:
        """Test init script mounts wait for the full restart sequence."""
        request = request_factory("influxdb:1.8", files=[init_script_mount])

        select_readiness_strategy(request)

        assert request.waiting_for == AllOf(
            (
                PortOpen("8086/tcp"),
                LogMatch("influxdb init process in progress..."),
                LogMatch("Server shutdown completed"),
                LogMatch("Opened shard"),
            )
        )

    def test_init_scripts_take_precedence_over_tag(
        self, request_factory, init_script_mount
    ) -> None:
        """Test the conjunction is used regardless of the image version."""
        request = request_factory("influxdb:2.6", files=[init_script_mount])

        select_readiness_strategy(request)

        assert isinstance(request.waiting_for, AllOf)
        assert len(request.waiting_for.strategies) == 4
        assert request.waiting_for.strategies[0] == PortOpen("8086/tcp")

    def test_init_script_directory_elsewhere_is_ignored(self, request_factory) -> None:
        """Test only mounts at the container root count as init scripts."""
        mount = ContainerFile("/tmp/docker-entrypoint-initdb.d", "/scripts", 0o755)
        request = request_factory("influxdb:1.8", files=[mount])

        assert has_init_scripts(request) is False
        select_readiness_strategy(request)
        assert request.waiting_for == PortOpen("8086/tcp")

    def test_env_and_files_untouched(self, request_factory, init_script_mount) -> None:
        """Test only the waiting strategy is changed."""
        request = request_factory("influxdb:2.6", files=[init_script_mount])
        env = dict(request.env)
        files = list(request.files)

        select_readiness_strategy(request)

        assert request.env == env
        assert request.files == files

    def test_second_invocation_nests_conjunction(
        self, request_factory, init_script_mount
    ) -> None:
        """Test running the selector twice wraps the prior conjunction."""
        request = request_factory("influxdb:1.8", files=[init_script_mount])

        select_readiness_strategy(request)
        first = request.waiting_for
        select_readiness_strategy(request)

        assert isinstance(request.waiting_for, AllOf)
        assert request.waiting_for.strategies[0] == first

    def test_injected_factory(self, request_factory, init_script_mount) -> None:
        """Test strategies are built through the injected factory."""
        strategies = RecordingStrategies()
        request = request_factory("influxdb:1.8", files=[init_script_mount])
        request.waiting_for = strategies.for_listening_port("8086/tcp")

        select_readiness_strategy(request, strategies)

        assert request.waiting_for == (
            "all",
            (
                ("port", "8086/tcp"),
                ("log", "influxdb init process in progress..."),
                ("log", "Server shutdown completed"),
                ("log", "Opened shard"),
            ),
        )

    def test_injected_factory_for_v2(self, request_factory) -> None:
        """Test the structured log strategy comes from the injected factory."""
        request = request_factory("influxdb:2.6")

        select_readiness_strategy(request, RecordingStrategies())

        assert request.waiting_for == ("regex", LISTENING_PATTERN)
