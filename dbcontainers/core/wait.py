"""
Waiting strategy descriptors.

A waiting strategy tells the container client when a service is ready. The
descriptors here are immutable values; they are only evaluated once they have
been converted into the container client's own strategies by
``to_wait_strategy`` at launch time. Modules build them through a
``StrategyFactory`` so tests can substitute their own factory.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol, Tuple, Union

from testcontainers.core.wait_strategies import (
    CompositeWaitStrategy,
    LogMessageWaitStrategy,
    PortWaitStrategy,
)


@dataclass(frozen=True)
class LogMatch:
    """Ready once the container logs contain ``text``."""

    text: str


@dataclass(frozen=True)
class RegexLogMatch:
    """Ready once a container log line matches ``pattern``."""

    pattern: str


@dataclass(frozen=True)
class PortOpen:
    """Ready once ``port`` (e.g. ``"8086/tcp"``) accepts connections."""

    port: str


@dataclass(frozen=True)
class AllOf:
    """Ready once every strategy in ``strategies`` has succeeded."""

    strategies: Tuple["Strategy", ...]


Strategy = Union[LogMatch, RegexLogMatch, PortOpen, AllOf]


class StrategyFactory(Protocol):
    """Capability interface used by modules to build waiting strategies."""

    def for_log(self, text: str) -> Strategy: ...

    def for_regex_log(self, pattern: str) -> Strategy: ...

    def for_listening_port(self, port: str) -> Strategy: ...

    def for_all(self, *strategies: Strategy) -> Strategy: ...


class DescriptorStrategies:
    """Strategy factory producing the descriptor values of this module."""

    def for_log(self, text: str) -> LogMatch:
        return LogMatch(text)

    def for_regex_log(self, pattern: str) -> RegexLogMatch:
        return RegexLogMatch(pattern)

    def for_listening_port(self, port: str) -> PortOpen:
        return PortOpen(port)

    def for_all(self, *strategies: Strategy) -> AllOf:
        return AllOf(tuple(strategies))


DEFAULT_STRATEGIES = DescriptorStrategies()


def port_number(port: Union[str, int]) -> int:
    """
    Extract the numeric part of a port spec.

    Args:
        port: Port spec such as ``"8086/tcp"`` or ``8086``

    Returns:
        The port number

    Raises:
        ValueError: If the spec has no numeric port
    """
    if isinstance(port, int):
        return port
    number, _, _ = port.partition("/")
    if not number.isdigit():
        raise ValueError(f"Invalid port spec: {port!r}")
    return int(number)


def to_wait_strategy(
    strategy: Strategy,
    startup_timeout: Union[int, timedelta] = 60,
    poll_interval: Union[float, timedelta] = 1.0,
) -> Union[CompositeWaitStrategy, LogMessageWaitStrategy, PortWaitStrategy]:
    """
    Convert a strategy descriptor into a testcontainers waiting strategy.

    Args:
        strategy: Descriptor to convert
        startup_timeout: How long the strategy may take to succeed
        poll_interval: Delay between two readiness checks

    Returns:
        The equivalent testcontainers strategy

    Raises:
        TypeError: If the descriptor type is unknown
    """
    if isinstance(strategy, LogMatch):
        converted = LogMessageWaitStrategy(re.compile(re.escape(strategy.text)))
    elif isinstance(strategy, RegexLogMatch):
        converted = LogMessageWaitStrategy(re.compile(strategy.pattern))
    elif isinstance(strategy, PortOpen):
        converted = PortWaitStrategy(port_number(strategy.port))
    elif isinstance(strategy, AllOf):
        converted = CompositeWaitStrategy(
            *(
                to_wait_strategy(s, startup_timeout, poll_interval)
                for s in strategy.strategies
            )
        )
    else:
        raise TypeError(f"Unsupported waiting strategy: {strategy!r}")

    return converted.with_startup_timeout(startup_timeout).with_poll_interval(
        poll_interval
    )
