"""Stable public API for building tooling on top of starburst.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from starburst.core.config_loader import load_config, validate_config
from starburst.core.credentials import generate_salt, hash_password, verify_password
from starburst.core.dispatcher import ActionDispatcher
from starburst.core.errors import (
    ConfigError,
    ConfigLoadError,
    IndexOutOfRangeError,
    StarburstError,
    TransportError,
    TransportSendError,
    UnauthorizedError,
    UnsupportedDeviceError,
)
from starburst.core.model import (
    Credential,
    Device,
    DeviceStatus,
    GatewayConfig,
    StatusView,
)
from starburst.transports.base import ProbeTransport, WakeTransport

__all__ = [
    "StarburstError",
    "ConfigError",
    "ConfigLoadError",
    "IndexOutOfRangeError",
    "UnauthorizedError",
    "UnsupportedDeviceError",
    "TransportError",
    "TransportSendError",
    "Credential",
    "Device",
    "DeviceStatus",
    "GatewayConfig",
    "StatusView",
    "ProbeTransport",
    "WakeTransport",
    "load_config",
    "validate_config",
    "hash_password",
    "generate_salt",
    "verify_password",
    "Gateway",
]


class Gateway:
    """Public client for querying device status and sending wake packets.

    A `Gateway` wraps a validated config and the action dispatcher behind a
    synchronous API for scripts and other tools that do not run an event loop.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        probe_transport: ProbeTransport | None = None,
        wake_transport: WakeTransport | None = None,
    ) -> None:
        self._dispatcher = ActionDispatcher(
            config,
            probe_transport=probe_transport,
            wake_transport=wake_transport,
        )

    @classmethod
    def from_file(cls, path: str | Path, **kwargs) -> Gateway:
        return cls(load_config(path), **kwargs)

    @property
    def config(self) -> GatewayConfig:
        return self._dispatcher.config

    def status(self) -> StatusView:
        return asyncio.run(self._dispatcher.status())

    def wake(self, index: int, authorization: str | None) -> StatusView:
        return asyncio.run(self._dispatcher.wake(index, authorization))
