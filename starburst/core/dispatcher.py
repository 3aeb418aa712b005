"""Request orchestration used by the web boundary, CLI and public API."""

from __future__ import annotations

import asyncio
import logging

from starburst.core.auth import authorize
from starburst.core.errors import TransportError, UnauthorizedError, UnsupportedDeviceError
from starburst.core.model import Device, DeviceStatus, GatewayConfig, StatusView
from starburst.core.registry import DeviceRegistry
from starburst.transports.base import ProbeTransport, WakeTransport
from starburst.transports.ping import PingTransport
from starburst.transports.wol import MagicPacketTransport

PROBE_TIMEOUT_S = 1.0
LOGGER = logging.getLogger(__name__)


class ActionDispatcher:
    def __init__(
        self,
        config: GatewayConfig,
        *,
        probe_transport: ProbeTransport | None = None,
        wake_transport: WakeTransport | None = None,
        probe_timeout_s: float = PROBE_TIMEOUT_S,
    ) -> None:
        self.config = config
        self.registry = DeviceRegistry(config.devices)
        self.probe_transport = probe_transport or PingTransport()
        self.wake_transport = wake_transport or MagicPacketTransport()
        self.probe_timeout_s = probe_timeout_s

    async def status(self) -> StatusView:
        """Probe every device concurrently and report results in config order."""
        devices = list(self.registry)
        results = await asyncio.gather(
            *(self._probe(device) for _, device in devices)
        )
        return StatusView(
            name=self.config.name,
            devices=tuple(
                DeviceStatus(
                    index=index,
                    name=device.name,
                    reachable=reachable,
                    controllable=device.controllable,
                )
                for (index, device), reachable in zip(devices, results)
            ),
        )

    async def wake(self, index: int, authorization: str | None) -> StatusView:
        """Send a wake packet to device ``index`` and return a fresh status view.

        The index is checked first, then the credentials. Nothing about the
        device's wake support is revealed to a caller that fails authorization.

        Raises:
            IndexOutOfRangeError: ``index`` does not address a device.
            UnauthorizedError: the Authorization header is missing or wrong.
            UnsupportedDeviceError: the device has no MAC configured.
            TransportError: the magic packet could not be sent.
        """
        device = self.registry.resolve(index)

        if not await asyncio.to_thread(authorize, authorization, self.config.credential):
            raise UnauthorizedError()

        if device.mac is None:
            raise UnsupportedDeviceError(f"Server '{device.name}' does not support WOL")

        try:
            await asyncio.to_thread(self.wake_transport.send_wake, device.mac)
        except TransportError:
            LOGGER.error("Failed to send WOL packet to device %d (%s)", index, device.name, exc_info=True)
            raise
        LOGGER.info("Sent WOL packet to device %d (%s) at %s", index, device.name, device.mac)

        return await self.status()

    async def _probe(self, device: Device) -> bool:
        try:
            return await asyncio.wait_for(
                self.probe_transport.probe(device.hostname, self.probe_timeout_s),
                timeout=self.probe_timeout_s,
            )
        except asyncio.TimeoutError:
            return False
        except Exception as exc:
            LOGGER.warning("Probe of %s failed, reporting it unreachable: %s", device.hostname, exc)
            return False
