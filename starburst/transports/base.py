"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class ProbeTransport(Protocol):
    async def probe(self, hostname: str, timeout_s: float = 1.0) -> bool:
        """Return True if ``hostname`` answered within ``timeout_s``."""


class WakeTransport(Protocol):
    def send_wake(self, mac: str) -> None:
        """Send a wake signal to ``mac``; raise TransportError on failure."""
