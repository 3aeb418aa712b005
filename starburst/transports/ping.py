"""ICMP reachability probe using the system ``ping`` binary."""

from __future__ import annotations

import asyncio
import logging
import math

LOGGER = logging.getLogger(__name__)


class PingTransport:
    def __init__(self, executable: str = "ping") -> None:
        self.executable = executable

    def command(self, hostname: str, timeout_s: float) -> list[str]:
        wait_s = max(1, math.ceil(timeout_s))
        return [self.executable, "-c", "1", "-W", str(wait_s), hostname]

    async def probe(self, hostname: str, timeout_s: float = 1.0) -> bool:
        if not hostname or hostname.startswith("-"):
            raise ValueError(f"Invalid hostname {hostname!r}")

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(hostname, timeout_s),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError:
            LOGGER.warning("'%s' not found; reporting %s as unreachable", self.executable, hostname)
            return False

        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
            raise
        return returncode == 0
