"""Wake-on-LAN transport sending magic packets over UDP broadcast."""

from __future__ import annotations

from wakeonlan import send_magic_packet

from starburst.core.errors import TransportSendError

BROADCAST_IP = "255.255.255.255"
DEFAULT_PORT = 9


class MagicPacketTransport:
    def __init__(self, ip_address: str = BROADCAST_IP, port: int = DEFAULT_PORT) -> None:
        self.ip_address = ip_address
        self.port = port

    def send_wake(self, mac: str) -> None:
        try:
            send_magic_packet(mac, ip_address=self.ip_address, port=self.port)
        except ValueError as exc:
            raise TransportSendError(f"Invalid MAC address {mac!r}: {exc}") from exc
        except OSError as exc:
            raise TransportSendError(f"Magic packet send failed for {mac}: {exc}") from exc
