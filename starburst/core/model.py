"""Core data models used across config loading, dispatch, CLI and web."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MEMORY_COST_KIB = 4096
DEFAULT_ITERATIONS = 3
DEFAULT_PARALLELISM = 1


@dataclass(frozen=True)
class Credential:
    hash: str
    salt: str
    memory_cost_kib: int = DEFAULT_MEMORY_COST_KIB
    iterations: int = DEFAULT_ITERATIONS
    parallelism: int = DEFAULT_PARALLELISM

    def __repr__(self) -> str:
        return (
            f"Credential(hash=<redacted>, salt=<redacted>, memory_cost_kib={self.memory_cost_kib}, "
            f"iterations={self.iterations}, parallelism={self.parallelism})"
        )


@dataclass(frozen=True)
class Device:
    name: str
    hostname: str
    mac: str | None = None

    @property
    def controllable(self) -> bool:
        return self.mac is not None


@dataclass(frozen=True)
class GatewayConfig:
    name: str | None
    credential: Credential | None
    devices: tuple[Device, ...]


@dataclass(frozen=True)
class DeviceStatus:
    index: int
    name: str
    reachable: bool
    controllable: bool


@dataclass(frozen=True)
class StatusView:
    name: str | None
    devices: tuple[DeviceStatus, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "devices": [
                {
                    "index": status.index,
                    "name": status.name,
                    "reachable": status.reachable,
                    "controllable": status.controllable,
                }
                for status in self.devices
            ],
        }
