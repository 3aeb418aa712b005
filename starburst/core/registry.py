"""Index-addressed lookup of configured devices."""

from __future__ import annotations

from collections.abc import Iterator

from starburst.core.errors import IndexOutOfRangeError
from starburst.core.model import Device


class DeviceRegistry:
    def __init__(self, devices: tuple[Device, ...]) -> None:
        self._devices = tuple(devices)

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[tuple[int, Device]]:
        return iter(enumerate(self._devices))

    def resolve(self, index: int) -> Device:
        if index < 0 or index >= len(self._devices):
            raise IndexOutOfRangeError(index, len(self._devices))
        return self._devices[index]
