"""Domain-specific errors for starburst."""

from __future__ import annotations


class StarburstError(Exception):
    """Base error for starburst."""


class ConfigLoadError(StarburstError):
    """Raised when the config file cannot be read or parsed."""


class ConfigError(StarburstError):
    """Raised when a config document violates the config schema."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        if field:
            super().__init__(f'Invalid config: "{field}" {reason}')
        else:
            super().__init__(f"Invalid config: {reason}")


class IndexOutOfRangeError(StarburstError):
    """Raised when a device index does not address a configured device."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"Device index {index} out of range for {count} configured device(s)")


class UnauthorizedError(StarburstError):
    """Raised when a wake request does not carry the shared password."""

    challenge = "Basic"

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class UnsupportedDeviceError(StarburstError):
    """Raised when a device has no wake address configured."""


class TransportError(StarburstError):
    """Base transport error."""


class TransportSendError(TransportError):
    """Raised when a wake packet could not be sent."""
