"""Device status and Wake-on-LAN gateway."""

__version__ = "0.1.0"
