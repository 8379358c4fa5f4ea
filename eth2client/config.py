"""Configuration for the beacon node client."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import InvalidOptionsError
from .version import user_agent


def normalize_address(address: str) -> str:
    """Beacon node address with a scheme and without a trailing slash."""
    address = address.strip()
    if "://" not in address:
        address = f"http://{address}"
    return address.rstrip("/")


@dataclass
class ClientConfig:
    """Client configuration."""

    address: str = ""
    timeout: float = 2.0
    extra_headers: dict[str, str] = field(default_factory=dict)
    enforce_json: bool = False
    custom_spec_support: bool = False
    allow_delayed_start: bool = False
    static_value_ttl: float = 300.0
    connection_check_interval: float = 30.0
    event_reconnect_delay: float = 1.0
    user_agent: Optional[str] = None
    metrics_enabled: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if self.address:
            self.address = normalize_address(self.address)

    def validate(self) -> None:
        """Raise InvalidOptionsError if the configuration cannot be used."""
        if not self.address:
            raise InvalidOptionsError("no address specified")
        if self.timeout <= 0:
            raise InvalidOptionsError("timeout must be positive")
        if self.static_value_ttl <= 0:
            raise InvalidOptionsError("static value TTL must be positive")
        if self.connection_check_interval <= 0:
            raise InvalidOptionsError("connection check interval must be positive")
        if self.event_reconnect_delay < 0:
            raise InvalidOptionsError("event reconnect delay must not be negative")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidOptionsError(f"unknown log level {self.log_level}")

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        headers = {"User-Agent": self.user_agent or user_agent()}
        headers.update(self.extra_headers)
        return headers
