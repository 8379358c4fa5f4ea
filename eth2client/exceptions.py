"""Exceptions raised by the Beacon API client."""

from typing import Optional


class Eth2ClientError(Exception):
    """Base class for all client errors."""


class InvalidOptionsError(Eth2ClientError, ValueError):
    """Call options or client configuration are unusable."""


class BeaconAPIError(Eth2ClientError):
    """Non-2xx response from the beacon node."""

    def __init__(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        data: bytes = b"",
    ):
        self.method = method
        self.endpoint = endpoint
        self.status_code = status_code
        self.data = data
        body = data.decode("utf-8", errors="replace") if data else ""
        super().__init__(f"{method} {endpoint} failed with status {status_code}: {body}")

    @property
    def status(self) -> int:
        return self.status_code


class BlockNotFoundError(BeaconAPIError):
    """Block not found error."""

    def __init__(self, method: str, endpoint: str, data: bytes = b""):
        super().__init__(method, endpoint, 404, data)


class MalformedResponseError(Eth2ClientError):
    """Response could not be decoded (headers, JSON or SSZ)."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.endpoint = endpoint
        super().__init__(f"{endpoint}: {message}" if endpoint else message)


class UnsupportedVersionError(MalformedResponseError):
    """Consensus version not handled by an endpoint."""


class InconsistentResultError(Eth2ClientError):
    """Decoded response does not match what was requested."""


class NotActiveError(Eth2ClientError):
    """Beacon node is not reachable."""


class NotSyncedError(Eth2ClientError):
    """Beacon node is not synced."""


__all__ = [
    "Eth2ClientError",
    "InvalidOptionsError",
    "BeaconAPIError",
    "BlockNotFoundError",
    "MalformedResponseError",
    "UnsupportedVersionError",
    "InconsistentResultError",
    "NotActiveError",
    "NotSyncedError",
]
