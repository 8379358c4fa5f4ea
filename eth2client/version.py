"""Version info for eth2client and identification of beacon node software."""

import os
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Optional

CLIENT_NAME = "eth2client"

# Substrings of /eth/v1/node/version identifying consensus clients.
KNOWN_CLIENTS = (
    "lighthouse",
    "prysm",
    "teku",
    "nimbus",
    "lodestar",
    "grandine",
    "caplin",
)

# Node version substrings that identify distributed validator middleware.
DVT_MIDDLEWARE_SIGNATURES = ("charon",)


def get_version() -> str:
    """Get the installed eth2client version."""
    try:
        return package_version(CLIENT_NAME)
    except PackageNotFoundError:
        return os.environ.get("ETH2CLIENT_VERSION", "0.1.0")


def user_agent() -> str:
    """Default User-Agent header for requests to the beacon node."""
    return f"{CLIENT_NAME}/{get_version()}"


def identify_client(node_version: str) -> Optional[str]:
    """Name of the consensus client behind a /eth/v1/node/version string.

    e.g. "Lighthouse/v5.1.0-abc/x86_64-linux" -> "lighthouse"
    """
    name_lower = node_version.lower()
    for name in KNOWN_CLIENTS:
        if name in name_lower:
            return name
    return None


def is_dvt_middleware(node_version: str) -> bool:
    """Whether the node version belongs to DVT middleware rather than a beacon node."""
    name_lower = node_version.lower()
    return any(signature in name_lower for signature in DVT_MIDDLEWARE_SIGNATURES)


__all__ = [
    "CLIENT_NAME",
    "KNOWN_CLIENTS",
    "DVT_MIDDLEWARE_SIGNATURES",
    "get_version",
    "user_agent",
    "identify_client",
    "is_dvt_middleware",
]
