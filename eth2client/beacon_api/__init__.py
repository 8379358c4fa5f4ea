"""Beacon API client."""

from .client import BeaconClient
from .content_type import ContentType
from .response import HTTPResponse
from .versioned import (
    Response,
    VersionedAttestation,
    VersionedBlindedProposal,
    VersionedProposal,
    VersionedSignedBeaconBlock,
    VersionedSignedExecutionPayloadEnvelope,
    VersionedSignedProposal,
    VersionedSingleAttestation,
    VersionedV3Proposal,
)
from .cache import StaticValueCache
from .utils import to_hex

__all__ = [
    "BeaconClient",
    "ContentType",
    "HTTPResponse",
    "Response",
    "VersionedAttestation",
    "VersionedBlindedProposal",
    "VersionedProposal",
    "VersionedSignedBeaconBlock",
    "VersionedSignedExecutionPayloadEnvelope",
    "VersionedSignedProposal",
    "VersionedSingleAttestation",
    "VersionedV3Proposal",
    "StaticValueCache",
    "to_hex",
]
