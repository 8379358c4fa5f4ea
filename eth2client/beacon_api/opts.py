"""Per-call options for BeaconClient endpoints.

Every options object accepts `timeout`, overriding the client's default
request timeout (in seconds) for that call.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..spec.constants import INFINITY_SIGNATURE
from ..exceptions import InvalidOptionsError

ZERO_GRAFFITI = b"\x00" * 32


@dataclass
class CallOpts:
    timeout: Optional[float] = None


@dataclass
class ProposalOpts(CallOpts):
    """Options for proposal, blinded_proposal and v3_proposal."""

    slot: int = 0
    randao_reveal: bytes = b""
    graffiti: bytes = ZERO_GRAFFITI
    skip_randao_verification: bool = False
    # Sent to the v3 endpoint only.
    builder_boost_factor: Optional[int] = None

    def validate(self) -> None:
        if self.slot == 0:
            raise InvalidOptionsError("no slot specified")
        if len(self.randao_reveal) != 96:
            raise InvalidOptionsError("randao reveal must be 96 bytes")
        if len(self.graffiti) != 32:
            raise InvalidOptionsError("graffiti must be 32 bytes")
        if self.skip_randao_verification and bytes(self.randao_reveal) != INFINITY_SIGNATURE:
            raise InvalidOptionsError(
                "randao reveal must be point at infinity if skip randao verification is set"
            )


@dataclass
class BlockOpts(CallOpts):
    """Options for endpoints addressed by block ID ("head", a slot or a root)."""

    block: str = ""

    def validate(self) -> None:
        if not self.block:
            raise InvalidOptionsError("no block specified")


@dataclass
class SignedBeaconBlockOpts(BlockOpts):
    # When set, the returned block must hash to this root.
    expected_root: Optional[bytes] = None


@dataclass
class BlobSidecarsOpts(BlockOpts):
    indices: list[int] = field(default_factory=list)


@dataclass
class AttestationDataOpts(CallOpts):
    slot: int = 0
    committee_index: int = 0


@dataclass
class AggregateAttestationOpts(CallOpts):
    slot: int = 0
    attestation_data_root: bytes = b""
    committee_index: int = 0

    def validate(self) -> None:
        if len(self.attestation_data_root) != 32 or not any(self.attestation_data_root):
            raise InvalidOptionsError("no attestation data root specified")


@dataclass
class SubmitProposalOpts(CallOpts):
    proposal: object = None
    broadcast_validation: Optional[str] = None

    def validate(self) -> None:
        if self.proposal is None:
            raise InvalidOptionsError("no proposal supplied")


@dataclass
class SubmitAttestationsOpts(CallOpts):
    attestations: list = field(default_factory=list)

    def validate(self) -> None:
        if not self.attestations:
            raise InvalidOptionsError("no attestations supplied")


__all__ = [
    "CallOpts",
    "ProposalOpts",
    "BlockOpts",
    "SignedBeaconBlockOpts",
    "BlobSidecarsOpts",
    "AttestationDataOpts",
    "AggregateAttestationOpts",
    "SubmitProposalOpts",
    "SubmitAttestationsOpts",
    "ZERO_GRAFFITI",
]
