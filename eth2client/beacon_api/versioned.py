"""Version-tagged results returned by multi-fork endpoints.

Each result carries a ConsensusVersion and a single payload. The payload type
allowed for every version is fixed per result class and checked when the
result is built, so a result can never hold a payload from another fork.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, Optional, TypeVar

from ..exceptions import UnsupportedVersionError
from ..spec.forks import ConsensusVersion
from ..spec.json_codec import to_json, to_yaml
from ..spec import types as t
from ..ssz import hash_tree_root

T = TypeVar("T")

V = ConsensusVersion

PROPOSAL_TYPES = {
    V.PHASE0: t.Phase0BeaconBlock,
    V.ALTAIR: t.AltairBeaconBlock,
    V.BELLATRIX: t.BellatrixBeaconBlock,
    V.CAPELLA: t.CapellaBeaconBlock,
    V.DENEB: t.DenebBlockContents,
    V.ELECTRA: t.ElectraBlockContents,
    V.FULU: t.FuluBlockContents,
    V.GLOAS: t.BeaconBlock,
}

BLINDED_PROPOSAL_TYPES = {
    V.BELLATRIX: t.BlindedBellatrixBeaconBlock,
    V.CAPELLA: t.BlindedCapellaBeaconBlock,
    V.DENEB: t.BlindedDenebBeaconBlock,
    V.ELECTRA: t.BlindedElectraBeaconBlock,
    V.FULU: t.BlindedElectraBeaconBlock,
}

SIGNED_BLOCK_TYPES = {
    V.PHASE0: t.SignedPhase0BeaconBlock,
    V.ALTAIR: t.SignedAltairBeaconBlock,
    V.BELLATRIX: t.SignedBellatrixBeaconBlock,
    V.CAPELLA: t.SignedCapellaBeaconBlock,
    V.DENEB: t.SignedDenebBeaconBlock,
    V.ELECTRA: t.SignedElectraBeaconBlock,
    V.FULU: t.SignedElectraBeaconBlock,
    V.GLOAS: t.SignedBeaconBlock,
}

SIGNED_PROPOSAL_TYPES = {
    V.PHASE0: t.SignedPhase0BeaconBlock,
    V.ALTAIR: t.SignedAltairBeaconBlock,
    V.BELLATRIX: t.SignedBellatrixBeaconBlock,
    V.CAPELLA: t.SignedCapellaBeaconBlock,
    V.DENEB: t.SignedDenebBlockContents,
    V.ELECTRA: t.SignedElectraBlockContents,
    V.FULU: t.SignedFuluBlockContents,
    V.GLOAS: t.SignedBeaconBlock,
}

ATTESTATION_TYPES = {
    V.PHASE0: t.Phase0Attestation,
    V.ALTAIR: t.Phase0Attestation,
    V.BELLATRIX: t.Phase0Attestation,
    V.CAPELLA: t.Phase0Attestation,
    V.DENEB: t.Phase0Attestation,
    V.ELECTRA: t.Attestation,
    V.FULU: t.Attestation,
    V.GLOAS: t.Attestation,
}

SINGLE_ATTESTATION_TYPES = {
    V.ELECTRA: t.SingleAttestation,
    V.FULU: t.SingleAttestation,
    V.GLOAS: t.SingleAttestation,
}

ENVELOPE_TYPES = {
    V.GLOAS: t.SignedExecutionPayloadEnvelope,
}


@dataclass
class Response(Generic[T]):
    """Decoded payload plus the envelope metadata (or response headers)."""

    data: T
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VersionedResult:
    """Base for version-tagged payloads.

    Raises:
        UnsupportedVersionError: if the class has no payload type for `version`
        TypeError: if `data` is not of the payload type for `version`
    """

    version: ConsensusVersion
    data: Any

    TYPES: ClassVar[dict] = {}
    KIND: ClassVar[str] = "versioned data"

    def __post_init__(self):
        expected = self.expected_type()
        if not isinstance(self.data, expected):
            raise TypeError(
                f"{self.version} {self.KIND} must be {expected.__name__}, "
                f"not {type(self.data).__name__}"
            )

    def expected_type(self) -> type:
        return self.type_for(self.version)

    @classmethod
    def type_for(cls, version: ConsensusVersion) -> type:
        expected = cls.TYPES.get(version)
        if expected is None:
            raise UnsupportedVersionError(f"unhandled {cls.KIND} version {version}")
        return expected

    @classmethod
    def supported_versions(cls) -> list[ConsensusVersion]:
        return list(cls.TYPES)

    def to_json(self) -> dict[str, Any]:
        return {"version": str(self.version), "data": to_json(self.data)}

    def __str__(self) -> str:
        return to_yaml(self.to_json())


class _BlockAccessors(ABC):
    """Accessors shared by results wrapping an (optionally signed) block."""

    data: Any

    @property
    @abstractmethod
    def block(self):
        """The unsigned block inside `data`."""

    @property
    def slot(self) -> int:
        return int(self.block.slot)

    @property
    def proposer_index(self) -> int:
        return int(self.block.proposer_index)

    @property
    def parent_root(self) -> bytes:
        return bytes(self.block.parent_root)

    @property
    def state_root(self) -> bytes:
        return bytes(self.block.state_root)

    @property
    def root(self) -> bytes:
        return hash_tree_root(self.block)

    @property
    def body_root(self) -> bytes:
        return hash_tree_root(self.block.body)

    @property
    def randao_reveal(self) -> bytes:
        return bytes(self.block.body.randao_reveal)

    @property
    def graffiti(self) -> bytes:
        return bytes(self.block.body.graffiti)


@dataclass(frozen=True)
class VersionedProposal(_BlockAccessors, VersionedResult):
    """Unsigned block proposal (block contents from Deneb)."""

    TYPES: ClassVar[dict] = PROPOSAL_TYPES
    KIND: ClassVar[str] = "block proposal"

    @property
    def block(self):
        if hasattr(self.data, "block"):
            return self.data.block
        return self.data

    @property
    def blobs(self) -> list:
        if not hasattr(self.data, "blobs"):
            raise AttributeError(f"no blobs in {self.version} block proposal")
        return list(self.data.blobs)

    @property
    def kzg_proofs(self) -> list:
        if not hasattr(self.data, "kzg_proofs"):
            raise AttributeError(f"no kzg proofs in {self.version} block proposal")
        return list(self.data.kzg_proofs)


@dataclass(frozen=True)
class VersionedBlindedProposal(_BlockAccessors, VersionedResult):
    TYPES: ClassVar[dict] = BLINDED_PROPOSAL_TYPES
    KIND: ClassVar[str] = "blinded block proposal"

    @property
    def block(self):
        return self.data

    @property
    def transactions_root(self) -> bytes:
        return bytes(self.data.body.execution_payload_header.transactions_root)


@dataclass(frozen=True)
class VersionedV3Proposal(_BlockAccessors, VersionedResult):
    """Proposal from the v3 endpoint, either full or blinded.

    `blinded`, `execution_value` and `consensus_value` come from the
    Eth-Execution-Payload-Blinded, Eth-Execution-Payload-Value and
    Eth-Consensus-Block-Value headers. Values are in wei.
    """

    blinded: bool = False
    execution_value: Optional[int] = None
    consensus_value: Optional[int] = None

    TYPES: ClassVar[dict] = PROPOSAL_TYPES
    BLINDED_TYPES: ClassVar[dict] = BLINDED_PROPOSAL_TYPES
    KIND: ClassVar[str] = "block proposal"

    def expected_type(self) -> type:
        return self.type_for(self.version, self.blinded)

    @classmethod
    def type_for(cls, version: ConsensusVersion, blinded: bool = False) -> type:
        types = cls.BLINDED_TYPES if blinded else cls.TYPES
        expected = types.get(version)
        if expected is None:
            raise UnsupportedVersionError(f"unhandled block proposal version {version}")
        return expected

    @property
    def block(self):
        if not self.blinded and hasattr(self.data, "block"):
            return self.data.block
        return self.data

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["execution_payload_blinded"] = self.blinded
        if self.execution_value is not None:
            result["execution_payload_value"] = str(self.execution_value)
        if self.consensus_value is not None:
            result["consensus_block_value"] = str(self.consensus_value)
        return result


@dataclass(frozen=True)
class VersionedSignedBeaconBlock(_BlockAccessors, VersionedResult):
    TYPES: ClassVar[dict] = SIGNED_BLOCK_TYPES
    KIND: ClassVar[str] = "signed beacon block"

    @property
    def block(self):
        return self.data.message

    @property
    def signature(self) -> bytes:
        return bytes(self.data.signature)

    @property
    def execution_block_hash(self) -> bytes:
        if self.version < V.BELLATRIX:
            raise AttributeError(f"no execution payload in {self.version} block")
        if self.version >= V.GLOAS:
            bid = self.block.body.signed_execution_payload_bid.message
            return bytes(bid.block_hash)
        return bytes(self.block.body.execution_payload.block_hash)


@dataclass(frozen=True)
class VersionedSignedProposal(_BlockAccessors, VersionedResult):
    """Signed proposal for submission (signed block contents from Deneb)."""

    TYPES: ClassVar[dict] = SIGNED_PROPOSAL_TYPES
    KIND: ClassVar[str] = "signed block proposal"

    @property
    def signed_block(self):
        if hasattr(self.data, "signed_block"):
            return self.data.signed_block
        return self.data

    @property
    def block(self):
        return self.signed_block.message


@dataclass(frozen=True)
class VersionedAttestation(VersionedResult):
    TYPES: ClassVar[dict] = ATTESTATION_TYPES
    KIND: ClassVar[str] = "attestation"

    @property
    def attestation_data(self):
        return self.data.data

    @property
    def slot(self) -> int:
        return int(self.data.data.slot)

    @property
    def aggregation_bits(self):
        return self.data.aggregation_bits

    @property
    def signature(self) -> bytes:
        return bytes(self.data.signature)

    @property
    def committee_bits(self):
        if self.version < V.ELECTRA:
            raise AttributeError(f"no committee bits in {self.version} attestation")
        return self.data.committee_bits

    @property
    def committee_index(self) -> int:
        """Committee index; from Electra the first set committee bit."""
        if self.version < V.ELECTRA:
            return int(self.data.data.index)
        for index, bit in enumerate(self.data.committee_bits):
            if bit:
                return index
        raise ValueError("no committee bits set in attestation")


@dataclass(frozen=True)
class VersionedSingleAttestation(VersionedResult):
    TYPES: ClassVar[dict] = SINGLE_ATTESTATION_TYPES
    KIND: ClassVar[str] = "single attestation"

    @property
    def slot(self) -> int:
        return int(self.data.data.slot)

    @property
    def committee_index(self) -> int:
        return int(self.data.committee_index)

    @property
    def attester_index(self) -> int:
        return int(self.data.attester_index)


@dataclass(frozen=True)
class VersionedSignedExecutionPayloadEnvelope(VersionedResult):
    TYPES: ClassVar[dict] = ENVELOPE_TYPES
    KIND: ClassVar[str] = "execution payload envelope"

    @property
    def slot(self) -> int:
        return int(self.data.message.slot)

    @property
    def beacon_block_root(self) -> bytes:
        return bytes(self.data.message.beacon_block_root)

    @property
    def builder_index(self) -> int:
        return int(self.data.message.builder_index)

    @property
    def block_hash(self) -> bytes:
        return bytes(self.data.message.payload.block_hash)


__all__ = [
    "Response",
    "VersionedResult",
    "VersionedProposal",
    "VersionedBlindedProposal",
    "VersionedV3Proposal",
    "VersionedSignedBeaconBlock",
    "VersionedSignedProposal",
    "VersionedAttestation",
    "VersionedSingleAttestation",
    "VersionedSignedExecutionPayloadEnvelope",
    "PROPOSAL_TYPES",
    "BLINDED_PROPOSAL_TYPES",
    "SIGNED_BLOCK_TYPES",
    "SIGNED_PROPOSAL_TYPES",
    "ATTESTATION_TYPES",
    "SINGLE_ATTESTATION_TYPES",
    "ENVELOPE_TYPES",
]
