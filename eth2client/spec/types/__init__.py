"""SSZ types served and accepted by the Beacon API.

Types are organized by the fork that introduced them:
- base.py: Basic types and primitives
- phase0.py: Phase 0 types
- altair.py: Altair types (sync aggregates, contributions)
- bellatrix.py: Bellatrix types (execution payload, blinded blocks)
- capella.py: Capella types (withdrawals)
- deneb.py: Deneb types (blobs, block contents)
- electra.py: Electra types (committee bits, execution requests)
- fulu.py: Fulu types (cell proofs in block contents)
- gloas.py: Gloas types (ePBS)
"""

# Base types
from .base import (
    uint8, uint64, uint256, boolean,
    Bytes4, Bytes20, Bytes32, Bytes48, Bytes96, ByteVector, ByteList,
    Container, Vector, List,
    Bitvector, Bitlist,
    Slot, Epoch, CommitteeIndex, ValidatorIndex, Gwei,
    Root, Hash32, Version, DomainType, Domain,
    BLSPubkey, BLSSignature, ExecutionAddress, WithdrawalIndex,
    KZGCommitment, KZGProof,
    Transaction,
    Fork, ForkData, Checkpoint,
)

# Phase 0
from .phase0 import (
    AttestationData,
    Eth1Data,
    BeaconBlockHeader,
    SignedBeaconBlockHeader,
    ProposerSlashing,
    DepositData,
    Deposit,
    VoluntaryExit,
    SignedVoluntaryExit,
    Phase0Attestation,
    Phase0IndexedAttestation,
    Phase0AttesterSlashing,
    Phase0BeaconBlockBody,
    Phase0BeaconBlock,
    SignedPhase0BeaconBlock,
)

# Altair
from .altair import (
    SyncAggregate,
    SyncCommitteeContribution,
    ContributionAndProof,
    SignedContributionAndProof,
    AltairBeaconBlockBody,
    AltairBeaconBlock,
    SignedAltairBeaconBlock,
)

# Bellatrix
from .bellatrix import (
    ExecutionPayloadHeaderBellatrix,
    ExecutionPayloadBellatrix,
    BellatrixBeaconBlockBody,
    BellatrixBeaconBlock,
    SignedBellatrixBeaconBlock,
    BlindedBellatrixBeaconBlockBody,
    BlindedBellatrixBeaconBlock,
    SignedBlindedBellatrixBeaconBlock,
)

# Capella
from .capella import (
    Withdrawal,
    BLSToExecutionChange,
    SignedBLSToExecutionChange,
    ExecutionPayloadHeaderCapella,
    ExecutionPayloadCapella,
    CapellaBeaconBlockBody,
    CapellaBeaconBlock,
    SignedCapellaBeaconBlock,
    BlindedCapellaBeaconBlockBody,
    BlindedCapellaBeaconBlock,
    SignedBlindedCapellaBeaconBlock,
)

# Deneb
from .deneb import (
    Blob,
    BlobSidecar,
    ExecutionPayloadHeader,
    ExecutionPayload,
    DenebBeaconBlockBody,
    DenebBeaconBlock,
    SignedDenebBeaconBlock,
    DenebBlockContents,
    SignedDenebBlockContents,
    BlindedDenebBeaconBlockBody,
    BlindedDenebBeaconBlock,
    SignedBlindedDenebBeaconBlock,
)

# Electra
from .electra import (
    Attestation,
    IndexedAttestation,
    AttesterSlashing,
    SingleAttestation,
    DepositRequest,
    WithdrawalRequest,
    ConsolidationRequest,
    ExecutionRequests,
    ElectraBeaconBlockBody,
    ElectraBeaconBlock,
    SignedElectraBeaconBlock,
    ElectraBlockContents,
    SignedElectraBlockContents,
    BlindedElectraBeaconBlockBody,
    BlindedElectraBeaconBlock,
    SignedBlindedElectraBeaconBlock,
)

# Fulu
from .fulu import (
    FuluBlockContents,
    SignedFuluBlockContents,
)

# Gloas (ePBS)
from .gloas import (
    BuilderIndex,
    PayloadAttestationData,
    PayloadAttestation,
    PayloadAttestationMessage,
    ExecutionPayloadBid,
    SignedExecutionPayloadBid,
    ExecutionPayloadEnvelope,
    SignedExecutionPayloadEnvelope,
    BeaconBlockBody,
    BeaconBlock,
    SignedBeaconBlock,
)

__all__ = [
    # Base
    "Slot", "Epoch", "CommitteeIndex", "ValidatorIndex", "Gwei",
    "Root", "Hash32", "Version", "DomainType", "Domain",
    "BLSPubkey", "BLSSignature", "ExecutionAddress", "WithdrawalIndex",
    "KZGCommitment", "KZGProof", "Transaction",
    "Fork", "ForkData", "Checkpoint",
    # Phase 0
    "AttestationData", "Eth1Data",
    "BeaconBlockHeader", "SignedBeaconBlockHeader",
    "ProposerSlashing", "DepositData", "Deposit",
    "VoluntaryExit", "SignedVoluntaryExit",
    "Phase0Attestation", "Phase0IndexedAttestation", "Phase0AttesterSlashing",
    "Phase0BeaconBlockBody", "Phase0BeaconBlock", "SignedPhase0BeaconBlock",
    # Altair
    "SyncAggregate", "SyncCommitteeContribution",
    "ContributionAndProof", "SignedContributionAndProof",
    "AltairBeaconBlockBody", "AltairBeaconBlock", "SignedAltairBeaconBlock",
    # Bellatrix
    "ExecutionPayloadHeaderBellatrix", "ExecutionPayloadBellatrix",
    "BellatrixBeaconBlockBody", "BellatrixBeaconBlock", "SignedBellatrixBeaconBlock",
    "BlindedBellatrixBeaconBlockBody", "BlindedBellatrixBeaconBlock",
    "SignedBlindedBellatrixBeaconBlock",
    # Capella
    "Withdrawal", "BLSToExecutionChange", "SignedBLSToExecutionChange",
    "ExecutionPayloadHeaderCapella", "ExecutionPayloadCapella",
    "CapellaBeaconBlockBody", "CapellaBeaconBlock", "SignedCapellaBeaconBlock",
    "BlindedCapellaBeaconBlockBody", "BlindedCapellaBeaconBlock",
    "SignedBlindedCapellaBeaconBlock",
    # Deneb
    "Blob", "BlobSidecar",
    "ExecutionPayloadHeader", "ExecutionPayload",
    "DenebBeaconBlockBody", "DenebBeaconBlock", "SignedDenebBeaconBlock",
    "DenebBlockContents", "SignedDenebBlockContents",
    "BlindedDenebBeaconBlockBody", "BlindedDenebBeaconBlock",
    "SignedBlindedDenebBeaconBlock",
    # Electra
    "Attestation", "IndexedAttestation", "AttesterSlashing", "SingleAttestation",
    "DepositRequest", "WithdrawalRequest", "ConsolidationRequest",
    "ExecutionRequests",
    "ElectraBeaconBlockBody", "ElectraBeaconBlock", "SignedElectraBeaconBlock",
    "ElectraBlockContents", "SignedElectraBlockContents",
    "BlindedElectraBeaconBlockBody", "BlindedElectraBeaconBlock",
    "SignedBlindedElectraBeaconBlock",
    # Fulu
    "FuluBlockContents", "SignedFuluBlockContents",
    # Gloas
    "BuilderIndex",
    "PayloadAttestationData", "PayloadAttestation", "PayloadAttestationMessage",
    "ExecutionPayloadBid", "SignedExecutionPayloadBid",
    "ExecutionPayloadEnvelope", "SignedExecutionPayloadEnvelope",
    "BeaconBlockBody", "BeaconBlock", "SignedBeaconBlock",
]
