"""Phase 0 SSZ types."""

from .base import (
    Container, Vector, List,
    Bitlist,
    uint64,
    Bytes32, BLSPubkey, BLSSignature,
    Slot, Epoch, ValidatorIndex, Gwei, Root, Hash32,
    Checkpoint,
)
from ..constants import (
    DEPOSIT_CONTRACT_TREE_DEPTH,
    MAX_PROPOSER_SLASHINGS,
    MAX_ATTESTER_SLASHINGS,
    MAX_ATTESTATIONS,
    MAX_DEPOSITS,
    MAX_VOLUNTARY_EXITS,
    MAX_VALIDATORS_PER_COMMITTEE,
)


class AttestationData(Container):
    slot: Slot
    index: uint64  # CommitteeIndex, always 0 from Electra
    beacon_block_root: Root
    source: Checkpoint
    target: Checkpoint


class Eth1Data(Container):
    deposit_root: Root
    deposit_count: uint64
    block_hash: Hash32


class BeaconBlockHeader(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body_root: Root


class SignedBeaconBlockHeader(Container):
    message: BeaconBlockHeader
    signature: BLSSignature


class ProposerSlashing(Container):
    signed_header_1: SignedBeaconBlockHeader
    signed_header_2: SignedBeaconBlockHeader


class DepositData(Container):
    pubkey: BLSPubkey
    withdrawal_credentials: Bytes32
    amount: Gwei
    signature: BLSSignature


class Deposit(Container):
    proof: Vector[Bytes32, DEPOSIT_CONTRACT_TREE_DEPTH + 1]
    data: DepositData


class VoluntaryExit(Container):
    epoch: Epoch
    validator_index: ValidatorIndex


class SignedVoluntaryExit(Container):
    message: VoluntaryExit
    signature: BLSSignature


class Phase0Attestation(Container):
    aggregation_bits: Bitlist[MAX_VALIDATORS_PER_COMMITTEE()]
    data: AttestationData
    signature: BLSSignature


class Phase0IndexedAttestation(Container):
    attesting_indices: List[ValidatorIndex, MAX_VALIDATORS_PER_COMMITTEE()]
    data: AttestationData
    signature: BLSSignature


class Phase0AttesterSlashing(Container):
    attestation_1: Phase0IndexedAttestation
    attestation_2: Phase0IndexedAttestation


class Phase0BeaconBlockBody(Container):
    randao_reveal: BLSSignature
    eth1_data: Eth1Data
    graffiti: Bytes32
    proposer_slashings: List[ProposerSlashing, MAX_PROPOSER_SLASHINGS]
    attester_slashings: List[Phase0AttesterSlashing, MAX_ATTESTER_SLASHINGS]
    attestations: List[Phase0Attestation, MAX_ATTESTATIONS]
    deposits: List[Deposit, MAX_DEPOSITS]
    voluntary_exits: List[SignedVoluntaryExit, MAX_VOLUNTARY_EXITS]


class Phase0BeaconBlock(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body: Phase0BeaconBlockBody


class SignedPhase0BeaconBlock(Container):
    message: Phase0BeaconBlock
    signature: BLSSignature


__all__ = [
    "AttestationData",
    "Eth1Data",
    "BeaconBlockHeader",
    "SignedBeaconBlockHeader",
    "ProposerSlashing",
    "DepositData",
    "Deposit",
    "VoluntaryExit",
    "SignedVoluntaryExit",
    "Phase0Attestation",
    "Phase0IndexedAttestation",
    "Phase0AttesterSlashing",
    "Phase0BeaconBlockBody",
    "Phase0BeaconBlock",
    "SignedPhase0BeaconBlock",
]
