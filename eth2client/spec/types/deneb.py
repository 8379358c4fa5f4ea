"""Deneb SSZ types (adds blobs and blob gas fields)."""

from .base import (
    Container, Vector, List,
    uint8, uint64, uint256,
    Bytes32, ByteVector, BLSSignature,
    Hash32, ExecutionAddress, Transaction,
    Slot, ValidatorIndex, Root, KZGCommitment, KZGProof,
)
from .phase0 import (
    Eth1Data, SignedBeaconBlockHeader,
    ProposerSlashing, Deposit, SignedVoluntaryExit,
    Phase0Attestation, Phase0AttesterSlashing,
)
from .altair import SyncAggregate
from .capella import Withdrawal, SignedBLSToExecutionChange
from ..constants import (
    BYTES_PER_LOGS_BLOOM,
    MAX_EXTRA_DATA_BYTES,
    MAX_TRANSACTIONS_PER_PAYLOAD,
    MAX_WITHDRAWALS_PER_PAYLOAD,
    MAX_BLS_TO_EXECUTION_CHANGES,
    MAX_BLOB_COMMITMENTS_PER_BLOCK,
    FIELD_ELEMENTS_PER_BLOB,
    BYTES_PER_FIELD_ELEMENT,
    KZG_COMMITMENT_INCLUSION_PROOF_DEPTH,
    MAX_PROPOSER_SLASHINGS,
    MAX_ATTESTER_SLASHINGS,
    MAX_ATTESTATIONS,
    MAX_DEPOSITS,
    MAX_VOLUNTARY_EXITS,
)

BYTES_PER_BLOB = FIELD_ELEMENTS_PER_BLOB * BYTES_PER_FIELD_ELEMENT


class Blob(ByteVector[BYTES_PER_BLOB]):
    pass


class BlobSidecar(Container):
    index: uint64
    blob: Blob
    kzg_commitment: KZGCommitment
    kzg_proof: KZGProof
    signed_block_header: SignedBeaconBlockHeader
    kzg_commitment_inclusion_proof: Vector[Bytes32, KZG_COMMITMENT_INCLUSION_PROOF_DEPTH()]


class ExecutionPayloadHeader(Container):
    """Deneb/Electra ExecutionPayloadHeader (with blob gas fields)."""
    parent_hash: Hash32
    fee_recipient: ExecutionAddress
    state_root: Bytes32
    receipts_root: Bytes32
    logs_bloom: ByteVector[BYTES_PER_LOGS_BLOOM]
    prev_randao: Bytes32
    block_number: uint64
    gas_limit: uint64
    gas_used: uint64
    timestamp: uint64
    extra_data: List[uint8, MAX_EXTRA_DATA_BYTES]
    base_fee_per_gas: uint256
    block_hash: Hash32
    transactions_root: Bytes32
    withdrawals_root: Bytes32
    blob_gas_used: uint64
    excess_blob_gas: uint64


class ExecutionPayload(Container):
    """Deneb/Electra ExecutionPayload (with blob gas fields)."""
    parent_hash: Hash32
    fee_recipient: ExecutionAddress
    state_root: Bytes32
    receipts_root: Bytes32
    logs_bloom: ByteVector[BYTES_PER_LOGS_BLOOM]
    prev_randao: Bytes32
    block_number: uint64
    gas_limit: uint64
    gas_used: uint64
    timestamp: uint64
    extra_data: List[uint8, MAX_EXTRA_DATA_BYTES]
    base_fee_per_gas: uint256
    block_hash: Hash32
    transactions: List[Transaction, MAX_TRANSACTIONS_PER_PAYLOAD]
    withdrawals: List[Withdrawal, MAX_WITHDRAWALS_PER_PAYLOAD()]
    blob_gas_used: uint64
    excess_blob_gas: uint64


class DenebBeaconBlockBody(Container):
    randao_reveal: BLSSignature
    eth1_data: Eth1Data
    graffiti: Bytes32
    proposer_slashings: List[ProposerSlashing, MAX_PROPOSER_SLASHINGS]
    attester_slashings: List[Phase0AttesterSlashing, MAX_ATTESTER_SLASHINGS]
    attestations: List[Phase0Attestation, MAX_ATTESTATIONS]
    deposits: List[Deposit, MAX_DEPOSITS]
    voluntary_exits: List[SignedVoluntaryExit, MAX_VOLUNTARY_EXITS]
    sync_aggregate: SyncAggregate
    execution_payload: ExecutionPayload
    bls_to_execution_changes: List[SignedBLSToExecutionChange, MAX_BLS_TO_EXECUTION_CHANGES]
    blob_kzg_commitments: List[KZGCommitment, MAX_BLOB_COMMITMENTS_PER_BLOCK()]


class DenebBeaconBlock(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body: DenebBeaconBlockBody


class SignedDenebBeaconBlock(Container):
    message: DenebBeaconBlock
    signature: BLSSignature


class DenebBlockContents(Container):
    """Unsigned proposal: the block plus the blobs it commits to."""
    block: DenebBeaconBlock
    kzg_proofs: List[KZGProof, MAX_BLOB_COMMITMENTS_PER_BLOCK()]
    blobs: List[Blob, MAX_BLOB_COMMITMENTS_PER_BLOCK()]


class SignedDenebBlockContents(Container):
    signed_block: SignedDenebBeaconBlock
    kzg_proofs: List[KZGProof, MAX_BLOB_COMMITMENTS_PER_BLOCK()]
    blobs: List[Blob, MAX_BLOB_COMMITMENTS_PER_BLOCK()]


class BlindedDenebBeaconBlockBody(Container):
    randao_reveal: BLSSignature
    eth1_data: Eth1Data
    graffiti: Bytes32
    proposer_slashings: List[ProposerSlashing, MAX_PROPOSER_SLASHINGS]
    attester_slashings: List[Phase0AttesterSlashing, MAX_ATTESTER_SLASHINGS]
    attestations: List[Phase0Attestation, MAX_ATTESTATIONS]
    deposits: List[Deposit, MAX_DEPOSITS]
    voluntary_exits: List[SignedVoluntaryExit, MAX_VOLUNTARY_EXITS]
    sync_aggregate: SyncAggregate
    execution_payload_header: ExecutionPayloadHeader
    bls_to_execution_changes: List[SignedBLSToExecutionChange, MAX_BLS_TO_EXECUTION_CHANGES]
    blob_kzg_commitments: List[KZGCommitment, MAX_BLOB_COMMITMENTS_PER_BLOCK()]


class BlindedDenebBeaconBlock(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body: BlindedDenebBeaconBlockBody


class SignedBlindedDenebBeaconBlock(Container):
    message: BlindedDenebBeaconBlock
    signature: BLSSignature


__all__ = [
    "BYTES_PER_BLOB",
    "Blob",
    "BlobSidecar",
    "ExecutionPayloadHeader",
    "ExecutionPayload",
    "DenebBeaconBlockBody",
    "DenebBeaconBlock",
    "SignedDenebBeaconBlock",
    "DenebBlockContents",
    "SignedDenebBlockContents",
    "BlindedDenebBeaconBlockBody",
    "BlindedDenebBeaconBlock",
    "SignedBlindedDenebBeaconBlock",
]
