"""Checks that a decoded response answers the request that was made.

A beacon node returning data for another slot, or with a RANDAO reveal or
graffiti other than the one supplied, is treated as faulty. Every failed
check raises InconsistentResultError.
"""

from typing import Optional

from ..exceptions import InconsistentResultError
from ..ssz import hash_tree_root
from .utils import to_hex


def check_proposal(
    proposal,
    slot: int,
    randao_reveal: bytes,
    graffiti: bytes,
    *,
    dvt_middleware: bool = False,
    kind: str = "beacon block proposal",
) -> None:
    """Check slot, RANDAO reveal and graffiti of a proposal.

    When connected through DVT middleware the middleware decides the RANDAO
    reveal and graffiti, so only the slot is checked.
    """
    if proposal.slot != slot:
        raise InconsistentResultError(
            f"{kind} not for requested slot (slot {proposal.slot}; expected {slot})"
        )
    if dvt_middleware:
        return

    if proposal.randao_reveal != bytes(randao_reveal):
        raise InconsistentResultError(
            f"{kind} has RANDAO reveal {to_hex(proposal.randao_reveal)}; "
            f"expected {to_hex(randao_reveal)}"
        )
    if proposal.graffiti != bytes(graffiti):
        raise InconsistentResultError(
            f"{kind} has graffiti {to_hex(proposal.graffiti)}; expected {to_hex(graffiti)}"
        )


def check_attestation_data(data, slot: int, committee_index: int) -> None:
    if int(data.slot) != slot:
        raise InconsistentResultError("attestation data not for requested slot")
    if int(data.index) != committee_index:
        raise InconsistentResultError("attestation data not for requested committee index")


def check_aggregate_attestation(
    attestation,
    slot: int,
    attestation_data_root: bytes,
) -> None:
    """Check the slot and attestation data root of an aggregate.

    The root is recomputed from the returned attestation data rather than
    trusted from the response.
    """
    data = attestation.attestation_data
    if int(data.slot) != slot:
        raise InconsistentResultError(
            f"aggregate attestation not for requested slot (slot {int(data.slot)}; expected {slot})"
        )
    root = hash_tree_root(data)
    if root != bytes(attestation_data_root):
        raise InconsistentResultError(
            f"aggregate attestation has data root {to_hex(root)}; "
            f"expected {to_hex(attestation_data_root)}"
        )


def check_block_root(block, root: Optional[bytes]) -> None:
    """Check a signed block hashes to the requested root, when one was given."""
    if root is None:
        return
    actual = block.root
    if actual != bytes(root):
        raise InconsistentResultError(
            f"beacon block has root {to_hex(actual)}; expected {to_hex(root)}"
        )


__all__ = [
    "check_proposal",
    "check_attestation_data",
    "check_aggregate_attestation",
    "check_block_root",
]
