"""Pytest configuration for eth2client tests."""

import sys

import pytest


def pytest_addoption(parser):
    """Add command line options for the test suite."""
    parser.addoption(
        "--preset",
        action="store",
        default="minimal",
        choices=["minimal", "mainnet"],
        help="Preset to use for tests (minimal or mainnet)",
    )


def pytest_configure(config):
    """Set preset BEFORE any imports happen during test collection.

    SSZ types use Vector[T, N()] where N() is evaluated at class definition
    time, so the preset must be set before any type module is imported.
    """
    preset = config.getoption("--preset", default="minimal")

    for mod in [name for name in sys.modules if name.startswith("eth2client.spec.types")]:
        del sys.modules[mod]

    from eth2client.spec.constants import set_preset as do_set_preset
    do_set_preset(preset)


@pytest.fixture(scope="session")
def preset(request):
    """Return the preset being used."""
    return request.config.getoption("--preset")


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


RANDAO_REVEAL = bytes.fromhex("a1" * 96)
GRAFFITI = b"eth2client".ljust(32, b"\x00")
PARENT_ROOT = bytes.fromhex("11" * 32)
STATE_ROOT = bytes.fromhex("22" * 32)
GENESIS_VALIDATORS_ROOT = bytes.fromhex("4b363db94e286120d76eb905340fdd4e54bfe9f06bf33ff6cf5ad27f511bfe95")


def make_block(block_cls, slot=100, randao_reveal=RANDAO_REVEAL, graffiti=GRAFFITI, proposer_index=7):
    """Build a block of `block_cls` with the given proposal fields."""
    body_cls = block_cls.fields()["body"]
    body = body_cls(randao_reveal=randao_reveal, graffiti=graffiti)
    return block_cls(
        slot=slot,
        proposer_index=proposer_index,
        parent_root=PARENT_ROOT,
        state_root=STATE_ROOT,
        body=body,
    )


def make_proposal(version, slot=100, randao_reveal=RANDAO_REVEAL, graffiti=GRAFFITI, blinded=False):
    """Build the proposal payload served for `version` (block or block contents)."""
    from eth2client.beacon_api.versioned import BLINDED_PROPOSAL_TYPES, PROPOSAL_TYPES

    typ = (BLINDED_PROPOSAL_TYPES if blinded else PROPOSAL_TYPES)[version]
    fields = typ.fields()
    if "block" in fields:
        block = make_block(fields["block"], slot, randao_reveal, graffiti)
        return typ(block=block)
    return make_block(typ, slot, randao_reveal, graffiti)


def make_attestation_data(slot=100, index=0):
    from eth2client.spec.types import AttestationData, Checkpoint

    return AttestationData(
        slot=slot,
        index=index,
        beacon_block_root=PARENT_ROOT,
        source=Checkpoint(epoch=2, root=STATE_ROOT),
        target=Checkpoint(epoch=3, root=PARENT_ROOT),
    )
