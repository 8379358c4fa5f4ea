"""Tests for utilities, options, configuration and version helpers."""

import pytest

from eth2client.beacon_api.opts import (
    AggregateAttestationOpts,
    BlockOpts,
    ProposalOpts,
    SubmitAttestationsOpts,
)
from eth2client.beacon_api.utils import to_hex, url_for_call
from eth2client.config import ClientConfig, normalize_address
from eth2client.exceptions import InvalidOptionsError
from eth2client.spec.constants import INFINITY_SIGNATURE
from eth2client.version import identify_client, is_dvt_middleware, user_agent

from conftest import GRAFFITI, RANDAO_REVEAL


def test_to_hex():
    assert to_hex(b"\x01\xab") == "0x01ab"
    assert to_hex(bytearray(b"\xff")) == "0xff"
    assert to_hex(255) == "0xff"
    assert to_hex(1, length=4) == "0x00000001"


@pytest.mark.parametrize("base,endpoint,query,expected", [
    ("http://localhost:5052", "/eth/v1/node/version", "", "http://localhost:5052/eth/v1/node/version"),
    ("http://localhost:5052/", "eth/v1/node/version", "", "http://localhost:5052/eth/v1/node/version"),
    ("http://node/prefix", "/eth/v1/node/version", "", "http://node/prefix/eth/v1/node/version"),
    (
        "http://node?apikey=abc",
        "/eth/v3/validator/blocks/1",
        "randao_reveal=0x00&skip_randao_verification",
        "http://node/eth/v3/validator/blocks/1?apikey=abc&randao_reveal=0x00&skip_randao_verification",
    ),
])
def test_url_for_call(base, endpoint, query, expected):
    assert url_for_call(base, endpoint, query) == expected


def test_normalize_address():
    assert normalize_address("localhost:5052/") == "http://localhost:5052"
    assert normalize_address(" https://node.example ") == "https://node.example"


def test_config_validate():
    ClientConfig(address="localhost:5052").validate()
    with pytest.raises(InvalidOptionsError, match="no address specified"):
        ClientConfig().validate()
    with pytest.raises(InvalidOptionsError, match="timeout must be positive"):
        ClientConfig(address="localhost", timeout=0).validate()
    with pytest.raises(InvalidOptionsError, match="unknown log level verbose"):
        ClientConfig(address="localhost", log_level="verbose").validate()
    ClientConfig(address="localhost", log_level="debug").validate()


def test_config_headers():
    config = ClientConfig(address="localhost", extra_headers={"Authorization": "Bearer x"})
    assert config.headers["User-Agent"] == user_agent()
    assert config.headers["Authorization"] == "Bearer x"
    assert ClientConfig(user_agent="vc/1.0").headers["User-Agent"] == "vc/1.0"


def test_proposal_opts():
    ProposalOpts(slot=1, randao_reveal=RANDAO_REVEAL, graffiti=GRAFFITI).validate()
    with pytest.raises(InvalidOptionsError, match="no slot specified"):
        ProposalOpts(randao_reveal=RANDAO_REVEAL).validate()
    with pytest.raises(InvalidOptionsError, match="randao reveal must be 96 bytes"):
        ProposalOpts(slot=1, randao_reveal=b"\x00").validate()
    with pytest.raises(InvalidOptionsError, match="point at infinity"):
        ProposalOpts(slot=1, randao_reveal=RANDAO_REVEAL, skip_randao_verification=True).validate()
    ProposalOpts(slot=1, randao_reveal=INFINITY_SIGNATURE, skip_randao_verification=True).validate()


def test_other_opts():
    with pytest.raises(InvalidOptionsError, match="no block specified"):
        BlockOpts().validate()
    with pytest.raises(InvalidOptionsError, match="no attestation data root specified"):
        AggregateAttestationOpts(slot=1, attestation_data_root=b"\x00" * 32).validate()
    with pytest.raises(InvalidOptionsError, match="no attestations supplied"):
        SubmitAttestationsOpts().validate()


@pytest.mark.parametrize("node_version,name", [
    ("Lighthouse/v5.1.3-3058b96/x86_64-linux", "lighthouse"),
    ("teku/v24.4.0/linux-x86_64/-eclipseadoptium-openjdk64bitservervm-java-21", "teku"),
    ("Prysm/v5.0.3/ac8690d", "prysm"),
    ("somethingelse/v1", None),
])
def test_identify_client(node_version, name):
    assert identify_client(node_version) == name


def test_dvt_middleware():
    assert is_dvt_middleware("obolnetwork/charon/v1.0.0-abc")
    assert not is_dvt_middleware("Lighthouse/v5.1.3")
