"""Typed view of /eth/v1/config/spec.

The endpoint returns every value as a string. parse_spec() turns domains and
fork versions into 4-byte values, other hex into bytes, times and durations
into datetime/timedelta, and decimal strings into ints.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..spec import constants
from ..spec.forks import FORKS, ConsensusVersion

# Domain types some nodes leave out of their spec.
DEFAULT_DOMAINS = {
    "DOMAIN_APPLICATION_MASK": constants.DOMAIN_APPLICATION_MASK,
    "DOMAIN_BLS_TO_EXECUTION_CHANGE": constants.DOMAIN_BLS_TO_EXECUTION_CHANGE,
    "DOMAIN_APPLICATION_BUILDER": constants.DOMAIN_APPLICATION_BUILDER,
}


def _hex_bytes(value: str) -> Optional[bytes]:
    if not value.startswith("0x"):
        return None
    try:
        return bytes.fromhex(value[2:])
    except ValueError:
        return None


def _fixed(data: bytes, length: int) -> bytes:
    return data[:length].ljust(length, b"\x00")


def _uint(value: str) -> Optional[int]:
    if not value.isdigit():
        return None
    return int(value)


def parse_spec_value(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value

    if key.startswith("DOMAIN_") or key.endswith("_FORK_VERSION"):
        data = _hex_bytes(value)
        if data is not None:
            return _fixed(data, 4)

    data = _hex_bytes(value)
    if data is not None:
        return data

    number = _uint(value)
    if key.endswith("_TIME") and number:
        return datetime.fromtimestamp(number, tz=timezone.utc)
    if (key.startswith("SECONDS_PER_") or key == "GENESIS_DELAY") and number:
        return timedelta(seconds=number)
    if number is not None:
        return number
    return value


def parse_spec(raw: dict[str, Any]) -> dict[str, Any]:
    """Parse the string values of a node's spec, adding missing domain types."""
    config = {key: parse_spec_value(key, value) for key, value in raw.items()}
    for key, default in DEFAULT_DOMAINS.items():
        config.setdefault(key, default)
    return config


def fork_epochs(spec: dict[str, Any]) -> dict[ConsensusVersion, int]:
    """Activation epoch of every fork the spec schedules.

    Phase0 is always at epoch 0. Forks whose epoch is missing are left out.
    """
    epochs = {ConsensusVersion.PHASE0: 0}
    for fork in FORKS[1:]:
        epoch = spec.get(fork.fork_epoch_key)
        if isinstance(epoch, int) and not isinstance(epoch, bool):
            epochs[fork] = epoch
    return epochs


def consensus_version_at_epoch(spec: dict[str, Any], epoch: int) -> ConsensusVersion:
    """Latest fork active at `epoch` according to the spec."""
    version = ConsensusVersion.PHASE0
    for fork, fork_epoch in fork_epochs(spec).items():
        if fork_epoch <= epoch and fork > version:
            version = fork
    return version


def slots_per_epoch(spec: dict[str, Any]) -> int:
    value = spec.get("SLOTS_PER_EPOCH")
    if isinstance(value, int) and value > 0:
        return value
    return constants.SLOTS_PER_EPOCH()


__all__ = [
    "parse_spec",
    "parse_spec_value",
    "fork_epochs",
    "consensus_version_at_epoch",
    "slots_per_epoch",
    "DEFAULT_DOMAINS",
]
