"""Beacon API response and event data types."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..spec.json_codec import from_json, parse_hex, to_json
from ..spec.types import SignedBeaconBlockHeader
from .utils import to_hex


def _root(value: str, name: str) -> bytes:
    data = parse_hex(value, name)
    if len(data) != 32:
        raise ValueError(f"{name}: expected 32 bytes, got {len(data)}")
    return data


def _uint(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{name}: expected quoted integer")
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"invalid value for {name}") from None
    if number < 0:
        raise ValueError(f"invalid value for {name}")
    return number


@dataclass
class Genesis:
    """Response from /eth/v1/beacon/genesis."""

    genesis_time: datetime
    genesis_validators_root: bytes
    genesis_fork_version: bytes

    @classmethod
    def from_dict(cls, data: dict) -> "Genesis":
        fork_version = parse_hex(data["genesis_fork_version"], "genesis_fork_version")
        if len(fork_version) != 4:
            raise ValueError("genesis_fork_version: expected 4 bytes")
        return cls(
            genesis_time=datetime.fromtimestamp(
                _uint(data["genesis_time"], "genesis_time"), tz=timezone.utc
            ),
            genesis_validators_root=_root(data["genesis_validators_root"], "genesis_validators_root"),
            genesis_fork_version=fork_version,
        )

    def to_dict(self) -> dict:
        return {
            "genesis_time": str(int(self.genesis_time.timestamp())),
            "genesis_validators_root": to_hex(self.genesis_validators_root),
            "genesis_fork_version": to_hex(self.genesis_fork_version),
        }


@dataclass
class DepositContract:
    """Response from /eth/v1/config/deposit_contract."""

    chain_id: int
    address: bytes

    @classmethod
    def from_dict(cls, data: dict) -> "DepositContract":
        address = parse_hex(data["address"], "address")
        if len(address) != 20:
            raise ValueError("address: expected 20 bytes")
        return cls(chain_id=_uint(data["chain_id"], "chain_id"), address=address)

    def to_dict(self) -> dict:
        return {"chain_id": str(self.chain_id), "address": to_hex(self.address)}


@dataclass
class SyncState:
    """Response from /eth/v1/node/syncing."""

    head_slot: int
    sync_distance: int
    is_syncing: bool
    is_optimistic: bool = False
    el_offline: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "SyncState":
        if "head_slot" not in data:
            raise ValueError("head slot missing")
        if "sync_distance" not in data:
            raise ValueError("sync distance missing")
        return cls(
            head_slot=_uint(data["head_slot"], "head slot"),
            sync_distance=_uint(data["sync_distance"], "sync distance"),
            is_syncing=bool(data.get("is_syncing", False)),
            is_optimistic=bool(data.get("is_optimistic", False)),
            el_offline=bool(data.get("el_offline", False)),
        )

    def to_dict(self) -> dict:
        return {
            "head_slot": str(self.head_slot),
            "sync_distance": str(self.sync_distance),
            "is_syncing": self.is_syncing,
            "is_optimistic": self.is_optimistic,
            "el_offline": self.el_offline,
        }


@dataclass
class NodeVersion:
    version: str

    @classmethod
    def from_dict(cls, data: dict) -> "NodeVersion":
        if not isinstance(data.get("version"), str):
            raise ValueError("version missing")
        return cls(version=data["version"])

    def to_dict(self) -> dict:
        return {"version": self.version}


@dataclass
class BlockRoot:
    root: bytes

    @classmethod
    def from_dict(cls, data: dict) -> "BlockRoot":
        return cls(root=_root(data["root"], "root"))

    def to_dict(self) -> dict:
        return {"root": to_hex(self.root)}


@dataclass
class BeaconBlockHeader:
    """Response from /eth/v1/beacon/headers/{block_id}."""

    root: bytes
    canonical: bool
    header: SignedBeaconBlockHeader

    @classmethod
    def from_dict(cls, data: dict) -> "BeaconBlockHeader":
        return cls(
            root=_root(data["root"], "root"),
            canonical=bool(data.get("canonical", False)),
            header=from_json(SignedBeaconBlockHeader, data["header"]),
        )

    @property
    def slot(self) -> int:
        return int(self.header.message.slot)

    def to_dict(self) -> dict:
        return {
            "root": to_hex(self.root),
            "canonical": self.canonical,
            "header": to_json(self.header),
        }


# Events

@dataclass
class HeadEvent:
    slot: int
    block: bytes
    state: bytes
    epoch_transition: bool
    current_duty_dependent_root: Optional[bytes] = None
    previous_duty_dependent_root: Optional[bytes] = None

    @classmethod
    def from_dict(cls, data: dict) -> "HeadEvent":
        return cls(
            slot=_uint(data["slot"], "slot"),
            block=_root(data["block"], "block"),
            state=_root(data["state"], "state"),
            epoch_transition=bool(data.get("epoch_transition", False)),
            current_duty_dependent_root=(
                _root(data["current_duty_dependent_root"], "current_duty_dependent_root")
                if data.get("current_duty_dependent_root")
                else None
            ),
            previous_duty_dependent_root=(
                _root(data["previous_duty_dependent_root"], "previous_duty_dependent_root")
                if data.get("previous_duty_dependent_root")
                else None
            ),
        )

    def to_dict(self) -> dict:
        result = {
            "slot": str(self.slot),
            "block": to_hex(self.block),
            "state": to_hex(self.state),
            "epoch_transition": self.epoch_transition,
        }
        if self.current_duty_dependent_root is not None:
            result["current_duty_dependent_root"] = to_hex(self.current_duty_dependent_root)
        if self.previous_duty_dependent_root is not None:
            result["previous_duty_dependent_root"] = to_hex(self.previous_duty_dependent_root)
        return result


@dataclass
class BlockEvent:
    slot: int
    block: bytes
    execution_optimistic: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "BlockEvent":
        return cls(
            slot=_uint(data["slot"], "slot"),
            block=_root(data["block"], "block"),
            execution_optimistic=bool(data.get("execution_optimistic", False)),
        )

    def to_dict(self) -> dict:
        return {
            "slot": str(self.slot),
            "block": to_hex(self.block),
            "execution_optimistic": self.execution_optimistic,
        }


@dataclass
class FinalizedCheckpointEvent:
    block: bytes
    state: bytes
    epoch: int

    @classmethod
    def from_dict(cls, data: dict) -> "FinalizedCheckpointEvent":
        return cls(
            block=_root(data["block"], "block"),
            state=_root(data["state"], "state"),
            epoch=_uint(data["epoch"], "epoch"),
        )

    def to_dict(self) -> dict:
        return {"block": to_hex(self.block), "state": to_hex(self.state), "epoch": str(self.epoch)}


@dataclass
class ChainReorgEvent:
    slot: int
    depth: int
    old_head_block: bytes
    new_head_block: bytes
    old_head_state: bytes
    new_head_state: bytes
    epoch: int

    @classmethod
    def from_dict(cls, data: dict) -> "ChainReorgEvent":
        return cls(
            slot=_uint(data["slot"], "slot"),
            depth=_uint(data["depth"], "depth"),
            old_head_block=_root(data["old_head_block"], "old_head_block"),
            new_head_block=_root(data["new_head_block"], "new_head_block"),
            old_head_state=_root(data["old_head_state"], "old_head_state"),
            new_head_state=_root(data["new_head_state"], "new_head_state"),
            epoch=_uint(data["epoch"], "epoch"),
        )

    def to_dict(self) -> dict:
        return {
            "slot": str(self.slot),
            "depth": str(self.depth),
            "old_head_block": to_hex(self.old_head_block),
            "new_head_block": to_hex(self.new_head_block),
            "old_head_state": to_hex(self.old_head_state),
            "new_head_state": to_hex(self.new_head_state),
            "epoch": str(self.epoch),
        }


@dataclass
class Event:
    """A decoded event from the /eth/v1/events stream."""

    topic: str
    data: object


__all__ = [
    "Genesis",
    "DepositContract",
    "SyncState",
    "NodeVersion",
    "BlockRoot",
    "BeaconBlockHeader",
    "HeadEvent",
    "BlockEvent",
    "FinalizedCheckpointEvent",
    "ChainReorgEvent",
    "Event",
]
