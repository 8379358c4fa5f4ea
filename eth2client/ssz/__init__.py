"""SSZ serialization and merkleization helpers."""

from remerkleable.core import View

from ..spec.types import ForkData


def encode(obj: View) -> bytes:
    """Encode an SSZ object to bytes."""
    return obj.encode_bytes()


def decode(cls: type[View], data: bytes) -> View:
    """Decode bytes into an SSZ object."""
    return cls.decode_bytes(data)


def hash_tree_root(obj: View) -> bytes:
    """Compute the hash tree root of an SSZ object."""
    return bytes(obj.hash_tree_root())


def compute_fork_data_root(current_version: bytes, genesis_validators_root: bytes) -> bytes:
    """Return the 32-byte fork data root for a fork version."""
    return hash_tree_root(ForkData(
        current_version=current_version,
        genesis_validators_root=genesis_validators_root,
    ))


def compute_domain(domain_type: bytes, fork_version: bytes, genesis_validators_root: bytes) -> bytes:
    """Return the 32-byte signing domain.

    Args:
        domain_type: 4-byte domain type
        fork_version: 4-byte fork version
        genesis_validators_root: 32-byte genesis validators root
    """
    if len(domain_type) != 4:
        raise ValueError(f"domain type must be 4 bytes, got {len(domain_type)}")
    fork_data_root = compute_fork_data_root(fork_version, genesis_validators_root)
    return bytes(domain_type) + fork_data_root[:28]


__all__ = ["encode", "decode", "hash_tree_root", "compute_fork_data_root", "compute_domain"]
