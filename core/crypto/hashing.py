"""
Module 01 - Hashing Utilities
Hash primitives consumed by the streaming Merkle accumulator.

Owner: Protocol/Crypto Engineer
Module ID: M01

This module provides:
- SHA-256 hashing for raw bytes
- Parent hashing over concatenated child digests
- A small registry of fixed-width 32-byte hash functions
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Digests are raw bytes; hex is for display only
- Concatenation uses no separator, so every digest must have the same width
"""
from __future__ import annotations

import hashlib
from typing import Callable


HashFunction = Callable[[bytes], bytes]


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_bytes(data: bytes) -> bytes:
    """
    Alias for sha256() - compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return sha256(data)


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256 hash of raw bytes (32 bytes)."""
    return hashlib.sha3_256(data).digest()


def blake2b_256(data: bytes) -> bytes:
    """Compute BLAKE2b hash of raw bytes truncated to a 32-byte digest."""
    return hashlib.blake2b(data, digest_size=32).digest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha256": sha256,
    "sha3_256": sha3_256,
    "blake2b_256": blake2b_256,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a registered hash function by name.

    Args:
        name: One of the keys of HASH_FUNCTIONS (case-insensitive)

    Returns:
        The hash function

    Raises:
        ValueError: If the name is not registered
    """
    key = name.strip().lower()
    if key not in HASH_FUNCTIONS:
        raise ValueError(
            f"Unknown hash algorithm {name!r}, expected one of {sorted(HASH_FUNCTIONS)}"
        )
    return HASH_FUNCTIONS[key]


def digest_size(hash_fn: HashFunction) -> int:
    """Return the output width of a hash function by hashing empty input."""
    return len(hash_fn(b""))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    # Decode (will raise ValueError for invalid hex chars)
    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_concat(left: bytes, right: bytes, hash_fn: HashFunction = sha256) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = H(left + right)

    Args:
        left: Left child digest
        right: Right child digest
        hash_fn: Hash function to apply (default: sha256)

    Returns:
        Digest of the concatenation
    """
    return hash_fn(left + right)


__all__ = [
    "HashFunction",
    "HASH_FUNCTIONS",
    "sha256",
    "hash_bytes",
    "sha3_256",
    "blake2b_256",
    "get_hash_function",
    "digest_size",
    "to_hex",
    "from_hex",
    "hash_concat",
]
