"""
Core cryptographic utilities.

Module 01 provides the hash primitives the accumulator is built on.
"""
from .hashing import (
    HashFunction,
    HASH_FUNCTIONS,
    sha256,
    hash_bytes,
    sha3_256,
    blake2b_256,
    get_hash_function,
    digest_size,
    to_hex,
    from_hex,
    hash_concat,
)

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
