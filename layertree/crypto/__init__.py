"""
Core cryptographic utilities.

Provides the hash primitives used throughout the tree engine.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    SUPPORTED_ALGORITHMS,
    HASH_SIZE,
    ensure_algorithm,
    to_bytes,
    hash_bytes,
    sha3_256,
    hash_leaf,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "HASH_SIZE",
    "ensure_algorithm",
    "to_bytes",
    "hash_bytes",
    "sha3_256",
    "hash_leaf",
    "hash_concat",
    "to_hex",
    "from_hex",
]
