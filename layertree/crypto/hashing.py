"""
Hashing Utilities
Hash primitives shared by the builder, updater and proof engine.

This module provides:
- Leaf hashing for raw elements: H(element)
- Parent hashing: H(left || right)
- Hex encoding/decoding with 0x prefix

Hashing Rules (Hard Contracts):
1. Default algorithm is SHA3-256; SHA-256 is the only alternative
2. Elements are hashed as-is, with no prefix, tag or salt
3. str elements are encoded as UTF-8 before hashing
4. Parent input is the left digest bytes followed by the right digest bytes
"""
from __future__ import annotations

import hashlib
from typing import Union

from layertree.schemas.errors import UnsupportedAlgorithmException


Element = Union[bytes, bytearray, memoryview, str]

DEFAULT_ALGORITHM = "sha3_256"
SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha3_256", "sha256")

# Both supported algorithms produce 32-byte digests
HASH_SIZE = 32


# Spellings accepted for each supported algorithm, keyed without "-" or "_"
_ALGORITHM_ALIASES: dict[str, str] = {
    "sha3256": "sha3_256",
    "sha256": "sha256",
}


def ensure_algorithm(algorithm: str) -> str:
    """
    Normalize and validate a hash algorithm name.

    Case, "-" and "_" are ignored, so "SHA3-256" means "sha3_256" and
    "SHA-256" means "sha256".

    Raises:
        UnsupportedAlgorithmException: If the algorithm is not supported
    """
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithmException(repr(algorithm), SUPPORTED_ALGORITHMS)
    key = algorithm.strip().lower().replace("-", "").replace("_", "")
    if key not in _ALGORITHM_ALIASES:
        raise UnsupportedAlgorithmException(algorithm, SUPPORTED_ALGORITHMS)
    return _ALGORITHM_ALIASES[key]


def to_bytes(element: Element) -> bytes:
    """
    Convert an element to the exact bytes that get hashed.

    Args:
        element: bytes-like object or str (UTF-8 encoded)

    Returns:
        Raw bytes

    Raises:
        TypeError: For any other type
    """
    if isinstance(element, bytes):
        return element
    if isinstance(element, (bytearray, memoryview)):
        return bytes(element)
    if isinstance(element, str):
        return element.encode("utf-8")
    raise TypeError(
        f"Element must be bytes or str, got {type(element).__name__}"
    )


def hash_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash raw bytes with the given algorithm.

    A fresh hash object is created per call.

    Args:
        data: Raw bytes to hash
        algorithm: One of SUPPORTED_ALGORITHMS

    Returns:
        32-byte digest
    """
    if algorithm == "sha3_256":
        return hashlib.sha3_256(data).digest()
    if algorithm == "sha256":
        return hashlib.sha256(data).digest()
    raise UnsupportedAlgorithmException(algorithm, SUPPORTED_ALGORITHMS)


def sha3_256(data: bytes) -> bytes:
    """
    Compute SHA3-256 hash of raw bytes.

    Example:
        >>> sha3_256(b"1").hex()
        '67b176705b46206614219f47a05aee7ae6a3edbe850bbbe214c536b989aea4d2'
    """
    return hashlib.sha3_256(data).digest()


def hash_leaf(element: Element, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Compute the leaf hash of one element: H(element).

    Args:
        element: Element to hash (str is UTF-8 encoded)
        algorithm: Hash algorithm name

    Returns:
        32-byte leaf hash
    """
    return hash_bytes(to_bytes(element), algorithm)


def hash_concat(left: bytes, right: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash the concatenation of two digests: H(left || right).

    This is the parent hash for every internal node.
    """
    return hash_bytes(left + right, algorithm)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
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

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "Element",
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
