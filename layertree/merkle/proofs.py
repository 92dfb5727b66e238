"""
Proof Engine
Inclusion proof generation and verification against a MerkleTree.

Proof generation:
1. Locate H(element) in the leaf layer (duplicate handling follows
   TreeConfig.duplicate_policy)
2. For every layer below the root, record sibling_or_self(layer, index),
   then move up: index = index // 2

Verification:
1. Start from H(element)
2. For each sibling, bottom-up:
   - even index: hash = H(hash || sibling)
   - odd index:  hash = H(sibling || hash)
   - index = index // 2
3. Valid iff the result equals the tree's current root

A proof is a snapshot of the tree at generation time. Appending elements
may change the root, after which an older proof simply fails to verify.
Proof length is not checked separately; a short or long path produces a
mismatching hash.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from layertree.crypto.hashing import (
    DEFAULT_ALGORITHM,
    Element,
    from_hex,
    hash_leaf,
    to_hex,
)
from layertree.merkle.layers import MerkleTree, merkle_parent, sibling_or_self


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    Attributes:
        index: 0-based leaf index at generation time
        siblings: Sibling hashes from the leaf level up to (not including)
            the root
        leaf: The leaf hash being proven
        root: Root hash of the tree when the proof was generated
    """
    index: int
    siblings: tuple[bytes, ...]
    leaf: bytes
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        # Accept any sequence but store an immutable copy
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def __len__(self) -> int:
        return len(self.siblings)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with 0x-prefixed hex strings."""
        return {
            "index": self.index,
            "siblings": [to_hex(s) for s in self.siblings],
            "leaf": to_hex(self.leaf),
            "root": to_hex(self.root),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """Inverse of to_dict()."""
        return cls(
            index=int(data["index"]),
            siblings=tuple(from_hex(s) for s in data["siblings"]),
            leaf=from_hex(data["leaf"]),
            root=from_hex(data["root"]),
        )


def generate_proof(tree: MerkleTree, element: Element) -> Optional[MerkleProof]:
    """
    Generate an inclusion proof for an element.

    Args:
        tree: Tree to prove against
        element: Element whose inclusion is proven

    Returns:
        MerkleProof, or None if the element is not a leaf of the tree

    Raises:
        DuplicateLeafException: If the element occurs more than once and
            the duplicate policy is "reject"
    """
    leaf_index = tree.index_of(element)
    if leaf_index is None:
        logger.debug("Proof requested for an element that is not a leaf")
        return None

    siblings: list[bytes] = []
    index = leaf_index
    # Layer 0 is the root; walk from the leaves up to layer 1
    for level in range(tree.layer_count - 1, 0, -1):
        layer = tree._layers[level]
        siblings.append(sibling_or_self(layer, index))
        index //= 2

    logger.debug(f"Generated proof for leaf {leaf_index} with {len(siblings)} siblings")
    return MerkleProof(
        index=leaf_index,
        siblings=tuple(siblings),
        leaf=tree._layers[-1][leaf_index],
        root=tree.root_hash,
    )


def compute_root_from_proof(
    leaf: bytes,
    index: int,
    siblings: Sequence[bytes],
    algorithm: str = DEFAULT_ALGORITHM,
) -> bytes:
    """
    Recompute a root hash from a leaf hash and its sibling path.

    Args:
        leaf: Leaf hash (already hashed)
        index: Leaf index the path was generated for
        siblings: Sibling hashes, bottom-up
        algorithm: Hash algorithm name

    Returns:
        The root implied by the path
    """
    current = leaf
    for sibling in siblings:
        if index % 2 == 0:
            current = merkle_parent(current, sibling, algorithm)
        else:
            current = merkle_parent(sibling, current, algorithm)
        index //= 2
    return current


def verify_proof(
    tree: MerkleTree,
    element: Element,
    proof: Sequence[bytes] | MerkleProof,
    index: int | None = None,
) -> bool:
    """
    Verify that an element is included in the tree's current root.

    Args:
        tree: Tree whose current root is checked
        element: Element claimed to be a leaf
        proof: Sibling hashes (bottom-up), or a MerkleProof
        index: Leaf index; taken from the proof when a MerkleProof is given

    Returns:
        True if the recomputed root equals the tree's root; False if it
        differs, the tree is empty, or the index is negative
    """
    if isinstance(proof, MerkleProof):
        siblings: Sequence[bytes] = proof.siblings
        if index is None:
            index = proof.index
    else:
        siblings = proof

    if index is None:
        raise TypeError("verify_proof() needs a leaf index when given a bare sibling list")

    root = tree.root_hash
    if root is None or index < 0:
        return False

    leaf = hash_leaf(element, tree.algorithm)
    return compute_root_from_proof(leaf, index, siblings, tree.algorithm) == root


__all__ = [
    "MerkleProof",
    "generate_proof",
    "compute_root_from_proof",
    "verify_proof",
]
