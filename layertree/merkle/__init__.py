"""
Merkle Tree Engine
Layer store, builder, incremental updater and proof engine.

This package provides:
- MerkleTree: the layer store (root first, leaves last)
- build: construct a tree from a leaf set
- add_element / add_elements: append leaves in place
- generate_proof / verify_proof: inclusion proofs against the current root

Commitment Rules:
1. Leaf hashing: H(element), SHA3-256 by default
2. Parent hashing: H(left || right)
3. Padding: duplicate last node if odd number at any level
4. Empty tree: no root
5. Single leaf: root = leaf

Usage:
    from layertree.merkle import build, generate_proof, verify_proof

    tree = build([b"a", b"b", b"c"])
    tree.add_element(b"d")
    proof = generate_proof(tree, b"c")
    assert verify_proof(tree, b"c", proof.siblings, proof.index)
"""
from .layers import (
    MerkleTree,
    sibling_index,
    sibling_or_self,
    merkle_parent,
    derive_parent,
    parent_layer_length,
    check_invariants,
)
from .builder import build, build_parent_layer
from .updater import add_element, add_elements
from .proofs import (
    MerkleProof,
    generate_proof,
    compute_root_from_proof,
    verify_proof,
)


__all__ = [
    # Layer store
    "MerkleTree",
    "sibling_index",
    "sibling_or_self",
    "merkle_parent",
    "derive_parent",
    "parent_layer_length",
    "check_invariants",
    # Builder
    "build",
    "build_parent_layer",
    # Incremental updater
    "add_element",
    "add_elements",
    # Proofs
    "MerkleProof",
    "generate_proof",
    "compute_root_from_proof",
    "verify_proof",
]
