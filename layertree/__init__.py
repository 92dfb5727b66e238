"""
layertree - Layered Merkle Hash Tree

Binary Merkle tree over ordered byte elements with:
- full construction from a leaf set
- O(log n) incremental append
- inclusion proof generation and verification

Usage:
    from layertree import build, generate_proof, verify_proof

    tree = build(["1", "2", "3"])
    tree.add_element("4")
    proof = generate_proof(tree, "2")
    assert verify_proof(tree, "2", proof.siblings, proof.index)
"""
from .merkle import (
    MerkleTree,
    MerkleProof,
    build,
    add_element,
    add_elements,
    generate_proof,
    verify_proof,
)

__version__ = "0.1.0"

__all__ = [
    "MerkleTree",
    "MerkleProof",
    "build",
    "add_element",
    "add_elements",
    "generate_proof",
    "verify_proof",
]
