"""
Builder
Constructs a MerkleTree from a complete leaf set.

Algorithm:
1. Hash every element independently, in order: leaf[i] = H(element[i])
2. Derive the layer above: node i = H(child[2i] || child[2i+1]), with the
   last child duplicated when the child layer has odd length
3. Repeat until a single-node layer (the root) is produced
4. Layers are stored root first

Edge cases:
- No elements: one empty leaf layer, no root
- One element: one layer, the leaf hash is the root

Determinism Notes:
- Leaf order is preserved exactly; nothing is sorted
- Identical leaf sequences always produce identical layers
"""
from __future__ import annotations

import logging
from typing import Sequence

from layertree.config.runtime import TreeConfig
from layertree.crypto.hashing import Element
from layertree.merkle.layers import (
    MerkleTree,
    check_invariants,
    derive_parent,
    parent_layer_length,
)


logger = logging.getLogger(__name__)


def build_parent_layer(layer: Sequence[bytes], algorithm: str) -> list[bytes]:
    """
    Derive the layer directly above `layer`.

    Example:
        [a, b, c] -> [H(a || b), H(c || c)]
    """
    return [
        derive_parent(layer, i, algorithm)
        for i in range(parent_layer_length(len(layer)))
    ]


def build(
    leaves: Sequence[Element],
    algorithm: str | None = None,
    config: TreeConfig | None = None,
) -> MerkleTree:
    """
    Build a Merkle tree from an ordered leaf set.

    Args:
        leaves: Elements to commit to (bytes, or str encoded as UTF-8)
        algorithm: Hash algorithm name; defaults to the config's
        config: Runtime configuration; defaults to get_default_config()

    Returns:
        A new MerkleTree

    Raises:
        TypeError: If an element is neither bytes nor str
    """
    tree = MerkleTree(algorithm=algorithm, config=config)

    current = [tree.leaf_hash(leaf) for leaf in leaves]
    layers = [current]
    while len(current) > 1:
        current = build_parent_layer(current, tree.algorithm)
        layers.insert(0, current)

    tree._layers = layers
    logger.debug(
        f"Built tree with {tree.leaf_count} leaves and {tree.layer_count} layers "
        f"({tree.algorithm})"
    )

    if tree.config.check_invariants:
        check_invariants(tree)
    return tree


__all__ = [
    "build",
    "build_parent_layer",
]
