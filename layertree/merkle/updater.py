"""
Incremental Updater
Appends one element to an existing MerkleTree in place.

Only the path from the new leaf to the root is touched, so an insertion
costs O(log n) hash computations instead of a full rebuild.

Algorithm:
1. Append H(element) to the leaf layer
2. One leaf: that hash is the whole tree
3. Two leaves: add a root layer H(leaf[0] || leaf[1])
4. Otherwise walk from the layer above the leaves up to the old root.
   At each level the expected length is ceil(len(child) / 2):
   - one node short: the new child node is unpaired, append
     H(last_child || last_child)
   - already long enough: overwrite the rightmost node with
     H(child[2k] || sibling_or_self(child, 2k))
5. If the old root layer now holds two nodes, add a new root above it

Padding placeholders H(x || x) are replaced as soon as the real right
sibling arrives, so after any sequence of insertions the layers equal
those produced by build() over the same elements.
"""
from __future__ import annotations

import logging
from typing import Iterable

from layertree.crypto.hashing import Element
from layertree.merkle.layers import (
    MerkleTree,
    check_invariants,
    derive_parent,
    merkle_parent,
    parent_layer_length,
)
from layertree.schemas.errors import TreeInvariantException


logger = logging.getLogger(__name__)


def _refresh_rightmost(layers: list[list[bytes]], level: int, algorithm: str) -> None:
    """Recompute (or create) the rightmost node of layers[level] from its child layer."""
    child = layers[level + 1]
    target = layers[level]

    expected = parent_layer_length(len(child))
    rightmost = expected - 1
    node = derive_parent(child, rightmost, algorithm)

    if len(target) == expected:
        target[rightmost] = node
    elif len(target) == expected - 1:
        target.append(node)
    else:
        raise TreeInvariantException(
            f"Layer {level} holds {len(target)} nodes, expected {expected - 1} or {expected}",
            layer_index=level,
        )


def add_element(tree: MerkleTree, element: Element) -> None:
    """
    Extend a tree by exactly one leaf, updating it in place.

    Args:
        tree: Tree to extend
        element: Element to append (bytes, or str encoded as UTF-8)

    Raises:
        TypeError: If element is neither bytes nor str
        TreeInvariantException: If the existing layers are inconsistent
    """
    algorithm = tree.algorithm
    leaf = tree.leaf_hash(element)

    layers = tree._layers
    if not layers:
        layers.append([])
    leaves = layers[-1]
    leaves.append(leaf)

    # A single leaf is already the root
    if len(leaves) == 2:
        layers.insert(0, [merkle_parent(leaves[0], leaves[1], algorithm)])
    elif len(leaves) > 2:
        if len(layers) < 2:
            raise TreeInvariantException(
                f"Tree with {len(leaves) - 1} leaves has no parent layer",
                layer_index=0,
            )
        for level in range(len(layers) - 2, -1, -1):
            _refresh_rightmost(layers, level, algorithm)

        top = layers[0]
        if len(top) == 2:
            layers.insert(0, [merkle_parent(top[0], top[1], algorithm)])

    logger.debug(
        f"Added leaf {len(leaves) - 1}; tree now has {tree.layer_count} layers"
    )

    if tree.config.check_invariants:
        check_invariants(tree)


def add_elements(tree: MerkleTree, elements: Iterable[Element]) -> None:
    """Append elements one at a time, in order."""
    for element in elements:
        add_element(tree, element)


__all__ = [
    "add_element",
    "add_elements",
]
