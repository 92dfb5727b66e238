"""
Layer Store
Ordered sequence of hash layers, root first, leaves last.

Structure Rules (Hard Contracts):
1. No elements: either no layers or a single empty leaf layer
2. One element: a single layer holding that element's hash (it is the root)
3. Two or more elements: the leaf layer holds one hash per element in
   insertion order, every layer above has ceil(len(below) / 2) nodes,
   and layer 0 has exactly one node
4. Parent hashing: parent = H(left || right)
5. Padding rule: an unpaired rightmost node is paired with itself

The padding rule lives here once (sibling_or_self) and is shared by the
builder, the incremental updater and the proof engine.

Only the builder and updater write to MerkleTree._layers; everything
public on MerkleTree is read-only.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from layertree.config.runtime import TreeConfig, get_default_config
from layertree.crypto.hashing import Element, ensure_algorithm, hash_concat, hash_leaf
from layertree.schemas.errors import DuplicateLeafException, TreeInvariantException

if TYPE_CHECKING:
    from layertree.merkle.proofs import MerkleProof


logger = logging.getLogger(__name__)


def sibling_index(index: int) -> int:
    """Index of the node paired with `index` (flips the lowest bit)."""
    return index ^ 1


def sibling_or_self(layer: Sequence[bytes], index: int) -> bytes:
    """
    Return the hash paired with layer[index] when deriving its parent.

    Odd indices always have a left neighbour. An even index at the end of
    an odd-length layer has no right neighbour and is paired with itself.
    """
    sibling = sibling_index(index)
    if sibling < len(layer):
        return layer[sibling]
    return layer[index]


def merkle_parent(left: bytes, right: bytes, algorithm: str) -> bytes:
    """Compute the parent hash of two child nodes: H(left || right)."""
    return hash_concat(left, right, algorithm)


def derive_parent(layer: Sequence[bytes], parent_index: int, algorithm: str) -> bytes:
    """
    Compute node `parent_index` of the layer above `layer`.

    Left child is layer[2 * parent_index]; the right child follows the
    padding rule.
    """
    left_index = 2 * parent_index
    return merkle_parent(layer[left_index], sibling_or_self(layer, left_index), algorithm)


def parent_layer_length(child_length: int) -> int:
    """Number of nodes in the layer above a layer of `child_length` nodes."""
    return (child_length + 1) // 2


class MerkleTree:
    """
    Binary Merkle tree stored as a list of layers.

    Example:
        >>> tree = MerkleTree.from_leaves(["1", "2", "3"])
        >>> tree.layer_count
        3
        >>> tree.root_hash.hex()[:16]
        '62bc53b8ce6d0042'
    """

    def __init__(
        self,
        algorithm: str | None = None,
        config: TreeConfig | None = None,
    ) -> None:
        self.config = config or get_default_config()
        self.algorithm = ensure_algorithm(algorithm or self.config.hash_algorithm)
        self._layers: list[list[bytes]] = []

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def root_hash(self) -> Optional[bytes]:
        """The single hash of layer 0, or None when the tree has no elements."""
        if not self._layers or not self._layers[0]:
            return None
        return self._layers[0][0]

    @property
    def leaf_layer(self) -> Optional[tuple[bytes, ...]]:
        """The leaf hashes in insertion order, or None when empty."""
        if self.is_empty:
            return None
        return tuple(self._layers[-1])

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def leaf_count(self) -> int:
        if not self._layers:
            return 0
        return len(self._layers[-1])

    @property
    def is_empty(self) -> bool:
        return self.leaf_count == 0

    def layer_at(self, index: int) -> tuple[bytes, ...]:
        """
        Return a snapshot of one layer (0 = root layer).

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self._layers):
            raise IndexError(
                f"Layer index {index} out of range for {len(self._layers)} layers"
            )
        return tuple(self._layers[index])

    def layers(self) -> list[tuple[bytes, ...]]:
        """Snapshot of every layer, root first."""
        return [tuple(layer) for layer in self._layers]

    def leaf_hash(self, element: Element) -> bytes:
        """Hash an element the way this tree hashes its leaves."""
        return hash_leaf(element, self.algorithm)

    def index_of(self, element: Element) -> Optional[int]:
        """
        Locate an element among the leaves.

        Returns:
            The leaf index, or None if the element is not a leaf

        Raises:
            DuplicateLeafException: If the element occurs more than once
                and the duplicate policy is "reject"
        """
        if self.is_empty:
            return None

        target = self.leaf_hash(element)
        matches = [i for i, leaf in enumerate(self._layers[-1]) if leaf == target]
        if not matches:
            return None

        if len(matches) > 1:
            logger.warning(
                f"Element occurs {len(matches)} times among leaves (indices {matches})"
            )
            if self.config.duplicate_policy == "reject":
                raise DuplicateLeafException(
                    "Element occurs more than once; leaf index is ambiguous",
                    indices=matches,
                )
        return matches[0]

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        root = self.root_hash.hex() if self.root_hash is not None else None
        return (
            f"MerkleTree(algorithm={self.algorithm!r}, leaves={self.leaf_count}, "
            f"layers={self.layer_count}, root={root!r})"
        )

    # ------------------------------------------------------------------
    # Engine shortcuts
    # ------------------------------------------------------------------

    @classmethod
    def from_leaves(
        cls,
        leaves: Sequence[Element],
        algorithm: str | None = None,
        config: TreeConfig | None = None,
    ) -> "MerkleTree":
        """Build a tree from a leaf set. See builder.build()."""
        from layertree.merkle.builder import build
        return build(leaves, algorithm=algorithm, config=config)

    def add_element(self, element: Element) -> None:
        """Append one element in place. See updater.add_element()."""
        from layertree.merkle.updater import add_element
        add_element(self, element)

    def add_elements(self, elements: Iterable[Element]) -> None:
        """Append elements one at a time, in order."""
        from layertree.merkle.updater import add_elements
        add_elements(self, elements)

    def generate_proof(self, element: Element) -> Optional["MerkleProof"]:
        """Inclusion proof for an element, or None if absent."""
        from layertree.merkle.proofs import generate_proof
        return generate_proof(self, element)

    def verify_proof(
        self,
        element: Element,
        proof: Sequence[bytes] | "MerkleProof",
        index: int | None = None,
    ) -> bool:
        """Check an element against the current root. See proofs.verify_proof()."""
        from layertree.merkle.proofs import verify_proof
        return verify_proof(self, element, proof, index)


def check_invariants(tree: MerkleTree) -> None:
    """
    Validate the full layer structure of a tree.

    Recomputes every internal node, so this is O(n). Called after each
    mutation when TreeConfig.check_invariants is set.

    Raises:
        TreeInvariantException: On the first violation found
    """
    layers = tree._layers

    if tree.is_empty:
        if len(layers) > 1:
            raise TreeInvariantException(
                f"Empty tree must hold at most one layer, found {len(layers)}"
            )
        return

    if len(layers[0]) != 1:
        raise TreeInvariantException(
            f"Root layer must hold exactly one node, found {len(layers[0])}",
            layer_index=0,
        )

    for level in range(len(layers) - 1):
        child = layers[level + 1]
        expected = parent_layer_length(len(child))
        if len(layers[level]) != expected:
            raise TreeInvariantException(
                f"Layer {level} holds {len(layers[level])} nodes, expected {expected}",
                layer_index=level,
            )
        for i, node in enumerate(layers[level]):
            if node != derive_parent(child, i, tree.algorithm):
                raise TreeInvariantException(
                    f"Node {i} of layer {level} does not match its children",
                    layer_index=level,
                    details={"node_index": i},
                )


__all__ = [
    "MerkleTree",
    "sibling_index",
    "sibling_or_self",
    "merkle_parent",
    "derive_parent",
    "parent_layer_length",
    "check_invariants",
]
