"""
Proof Engine Unit Tests
Tests for layertree/merkle/proofs.py

Covers:
1. Round trip - every element of a tree proves and verifies
2. Not found - absent elements yield None
3. Tamper detection - wrong sibling, element, index or length fails
4. Staleness - proofs taken before an insertion do not crash afterwards
5. Duplicate policy - first match vs. rejection
"""
import pytest

from layertree.crypto.hashing import sha3_256
from layertree.merkle import (
    MerkleProof,
    MerkleTree,
    build,
    compute_root_from_proof,
    generate_proof,
    verify_proof,
)
from layertree.schemas.errors import DuplicateLeafException

from fixtures.trees import make_elements


class TestRoundTrip:

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 7, 8, 9, 16, 21])
    def test_every_element_verifies(self, count):
        leaves = make_elements(count)
        tree = build(leaves)

        for i, leaf in enumerate(leaves):
            proof = generate_proof(tree, leaf)
            assert proof is not None
            assert proof.index == i
            assert verify_proof(tree, leaf, proof.siblings, proof.index)

    def test_proof_length_is_tree_height(self):
        tree = build(make_elements(5))

        proof = generate_proof(tree, b"element-4")

        assert len(proof) == tree.layer_count - 1

    def test_single_element_proof_is_empty(self):
        tree = build(["1"])

        proof = generate_proof(tree, "1")

        assert proof.siblings == ()
        assert proof.root == proof.leaf
        assert verify_proof(tree, "1", [], 0)

    def test_unpaired_leaf_uses_itself(self):
        tree = build(["1", "2", "3"])

        proof = generate_proof(tree, "3")

        assert proof.siblings[0] == sha3_256(b"3")
        assert proof.siblings[1] == sha3_256(sha3_256(b"1") + sha3_256(b"2"))

    def test_proof_snapshot_fields(self):
        tree = build(make_elements(6))

        proof = generate_proof(tree, b"element-3")

        assert proof.leaf == sha3_256(b"element-3")
        assert proof.root == tree.root_hash

    def test_accepts_proof_object(self):
        tree = build(make_elements(6))
        proof = generate_proof(tree, b"element-2")

        assert verify_proof(tree, b"element-2", proof)
        assert tree.verify_proof(b"element-2", proof.siblings, proof.index)

    def test_tree_method_accepts_proof_object(self):
        tree = build(make_elements(6))
        proof = tree.generate_proof(b"element-5")

        assert tree.verify_proof(b"element-5", proof)
        assert not tree.verify_proof(b"element-5", proof, 0)

    def test_incrementally_built_tree(self):
        leaves = make_elements(11)
        tree = MerkleTree()
        tree.add_elements(leaves)

        for leaf in leaves:
            proof = tree.generate_proof(leaf)
            assert tree.verify_proof(leaf, proof.siblings, proof.index)

    def test_compute_root_from_proof(self):
        tree = build(make_elements(7))
        proof = generate_proof(tree, b"element-6")

        root = compute_root_from_proof(proof.leaf, proof.index, proof.siblings)

        assert root == tree.root_hash


class TestNotFound:

    def test_absent_element_returns_none(self):
        tree = build(make_elements(4))

        assert generate_proof(tree, b"missing") is None

    def test_empty_tree_returns_none(self):
        assert generate_proof(build([]), b"anything") is None
        assert generate_proof(MerkleTree(), b"anything") is None

    def test_internal_node_is_not_a_leaf(self):
        tree = build(make_elements(4))
        internal = tree.layer_at(1)[0]

        assert tree.index_of(internal) is None


class TestVerificationFailures:

    def test_empty_tree_is_false(self):
        assert not verify_proof(build([]), b"x", [], 0)
        assert not verify_proof(MerkleTree(), b"x", [], 0)

    def test_wrong_element(self):
        tree = build(make_elements(4))
        proof = generate_proof(tree, b"element-1")

        assert not verify_proof(tree, b"element-2", proof.siblings, proof.index)

    def test_tampered_sibling(self):
        tree = build(make_elements(4))
        proof = generate_proof(tree, b"element-1")
        siblings = list(proof.siblings)
        siblings[0] = sha3_256(b"tampered")

        assert not verify_proof(tree, b"element-1", siblings, proof.index)

    def test_wrong_index(self):
        tree = build(make_elements(4))
        proof = generate_proof(tree, b"element-1")

        assert not verify_proof(tree, b"element-1", proof.siblings, 2)

    def test_negative_index(self):
        tree = build(make_elements(4))
        proof = generate_proof(tree, b"element-0")

        assert not verify_proof(tree, b"element-0", proof.siblings, -1)

    def test_truncated_and_extended_paths(self):
        tree = build(make_elements(8))
        proof = generate_proof(tree, b"element-3")

        assert not verify_proof(tree, b"element-3", proof.siblings[:-1], proof.index)
        extended = proof.siblings + (sha3_256(b"extra"),)
        assert not verify_proof(tree, b"element-3", extended, proof.index)

    def test_bare_siblings_need_index(self):
        tree = build(make_elements(2))

        with pytest.raises(TypeError, match="index"):
            verify_proof(tree, b"element-0", [])


class TestStaleProofs:

    def test_old_proof_after_insertion_is_boolean(self):
        leaves = make_elements(4)
        tree = build(leaves)
        proof = generate_proof(tree, leaves[0])

        tree.add_element(b"new")

        assert verify_proof(tree, leaves[0], proof.siblings, proof.index) is False

    def test_fresh_proof_after_insertion_verifies(self):
        leaves = make_elements(4)
        tree = build(leaves)
        tree.add_element(b"new")

        proof = generate_proof(tree, leaves[0])

        assert verify_proof(tree, leaves[0], proof.siblings, proof.index)


class TestDuplicateLeaves:

    def test_first_match_by_default(self):
        tree = build([b"a", b"dup", b"b", b"dup"])

        proof = generate_proof(tree, b"dup")

        assert proof.index == 1
        assert verify_proof(tree, b"dup", proof.siblings, proof.index)

    def test_duplicate_warning_logged(self, caplog):
        tree = build([b"dup", b"dup"])

        with caplog.at_level("WARNING", logger="layertree.merkle.layers"):
            generate_proof(tree, b"dup")

        assert "occurs 2 times" in caplog.text

    def test_reject_policy(self, reject_config):
        tree = build([b"a", b"dup", b"dup"], config=reject_config)

        with pytest.raises(DuplicateLeafException) as exc_info:
            generate_proof(tree, b"dup")
        assert exc_info.value.details["indices"] == [1, 2]

    def test_reject_policy_unique_element(self, reject_config):
        tree = build([b"a", b"dup", b"dup"], config=reject_config)

        assert generate_proof(tree, b"a").index == 0


class TestMerkleProofModel:

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            MerkleProof(index=-1, siblings=(), leaf=b"", root=b"")

    def test_siblings_stored_as_tuple(self):
        proof = MerkleProof(index=0, siblings=[b"x"], leaf=b"l", root=b"r")

        assert proof.siblings == (b"x",)

    def test_dict_round_trip(self):
        tree = build(make_elements(5))
        proof = generate_proof(tree, b"element-4")

        data = proof.to_dict()

        assert data["root"] == "0x" + tree.root_hash.hex()
        assert MerkleProof.from_dict(data) == proof
