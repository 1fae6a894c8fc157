"""
Merkle Tree Unit Tests
Tests for merkle_core/merkle/tree.py and single proofs in merkle_core/merkle/proofs.py

Required behavior:
1. Root determinism - same leaves -> same root across runs
2. Padding correctness - odd levels pair the last node with itself
3. Proof verification - generate proof for each index, verify passes
4. Tamper detection - tampered sibling/leaf/root fails verification
5. Empty leaves - rejected with EmptyTreeError
6. Single leaf - root equals leaf, proof is empty
"""
import pytest

from merkle_core.crypto.hashing import hash_pair, keccak256, sha256, to_hex
from merkle_core.merkle import (
    InternalNode,
    LeafNode,
    MerkleTree,
    compute_tree_depth,
    level_sizes,
    process_proof,
    tree_size,
    verify_proof,
)
from merkle_core.schemas.errors import (
    CorruptedTreeError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    MalformedProofError,
)

from fixtures import (
    GOLDEN_LEAVES,
    GOLDEN_LEVEL_1,
    GOLDEN_LEVEL_2,
    GOLDEN_ROOT,
    golden_bytes,
    make_leaf_hashes,
)


@pytest.fixture
def golden_tree() -> MerkleTree:
    return MerkleTree.build(golden_bytes(GOLDEN_LEAVES))


class TestLevelArithmetic:
    """Tests for level_sizes / tree_size / compute_tree_depth."""

    @pytest.mark.parametrize(
        "count,sizes",
        [
            (1, [1]),
            (2, [2, 1]),
            (3, [3, 2, 1]),
            (5, [5, 3, 2, 1]),
            (8, [8, 4, 2, 1]),
            (9, [9, 5, 3, 2, 1]),
        ],
    )
    def test_level_sizes(self, count, sizes):
        assert level_sizes(count) == sizes
        assert tree_size(count) == sum(sizes)
        assert compute_tree_depth(count) == len(sizes) - 1

    def test_level_sizes_empty_raises(self):
        with pytest.raises(EmptyTreeError):
            level_sizes(0)


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_empty_leaves_raises(self):
        with pytest.raises(EmptyTreeError, match="no leaves"):
            MerkleTree.build([])

    def test_empty_tree_error_is_value_error(self):
        with pytest.raises(ValueError):
            MerkleTree.build([])


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = keccak256(b"single leaf")
        tree = MerkleTree.build([leaf])

        assert tree.root == leaf
        assert tree.depth == 0
        assert tree.size == 1

    def test_single_leaf_proof_is_empty(self):
        leaf = keccak256(b"only one")
        tree = MerkleTree.build([leaf])

        assert tree.get_proof(0) == []
        assert verify_proof(tree.root, leaf, [])


class TestGoldenTree:
    """Five-leaf allowlist: known node hashes."""

    def test_root(self, golden_tree):
        assert to_hex(golden_tree.root) == GOLDEN_ROOT

    def test_flat_node_array(self, golden_tree):
        expected = GOLDEN_LEAVES + GOLDEN_LEVEL_1 + GOLDEN_LEVEL_2 + [GOLDEN_ROOT]
        assert [to_hex(h) for h in golden_tree.hashes()] == expected

    def test_shape(self, golden_tree):
        assert golden_tree.leaf_count == 5
        assert len(golden_tree) == 5
        assert golden_tree.level_sizes == (5, 3, 2, 1)
        assert golden_tree.size == 11
        assert golden_tree.depth == 3

    def test_proof_for_index_2(self, golden_tree):
        proof = golden_tree.get_proof(2)

        assert [to_hex(h) for h in proof] == [
            GOLDEN_LEAVES[3],
            GOLDEN_LEVEL_1[0],
            GOLDEN_LEVEL_2[1],
        ]

    def test_proof_for_padded_leaf_repeats_itself(self, golden_tree):
        """Leaf 4 is paired with itself, then its parent is paired with itself."""
        proof = golden_tree.get_proof(4)

        assert [to_hex(h) for h in proof] == [
            GOLDEN_LEAVES[4],
            GOLDEN_LEVEL_1[2],
            GOLDEN_LEVEL_2[0],
        ]

    def test_every_proof_has_depth_entries(self, golden_tree):
        for i in range(5):
            assert len(golden_tree.get_proof(i)) == golden_tree.depth


class TestPadding:
    """Tests for the duplicate-last padding rule."""

    def test_three_leaves(self):
        a, b, c = make_leaf_hashes(3)
        tree = MerkleTree.build([a, b, c])

        expected = hash_pair(hash_pair(a, b), hash_pair(c, c))
        assert tree.root == expected

    def test_two_leaves(self):
        a, b = make_leaf_hashes(2)
        assert MerkleTree.build([a, b]).root == hash_pair(a, b)

    def test_odd_node_is_duplicated(self, golden_tree):
        node = golden_tree.node(7)
        assert isinstance(node, InternalNode)
        assert node.is_duplicated
        assert (node.left, node.right) == (4, 4)

    def test_padding_matches_explicit_copy(self):
        """[a, b, c] and [a, b, c, c] share a root but not a leaf count."""
        a, b, c = make_leaf_hashes(3)
        three = MerkleTree.build([a, b, c])
        four = MerkleTree.build([a, b, c, c])
        assert three.root == four.root
        assert three.leaf_count != four.leaf_count


class TestRootDeterminism:
    """Tests for deterministic root computation."""

    def test_same_leaves_same_root(self):
        leaves = make_leaf_hashes(7)
        assert MerkleTree.build(leaves).root == MerkleTree.build(list(leaves)).root

    def test_leaf_order_matters(self):
        leaves = make_leaf_hashes(4)
        reordered = [leaves[0], leaves[2], leaves[1], leaves[3]]
        assert MerkleTree.build(leaves).root != MerkleTree.build(reordered).root

    def test_sibling_swap_does_not_matter(self):
        """Sorted pair hashing: swapping two siblings keeps the root."""
        leaves = make_leaf_hashes(4)
        swapped = [leaves[1], leaves[0], leaves[2], leaves[3]]
        assert MerkleTree.build(leaves).root == MerkleTree.build(swapped).root

    def test_hash_algorithm_changes_root(self):
        leaves = make_leaf_hashes(4)
        assert MerkleTree.build(leaves, "keccak256").root != MerkleTree.build(leaves, "sha256").root

    def test_sha256_tree(self):
        a, b = make_leaf_hashes(2)
        low, high = sorted([a, b])
        assert MerkleTree.build([a, b], "sha256").root == sha256(low + high)


class TestInvalidInput:
    """Tests for rejected build input and lookups."""

    def test_short_leaf_rejected(self):
        with pytest.raises(InvalidArgumentError):
            MerkleTree.build([b"short"])

    def test_unknown_hash_rejected(self):
        with pytest.raises(ValueError, match="Unknown hash algorithm"):
            MerkleTree.build(make_leaf_hashes(2), "md5")

    @pytest.mark.parametrize("index", [5, -1, 100])
    def test_proof_index_out_of_range(self, golden_tree, index):
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            golden_tree.get_proof(index)
        assert exc_info.value.details.get("leaf_count") == 5

    def test_proof_index_must_be_int(self, golden_tree):
        with pytest.raises(IndexOutOfRangeError):
            golden_tree.get_proof(True)
        with pytest.raises(IndexError):
            golden_tree.get_proof("1")

    def test_node_array_length_checked(self, golden_tree):
        nodes = [golden_tree.node(i) for i in range(golden_tree.size - 1)]
        with pytest.raises(CorruptedTreeError):
            MerkleTree(nodes, golden_tree.level_sizes)


class TestSlotNavigation:
    """Tests for parent/sibling slot arithmetic."""

    def test_leaf_nodes(self, golden_tree):
        for i in range(5):
            node = golden_tree.node(i)
            assert isinstance(node, LeafNode)
            assert node.position == i
            assert golden_tree.is_leaf_slot(i)
        assert not golden_tree.is_leaf_slot(5)

    def test_parent_slots(self, golden_tree):
        assert golden_tree.parent_slot(0) == 5
        assert golden_tree.parent_slot(3) == 6
        assert golden_tree.parent_slot(4) == 7
        assert golden_tree.parent_slot(7) == 9
        assert golden_tree.parent_slot(9) == 10
        assert golden_tree.parent_slot(10) is None

    def test_sibling_slots(self, golden_tree):
        assert golden_tree.sibling_slot(0) == 1
        assert golden_tree.sibling_slot(1) == 0
        assert golden_tree.sibling_slot(4) == 4
        assert golden_tree.sibling_slot(7) == 7
        assert golden_tree.sibling_slot(8) == 9
        assert golden_tree.sibling_slot(10) is None

    def test_node_out_of_range(self, golden_tree):
        with pytest.raises(IndexOutOfRangeError):
            golden_tree.node(11)


class TestProofVerification:
    """Tests for single-proof verification."""

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 8, 13])
    def test_all_proofs_verify(self, count):
        leaves = make_leaf_hashes(count)
        tree = MerkleTree.build(leaves)

        for i, leaf in enumerate(leaves):
            proof = tree.get_proof(i)
            assert process_proof(leaf, proof) == tree.root
            assert verify_proof(tree.root, leaf, proof)

    def test_sha256_proofs_verify(self):
        leaves = make_leaf_hashes(6)
        tree = MerkleTree.build(leaves, "sha256")
        for i, leaf in enumerate(leaves):
            assert verify_proof(tree.root, leaf, tree.get_proof(i), "sha256")
            assert not verify_proof(tree.root, leaf, tree.get_proof(i), "keccak256")

    def test_proof_for_other_leaf_fails(self, golden_tree):
        leaves = golden_tree.leaf_hashes()
        assert not verify_proof(golden_tree.root, leaves[1], golden_tree.get_proof(2))


class TestTamperDetection:
    """Tests for tamper detection in proofs."""

    def test_any_byte_of_any_proof_element(self, golden_tree):
        leaf = golden_tree.leaf_hash(2)
        proof = golden_tree.get_proof(2)

        for element in range(len(proof)):
            for byte_index in range(32):
                tampered = list(proof)
                corrupted = bytearray(tampered[element])
                corrupted[byte_index] ^= 0x01
                tampered[element] = bytes(corrupted)
                assert not verify_proof(golden_tree.root, leaf, tampered)

    def test_tampered_leaf(self, golden_tree):
        proof = golden_tree.get_proof(2)
        assert not verify_proof(golden_tree.root, keccak256(b"forged"), proof)

    def test_tampered_root(self, golden_tree):
        proof = golden_tree.get_proof(2)
        assert not verify_proof(keccak256(b"other root"), golden_tree.leaf_hash(2), proof)

    def test_truncated_proof(self, golden_tree):
        proof = golden_tree.get_proof(2)
        assert not verify_proof(golden_tree.root, golden_tree.leaf_hash(2), proof[:-1])

    def test_malformed_element_raises_in_process(self, golden_tree):
        proof = golden_tree.get_proof(2)
        proof[1] = b"\x00" * 31
        with pytest.raises(MalformedProofError):
            process_proof(golden_tree.leaf_hash(2), proof)

    def test_malformed_element_rejected_by_verify(self, golden_tree):
        proof = golden_tree.get_proof(2)
        proof[1] = b"\x00" * 31
        assert verify_proof(golden_tree.root, golden_tree.leaf_hash(2), proof) is False


class TestValidateAndRender:
    """Tests for validate() and render()."""

    def test_built_tree_validates(self, golden_tree):
        golden_tree.validate()

    def test_tampered_internal_node_detected(self, golden_tree):
        nodes = [golden_tree.node(i) for i in range(golden_tree.size)]
        nodes[5] = InternalNode(hash=bytes(32), left=0, right=1)
        tampered = MerkleTree(nodes, golden_tree.level_sizes)

        with pytest.raises(CorruptedTreeError, match="Node 5"):
            tampered.validate()

    def test_miswired_node_detected(self, golden_tree):
        nodes = [golden_tree.node(i) for i in range(golden_tree.size)]
        original = nodes[6]
        nodes[6] = InternalNode(hash=original.hash, left=3, right=2)
        tampered = MerkleTree(nodes, golden_tree.level_sizes)

        with pytest.raises(CorruptedTreeError, match="wired"):
            tampered.validate()

    def test_render_lists_every_node(self, golden_tree):
        text = golden_tree.render()
        lines = text.splitlines()

        assert lines[0] == "level 3 (root)"
        assert lines[1] == f"  10) {GOLDEN_ROOT}  <- 8, 9"
        assert f"  7) {GOLDEN_LEVEL_1[2]}  <- 4, 4" in lines
        assert "level 0 (leaves)" in lines
        for h in GOLDEN_LEAVES:
            assert h in text
