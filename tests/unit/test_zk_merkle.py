"""
Membership witness tests.
Tests for zk_merkle.py
"""
import pytest

from conftest import TOY_EMPTY_LEAF, ToyOracle, recompute_root
from merkle_errors import IndexOutOfRange
from merkle_tree import build_tree
from zk_merkle import MembershipWitness, membership_witness


@pytest.fixture
def toy_witness():
    tree = build_tree([1, 2, 3], 2, ToyOracle(), TOY_EMPTY_LEAF)
    return membership_witness(tree, 2)


class TestMembershipWitness:
    """Tests for witness collection."""

    def test_fields(self, toy_witness):
        assert toy_witness == MembershipWitness(
            leaf=3,
            leaf_index=2,
            root=9990,
            path_elements=(TOY_EMPTY_LEAF, 6),
            path_indices=(0, 1),
        )

    def test_padded_leaf(self):
        tree = build_tree([1, 2, 3], 2, ToyOracle(), TOY_EMPTY_LEAF)
        assert membership_witness(tree, 3).leaf == TOY_EMPTY_LEAF

    def test_recomputes_root(self, sha_oracle, commitments):
        tree = build_tree(commitments, 4, sha_oracle)
        for index in (0, 2, 7, 15):
            w = membership_witness(tree, index)
            assert recompute_root(sha_oracle, w.leaf, list(w.path_elements), w.leaf_index) == w.root

    def test_index_out_of_range(self):
        tree = build_tree([1], 1, ToyOracle(), TOY_EMPTY_LEAF)
        with pytest.raises(IndexOutOfRange):
            membership_witness(tree, 2)
        with pytest.raises(IndexOutOfRange):
            membership_witness(tree, -1)

    def test_frozen(self, toy_witness):
        with pytest.raises(AttributeError):
            toy_witness.root = 0


class TestCircuitInput:
    """Tests for circom-style input rendering."""

    def test_decimal(self, toy_witness):
        assert toy_witness.to_circuit_input() == {
            "leaf": "3",
            "root": "9990",
            "pathElements": ["9999", "6"],
            "pathIndices": ["0", "1"],
        }

    def test_hex(self, toy_witness):
        data = toy_witness.to_circuit_input(radix=16)

        assert data["root"] == hex(9990)
        assert data["pathElements"] == [hex(9999), "0x6"]
        assert data["pathIndices"] == ["0", "1"]

    def test_unsupported_radix(self, toy_witness):
        with pytest.raises(ValueError, match="radix"):
            toy_witness.to_circuit_input(radix=2)


class TestPySnark:
    """Conversion to PySNARK values (skipped without PySNARK)."""

    def test_to_pysnark(self, toy_witness):
        pytest.importorskip("pysnark.runtime")

        leaf, siblings, positions, root = toy_witness.to_pysnark()

        assert leaf.val() == 3
        assert [s.val() for s in siblings] == [TOY_EMPTY_LEAF, 6]
        assert positions == [0, 1]
        assert root.val() == 9990
