# zk_merkle.py
"""
Membership witness for the Poseidon Merkle circuit.

Given a built tree and a leaf index, collect everything the prover passes to
the membership circuit:

- leaf           (private)  the commitment being proven
- path_elements  (private)  siblings from leaf level up to just below root
- path_indices   (public)   0 = node is LEFT child, 1 = RIGHT child, per level
- root           (public)   the tree root

The circuit walks up the tree: at level h it hashes (needle, sibling) when
path_indices[h] == 0 and (sibling, needle) when it is 1, then enforces the
result equals root. Verification itself is done by the circuit, not here.

Two output forms:
- to_circuit_input(): circom-style input dict of decimal / hex strings
- to_pysnark():       PySNARK PrivVal / PubVal values
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from hash_utils import FieldElement
from merkle_tree import MerkleTree, get_path_elements, get_path_indices


def _format(value: int, radix: int) -> str:
    if radix == 10:
        return str(value)
    if radix == 16:
        return hex(value)
    raise ValueError(f"Unsupported radix {radix}, use 10 or 16")


@dataclass(frozen=True)
class MembershipWitness:
    """
    Inputs proving that `leaf` sits at `leaf_index` under `root`.

    Attributes:
        leaf: the leaf value (EMPTY_LEAF for a padded slot)
        leaf_index: 0-based position in levels[0]
        root: the tree root
        path_elements: one sibling per level, leaf to root
        path_indices: bits of leaf_index, least significant first
    """
    leaf: FieldElement
    leaf_index: int
    root: FieldElement
    path_elements: Tuple[FieldElement, ...]
    path_indices: Tuple[int, ...]

    def to_circuit_input(self, radix: int = 10) -> Dict[str, Union[str, List[str]]]:
        """
        Render as a circom input object (field elements as strings).

        Args:
            radix: 10 for decimal strings, 16 for 0x-prefixed hex

        Returns:
            {"leaf": ..., "root": ..., "pathElements": [...], "pathIndices": [...]}
        """
        return {
            "leaf": _format(self.leaf, radix),
            "root": _format(self.root, radix),
            "pathElements": [_format(e, radix) for e in self.path_elements],
            "pathIndices": [str(bit) for bit in self.path_indices],
        }

    def to_pysnark(self):
        """
        Convert to PySNARK field values.

        - leaf and siblings become PrivVal (private witnesses)
        - root becomes PubVal (public input)
        - positions stay plain ints (public routing knowledge)

        Must be called inside a PySNARK recording context (@snark) for the
        values to become part of a proof.

        Returns:
            (leaf_priv, siblings_priv, positions, root_pub)
        """
        from pysnark.runtime import PrivVal, PubVal

        leaf_priv = PrivVal(self.leaf)
        siblings_priv = [PrivVal(s) for s in self.path_elements]
        root_pub = PubVal(self.root)
        return leaf_priv, siblings_priv, list(self.path_indices), root_pub


def membership_witness(tree: MerkleTree, leaf_index: int) -> MembershipWitness:
    """
    Collect the membership witness for the leaf at leaf_index.

    Raises:
        IndexOutOfRange: leaf_index outside [0, 2^height)
    """
    path = get_path_elements(tree, leaf_index, tree.height)
    return MembershipWitness(
        leaf=tree.levels[0][leaf_index],
        leaf_index=leaf_index,
        root=tree.root(),
        path_elements=tuple(path),
        path_indices=tuple(get_path_indices(leaf_index, tree.height)),
    )
