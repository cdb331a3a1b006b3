# merkle_tree.py
"""
Fixed-height binary Merkle tree over field elements.

This is the off-circuit part: the tree is built and Merkle openings are
extracted in plain Python, exactly the way the membership circuit expects
to recompute them.

Layout (height = 2, leaves [A, B, C]):

                 root            levels[2]
               /      \
             N0        N1        levels[1]
            /  \      /  \
           A    B    C    E      levels[0]   (E = EMPTY_LEAF padding)

- levels[0] always has 2^height entries; missing leaves are EMPTY_LEAF
- levels[y][x] = H(levels[y-1][2x], levels[y-1][2x+1]) (even = left)
- levels[height][0] = root
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from hash_utils import EMPTY_LEAF, FieldElement, HashOracle, check_field_element
from merkle_errors import CapacityExceeded, IndexOutOfRange, InvalidHeight, MalformedTree

logger = logging.getLogger(__name__)


def _check_height(height: object) -> int:
    if isinstance(height, bool) or not isinstance(height, int) or height < 1:
        raise InvalidHeight(f"Tree height must be a positive integer, got {height!r}", {"height": height})
    return height


def _check_leaf_index(leaf_index: object, height: int) -> int:
    capacity = 2 ** height
    if isinstance(leaf_index, bool) or not isinstance(leaf_index, int) or not 0 <= leaf_index < capacity:
        raise IndexOutOfRange(
            f"Leaf index {leaf_index!r} out of range [0, {capacity})",
            {"leaf_index": leaf_index, "capacity": capacity},
        )
    return leaf_index


class MerkleTree:
    """
    Complete, immutable binary Merkle tree of a fixed height.

    - levels[0] = padded leaves (2^height entries)
    - levels[y] = parents of levels[y-1] (2^(height-y) entries)
    - levels[height][0] = root

    Build it with MerkleTree.build(...) / build_tree(...). The constructor
    only wraps precomputed levels and checks their shape.
    """

    def __init__(self, levels: Sequence[Sequence[FieldElement]], num_leaves: Optional[int] = None) -> None:
        if len(levels) < 2:
            raise MalformedTree(
                f"Tree needs at least 2 levels, got {len(levels)}", {"levels": len(levels)}
            )
        height = len(levels) - 1
        for y, level in enumerate(levels):
            expected = 2 ** (height - y)
            if len(level) != expected:
                raise MalformedTree(
                    f"Level {y} has {len(level)} nodes, expected {expected} for height {height}",
                    {"level": y, "size": len(level), "expected": expected},
                )

        if num_leaves is None:
            num_leaves = 2 ** height
        elif isinstance(num_leaves, bool) or not isinstance(num_leaves, int) or not 0 <= num_leaves <= 2 ** height:
            raise MalformedTree(
                f"num_leaves {num_leaves!r} outside [0, {2 ** height}] for height {height}",
                {"num_leaves": num_leaves, "capacity": 2 ** height},
            )

        self._levels: Tuple[Tuple[FieldElement, ...], ...] = tuple(tuple(level) for level in levels)
        self._height = height
        # Number of real (non-padding) leaves, when known
        self._num_leaves = num_leaves

    @property
    def levels(self) -> Tuple[Tuple[FieldElement, ...], ...]:
        return self._levels

    @property
    def height(self) -> int:
        return self._height

    @property
    def capacity(self) -> int:
        return 2 ** self._height

    @property
    def num_leaves(self) -> int:
        return self._num_leaves

    @classmethod
    def build(
        cls,
        leaves: Iterable[FieldElement],
        height: int,
        oracle: HashOracle,
        empty_leaf: FieldElement = EMPTY_LEAF,
    ) -> "MerkleTree":
        return build_tree(leaves, height, oracle, empty_leaf)

    def root(self) -> FieldElement:
        """
        Return the root hash of the tree (a field element).
        """
        return self.levels[self.height][0]

    def leaf(self, index: int) -> FieldElement:
        """Leaf at index (EMPTY_LEAF for padded slots)."""
        return self.levels[0][_check_leaf_index(index, self.height)]

    def path_elements(self, index: int) -> List[FieldElement]:
        return get_path_elements(self, index, self.height)

    def path_indices(self, index: int) -> List[int]:
        return get_path_indices(index, self.height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self.levels == other.levels

    def __hash__(self) -> int:
        return hash(self.levels)

    def __repr__(self) -> str:
        return f"MerkleTree(height={self.height}, num_leaves={self.num_leaves}, root={self.root()})"


def build_tree(
    leaves: Iterable[FieldElement],
    height: int,
    oracle: HashOracle,
    empty_leaf: FieldElement = EMPTY_LEAF,
) -> MerkleTree:
    """
    Build the full tree bottom-up.

    Leaves are copied into levels[0] in order and the remaining slots up to
    2^height are filled with `empty_leaf`. Each parent is
    oracle.compress(left, right) with the even-indexed child on the left.
    Two calls with the same (leaves, height) give bit-identical trees, so
    the root of an all-empty tree is a well-known constant per height.

    Args:
        leaves: commitments (field elements), at most 2^height of them
        height: number of hashing levels, >= 1
        oracle: the two-input compression function
        empty_leaf: padding sentinel; must match the circuit's constant

    Returns:
        the completed MerkleTree

    Raises:
        InvalidHeight: height is not a positive integer
        CapacityExceeded: more than 2^height leaves (no tree is built)
        InvalidFieldElement: a leaf or the sentinel is outside the field
    """
    height = _check_height(height)
    leaves = list(leaves)
    capacity = 2 ** height
    if len(leaves) > capacity:
        raise CapacityExceeded(
            f"{len(leaves)} leaves do not fit a tree of height {height} (capacity {capacity})",
            {"num_leaves": len(leaves), "height": height, "capacity": capacity},
        )

    level = [check_field_element(leaf, oracle.modulus) for leaf in leaves]
    if len(level) < capacity:
        padding = check_field_element(empty_leaf, oracle.modulus)
        level.extend([padding] * (capacity - len(level)))

    levels: List[List[FieldElement]] = [level]
    for y in range(1, height + 1):
        below = levels[y - 1]
        levels.append([oracle.compress(below[2 * x], below[2 * x + 1]) for x in range(2 ** (height - y))])

    tree = MerkleTree(levels, num_leaves=len(leaves))
    logger.debug(f"Built tree of height {height} with {len(leaves)} leaves, root {tree.root()}")
    return tree


def get_path_elements(tree: MerkleTree, leaf_index: int, height: int) -> List[FieldElement]:
    """
    Compute the Merkle opening (sibling path) for a given leaf index.

    Returns: siblings
    - siblings[y] = sibling of the path node at level y (0 = leaf level,
      up to height - 1, the level just below the root)

    Example for height 2 and leaf_index 2:
    - siblings[0] = levels[0][3]  (2 is a left child, sibling on the right)
    - siblings[1] = levels[1][0]  (parent 1 is a right child)

    The order (leaf to root) and the sibling rule (flip the lowest bit) are
    the proof layout the circuit reads; changing either gives a proof that
    recomputes to a different root.

    Raises:
        MalformedTree: tree does not have height + 1 levels
        IndexOutOfRange: leaf_index outside [0, 2^height)
    """
    if isinstance(height, bool) or not isinstance(height, int) or len(tree.levels) != height + 1:
        raise MalformedTree(
            f"Tree has {len(tree.levels)} levels, which does not match height {height!r}",
            {"levels": len(tree.levels), "height": height},
        )
    idx = _check_leaf_index(leaf_index, height)

    siblings: List[FieldElement] = []
    for y in range(height):
        # If idx is even (left child), sibling is odd (right child), and vice versa
        siblings.append(tree.levels[y][idx ^ 1])
        # Move up one level
        idx //= 2

    logger.debug(f"Path for leaf {leaf_index}: {siblings}")
    return siblings


def get_path_indices(leaf_index: int, height: int) -> List[int]:
    """
    Bits of leaf_index, least significant first: positions[y] is 0 if the
    path node at level y is a LEFT child and 1 if it is a RIGHT child.
    """
    height = _check_height(height)
    idx = _check_leaf_index(leaf_index, height)
    return [(idx >> y) & 1 for y in range(height)]


def zero_values(height: int, oracle: HashOracle, empty_leaf: FieldElement = EMPTY_LEAF) -> List[FieldElement]:
    """
    Root of an all-empty subtree at each level 0..height.

    zeros[0] = empty_leaf, zeros[y] = H(zeros[y-1], zeros[y-1]). Every node
    of build_tree([], height) at level y equals zeros[y], so these are the
    path elements of any leaf in an empty tree (and zeros[height] its root).
    """
    height = _check_height(height)
    zeros = [check_field_element(empty_leaf, oracle.modulus)]
    for _ in range(height):
        zeros.append(oracle.compress(zeros[-1], zeros[-1]))
    return zeros
