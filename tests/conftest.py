"""
Pytest configuration and shared fixtures for the Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides toy hash oracles over a small prime field
"""

import sys
from pathlib import Path
from typing import List, Tuple

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from hash_utils import HashOracle, Sha256FieldOracle  # noqa: E402

TOY_MODULUS = 10007
TOY_EMPTY_LEAF = 9999


class ToyOracle(HashOracle):
    """H(a, b) = a + 2b + 1 mod 10007. Order-sensitive, trivially invertible."""

    modulus = TOY_MODULUS

    def __init__(self) -> None:
        self.calls: List[Tuple[int, int]] = []

    def _compress(self, left: int, right: int) -> int:
        self.calls.append((left, right))
        return (left + 2 * right + 1) % self.modulus


def recompute_root(oracle: HashOracle, leaf: int, path: List[int], leaf_index: int) -> int:
    """Hash the leaf up the path, routing by the bits of leaf_index (LSB first)."""
    needle = leaf
    for y, sibling in enumerate(path):
        if (leaf_index >> y) & 1 == 0:
            needle = oracle.compress(needle, sibling)
        else:
            needle = oracle.compress(sibling, needle)
    return needle


@pytest.fixture
def toy_oracle():
    return ToyOracle()


@pytest.fixture
def sha_oracle():
    return Sha256FieldOracle()


@pytest.fixture
def commitments():
    """Three BN254 commitments used by the reference height-4 example."""
    return [
        4873845517341354240483781786684739248524789913426222845413696638288295894761,
        19893796767628644644508042129737146844370001181247521714447689156352108429278,
        3970558148520727263457132309636987021913061380623131292344242352805121773637,
    ]
