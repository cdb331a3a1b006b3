# merkle_config.py
"""
Tree configuration.

Defaults match the membership circuit (Poseidon over BN254, EMPTY_LEAF
sentinel). Override with environment variables, or a .env file:

    MERKLE_TREE_HEIGHT=20
    MERKLE_HASH_BACKEND=poseidon    # or sha256
    MERKLE_EMPTY_LEAF=1112...8081   # decimal or 0x hex

Changing the sentinel or the hash is only valid if the circuit was compiled
with the same constants; a mismatch is not detectable here.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from dotenv import load_dotenv

from hash_utils import (
    EMPTY_LEAF,
    FieldElement,
    HashOracle,
    PoseidonOracle,
    Sha256FieldOracle,
    check_field_element,
    to_field_element,
)
from merkle_errors import InvalidHeight
from merkle_tree import MerkleTree, build_tree

load_dotenv()

DEFAULT_HEIGHT = 20

HASH_BACKENDS = {
    "poseidon": PoseidonOracle,
    "sha256": Sha256FieldOracle,
}


@dataclass(frozen=True)
class TreeConfig:
    """Parameters shared by every tree built for one circuit."""
    height: int = DEFAULT_HEIGHT
    hash_backend: str = "poseidon"
    empty_leaf: FieldElement = EMPTY_LEAF

    def __post_init__(self) -> None:
        if isinstance(self.height, bool) or not isinstance(self.height, int) or self.height < 1:
            raise InvalidHeight(
                f"Tree height must be a positive integer, got {self.height!r}", {"height": self.height}
            )
        if self.hash_backend not in HASH_BACKENDS:
            raise ValueError(
                f"Unknown hash backend {self.hash_backend!r}, expected one of {sorted(HASH_BACKENDS)}"
            )
        check_field_element(self.empty_leaf)

    @staticmethod
    def from_env(prefix: str = "MERKLE_") -> "TreeConfig":
        """Load configuration from environment variables."""
        height_text = os.getenv(f"{prefix}TREE_HEIGHT")
        empty_text = os.getenv(f"{prefix}EMPTY_LEAF")
        if height_text is None:
            height = DEFAULT_HEIGHT
        else:
            try:
                height = int(height_text)
            except ValueError:
                raise InvalidHeight(
                    f"{prefix}TREE_HEIGHT is not an integer: {height_text!r}", {"height": height_text}
                )
        return TreeConfig(
            height=height,
            hash_backend=os.getenv(f"{prefix}HASH_BACKEND", "poseidon").lower(),
            empty_leaf=EMPTY_LEAF if empty_text is None else to_field_element(empty_text),
        )


def make_oracle(config: Optional[TreeConfig] = None) -> HashOracle:
    """Instantiate the hash oracle named by the configuration."""
    config = config or TreeConfig()
    return HASH_BACKENDS[config.hash_backend]()


def build_configured_tree(leaves: Iterable[FieldElement], config: Optional[TreeConfig] = None) -> MerkleTree:
    """Build a tree with the configured height, hash and padding sentinel."""
    config = config or TreeConfig()
    return build_tree(leaves, config.height, make_oracle(config), config.empty_leaf)
