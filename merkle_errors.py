# merkle_errors.py
"""
Error taxonomy for tree construction and path extraction.

Every error is a local precondition violation detected at the call that
receives the bad input. Nothing here is retryable: the computation is
deterministic, so the same input always fails the same way.

Each exception also subclasses the matching builtin (ValueError / IndexError)
so callers that only know the builtins still catch them.
"""

from typing import Any, Dict, Optional


class ErrorCodes:
    """Stable machine-readable error codes."""

    INVALID_FIELD_ELEMENT = "INVALID_FIELD_ELEMENT"
    INVALID_HEIGHT = "INVALID_HEIGHT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    MALFORMED_TREE = "MALFORMED_TREE"


class MerkleTreeError(Exception):
    """
    Base exception for all tree errors.

    Carries a human-readable message, a stable code from ErrorCodes and a
    dict of structured details (the offending values).
    """

    code = "MERKLE_TREE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidFieldElement(MerkleTreeError, ValueError):
    """Value is not an integer in [0, modulus)."""

    code = ErrorCodes.INVALID_FIELD_ELEMENT


class InvalidHeight(MerkleTreeError, ValueError):
    """Tree height is not a positive integer."""

    code = ErrorCodes.INVALID_HEIGHT


class CapacityExceeded(MerkleTreeError, ValueError):
    """More leaves than the 2^height slots of the tree."""

    code = ErrorCodes.CAPACITY_EXCEEDED


class IndexOutOfRange(MerkleTreeError, IndexError):
    """Leaf index outside [0, 2^height)."""

    code = ErrorCodes.INDEX_OUT_OF_RANGE


class MalformedTree(MerkleTreeError, ValueError):
    """Tree levels do not have the shape implied by the height."""

    code = ErrorCodes.MALFORMED_TREE
