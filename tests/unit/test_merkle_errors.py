"""
Error taxonomy tests.
Tests for merkle_errors.py
"""
import pytest

from merkle_errors import (
    CapacityExceeded,
    ErrorCodes,
    IndexOutOfRange,
    InvalidFieldElement,
    InvalidHeight,
    MalformedTree,
    MerkleTreeError,
)


@pytest.mark.parametrize(
    "exc_type, code, builtin",
    [
        (InvalidFieldElement, ErrorCodes.INVALID_FIELD_ELEMENT, ValueError),
        (InvalidHeight, ErrorCodes.INVALID_HEIGHT, ValueError),
        (CapacityExceeded, ErrorCodes.CAPACITY_EXCEEDED, ValueError),
        (IndexOutOfRange, ErrorCodes.INDEX_OUT_OF_RANGE, IndexError),
        (MalformedTree, ErrorCodes.MALFORMED_TREE, ValueError),
    ],
)
def test_error_kinds(exc_type, code, builtin):
    err = exc_type("boom", {"x": 1})

    assert isinstance(err, MerkleTreeError)
    assert isinstance(err, builtin)
    assert err.code == code
    assert err.to_dict() == {"code": code, "message": "boom", "details": {"x": 1}}


def test_details_default_empty():
    assert InvalidHeight("bad").details == {}


def test_repr():
    assert repr(MalformedTree("bad shape")) == "MalformedTree(code='MALFORMED_TREE', message='bad shape')"
