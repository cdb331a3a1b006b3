# hash_utils.py
"""
Field constants and the two-input hash compression used to build the tree.

Two hash backends:
1. POSEIDON (PoseidonOracle): Poseidon over BN254 (circomlib PoseidonT3),
   evaluated natively with circomlibpy.
   This is the hash the membership circuit recomputes, so trees whose proofs
   are fed to the circuit must be built with it.
2. SHA-256 (Sha256FieldOracle): plain Python SHA-256 reduced into the field.
   Deterministic and dependency-free, for off-circuit tooling and tests.

Both are stateless and reentrant. Neither reduces its INPUTS modulo the field:
an input outside [0, modulus) is a caller bug and fails fast with
InvalidFieldElement.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from circomlibpy.poseidon import PoseidonHash

from merkle_errors import InvalidFieldElement

# BN254 scalar field modulus (used by circom, PySNARK and most backends)
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Padding value for absent leaves. Must match the constant hardcoded in the
# membership circuit; never a legitimate commitment.
EMPTY_LEAF = 11122724670666931127833274645309940916396779779585410472511079044548860378081

FieldElement = int


def check_field_element(value: object, modulus: int = FIELD_MODULUS) -> FieldElement:
    """
    Validate that value is a field element: an int in [0, modulus).

    bool is rejected even though it subclasses int.

    Raises:
        InvalidFieldElement: on a non-integer or out-of-range value
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldElement(
            f"Field element must be an int, got {type(value).__name__}",
            {"value": repr(value)},
        )
    if value < 0 or value >= modulus:
        raise InvalidFieldElement(
            f"Field element {value} outside [0, {modulus})",
            {"value": value, "modulus": modulus},
        )
    return value


def to_field_element(value: Union[int, str], modulus: int = FIELD_MODULUS) -> FieldElement:
    """
    Parse a commitment given as an int, a decimal string or a 0x-prefixed
    hexadecimal string (the formats circuit input files use).
    """
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError:
            raise InvalidFieldElement(
                f"Cannot parse field element from {text!r}", {"value": text}
            )
    return check_field_element(value, modulus)


def sha256_to_field(*values: int) -> int:
    """
    Hash integers using SHA-256 and map into field (OFF-CIRCUIT).

    Each value is encoded as 32 bytes big-endian; the digest is reduced
    modulo FIELD_MODULUS. Only the output is reduced.

    Args:
        *values: field elements

    Returns:
        integer in [0, FIELD_MODULUS)
    """
    h = hashlib.sha256()
    for v in values:
        h.update(v.to_bytes(32, byteorder="big", signed=False))
    return int.from_bytes(h.digest(), byteorder="big") % FIELD_MODULUS


class HashOracle(ABC):
    """
    Binary compression H(left, right) -> parent over a prime field.

    Deterministic and order-sensitive. compress() validates both inputs and
    the backend result against `modulus`; subclasses only implement
    _compress() on already-validated ints.
    """

    modulus: int = FIELD_MODULUS

    def compress(self, left: FieldElement, right: FieldElement) -> FieldElement:
        left = check_field_element(left, self.modulus)
        right = check_field_element(right, self.modulus)
        return check_field_element(self._compress(left, right), self.modulus)

    def __call__(self, left: FieldElement, right: FieldElement) -> FieldElement:
        return self.compress(left, right)

    @abstractmethod
    def _compress(self, left: int, right: int) -> int:
        raise NotImplementedError


class Sha256FieldOracle(HashOracle):
    """SHA-256 of the two 32-byte encodings, reduced into the BN254 field."""

    def _compress(self, left: int, right: int) -> int:
        return sha256_to_field(left, right)


class PoseidonOracle(HashOracle):
    """
    Poseidon(left, right) over BN254, matching circomlib's PoseidonT3 and
    the on-chain PoseidonT3 contract.

    Evaluated natively on ints through circomlibpy (a port of circomlibjs
    poseidon_opt), so building a tree records nothing into any constraint
    system. A backend callable (left, right) -> int can be passed instead,
    e.g. a native binding with the same parameters.
    """

    def __init__(self, backend: Optional[Callable[[int, int], int]] = None) -> None:
        if backend is None:
            poseidon = PoseidonHash()

            def backend(left: int, right: int) -> int:
                return poseidon.hash(2, [left, right])

        self._backend = backend

    def _compress(self, left: int, right: int) -> int:
        return self._backend(left, right)
