"""
Groth16 proof and verification-key containers for BN254.

A Groth16 proof is three group elements  (A ∈ G1, B ∈ G2, C ∈ G1)
plus the public inputs it attests to.  The credit-score circuit
exposes the score as its first public input.

Two wire formats are accepted:

1. **Binary** — ``A(64) ‖ B(128) ‖ C(64) ‖ n(4) ‖ n × input(32)``,
   big-endian, EIP-196/197 coordinate layout.
2. **snarkjs JSON** — ``{"pi_a": [x, y, z], "pi_b": [[x0, x1],
   [y0, y1], [z0, z1]], "pi_c": [x, y, z]}`` with decimal strings, and
   the public signals as a separate list.

Decoding rejects coordinates not reduced modulo the field modulus and
public inputs not reduced modulo the scalar order.  It does *not*
check the curve equation; that is the verifier's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

from .curve import (
    AffinePoint,
    BN254,
    Curve,
    G1_BYTES,
    G2_BYTES,
    G2Point,
    G2_INFINITY,
    INFINITY,
)
from .errors import ValidationError
from .field import (
    ELEMENT_BYTES,
    check_canonical,
    element_from_bytes,
    element_to_bytes,
    to_int,
)

_COUNT_BYTES = 4


@dataclass(frozen=True)
class VerificationKey:
    """
    Verification key held by the verifier.

    Only two field elements are stored; a full Groth16 key
    (α₁, β₂, γ₂, δ₂, IC) is needed once the pairing check exists.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        for v in (self.x, self.y):
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise ValidationError("verification key elements must be non-negative ints")

    @classmethod
    def from_tuple(cls, xy: Tuple[int, int]) -> VerificationKey:
        try:
            x, y = xy
        except (TypeError, ValueError):
            raise ValidationError("verification key must be a pair") from None
        return cls(x, y)

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"VerificationKey(0x{self.x:x}, 0x{self.y:x})"


@dataclass(frozen=True)
class Groth16Proof:
    """Proof elements  (A, B, C)  and the public inputs."""

    a: AffinePoint
    b: G2Point
    c: AffinePoint
    public_inputs: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        # accept any sequence, store a tuple
        object.__setattr__(self, "public_inputs", tuple(self.public_inputs))
        for v in self.public_inputs:
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise ValidationError("public inputs must be non-negative ints")

    # ── binary format ──────────────────────────────────────────────────

    def to_bytes(self) -> bytes:
        parts = [
            self.a.to_bytes(),
            self.b.to_bytes(),
            self.c.to_bytes(),
            len(self.public_inputs).to_bytes(_COUNT_BYTES, "big"),
        ]
        parts.extend(element_to_bytes(v) for v in self.public_inputs)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes, curve: Curve = BN254) -> Groth16Proof:
        """
        Decode the binary format.

        Raises
        ------
        ValidationError
            On truncated or trailing data, or on any non-canonical
            coordinate or public input.
        """
        header = 2 * G1_BYTES + G2_BYTES + _COUNT_BYTES
        if len(data) < header:
            raise ValidationError(f"proof truncated: {len(data)} < {header} bytes")
        off = 0
        a = AffinePoint.from_bytes(data[off:off + G1_BYTES])
        off += G1_BYTES
        b = G2Point.from_bytes(data[off:off + G2_BYTES])
        off += G2_BYTES
        c = AffinePoint.from_bytes(data[off:off + G1_BYTES])
        off += G1_BYTES
        n = int.from_bytes(data[off:off + _COUNT_BYTES], "big")
        off += _COUNT_BYTES
        if len(data) != off + n * ELEMENT_BYTES:
            raise ValidationError(
                f"expected {n} public inputs ({n * ELEMENT_BYTES} bytes), "
                f"got {len(data) - off} bytes"
            )
        inputs = [
            element_from_bytes(data[i:i + ELEMENT_BYTES])
            for i in range(off, len(data), ELEMENT_BYTES)
        ]
        proof = cls(a=a, b=b, c=c, public_inputs=tuple(inputs))
        proof.check_canonical(curve)
        return proof

    # ── snarkjs JSON ───────────────────────────────────────────────────

    @classmethod
    def from_json(
        cls,
        proof_json: dict,
        public_signals: Sequence[Union[int, str]] = (),
        curve: Curve = BN254,
    ) -> Groth16Proof:
        """Parse a snarkjs ``proof.json`` object plus ``public.json``."""
        if not isinstance(proof_json, dict):
            raise ValidationError("proof JSON must be an object")
        try:
            a = _g1_from_json(proof_json["pi_a"])
            b = _g2_from_json(proof_json["pi_b"])
            c = _g1_from_json(proof_json["pi_c"])
        except KeyError as exc:
            raise ValidationError(f"proof JSON missing {exc.args[0]!r}") from None
        inputs = tuple(to_int(s) for s in public_signals)
        proof = cls(a=a, b=b, c=c, public_inputs=inputs)
        proof.check_canonical(curve)
        return proof

    def to_json(self) -> dict:
        return {
            "pi_a": [str(self.a.x), str(self.a.y), "0" if self.a.is_infinity() else "1"],
            "pi_b": [
                [str(self.b.x[0]), str(self.b.x[1])],
                [str(self.b.y[0]), str(self.b.y[1])],
                ["0", "0"] if self.b.is_infinity() else ["1", "0"],
            ],
            "pi_c": [str(self.c.x), str(self.c.y), "0" if self.c.is_infinity() else "1"],
            "protocol": "groth16",
            "curve": "bn128",
        }

    # ── validation ─────────────────────────────────────────────────────

    def check_canonical(self, curve: Curve = BN254) -> None:
        """Raise unless every coordinate and input is fully reduced."""
        p = curve.field_modulus
        for label, v in (("A.x", self.a.x), ("A.y", self.a.y),
                         ("C.x", self.c.x), ("C.y", self.c.y)):
            check_canonical(v, p, label)
        for i, v in enumerate((*self.b.x, *self.b.y)):
            check_canonical(v, p, f"B[{i}]")
        for i, v in enumerate(self.public_inputs):
            check_canonical(v, curve.scalar_order, f"public input {i}")


# ── JSON coordinate helpers ─────────────────────────────────────────────
def _coords(value: Any, what: str) -> List[Any]:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise ValidationError(f"{what} point needs a list of 2 or 3 coordinates")
    return list(value)


def _g1_from_json(coords: List[Any]) -> AffinePoint:
    coords = _coords(coords, "G1")
    x, y = to_int(coords[0]), to_int(coords[1])
    if len(coords) == 3:
        z = to_int(coords[2])
        if z == 0:
            return INFINITY
        if z != 1:
            raise ValidationError("only normalised (z = 1) G1 points are accepted")
    return AffinePoint(x, y)


def _g2_from_json(coords: List[Any]) -> G2Point:
    coords = _coords(coords, "G2")
    x, y, *z = (_fp2_from_json(c) for c in coords)
    if z:
        if z[0] == (0, 0):
            return G2_INFINITY
        if z[0] != (1, 0):
            raise ValidationError("only normalised (z = 1) G2 points are accepted")
    return G2Point(x, y)


def _fp2_from_json(pair: Any) -> Tuple[int, int]:
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        raise ValidationError("G2 coordinates must be (c0, c1) pairs")
    return to_int(pair[0]), to_int(pair[1])
