"""
Affine point arithmetic on BN254 G1  (y² = x³ + 3).

Pure Python, operating on immutable ``AffinePoint`` values.  Every
function takes an optional ``Curve`` parameter set so the same group
law runs over the real BN254 base field, over the single-modulus
variant, and over small toy fields in tests.

Point at infinity
-----------------
The identity is encoded as the affine pair ``(0, 0)``, the convention
used by the EVM precompiles and snarkjs.  For ``b = 3`` the pair
``(0, 0)`` never satisfies the curve equation (it would need 0 ≡ 3),
so the encoding does not collide with a real point on these curves.
It is still an encoding, not a projective identity.

No constant-time guarantee: scalars here are public.

References
----------
- Barreto, Naehrig (2005). "Pairing-Friendly Elliptic Curves of Prime
  Order."  SAC 2005.
- EIP-196  Precompiled contracts for addition and scalar multiplication
  on the elliptic curve alt_bn128.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import ValidationError
from .field import (
    CURVE_ORDER,
    FIELD_MODULUS,
    ELEMENT_BYTES,
    element_from_bytes,
    element_to_bytes,
    inverse_or_raise,
)

G1_BYTES = 2 * ELEMENT_BYTES
G2_BYTES = 4 * ELEMENT_BYTES


# ── parameter sets ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class Curve:
    """Short Weierstrass curve  y² = x³ + b  over F_{field_modulus}."""

    name: str
    field_modulus: int
    scalar_order: int
    b: int
    cofactor: int = 1
    generator: Optional[Tuple[int, int]] = None

    def __repr__(self) -> str:
        return f"Curve({self.name})"


BN254 = Curve(
    name="bn254",
    field_modulus=FIELD_MODULUS,
    scalar_order=CURVE_ORDER,
    b=3,
    cofactor=1,
    generator=(1, 2),
)

# Coordinates reduced modulo r instead of p.  Not the real BN254 group;
# kept selectable because deployed verifiers were built against it.
BN254_SINGLE_MODULUS = Curve(
    name="bn254-single-modulus",
    field_modulus=CURVE_ORDER,
    scalar_order=CURVE_ORDER,
    b=3,
    cofactor=1,
    generator=(1, 2),
)

_CURVES: Dict[str, Curve] = {c.name: c for c in (BN254, BN254_SINGLE_MODULUS)}


def get_curve(name: str) -> Curve:
    """Look up a registered parameter set by name."""
    try:
        return _CURVES[name]
    except KeyError:
        raise ValidationError(
            f"unknown curve {name!r}; expected one of {sorted(_CURVES)}"
        ) from None


# ── point types ─────────────────────────────────────────────────────────
@dataclass(frozen=True)
class AffinePoint:
    """
    Affine point ``(x, y)``; ``(0, 0)`` is the point at infinity.

    Construction does **not** check the curve equation — call
    :func:`is_on_curve` before trusting a point.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        for name in ("x", "y"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValidationError(f"{name} must be an int, got {type(v).__name__}")
            if v < 0:
                raise ValidationError(f"{name} must be non-negative")

    @classmethod
    def from_tuple(cls, xy: Tuple[int, int]) -> AffinePoint:
        try:
            x, y = xy
        except (TypeError, ValueError):
            raise ValidationError("G1 point must be an (x, y) pair") from None
        return cls(x, y)

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def is_infinity(self) -> bool:
        return self.x == 0 and self.y == 0

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        """64-byte big-endian ``x ‖ y`` (EIP-196 layout)."""
        return element_to_bytes(self.x) + element_to_bytes(self.y)

    @classmethod
    def from_bytes(cls, data: bytes) -> AffinePoint:
        if len(data) != G1_BYTES:
            raise ValidationError(f"need {G1_BYTES} bytes, got {len(data)}")
        return cls(
            element_from_bytes(data[:ELEMENT_BYTES]),
            element_from_bytes(data[ELEMENT_BYTES:]),
        )

    def __repr__(self) -> str:
        if self.is_infinity():
            return "AffinePoint(∞)"
        return f"AffinePoint(0x{self.x:x}, 0x{self.y:x})"


INFINITY = AffinePoint(0, 0)


@dataclass(frozen=True)
class G2Point:
    """
    Point on the BN254 twist over F_p² as ``((x0, x1), (y0, y1))``
    where each pair is ``c0 + c1·i``.

    Opaque payload only: no group law is defined on it here.
    """

    x: Tuple[int, int]
    y: Tuple[int, int]

    def __post_init__(self) -> None:
        for name in ("x", "y"):
            try:
                pair = tuple(getattr(self, name))
            except TypeError:
                raise ValidationError(f"G2 {name} must be a (c0, c1) pair") from None
            if len(pair) != 2:
                raise ValidationError(
                    f"G2 {name} must have 2 components, got {len(pair)}"
                )
            object.__setattr__(self, name, pair)
        for coord in (*self.x, *self.y):
            if isinstance(coord, bool) or not isinstance(coord, int) or coord < 0:
                raise ValidationError("G2 coordinates must be non-negative ints")

    def is_infinity(self) -> bool:
        return self.x == (0, 0) and self.y == (0, 0)

    def to_bytes(self) -> bytes:
        return b"".join(element_to_bytes(c) for c in (*self.x, *self.y))

    @classmethod
    def from_bytes(cls, data: bytes) -> G2Point:
        if len(data) != G2_BYTES:
            raise ValidationError(f"need {G2_BYTES} bytes, got {len(data)}")
        x0, x1, y0, y1 = (
            element_from_bytes(data[i:i + ELEMENT_BYTES])
            for i in range(0, G2_BYTES, ELEMENT_BYTES)
        )
        return cls((x0, x1), (y0, y1))


G2_INFINITY = G2Point((0, 0), (0, 0))


# ── predicates ──────────────────────────────────────────────────────────
def is_infinity(p: AffinePoint) -> bool:
    return p.is_infinity()


def is_on_curve(p: AffinePoint, curve: Curve = BN254) -> bool:
    """
    True iff *p* is infinity, or both coordinates are reduced modulo
    the field modulus and  y² ≡ x³ + b.
    """
    if p.is_infinity():
        return True
    m = curve.field_modulus
    if p.x >= m or p.y >= m:
        return False
    return (p.y * p.y - p.x * p.x * p.x - curve.b) % m == 0


# ── group law ───────────────────────────────────────────────────────────
def negate(p: AffinePoint, curve: Curve = BN254) -> AffinePoint:
    """-P = (x, -y).  Infinity is its own negation."""
    if p.is_infinity():
        return p
    m = curve.field_modulus
    return AffinePoint(p.x % m, (m - p.y) % m)


def _chord(p: AffinePoint, q: AffinePoint, slope: int, m: int) -> AffinePoint:
    x3 = (slope * slope - p.x - q.x) % m
    y3 = (slope * (p.x - x3) - p.y) % m
    return AffinePoint(x3, y3)


def double(p: AffinePoint, curve: Curve = BN254) -> AffinePoint:
    """
    2P via the tangent line:  λ = 3x² / 2y.

    A point with y ≡ 0 has a vertical tangent and doubles to infinity.
    """
    if p.is_infinity():
        return INFINITY
    m = curve.field_modulus
    if p.y % m == 0:
        return INFINITY
    slope = (3 * p.x * p.x * inverse_or_raise(2 * p.y, m)) % m
    return _chord(p, p, slope, m)


def add(p: AffinePoint, q: AffinePoint, curve: Curve = BN254) -> AffinePoint:
    """
    P + Q with the full case analysis:

    - either operand at infinity → the other one;
    - same x with opposite y, or a vertical tangent → infinity;
    - same point → tangent slope;
    - otherwise → chord slope  (y₂ - y₁) / (x₂ - x₁).

    Raises ``NonInvertibleError`` if a slope denominator has no inverse
    (only possible for a composite modulus).
    """
    if p.is_infinity():
        return q
    if q.is_infinity():
        return p
    m = curve.field_modulus
    px, py, qx, qy = p.x % m, p.y % m, q.x % m, q.y % m
    if px == qx:
        if py != qy or py == 0:
            return INFINITY
        slope = (3 * px * px * inverse_or_raise(2 * py, m)) % m
    else:
        slope = ((qy - py) * inverse_or_raise(qx - px, m)) % m
    return _chord(AffinePoint(px, py), AffinePoint(qx, qy), slope, m)


def subtract(p: AffinePoint, q: AffinePoint, curve: Curve = BN254) -> AffinePoint:
    return add(p, negate(q, curve), curve)


def scalar_mul(p: AffinePoint, k: int, curve: Curve = BN254) -> AffinePoint:
    """
    k·P by right-to-left double-and-add.

    The scalar is not reduced modulo the group order.  Negative *k*
    multiplies -P by |k|.
    """
    if k < 0:
        return scalar_mul(negate(p, curve), -k, curve)
    result = INFINITY
    current = p
    while k:
        if k & 1:
            result = add(result, current, curve)
        current = double(current, curve)
        k >>= 1
    return result


def mul_by_cofactor(p: AffinePoint, curve: Curve = BN254) -> AffinePoint:
    """
    Clear the cofactor: h·P.

    BN254 G1 has prime order (h = 1), so on the registered parameter
    sets this returns *p* unchanged.  The twist group G2 has a large
    cofactor and is not handled here.
    """
    return scalar_mul(p, curve.cofactor, curve)


def generator(curve: Curve = BN254) -> AffinePoint:
    if curve.generator is None:
        raise ValidationError(f"{curve.name} has no registered generator")
    return AffinePoint.from_tuple(curve.generator)
