"""Group-law tests: exhaustive on a toy field, cross-checked on BN254."""
from __future__ import annotations

import random

import pytest
from py_ecc import bn128

from zkcredit.curve import (
    BN254,
    BN254_SINGLE_MODULUS,
    AffinePoint,
    Curve,
    G2Point,
    INFINITY,
    add,
    double,
    generator,
    get_curve,
    is_infinity,
    is_on_curve,
    mul_by_cofactor,
    negate,
    scalar_mul,
    subtract,
)
from zkcredit.errors import NonInvertibleError, ValidationError
from zkcredit.field import CURVE_ORDER, FIELD_MODULUS

G = AffinePoint(1, 2)


def _from_py_ecc(pt) -> AffinePoint:
    if pt is None:
        return INFINITY
    return AffinePoint(pt[0].n, pt[1].n)


# ── toy curve: exhaustive group law ─────────────────────────────────────

def test_toy_curve_has_no_point_at_origin(toy_points):
    assert AffinePoint(0, 0) not in toy_points


def test_identity(toy_curve, toy_points):
    for p in toy_points + [INFINITY]:
        assert add(p, INFINITY, toy_curve) == p
        assert add(INFINITY, p, toy_curve) == p


def test_inverse(toy_curve, toy_points):
    for p in toy_points:
        assert add(p, negate(p, toy_curve), toy_curve) == INFINITY
        assert is_on_curve(negate(p, toy_curve), toy_curve)


def test_closure_and_commutativity(toy_curve, toy_points):
    for p in toy_points:
        for q in toy_points:
            r = add(p, q, toy_curve)
            assert is_on_curve(r, toy_curve)
            assert r == add(q, p, toy_curve)


def test_associativity(toy_curve, toy_points):
    rng = random.Random(1234)
    for _ in range(300):
        p, q, r = (rng.choice(toy_points) for _ in range(3))
        lhs = add(add(p, q, toy_curve), r, toy_curve)
        rhs = add(p, add(q, r, toy_curve), toy_curve)
        assert lhs == rhs


def test_double_matches_add(toy_curve, toy_points):
    for p in toy_points + [INFINITY]:
        assert double(p, toy_curve) == add(p, p, toy_curve)


def test_vertical_tangent_doubles_to_infinity(toy_curve, toy_points):
    two_torsion = [p for p in toy_points if p.y == 0]
    for p in two_torsion:
        assert double(p, toy_curve) == INFINITY
        assert add(p, p, toy_curve) == INFINITY


def test_group_order_annihilates(toy_curve, toy_points):
    n = toy_curve.scalar_order
    for p in toy_points:
        assert scalar_mul(p, n, toy_curve) == INFINITY


def test_scalar_mul_matches_repeated_add(toy_curve, toy_points):
    p = toy_points[5]
    acc = INFINITY
    for k in range(0, 40):
        assert scalar_mul(p, k, toy_curve) == acc
        acc = add(acc, p, toy_curve)


# ── small scalars & special cases ──────────────────────────────────────

def test_scalar_mul_small():
    assert scalar_mul(G, 0) == INFINITY
    assert scalar_mul(G, 1) == G
    assert scalar_mul(G, 2) == double(G)
    assert scalar_mul(INFINITY, 12345) == INFINITY


def test_scalar_mul_negative():
    assert scalar_mul(G, -3) == negate(scalar_mul(G, 3))
    assert add(scalar_mul(G, -3), scalar_mul(G, 3)) == INFINITY


def test_subtract():
    assert subtract(scalar_mul(G, 7), scalar_mul(G, 3)) == scalar_mul(G, 4)
    assert subtract(G, G) == INFINITY


def test_negate_infinity():
    assert negate(INFINITY) == INFINITY
    assert is_infinity(negate(INFINITY))


def test_infinity_encoding():
    assert is_infinity(AffinePoint(0, 0))
    assert not is_infinity(AffinePoint(0, 1))
    assert is_on_curve(INFINITY)


def test_mul_by_cofactor_is_identity_on_bn254():
    p = scalar_mul(G, 99)
    assert mul_by_cofactor(p) == p
    assert mul_by_cofactor(INFINITY) == INFINITY


def test_mul_by_cofactor_uses_curve_cofactor(toy_curve, toy_points):
    curve = Curve("toy-h4", toy_curve.field_modulus, toy_curve.scalar_order, 3, cofactor=4)
    p = toy_points[3]
    assert mul_by_cofactor(p, curve) == scalar_mul(p, 4, curve)


# ── membership ─────────────────────────────────────────────────────────

def test_is_on_curve_bn254():
    assert is_on_curve(G)
    assert not is_on_curve(AffinePoint(1, 3))
    assert not is_on_curve(AffinePoint(0, 1))


def test_is_on_curve_rejects_unreduced_coordinates():
    aliased = AffinePoint(1 + FIELD_MODULUS, 2)
    assert (aliased.y ** 2 - aliased.x ** 3 - 3) % FIELD_MODULUS == 0
    assert not is_on_curve(aliased)


def test_affine_point_rejects_bad_coordinates():
    with pytest.raises(ValidationError):
        AffinePoint(-1, 2)
    with pytest.raises(ValidationError):
        AffinePoint(1, "2")
    with pytest.raises(ValidationError):
        AffinePoint(True, 2)


def test_non_invertible_denominator_raises():
    composite = Curve("composite", field_modulus=15, scalar_order=15, b=3)
    with pytest.raises(NonInvertibleError):
        add(AffinePoint(1, 2), AffinePoint(4, 5), composite)


# ── BN254 cross-check against py_ecc ───────────────────────────────────

@pytest.mark.parametrize("k", [2, 3, 5, 7, 1234567, 2**128 + 1, CURVE_ORDER - 1])
def test_scalar_mul_matches_py_ecc(k):
    assert scalar_mul(G, k) == _from_py_ecc(bn128.multiply(bn128.G1, k))


def test_add_double_match_py_ecc():
    p = _from_py_ecc(bn128.multiply(bn128.G1, 11))
    q = _from_py_ecc(bn128.multiply(bn128.G1, 29))
    assert add(p, q) == _from_py_ecc(bn128.multiply(bn128.G1, 40))
    assert double(p) == _from_py_ecc(bn128.double(bn128.multiply(bn128.G1, 11)))
    assert negate(p) == _from_py_ecc(bn128.neg(bn128.multiply(bn128.G1, 11)))


def test_generator_has_curve_order():
    assert scalar_mul(G, CURVE_ORDER) == INFINITY
    assert scalar_mul(G, CURVE_ORDER + 5) == scalar_mul(G, 5)


def test_bn254_constants_match_py_ecc():
    assert BN254.field_modulus == bn128.field_modulus
    assert BN254.scalar_order == bn128.curve_order
    assert generator() == _from_py_ecc(bn128.G1)


# ── single-modulus parameter set ───────────────────────────────────────

def test_single_modulus_curve_arithmetic():
    curve = BN254_SINGLE_MODULUS
    assert curve.field_modulus == CURVE_ORDER
    assert is_on_curve(G, curve)
    p = scalar_mul(G, 12345, curve)
    assert is_on_curve(p, curve)
    assert add(p, negate(p, curve), curve) == INFINITY
    # different field, different group
    assert p != scalar_mul(G, 12345)


def test_get_curve():
    assert get_curve("bn254") is BN254
    assert get_curve("bn254-single-modulus") is BN254_SINGLE_MODULUS
    with pytest.raises(ValidationError):
        get_curve("secp256k1")


def test_generator_missing(toy_curve):
    bare = Curve("bare", toy_curve.field_modulus, toy_curve.scalar_order, 3)
    with pytest.raises(ValidationError):
        generator(bare)


# ── encodings ──────────────────────────────────────────────────────────

def test_point_bytes():
    p = scalar_mul(G, 42)
    data = p.to_bytes()
    assert len(data) == 64
    assert AffinePoint.from_bytes(data) == p
    assert INFINITY.to_bytes() == b"\x00" * 64
    with pytest.raises(ValidationError):
        AffinePoint.from_bytes(data[:-1])


def test_g2_bytes():
    q = G2Point((1, 2), (3, 4))
    assert G2Point.from_bytes(q.to_bytes()) == q
    assert G2Point((0, 0), (0, 0)).is_infinity()
    with pytest.raises(ValidationError):
        G2Point((1, -2), (3, 4))


@pytest.mark.parametrize("x, y", [
    ((1, 2, 3), (4,)),
    ((1,), (2, 3)),
    (5, (1, 2)),
    ((1, 2), None),
])
def test_g2_requires_coordinate_pairs(x, y):
    with pytest.raises(ValidationError):
        G2Point(x, y)


def test_g2_coordinates_stored_as_tuples():
    q = G2Point([1, 2], [3, 4])
    assert q == G2Point((1, 2), (3, 4))
    hash(q)


@pytest.mark.parametrize("xy", [(1, 2, 3), (1,), None, 7])
def test_affine_from_tuple_requires_pair(xy):
    with pytest.raises(ValidationError):
        AffinePoint.from_tuple(xy)
