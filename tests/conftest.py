"""Shared fixtures for the zkcredit test-suite."""
from __future__ import annotations

import itertools

import pytest

from zkcredit.curve import AffinePoint, Curve, G2Point
from zkcredit.proofs import Groth16Proof, VerificationKey
from zkcredit.verifier import CreditScoreVerifier

ADMIN = "0xadmin"

TOY_PRIME = 103


def _toy_points(p: int, b: int):
    return [
        AffinePoint(x, y)
        for x in range(p)
        for y in range(p)
        if (y * y - x * x * x - b) % p == 0
    ]


@pytest.fixture(scope="session")
def toy_points():
    """All affine points of y² = x³ + 3 over F_103 (infinity excluded)."""
    return _toy_points(TOY_PRIME, 3)


@pytest.fixture(scope="session")
def toy_curve(toy_points):
    order = len(toy_points) + 1
    return Curve(
        name="toy103",
        field_modulus=TOY_PRIME,
        scalar_order=order,
        b=3,
        generator=toy_points[0].to_tuple(),
    )


@pytest.fixture
def clock():
    """Deterministic clock: 1_700_000_000, 1_700_000_001, …"""
    ticks = itertools.count(1_700_000_000)
    return lambda: next(ticks)


@pytest.fixture
def verifier(clock):
    return CreditScoreVerifier(ADMIN, VerificationKey(0x1234, 0x5678), clock=clock)


@pytest.fixture
def make_proof():
    """Build a proof whose ``A`` is on BN254 unless told otherwise."""

    def _make(score=750, a=AffinePoint(1, 2), extra=()):
        return Groth16Proof(
            a=a,
            b=G2Point((1, 2), (3, 4)),
            c=AffinePoint(1, 2),
            public_inputs=(score, *extra),
        )

    return _make

