"""
Modular arithmetic helpers for the BN254 fields.

BN254 has two distinct primes:

- ``FIELD_MODULUS`` (p) — the base field F_p that point coordinates
  live in.
- ``CURVE_ORDER`` (r) — the order of the G1 group, i.e. the scalar
  field that Groth16 public inputs live in.

Point arithmetic in :pymod:`curve` picks its modulus from a ``Curve``
parameter set; this module only provides the modulus-agnostic pieces.
"""

from __future__ import annotations

from typing import Optional, Union

from .errors import NonInvertibleError, ValidationError

# ── BN254 constants ─────────────────────────────────────────────────────
FIELD_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583
CURVE_ORDER = 21888242871839275222246405745257275088548364400416034343698204186575808495617
ELEMENT_BYTES = 32


# ── inversion ───────────────────────────────────────────────────────────
def mod_inverse(a: int, modulus: int = CURVE_ORDER) -> Optional[int]:
    """
    Multiplicative inverse of *a* modulo *modulus* via the iterative
    extended Euclidean algorithm.

    Returns ``None`` when ``gcd(a, modulus) > 1`` (no inverse exists,
    which includes ``a ≡ 0``).  Callers must treat ``None`` as a hard
    failure; see :func:`inverse_or_raise`.

    Python integers are signed and unbounded, so the Bézout coefficient
    ``t`` is allowed to go negative during the loop and is brought back
    into ``[0, modulus)`` once at the end.
    """
    if modulus < 2:
        raise ValidationError(f"modulus must be ≥ 2, got {modulus}")
    t, new_t = 0, 1
    r, new_r = modulus, a % modulus
    while new_r != 0:
        q = r // new_r
        t, new_t = new_t, t - q * new_t
        r, new_r = new_r, r - q * new_r
    if r > 1:
        return None
    if t < 0:
        t += modulus
    return t


def inverse_or_raise(a: int, modulus: int) -> int:
    """Like :func:`mod_inverse` but raises ``NonInvertibleError``."""
    inv = mod_inverse(a, modulus)
    if inv is None:
        raise NonInvertibleError(
            f"{a:#x} has no inverse modulo {modulus:#x}"
        )
    return inv


# ── encoding helpers ────────────────────────────────────────────────────
def to_int(value: Union[int, str]) -> int:
    """
    Parse a field-element encoding: ``int``, decimal string or ``0x``
    hex string (snarkjs emits decimal strings).
    """
    if isinstance(value, bool):
        raise ValidationError("boolean is not a field element")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"cannot parse field element from {type(value).__name__}")
    s = value.strip().lower()
    try:
        if s.startswith("0x"):
            return int(s, 16)
        return int(s, 10)
    except ValueError:
        raise ValidationError(f"malformed field element {value!r}") from None


def check_canonical(value: int, modulus: int, what: str = "value") -> int:
    """Return *value* if it lies in ``[0, modulus)``, else raise."""
    if not 0 <= value < modulus:
        raise ValidationError(f"{what} {value:#x} is not reduced modulo {modulus:#x}")
    return value


def element_to_bytes(value: int) -> bytes:
    return value.to_bytes(ELEMENT_BYTES, "big")


def element_from_bytes(data: bytes) -> int:
    if len(data) != ELEMENT_BYTES:
        raise ValidationError(f"need {ELEMENT_BYTES} bytes, got {len(data)}")
    return int.from_bytes(data, "big")
