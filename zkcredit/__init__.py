"""
zkcredit: zero-knowledge credit-score attestation on BN254.

Combines:

- **Affine BN254 G1 arithmetic** in pure Python (membership, negation,
  doubling, addition, double-and-add scalar multiplication)
- **Groth16 proof containers** with binary and snarkjs JSON decoding
- **A verifier state machine** holding a verification key, a pause
  switch and a per-user score ledger

Scores are attested off-chain by a proof whose first public input is
the score; the verifier checks the proof and records the score for the
submitting caller.

Security: the proof check is currently limited to G1 membership of the
proof's ``A`` element.  It does **not** evaluate the Groth16 pairing
equation and must not be relied on to reject forged proofs.

Quick start
-----------
::

    from zkcredit import CreditScoreVerifier, Account, Groth16Proof
    from zkcredit import AffinePoint, G2Point, VerificationKey

    admin = Account.generate()
    verifier = CreditScoreVerifier(admin.address, VerificationKey(0x1234, 0x5678))

    proof = Groth16Proof(
        a=AffinePoint(1, 2),
        b=G2Point((0, 0), (0, 0)),
        c=AffinePoint(1, 2),
        public_inputs=(750,),
    )
    alice = Account.generate()
    assert verifier.submit(alice.sign_submission(proof, 0, verifier.config.domain))
    print(verifier.get_credit_score(alice.address))      # 750
"""

__version__ = "0.1.0"

# ── field & curve ───────────────────────────────────────────────────────
from .field import FIELD_MODULUS, CURVE_ORDER, mod_inverse, inverse_or_raise
from .curve import (
    Curve,
    BN254,
    BN254_SINGLE_MODULUS,
    get_curve,
    AffinePoint,
    G2Point,
    INFINITY,
    is_infinity,
    is_on_curve,
    negate,
    add,
    subtract,
    double,
    scalar_mul,
    mul_by_cofactor,
    generator,
)

# ── proofs ──────────────────────────────────────────────────────────────
from .proofs import Groth16Proof, VerificationKey

# ── callers ─────────────────────────────────────────────────────────────
from .accounts import Account, SignedSubmission, address_from_public_key

# ── verifier ────────────────────────────────────────────────────────────
from .config import VerifierConfig, load_config
from .events import (
    EventLog,
    ProofVerified,
    ScoreUpdated,
    VerificationKeyUpdated,
    Paused,
    Unpaused,
)
from .verifier import CreditScoreVerifier, ScoreRecord

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    CreditScoreError,
    AuthorizationError,
    StateError,
    ValidationError,
    NonInvertibleError,
    ScoreRangeError,
    NonceError,
)

__all__ = [
    # version
    "__version__",
    # field & curve
    "FIELD_MODULUS", "CURVE_ORDER", "mod_inverse", "inverse_or_raise",
    "Curve", "BN254", "BN254_SINGLE_MODULUS", "get_curve",
    "AffinePoint", "G2Point", "INFINITY",
    "is_infinity", "is_on_curve", "negate", "add", "subtract", "double",
    "scalar_mul", "mul_by_cofactor", "generator",
    # proofs
    "Groth16Proof", "VerificationKey",
    # callers
    "Account", "SignedSubmission", "address_from_public_key",
    # verifier
    "VerifierConfig", "load_config",
    "EventLog", "ProofVerified", "ScoreUpdated", "VerificationKeyUpdated",
    "Paused", "Unpaused",
    "CreditScoreVerifier", "ScoreRecord",
    # errors
    "CreditScoreError", "AuthorizationError", "StateError", "ValidationError",
    "NonInvertibleError", "ScoreRangeError", "NonceError",
]
