"""
Credit-score proof verifier.

Holds the verification key, an admin-controlled pause flag and a
per-user score ledger.  A caller submits a proof; if it verifies, the
first public input is taken as the caller's attested credit score and
written to the ledger, superseding any earlier score.

Usage
-----
::

    from zkcredit import CreditScoreVerifier, Groth16Proof, VerificationKey

    verifier = CreditScoreVerifier("0xadmin", VerificationKey(0x1234, 0x5678))
    ok = verifier.verify_proof("0xalice", a, b, c, [750])
    assert verifier.get_credit_score("0xalice") == 750

Atomicity
---------
Every operation runs under one re-entrant lock and validates all of
its inputs before touching state, so concurrent callers observe each
call either fully applied or not at all, and a verification can never
read a half-rotated key.
Events are dispatched only after the call's state, nonce included, is
written; a failing subscriber cannot undo or mask a committed call.

Proof check
-----------
``_check_proof`` currently only checks that ``A`` lies on G1.  That is
**not** sound: anyone can produce a point on the curve.  The Groth16
pairing equation

    e(A, B) == e(α₁, β₂) · e(Σ xᵢ·ICᵢ, γ₂) · e(C, δ₂)

belongs in ``_check_proof`` once a pairing engine and a full
verification key are available.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .accounts import SignedSubmission
from .config import VerifierConfig
from .curve import AffinePoint, Curve, G2Point, is_on_curve
from .errors import (
    AuthorizationError,
    NonceError,
    ScoreRangeError,
    StateError,
    ValidationError,
)
from .events import (
    Event,
    EventLog,
    Paused,
    ProofVerified,
    ScoreUpdated,
    Unpaused,
    VerificationKeyUpdated,
)
from .proofs import Groth16Proof, VerificationKey

logger = logging.getLogger(__name__)

PointLike = Union[AffinePoint, Tuple[int, int]]
G2Like = Union[G2Point, Tuple[Tuple[int, int], Tuple[int, int]]]


@dataclass(frozen=True)
class ScoreRecord:
    """A user's current attested score."""

    score: int
    last_update: int     # UNIX seconds


def _as_g1(p: PointLike) -> AffinePoint:
    return p if isinstance(p, AffinePoint) else AffinePoint.from_tuple(p)


def _as_g2(p: G2Like) -> G2Point:
    if isinstance(p, G2Point):
        return p
    try:
        x, y = p
    except (TypeError, ValueError):
        raise ValidationError("G2 point must be an (x, y) pair") from None
    return G2Point(x, y)


def _as_key(key: Union[VerificationKey, Tuple[int, int]]) -> VerificationKey:
    return key if isinstance(key, VerificationKey) else VerificationKey.from_tuple(key)


class CreditScoreVerifier:
    """
    Proof-verification state machine.

    States are *active* (initial) and *paused*.  Only the admin moves
    between them; while paused, proof submission fails and everything
    else keeps working.
    """

    def __init__(
        self,
        admin: str,
        verification_key: Union[VerificationKey, Tuple[int, int]],
        *,
        config: Optional[VerifierConfig] = None,
        clock: Optional[Callable[[], int]] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        if not admin:
            raise ValidationError("admin address must be non-empty")
        self._config = config or VerifierConfig()
        self._curve: Curve = self._config.curve_params
        self._admin = admin
        self._key = _as_key(verification_key)
        self._paused = False
        self._ledger: Dict[str, ScoreRecord] = {}
        self._nonces: Dict[str, int] = {}
        self._clock = clock or (lambda: int(time.time()))
        self._events = events if events is not None else EventLog(
            maxlen=self._config.event_history,
        )
        self._lock = threading.RLock()

    # ── proof submission ───────────────────────────────────────────────

    def verify_proof(
        self,
        caller: str,
        proof_a: PointLike,
        proof_b: G2Like,
        proof_c: PointLike,
        public_inputs: Sequence[int],
    ) -> bool:
        """
        Verify a proof on behalf of *caller* and record the score.

        Returns ``False`` if the proof is rejected.  The ledger is left
        untouched; only a ``ProofVerified`` event with ``valid=False`` is
        emitted.

        Raises
        ------
        StateError
            If the verifier is paused.
        ScoreRangeError
            If the attested score lies outside the configured range.
        ValidationError
            If the proof is malformed or carries no public input.
        """
        proof = Groth16Proof(
            a=_as_g1(proof_a),
            b=_as_g2(proof_b),
            c=_as_g1(proof_c),
            public_inputs=tuple(public_inputs),
        )
        return self.verify(caller, proof)

    def verify(self, caller: str, proof: Groth16Proof) -> bool:
        """Same as :meth:`verify_proof`, taking a ``Groth16Proof``."""
        with self._lock:
            result, events = self._apply_proof(caller, proof)
            self._events.emit(*events)
            return result

    def submit(self, submission: SignedSubmission) -> bool:
        """
        Verify a signed submission; the sender is recovered from the
        signature and must use its next nonce.

        The nonce is consumed whenever the call returns, whether the
        proof was accepted or rejected.
        """
        sender = submission.recover_sender(self._config.domain)
        with self._lock:
            expected = self._nonces.get(sender, 0)
            if submission.nonce != expected:
                logger.warning(
                    "submission from %s has nonce %d, expected %d",
                    sender, submission.nonce, expected,
                )
                raise NonceError(
                    f"nonce {submission.nonce} does not match expected {expected}"
                )
            result, events = self._apply_proof(sender, submission.proof)
            self._nonces[sender] = expected + 1
            self._events.emit(*events)
            return result

    def _apply_proof(
        self, caller: str, proof: Groth16Proof
    ) -> Tuple[bool, List[Event]]:
        # Commits the ledger change; the caller emits the returned events
        # once every piece of state for the call is written.
        self._require_active()
        now = self._clock()
        if not self._check_proof(proof):
            logger.warning("proof from %s rejected", caller)
            return False, [ProofVerified(user=caller, valid=False, timestamp=now)]

        if not proof.public_inputs:
            raise ValidationError("proof carries no public input")
        score = proof.public_inputs[0]
        lo, hi = self._config.min_score, self._config.max_score
        if not lo <= score <= hi:
            raise ScoreRangeError(
                f"invalid score range: {score} not in [{lo}, {hi}]"
            )

        previous = self._ledger.get(caller)
        old_score = previous.score if previous is not None else 0
        self._ledger[caller] = ScoreRecord(score=score, last_update=now)
        logger.info("score for %s updated %d -> %d", caller, old_score, score)
        return True, [
            ProofVerified(user=caller, valid=True, timestamp=now),
            ScoreUpdated(
                user=caller, old_score=old_score, new_score=score, timestamp=now,
            ),
        ]

    def _check_proof(self, proof: Groth16Proof) -> bool:
        # Curve membership of A only; the pairing check goes here.
        return is_on_curve(proof.a, self._curve)

    # ── queries ────────────────────────────────────────────────────────

    def get_credit_score(self, user: str) -> int:
        """Current score of *user*, or 0 if none was ever recorded."""
        with self._lock:
            record = self._ledger.get(user)
        return record.score if record is not None else 0

    def get_score_record(self, user: str) -> Optional[ScoreRecord]:
        with self._lock:
            return self._ledger.get(user)

    def next_nonce(self, user: str) -> int:
        with self._lock:
            return self._nonces.get(user, 0)

    # ── admin ──────────────────────────────────────────────────────────

    def update_verification_key(
        self,
        caller: str,
        new_key: Union[VerificationKey, Tuple[int, int]],
    ) -> None:
        """Replace the verification key.  Admin only; allowed while paused."""
        key = _as_key(new_key)
        with self._lock:
            self._require_admin(caller, "update_verification_key")
            old = self._key
            self._key = key
            logger.info("verification key rotated %r -> %r", old, key)
            self._events.emit(VerificationKeyUpdated(old_key=old, new_key=key))

    def pause(self, caller: str) -> None:
        with self._lock:
            self._require_admin(caller, "pause")
            if self._paused:
                raise StateError("already paused")
            self._paused = True
            logger.info("verifier paused by %s", caller)
            self._events.emit(Paused(admin=caller))

    def unpause(self, caller: str) -> None:
        with self._lock:
            self._require_admin(caller, "unpause")
            if not self._paused:
                raise StateError("not paused")
            self._paused = False
            logger.info("verifier unpaused by %s", caller)
            self._events.emit(Unpaused(admin=caller))

    # ── guards ─────────────────────────────────────────────────────────

    def _require_admin(self, caller: str, operation: str) -> None:
        if caller != self._admin:
            logger.warning("%s refused for non-admin %s", operation, caller)
            raise AuthorizationError(f"{operation}: caller is not admin")

    def _require_active(self) -> None:
        if self._paused:
            raise StateError("system paused")

    # ── accessors ──────────────────────────────────────────────────────

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def verification_key(self) -> VerificationKey:
        with self._lock:
            return self._key

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def curve(self) -> Curve:
        return self._curve

    @property
    def config(self) -> VerifierConfig:
        return self._config

    @property
    def events(self) -> EventLog:
        return self._events

    def __repr__(self) -> str:
        state = "paused" if self._paused else "active"
        return (
            f"CreditScoreVerifier(admin={self._admin}, {state}, "
            f"curve={self._curve.name}, users={len(self._ledger)})"
        )
