"""
Error taxonomy for the credit-score verifier.

A rejected proof is *not* an error: ``verify_proof`` returns ``False``.
Everything below aborts the whole call with no state change.
"""

from __future__ import annotations


class CreditScoreError(Exception):
    """Base class for every error raised by :pymod:`zkcredit`."""


class AuthorizationError(CreditScoreError):
    """Caller is not allowed to perform the operation."""


class StateError(CreditScoreError):
    """Operation is not valid in the current pause state."""


class ValidationError(CreditScoreError, ValueError):
    """Malformed or out-of-range input."""


class NonInvertibleError(ValidationError):
    """Field element has no multiplicative inverse modulo the modulus."""


class ScoreRangeError(ValidationError):
    """Attested score lies outside the accepted range."""


class NonceError(ValidationError):
    """Signed submission carries a stale or future nonce."""
