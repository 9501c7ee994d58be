"""
Caller identities and signed proof submissions.

A caller is identified by an *address* derived from its secp256k1
public key.  Proof submissions are signed with a recoverable ECDSA
signature, so the verifier learns the sender from the signature alone,
the same way a contract runtime learns ``msg.sender`` from a signed
transaction.

Signing and recovery are delegated to ``coincurve`` (libsecp256k1).

Install
-------
    pip install coincurve>=18.0.0
"""

from __future__ import annotations

from dataclasses import dataclass

from coincurve import PrivateKey as _SK, PublicKey as _PK

from .errors import AuthorizationError, ValidationError
from .hash import hash_address, hash_submission
from .proofs import Groth16Proof

SECRET_BYTES = 32
RECOVERABLE_SIG_BYTES = 65


def address_from_public_key(public_key: _PK) -> str:
    return hash_address(public_key.format(compressed=True))


class Account:
    """secp256k1 key pair with a derived caller address."""

    __slots__ = ("_sk", "_address")

    def __init__(self, private_key: _SK) -> None:
        self._sk = private_key
        self._address = address_from_public_key(private_key.public_key)

    @classmethod
    def generate(cls) -> Account:
        return cls(_SK())

    @classmethod
    def from_secret(cls, secret: bytes) -> Account:
        if len(secret) != SECRET_BYTES:
            raise ValidationError(f"need {SECRET_BYTES} bytes, got {len(secret)}")
        return cls(_SK(secret))

    @property
    def address(self) -> str:
        return self._address

    @property
    def public_key(self) -> bytes:
        return self._sk.public_key.format(compressed=True)

    def sign_digest(self, digest: bytes) -> bytes:
        """65-byte recoverable signature over a 32-byte digest."""
        return self._sk.sign_recoverable(digest, hasher=None)

    def sign_submission(
        self,
        proof: Groth16Proof,
        nonce: int,
        domain: str,
    ) -> SignedSubmission:
        digest = hash_submission(domain, nonce, proof.to_bytes())
        return SignedSubmission(
            proof=proof, nonce=nonce, signature=self.sign_digest(digest),
        )

    def __repr__(self) -> str:
        return f"Account({self._address})"


@dataclass(frozen=True)
class SignedSubmission:
    """A proof, the sender's nonce, and the sender's signature."""

    proof: Groth16Proof
    nonce: int
    signature: bytes

    def digest(self, domain: str) -> bytes:
        return hash_submission(domain, self.nonce, self.proof.to_bytes())

    def recover_sender(self, domain: str) -> str:
        """
        Address of the key that signed this submission under *domain*.

        A signature made for another domain or over other data recovers
        to a different (unrelated) address rather than failing.

        Raises
        ------
        AuthorizationError
            If the signature is malformed or no key can be recovered.
        """
        if self.nonce < 0:
            raise ValidationError("nonce must be non-negative")
        if len(self.signature) != RECOVERABLE_SIG_BYTES:
            raise AuthorizationError(
                f"signature must be {RECOVERABLE_SIG_BYTES} bytes, "
                f"got {len(self.signature)}"
            )
        try:
            pk = _PK.from_signature_and_message(
                self.signature, self.digest(domain), hasher=None,
            )
        except ValueError as exc:
            raise AuthorizationError(f"unrecoverable signature: {exc}") from exc
        return address_from_public_key(pk)
