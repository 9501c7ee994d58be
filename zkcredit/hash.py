"""
Domain-separated hash functions.

Every hash call carries a unique domain tag so that an address digest
can never be replayed as a submission digest, even for identical
input bytes.

Convention follows BIP-340 tagged hashes:

    H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )
"""

from __future__ import annotations

import hashlib
from typing import Any

from .field import ELEMENT_BYTES

# ── domain tags ─────────────────────────────────────────────────────────
_TAG_ADDRESS    = b"ZKCREDIT/v1/address"
_TAG_SUBMISSION = b"ZKCREDIT/v1/submission"

ADDRESS_BYTES = 20


# ── internal helpers ────────────────────────────────────────────────────
def _tagged_hasher(tag: bytes) -> "hashlib._Hash":
    """Return a SHA-256 context pre-loaded with the BIP-340 tag prefix."""
    tag_hash = hashlib.sha256(tag).digest()
    h = hashlib.sha256()
    h.update(tag_hash)
    h.update(tag_hash)
    return h


def _encode_item(item: Any) -> bytes:
    """
    Canonical encoding of a hash input.

    Variable-length items are length-prefixed so that concatenations
    parse unambiguously.
    """
    if isinstance(item, bytes):
        return len(item).to_bytes(4, "big") + item
    if isinstance(item, bool):
        return b"\x01" if item else b"\x00"
    if isinstance(item, int):
        if item < 0:
            raise ValueError("cannot hash negative integer")
        return item.to_bytes(ELEMENT_BYTES, "big")
    if isinstance(item, str):
        return _encode_item(item.encode("utf-8"))
    if isinstance(item, (list, tuple)):
        parts = b"".join(_encode_item(x) for x in item)
        return len(item).to_bytes(4, "big") + parts
    raise TypeError(f"cannot hash {type(item).__name__}")


def _tagged_hash(tag: bytes, *args: Any) -> bytes:
    h = _tagged_hasher(tag)
    for a in args:
        h.update(_encode_item(a))
    return h.digest()


# ── public API ──────────────────────────────────────────────────────────
def hash_address(public_key: bytes) -> str:
    """
    Caller address for a compressed secp256k1 public key:
    ``0x`` + last 20 bytes of  H_address(pk).
    """
    return "0x" + _tagged_hash(_TAG_ADDRESS, public_key)[-ADDRESS_BYTES:].hex()


def hash_submission(domain: str, nonce: int, payload: bytes) -> bytes:
    """32-byte digest signed by the submitter of a proof."""
    return _tagged_hash(_TAG_SUBMISSION, domain, nonce, payload)
