"""
Domain-separated hash functions for the e-cash protocol.

Every hash call includes a unique domain tag so that a share commitment
can never be confused with a message digest, even when fed identical
data.

Convention follows BIP-340 tagged hashes:

    H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )

The message digest covered by the blind signature is plain SHA-256 of the
canonical coin string, so any RSA verifier that hashes the message the
usual way accepts the same signatures.
"""

from __future__ import annotations

import hashlib

# ── domain tags ─────────────────────────────────────────────────────────
_TAG_RIS  = b"ECASH/v1/ris"
_TAG_GUID = b"ECASH/v1/guid"


# ── internal helpers ────────────────────────────────────────────────────
def _tagged_hasher(tag: bytes) -> hashlib._Hash:
    """Return a SHA-256 context pre-loaded with the BIP-340 tag prefix."""
    tag_hash = hashlib.sha256(tag).digest()
    h = hashlib.sha256()
    h.update(tag_hash)
    h.update(tag_hash)
    return h


def _tagged_hash(tag: bytes, data: bytes) -> bytes:
    h = _tagged_hasher(tag)
    h.update(data)
    return h.digest()


# ── public hash functions ───────────────────────────────────────────────

def hash_share(share: bytes) -> bytes:
    """
    Commitment to a single RIS share:  c = H_ris(share).

    These are the values the bank signs (blindly); a merchant recomputes
    them for every share it is shown.
    """
    if not isinstance(share, (bytes, bytearray)):
        raise TypeError("share must be bytes")
    return _tagged_hash(_TAG_RIS, bytes(share))


def hash_guid(entropy: bytes) -> str:
    """Derive a coin identifier from fresh entropy (hex, no delimiters)."""
    return _tagged_hash(_TAG_GUID, entropy)[:16].hex()


def message_digest(message: bytes) -> int:
    """SHA-256 of the canonical coin string as a big-endian integer."""
    return int.from_bytes(hashlib.sha256(message).digest(), "big")
