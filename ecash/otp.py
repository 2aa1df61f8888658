"""
One-time-pad encoding of the purchaser identity.

At every RIS position the plaintext ``IDENT:<identity>`` (NUL-padded to a
fixed share length) is split as

    left  = k                 (uniform random)
    right = k ⊕ plaintext

Either share alone is uniformly distributed and says nothing about the
identity; ``left ⊕ right`` recovers it.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional, Tuple

from .constants import IDENT_DELIMITER, IDENT_STR, MERCHANT_VERDICT, SHARE_BYTES
from .errors import InvalidIdentity

logger = logging.getLogger(__name__)

_PAD_BYTE = b"\x00"
_PREFIX = IDENT_STR + IDENT_DELIMITER


def combine(a: bytes, b: bytes) -> bytes:
    """XOR two equal-length byte strings.  Symmetric and involutive."""
    if len(a) != len(b):
        raise ValueError(
            f"share length mismatch: {len(a)} != {len(b)}"
        )
    return bytes(x ^ y for x, y in zip(a, b))


def encode_identity(identity: str, share_length: int = SHARE_BYTES) -> bytes:
    """
    Encode ``IDENT:<identity>`` into exactly ``share_length`` bytes.

    Raises
    ------
    InvalidIdentity
        If the identity is empty, not a string, contains NUL (the padding
        byte), equals the merchant-fraud verdict, or does not fit in
        ``share_length`` bytes.
    """
    if not isinstance(identity, str) or not identity:
        raise InvalidIdentity("identity must be a non-empty string")
    if "\x00" in identity:
        raise InvalidIdentity("identity must not contain NUL characters")
    if identity == MERCHANT_VERDICT:
        raise InvalidIdentity(
            f"identity {MERCHANT_VERDICT!r} is reserved for the fraud verdict"
        )

    plaintext = (_PREFIX + identity).encode("utf-8")
    if len(plaintext) > share_length:
        raise InvalidIdentity(
            f"identity does not fit in a {share_length}-byte share",
            {"encoded_length": len(plaintext)},
        )
    return plaintext.ljust(share_length, _PAD_BYTE)


def make_pad(plaintext: bytes) -> Tuple[bytes, bytes]:
    """Split ``plaintext`` into ``(key, ciphertext)`` with a fresh key."""
    key = secrets.token_bytes(len(plaintext))
    return key, combine(key, plaintext)


def decode_identity(a: bytes, b: bytes) -> Optional[str]:
    """
    Recover the purchaser identity from a left/right share pair.

    Returns None when the pair does not decode to ``IDENT:<identity>``
    (shares from different positions, mismatched lengths, tampered
    bytes, two copies of the same side, or the reserved merchant
    verdict).
    """
    if len(a) != len(b):
        return None
    try:
        text = combine(a, b).rstrip(_PAD_BYTE).decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not text.startswith(_PREFIX):
        return None
    identity = text[len(_PREFIX):]
    if identity == MERCHANT_VERDICT:
        return None
    return identity or None
