"""
RSA blind signatures (Chaum 1982).

Key generation and number-theoretic helpers come from pycryptodome; the
blinding arithmetic itself is a handful of modular exponentiations.

Given the bank key  (n, e, d)  and the message digest  m = H(msg):

    blind:    m' = m · r^e  mod n          (r uniform, gcd(r, n) = 1)
    sign:     s' = m'^d     mod n          (bank; learns nothing about m)
    unblind:  s  = s' · r⁻¹ mod n          (= m^d mod n)
    verify:   s^e ≡ m       mod n

Blindness: for uniform r, m' is uniform in Z_n* regardless of m, so the
bank cannot link s to the signing request that produced it.

Install
-------
    pip install pycryptodome>=3.19.0

References
----------
- Chaum (1982). "Blind Signatures for Untraceable Payments."
  CRYPTO 1982.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from Crypto.PublicKey import RSA
from Crypto.Util.number import GCD, getRandomRange, inverse

from .constants import DEFAULT_KEY_BITS, DEFAULT_PUBLIC_EXPONENT, MIN_KEY_BITS
from .errors import KeyGenerationFailure, SigningFailure
from .hash import message_digest

logger = logging.getLogger(__name__)


# ── key material ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BankPublicKey:
    """The bank's public verification key  (n, e)."""

    n: int
    e: int

    @property
    def bits(self) -> int:
        return self.n.bit_length()

    def to_dict(self) -> dict:
        return {"n": str(self.n), "e": str(self.e)}

    @classmethod
    def from_dict(cls, data: dict) -> BankPublicKey:
        return cls(n=int(data["n"]), e=int(data["e"]))

    def __repr__(self) -> str:
        return f"BankPublicKey(bits={self.bits}, e={self.e})"


@dataclass(frozen=True)
class BankKeyPair:
    """Bank signing key.  ``d`` never leaves the bank."""

    public: BankPublicKey
    d: int

    def __repr__(self) -> str:
        return f"BankKeyPair({self.public!r})"


def generate_keypair(bits: int = DEFAULT_KEY_BITS) -> BankKeyPair:
    """
    Generate a fresh RSA key for the bank.

    Raises
    ------
    KeyGenerationFailure
        If ``bits`` is below ``MIN_KEY_BITS`` or the underlying
        generator fails.
    """
    if bits < MIN_KEY_BITS:
        raise KeyGenerationFailure(
            f"key size must be at least {MIN_KEY_BITS} bits",
            {"bits": bits},
        )
    try:
        key = RSA.generate(bits, e=DEFAULT_PUBLIC_EXPONENT)
    except ValueError as exc:
        raise KeyGenerationFailure(
            f"RSA key generation failed: {exc}", {"bits": bits},
        ) from exc

    logger.info(f"Generated {bits}-bit bank key")
    return BankKeyPair(
        public=BankPublicKey(n=int(key.n), e=int(key.e)),
        d=int(key.d),
    )


# ── purchaser side ──────────────────────────────────────────────────────

def blind(message: bytes, public_key: BankPublicKey) -> Tuple[int, int]:
    """
    Blind ``message`` for signing under ``public_key``.

    Returns ``(blinded, blinding_factor)``.  The blinding factor must be
    kept secret and is needed to unblind the bank's answer.
    """
    n, e = public_key.n, public_key.e
    m = message_digest(message) % n

    while True:
        r = getRandomRange(2, n)
        if GCD(r, n) == 1:
            break

    blinded = (m * pow(r, e, n)) % n
    return blinded, r


def unblind(
    blind_signature: int,
    blinding_factor: int,
    public_key: BankPublicKey,
) -> int:
    """Remove the blinding factor:  s = s' · r⁻¹ mod n."""
    n = public_key.n
    return (blind_signature * inverse(blinding_factor, n)) % n


# ── bank side ───────────────────────────────────────────────────────────

def sign_blinded(blinded: int, keypair: BankKeyPair) -> int:
    """
    Sign a blinded message:  s' = m'^d mod n.

    Deterministic: signing the same blinded value twice gives the same
    answer.

    Raises
    ------
    SigningFailure
        If ``blinded`` is not an integer in ``[1, n)``.
    """
    n = keypair.public.n
    if isinstance(blinded, bool) or not isinstance(blinded, int):
        raise SigningFailure(
            "blinded message must be an integer",
            {"type": type(blinded).__name__},
        )
    if not 0 < blinded < n:
        raise SigningFailure("blinded message out of range")
    return pow(blinded, keypair.d, n)


# ── anyone ──────────────────────────────────────────────────────────────

def verify(signature: int, public_key: BankPublicKey, message: bytes) -> bool:
    """Check  s^e ≡ H(message)  (mod n)."""
    n, e = public_key.n, public_key.e
    if isinstance(signature, bool) or not isinstance(signature, int):
        return False
    if not 0 < signature < n:
        return False
    return pow(signature, e, n) == message_digest(message) % n
