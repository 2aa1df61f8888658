"""
Coins: the purchaser-built, bank-signed anonymous token.

A coin exists in two distinct types so that it cannot be spent before it
is signed:

* ``UnsignedCoin``: built by the purchaser.  Holds the RIS commitments,
  the blinded canonical message (fixed at construction) and the secret
  blinding factor.  ``unblind`` consumes it exactly once.
* ``SignedCoin``: immutable.  Carries the bank signature over its own
  canonical message and answers merchant challenges via ``get_ris``.

Canonical message
-----------------
::

    ELECTRONIC_PIGGYBANK-<amount>-<guid>-<h^L_0,…,h^L_k>-<h^R_0,…,h^R_k>

Hashes are lowercase hex.  The guid is a random identifier and stands in
for the purchaser: the identity itself only ever appears inside the RIS
shares.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from . import blind as _blind
from .blind import BankPublicKey
from .commitment import RisCommitments
from .constants import (
    BANK_STR,
    COIN_RIS_LENGTH,
    FIELD_DELIMITER,
    HASH_DELIMITER,
    SHARE_BYTES,
)
from .errors import (
    AlreadyUnblinded,
    ConfigurationError,
    MalformedCoin,
    SigningFailure,
)
from .hash import hash_guid

logger = logging.getLogger(__name__)


# ── canonical serialisation ─────────────────────────────────────────────

@dataclass(frozen=True)
class ParsedCoin:
    """Fields recovered from a canonical coin string."""

    amount: int
    guid: str
    left_hashes: Tuple[bytes, ...]
    right_hashes: Tuple[bytes, ...]


def canonical_string(
    amount: int,
    guid: str,
    left_hashes: Sequence[bytes],
    right_hashes: Sequence[bytes],
) -> str:
    lh = HASH_DELIMITER.join(h.hex() for h in left_hashes)
    rh = HASH_DELIMITER.join(h.hex() for h in right_hashes)
    return FIELD_DELIMITER.join([BANK_STR, str(amount), guid, lh, rh])


def parse_coin_string(text: str) -> ParsedCoin:
    """
    Parse a canonical coin string.

    Raises
    ------
    MalformedCoin
        If the string does not have the canonical shape.
    """
    parts = text.split(FIELD_DELIMITER)
    if len(parts) != 5:
        raise MalformedCoin(f"expected 5 fields, got {len(parts)}")
    tag, amount_str, guid, lh, rh = parts
    if tag != BANK_STR:
        raise MalformedCoin(f"unknown coin tag {tag!r}")
    if not amount_str.isdigit():
        raise MalformedCoin(f"bad amount {amount_str!r}")
    if not guid:
        raise MalformedCoin("empty guid")
    try:
        left = tuple(bytes.fromhex(h) for h in lh.split(HASH_DELIMITER))
        right = tuple(bytes.fromhex(h) for h in rh.split(HASH_DELIMITER))
    except ValueError as exc:
        raise MalformedCoin(f"bad hash encoding: {exc}") from exc
    if len(left) != len(right):
        raise MalformedCoin("left and right hash counts differ")
    return ParsedCoin(
        amount=int(amount_str),
        guid=guid,
        left_hashes=left,
        right_hashes=right,
    )


# ── signed coin ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SignedCoin:
    """
    An unblinded, bank-signed coin.

    The shares are the purchaser's secrets: a merchant only ever sees the
    one share per position it asks for through ``get_ris``.
    """

    guid: str
    amount: int
    bank_key: BankPublicKey
    left_hashes: Tuple[bytes, ...]
    right_hashes: Tuple[bytes, ...]
    signature: Optional[int]
    left_shares: Tuple[bytes, ...] = field(repr=False)
    right_shares: Tuple[bytes, ...] = field(repr=False)
    purchaser_identity: str = field(repr=False, compare=False)

    @property
    def ris_length(self) -> int:
        return len(self.left_hashes)

    def to_string(self) -> str:
        return canonical_string(
            self.amount, self.guid, self.left_hashes, self.right_hashes,
        )

    def message(self) -> bytes:
        """The exact bytes the bank signature covers."""
        return self.to_string().encode("utf-8")

    def get_ris(self, select_left: bool, position: int) -> bytes:
        """Disclose the share on the chosen side of ``position``."""
        if not 0 <= position < len(self.left_shares):
            raise IndexError(f"RIS position {position} out of range")
        if select_left:
            return self.left_shares[position]
        return self.right_shares[position]

    def verify(self, bank_key: BankPublicKey) -> bool:
        return verify_coin(self, bank_key)

    def __str__(self) -> str:
        return self.to_string()


def verify_coin(coin: SignedCoin, bank_key: BankPublicKey) -> bool:
    """
    Check a coin's signature under ``bank_key``.

    The signed message is recomputed from the coin's own fields; a coin
    bound to a different key, with a missing signature, or with any
    altered amount, guid or commitment fails.
    """
    if coin.signature is None:
        return False
    if coin.bank_key != bank_key:
        return False
    if coin.ris_length == 0 or len(coin.right_hashes) != coin.ris_length:
        return False
    return _blind.verify(coin.signature, bank_key, coin.message())


# ── unsigned coin ───────────────────────────────────────────────────────

@dataclass
class UnsignedCoin:
    """Purchaser-side coin awaiting the bank's blind signature."""

    guid: str
    amount: int
    bank_key: BankPublicKey
    commitments: RisCommitments = field(repr=False)
    blinded_message: int
    blinding_factor: int = field(repr=False)
    purchaser_identity: str = field(repr=False)
    unblinded: bool = False

    @classmethod
    def create(
        cls,
        identity: str,
        amount: int,
        bank_key: BankPublicKey,
        *,
        ris_length: int = COIN_RIS_LENGTH,
        share_length: int = SHARE_BYTES,
    ) -> UnsignedCoin:
        """
        Build commitments for ``identity`` and blind the coin once.

        Raises
        ------
        ConfigurationError
            If ``amount`` is not a positive integer or ``ris_length < 1``.
        InvalidIdentity
            If the identity cannot be encoded in a share.
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ConfigurationError("amount must be an integer")
        if amount <= 0:
            raise ConfigurationError(
                "amount must be positive", {"amount": amount},
            )

        commitments = RisCommitments.build(identity, ris_length, share_length)
        guid = hash_guid(secrets.token_bytes(32))
        message = canonical_string(
            amount, guid, commitments.left_hashes, commitments.right_hashes,
        ).encode("utf-8")
        blinded, factor = _blind.blind(message, bank_key)

        logger.debug(f"Created coin {guid} worth {amount}")
        return cls(
            guid=guid,
            amount=amount,
            bank_key=bank_key,
            commitments=commitments,
            blinded_message=blinded,
            blinding_factor=factor,
            purchaser_identity=identity,
        )

    def to_string(self) -> str:
        return canonical_string(
            self.amount,
            self.guid,
            self.commitments.left_hashes,
            self.commitments.right_hashes,
        )

    def unblind(self, blind_signature: int) -> SignedCoin:
        """
        Turn the bank's blind signature into a usable ``SignedCoin``.

        Raises
        ------
        AlreadyUnblinded
            On a second call.
        SigningFailure
            If ``blind_signature`` is not an integer, or the unblinded
            signature does not verify, i.e. the bank signed something
            other than this coin's blinded message.
        """
        if self.unblinded:
            raise AlreadyUnblinded(self.guid)
        if isinstance(blind_signature, bool) or not isinstance(blind_signature, int):
            raise SigningFailure(
                "blind signature must be an integer",
                {"guid": self.guid, "type": type(blind_signature).__name__},
            )

        signature = _blind.unblind(
            blind_signature, self.blinding_factor, self.bank_key,
        )
        coin = SignedCoin(
            guid=self.guid,
            amount=self.amount,
            bank_key=self.bank_key,
            left_hashes=tuple(self.commitments.left_hashes),
            right_hashes=tuple(self.commitments.right_hashes),
            signature=signature,
            left_shares=tuple(self.commitments.left_shares),
            right_shares=tuple(self.commitments.right_shares),
            purchaser_identity=self.purchaser_identity,
        )
        if not verify_coin(coin, self.bank_key):
            raise SigningFailure(
                "bank signature does not match the blinded coin",
                {"guid": self.guid},
            )

        self.unblinded = True
        self.blinding_factor = 0
        logger.debug(f"Unblinded coin {self.guid}")
        return coin

