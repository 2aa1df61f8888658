"""
High-level e-cash protocol orchestration.

Provides a single ``ECashProtocol`` class that ties together issuance,
verification, merchant acceptance and double-spend tracing into a clean
API suitable for both integration testing and demos.

Usage
-----
::

    from ecash.protocol import ECashProtocol

    # Setup
    proto = ECashProtocol.setup()

    # Withdraw
    coin = proto.withdraw("alice", 20)

    # Spend twice
    t1 = proto.accept(coin)
    t2 = proto.accept(coin)

    # Trace
    assert proto.determine_cheater(coin.guid, t1, t2) == "alice"
"""

from __future__ import annotations

import logging
from typing import Optional

from .accountability import (
    CheaterVerdict,
    TranscriptLike,
    determine_cheater,
    investigate,
)
from .bank import Bank
from .blind import BankPublicKey
from .coin import SignedCoin, UnsignedCoin, verify_coin
from .config import ECashConfig
from .merchant import ChallengeSource, Merchant, Transcript, accept_coin

logger = logging.getLogger(__name__)


class ECashProtocol:
    """
    End-to-end e-cash protocol.

    Encapsulates the full lifecycle:
    1. Setup: create the bank and its key.
    2. Withdraw: build, blind, sign and unblind a coin.
    3. Accept: merchant verification and disclosure challenge.
    4. Trace: compare two transcripts of the same coin.
    """

    def __init__(self, bank: Bank) -> None:
        self._bank = bank
        self._config = bank.config

    # ── factories ──────────────────────────────────────────────────────

    @classmethod
    def setup(cls, config: Optional[ECashConfig] = None) -> ECashProtocol:
        """Create a protocol instance with a freshly keyed bank."""
        return cls(Bank.create(config))

    # ── issuance ───────────────────────────────────────────────────────

    def new_coin(self, identity: str, amount: int) -> UnsignedCoin:
        """Purchaser step: commitments and blinding."""
        return UnsignedCoin.create(
            identity,
            amount,
            self._bank.public_key,
            ris_length=self._config.ris_length,
            share_length=self._config.share_length,
        )

    def withdraw(self, identity: str, amount: int) -> SignedCoin:
        """Create a coin, have the bank blind-sign it and unblind it."""
        unsigned = self.new_coin(identity, amount)
        blind_signature = self._bank.sign(unsigned.blinded_message)
        coin = unsigned.unblind(blind_signature)
        logger.info(f"Issued coin {coin.guid} worth {amount}")
        return coin

    # ── verification & acceptance ──────────────────────────────────────

    def verify(self, coin: SignedCoin) -> bool:
        return verify_coin(coin, self._bank.public_key)

    def accept(
        self,
        coin: SignedCoin,
        challenge: Optional[ChallengeSource] = None,
    ) -> Transcript:
        return accept_coin(coin, self._bank.public_key, challenge=challenge)

    def merchant(self, name: str) -> Merchant:
        return Merchant(name, self._bank.public_key)

    # ── tracing ────────────────────────────────────────────────────────

    def determine_cheater(
        self,
        guid: str,
        transcript_a: TranscriptLike,
        transcript_b: TranscriptLike,
    ) -> str:
        return determine_cheater(
            guid, transcript_a, transcript_b,
            ris_length=self._config.ris_length,
        )

    def investigate(
        self,
        guid: str,
        transcript_a: TranscriptLike,
        transcript_b: TranscriptLike,
    ) -> CheaterVerdict:
        return investigate(
            guid, transcript_a, transcript_b,
            ris_length=self._config.ris_length,
        )

    # ── accessors ──────────────────────────────────────────────────────

    @property
    def bank(self) -> Bank:
        return self._bank

    @property
    def bank_key(self) -> BankPublicKey:
        return self._bank.public_key

    @property
    def config(self) -> ECashConfig:
        return self._config

    def __repr__(self) -> str:
        return f"ECashProtocol({self._bank!r})"
