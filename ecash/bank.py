"""
The issuing bank.

A ``Bank`` is created once at startup from an ``ECashConfig`` and passed
explicitly to whoever needs to sign or verify; there is no module-level
key.  The bank signs blinded messages without learning what they contain,
so it cannot later connect a spent coin to the withdrawal that produced
it.
"""

from __future__ import annotations

import logging
from typing import Optional

from .blind import BankKeyPair, BankPublicKey, generate_keypair, sign_blinded
from .coin import SignedCoin, verify_coin
from .config import ECashConfig
from .errors import ConfigurationError, SigningFailure

logger = logging.getLogger(__name__)


class Bank:
    """Holds the signing key and answers blind-signature requests."""

    def __init__(self, keypair: BankKeyPair, config: ECashConfig) -> None:
        self._keypair = keypair
        self.config = config
        self._issued = 0

    @classmethod
    def create(cls, config: Optional[ECashConfig] = None) -> Bank:
        """
        Validate ``config`` and generate the bank key.

        Raises
        ------
        ConfigurationError
            If the configuration does not validate.
        KeyGenerationFailure
            If the key cannot be generated.  No coin can be issued.
        """
        config = config or ECashConfig()
        errors = config.validate()
        if errors:
            raise ConfigurationError("invalid configuration", errors)

        keypair = generate_keypair(config.key_bits)
        logger.info(f"Bank ready with {keypair.public!r}")
        return cls(keypair, config)

    @property
    def public_key(self) -> BankPublicKey:
        return self._keypair.public

    @property
    def issued(self) -> int:
        """Number of blind signatures handed out."""
        return self._issued

    def sign(self, blinded: int) -> int:
        """
        Blind-sign ``blinded``.

        Signing is deterministic, so a caller retrying the same blinded
        message gets the same answer.  Failures are not retried here.

        Raises
        ------
        SigningFailure
            If the request is malformed.
        """
        if blinded is None:
            raise SigningFailure("blinded message is required")
        try:
            signature = sign_blinded(blinded, self._keypair)
        except SigningFailure as exc:
            logger.error(f"Signing failed: {exc.message}")
            raise
        self._issued += 1
        logger.info("Signed blinded coin")
        return signature

    def verify(self, coin: SignedCoin) -> bool:
        return verify_coin(coin, self.public_key)

    def __repr__(self) -> str:
        return f"Bank({self.public_key!r}, issued={self._issued})"
