"""
ecash: anonymous electronic cash with double-spend tracing.

A Chaum-style e-cash core combining:

- **RSA blind signatures** so the bank cannot link a spent coin to
  its withdrawal [Chaum, CRYPTO 1982]
- **RIS identity splitting**: one-time-pad shares of the purchaser
  identity, committed by hash at every coin position
- **Cut-and-choose acceptance** with an unbiased random side per
  position, and a tracer that names a double spender from two
  transcripts [Chaum, Fiat & Naor, CRYPTO 1988]

Quick start
-----------
::

    from ecash import ECashProtocol

    proto = ECashProtocol.setup()

    coin = proto.withdraw("alice", 20)
    assert proto.verify(coin)

    t1 = proto.accept(coin)
    t2 = proto.accept(coin)
    print(proto.determine_cheater(coin.guid, t1, t2))   # "alice"
"""

__version__ = "0.1.0"

# ── constants ───────────────────────────────────────────────────────────
from .constants import COIN_RIS_LENGTH, IDENT_STR, BANK_STR, MERCHANT_VERDICT

# ── configuration & errors ──────────────────────────────────────────────
from .config import ECashConfig, LogConfig, configure_logging
from .errors import (
    ErrorCode,
    ECashError,
    ConfigurationError,
    KeyGenerationFailure,
    SigningFailure,
    AlreadyUnblinded,
    InvalidIdentity,
    MalformedCoin,
    InvalidSignature,
    RisTamperDetected,
    MalformedTranscript,
)

# ── protocol ────────────────────────────────────────────────────────────
from .protocol import ECashProtocol
from .bank import Bank

# ── coins & issuance ────────────────────────────────────────────────────
from .coin import (
    UnsignedCoin,
    SignedCoin,
    ParsedCoin,
    canonical_string,
    parse_coin_string,
    verify_coin,
)
from .blind import BankPublicKey, BankKeyPair, generate_keypair

# ── acceptance ──────────────────────────────────────────────────────────
from .merchant import Merchant, RisElement, Transcript, accept_coin

# ── accountability ──────────────────────────────────────────────────────
from .accountability import (
    CheaterVerdict,
    PositionOutcome,
    determine_cheater,
    investigate,
)

# ── cryptographic building blocks ───────────────────────────────────────
from .commitment import RisPair, RisCommitments
from .otp import combine, decode_identity, encode_identity
from .hash import hash_share

__all__ = [
    # version
    "__version__",
    # constants
    "COIN_RIS_LENGTH", "IDENT_STR", "BANK_STR", "MERCHANT_VERDICT",
    # configuration & errors
    "ECashConfig", "LogConfig", "configure_logging",
    "ErrorCode", "ECashError", "ConfigurationError", "KeyGenerationFailure",
    "SigningFailure", "AlreadyUnblinded", "InvalidIdentity", "MalformedCoin",
    "InvalidSignature", "RisTamperDetected", "MalformedTranscript",
    # protocol
    "ECashProtocol", "Bank",
    # coins
    "UnsignedCoin", "SignedCoin", "ParsedCoin",
    "canonical_string", "parse_coin_string", "verify_coin",
    "BankPublicKey", "BankKeyPair", "generate_keypair",
    # acceptance
    "Merchant", "RisElement", "Transcript", "accept_coin",
    # accountability
    "CheaterVerdict", "PositionOutcome", "determine_cheater", "investigate",
    # building blocks
    "RisPair", "RisCommitments",
    "combine", "decode_identity", "encode_identity", "hash_share",
]
