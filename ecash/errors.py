"""
Error codes and exception classes for the e-cash protocol.

Every failure the protocol can surface to a caller is an ``ECashError``
carrying a numeric ``ErrorCode``.  Verification and tamper failures have
their own classes so that a rejected coin is never confused with a coin
that simply has not been found suspicious.
"""

from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    """Protocol error codes."""

    # 1xxx - General errors
    UNKNOWN_ERROR = 1000
    INVALID_PARAMETER = 1001

    # 2xxx - Bank / issuance errors
    KEY_GENERATION_FAILED = 2001
    SIGNING_FAILED = 2002
    ALREADY_UNBLINDED = 2003

    # 3xxx - Coin construction errors
    INVALID_IDENTITY = 3001
    MALFORMED_COIN = 3002

    # 4xxx - Acceptance errors
    INVALID_SIGNATURE = 4001
    RIS_TAMPER_DETECTED = 4002

    # 5xxx - Cheater determination errors
    MALFORMED_TRANSCRIPT = 5001


class ECashError(Exception):
    """Base exception for all e-cash protocol errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Any] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict."""
        result = {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


class ConfigurationError(ECashError):
    """A protocol parameter is out of range."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.INVALID_PARAMETER, message, details)


class KeyGenerationFailure(ECashError):
    """The bank key could not be generated.  Fatal at startup."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.KEY_GENERATION_FAILED, message, details)


class SigningFailure(ECashError):
    """The bank refused or failed to sign a blinded message."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.SIGNING_FAILED, message, details)


class AlreadyUnblinded(ECashError):
    """``unblind`` was called on a coin that has already been unblinded."""

    def __init__(self, guid: str):
        super().__init__(
            ErrorCode.ALREADY_UNBLINDED,
            f"coin {guid} has already been unblinded",
            {"guid": guid},
        )


class InvalidIdentity(ECashError):
    """The purchaser identity cannot be encoded into a share."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.INVALID_IDENTITY, message, details)


class MalformedCoin(ECashError):
    """A canonical coin string could not be parsed."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.MALFORMED_COIN, message, details)


class InvalidSignature(ECashError):
    """The coin's signature does not verify under the bank key."""

    def __init__(self, guid: str):
        super().__init__(
            ErrorCode.INVALID_SIGNATURE,
            f"invalid signature on coin {guid}",
            {"guid": guid},
        )


class RisTamperDetected(ECashError):
    """A disclosed share does not match its signed commitment."""

    def __init__(self, position: int, guid: Optional[str] = None):
        self.position = position
        super().__init__(
            ErrorCode.RIS_TAMPER_DETECTED,
            f"RIS validation failed at position {position}",
            {"position": position, "guid": guid},
        )


class MalformedTranscript(ECashError):
    """A transcript handed to cheater determination is not well formed."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.MALFORMED_TRANSCRIPT, message, details)
