"""
Merchant-side coin acceptance (cut-and-choose disclosure).

A merchant first verifies the bank signature, then, for every RIS
position, flips an unbiased coin to ask for either the left or the right
share and checks it against the signed commitment:

    b_i  ←$ {0, 1}
    v_i  =  coin.get_ris(b_i = 0, i)
    H(v_i) == (h^L_i if b_i = 0 else h^R_i)

Acceptance is all-or-nothing: any mismatch aborts with
``RisTamperDetected`` and no transcript is produced.

Two merchants challenged by the same coin pick independent bits, so with
probability  1 − 2^-k  their transcripts differ at some position, which
is what lets ``determine_cheater`` unmask a double spender.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .blind import BankPublicKey
from .coin import SignedCoin, parse_coin_string, verify_coin
from .errors import InvalidSignature, RisTamperDetected
from .hash import hash_share

logger = logging.getLogger(__name__)

# Returns True to request the left share, False for the right one.
ChallengeSource = Callable[[], bool]


def random_challenge() -> bool:
    """One unbiased bit from the OS CSPRNG; ``True`` selects left."""
    return secrets.randbits(1) == 0


# ── transcript data structures ──────────────────────────────────────────

@dataclass(frozen=True)
class RisElement:
    """One disclosed share together with the commitment it opened."""

    position: int
    is_left: bool
    value: bytes
    hash: bytes

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "is_left": self.is_left,
            "value": self.value.hex(),
            "hash": self.hash.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> RisElement:
        return cls(
            position=int(data["position"]),
            is_left=bool(data["is_left"]),
            value=bytes.fromhex(data["value"]),
            hash=bytes.fromhex(data["hash"]),
        )


@dataclass(frozen=True)
class Transcript:
    """The ordered record of one merchant's acceptance of one coin."""

    guid: str
    elements: Tuple[RisElement, ...]

    def __len__(self) -> int:
        return len(self.elements)

    def __getitem__(self, index: int) -> RisElement:
        return self.elements[index]

    def __iter__(self) -> Iterator[RisElement]:
        return iter(self.elements)

    @property
    def sides(self) -> List[bool]:
        return [el.is_left for el in self.elements]

    def to_dict(self) -> dict:
        return {
            "guid": self.guid,
            "elements": [el.to_dict() for el in self.elements],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Transcript:
        return cls(
            guid=data["guid"],
            elements=tuple(RisElement.from_dict(d) for d in data["elements"]),
        )


# ── acceptance ──────────────────────────────────────────────────────────

def accept_coin(
    coin: SignedCoin,
    bank_key: BankPublicKey,
    *,
    challenge: Optional[ChallengeSource] = None,
) -> Transcript:
    """
    Verify ``coin`` and run the per-position disclosure challenge.

    Parameters
    ----------
    coin : SignedCoin
        The coin offered in payment.
    bank_key : BankPublicKey
        The trusted bank key; the key embedded in the coin must match.
    challenge : callable or None
        Source of side selections.  Defaults to ``random_challenge``.

    Raises
    ------
    InvalidSignature
        If the signature does not verify.  No share is requested.
    RisTamperDetected
        If a disclosed share does not hash to its signed commitment.
    """
    if not verify_coin(coin, bank_key):
        logger.warning(f"Rejected coin {coin.guid}: invalid signature")
        raise InvalidSignature(coin.guid)

    draw = challenge or random_challenge
    parsed = parse_coin_string(coin.to_string())

    elements: List[RisElement] = []
    for i in range(len(parsed.left_hashes)):
        select_left = bool(draw())
        value = coin.get_ris(select_left, i)
        expected = (
            parsed.left_hashes[i] if select_left else parsed.right_hashes[i]
        )
        if hash_share(value) != expected:
            logger.warning(
                f"Rejected coin {coin.guid}: RIS mismatch at position {i}"
            )
            raise RisTamperDetected(i, coin.guid)
        elements.append(
            RisElement(position=i, is_left=select_left, value=value, hash=expected)
        )

    logger.info(f"Accepted coin {coin.guid} worth {parsed.amount}")
    return Transcript(guid=coin.guid, elements=tuple(elements))


class Merchant:
    """
    A merchant that accepts coins against one bank key and keeps every
    transcript it produced, repeats of the same coin included, until
    they are deposited.
    """

    def __init__(self, name: str, bank_key: BankPublicKey) -> None:
        self.name = name
        self.bank_key = bank_key
        self._transcripts: Dict[str, List[Transcript]] = {}

    def accept(
        self,
        coin: SignedCoin,
        challenge: Optional[ChallengeSource] = None,
    ) -> Transcript:
        transcript = accept_coin(coin, self.bank_key, challenge=challenge)
        seen = self._transcripts.setdefault(coin.guid, [])
        if seen:
            logger.warning(
                f"{self.name}: coin {coin.guid} presented again "
                f"(acceptance #{len(seen) + 1})"
            )
        seen.append(transcript)
        return transcript

    def transcripts_for(self, guid: str) -> List[Transcript]:
        """Every transcript recorded for ``guid``, oldest first."""
        return list(self._transcripts.get(guid, []))

    @property
    def accepted(self) -> List[str]:
        return list(self._transcripts)

    def __repr__(self) -> str:
        return f"Merchant({self.name!r}, accepted={len(self._transcripts)})"
