"""
Double-spend accountability: who cheated with this coin?

The bank holds two acceptance transcripts for the same coin guid.  Either
the purchaser showed the coin to two merchants, or one merchant deposited
the same transcript twice.

Each merchant challenges position  i  with an independent random side.
If the two transcripts disclosed opposite sides anywhere, then

    v^A_i ⊕ v^B_i  =  k_i ⊕ (k_i ⊕ IDENT:<identity>)  =  IDENT:<identity>

and the purchaser is named.  With two honest, independent merchants the
sides coincide at every position only with probability  2^-k.  A single
merchant replaying its own transcript can never differ anywhere, so
finding no opening is itself the verdict: merchant fraud.

A position that discloses opposite sides but fails to decode (corrupted
or forged values) is recorded and skipped; it must not mask a valid
opening at another position.

Security properties
-------------------
- **Anonymity:** a single honest spend discloses one uniform share per
  position and reveals nothing about the purchaser.
- **Soundness:** only a string carrying the ``IDENT:`` sentinel is
  accepted as an identity, so a verdict never names anyone but the
  purchaser the shares were built for, or ``"merchant"``.

References
----------
- Chaum, Fiat, Naor (1988). "Untraceable Electronic Cash."
  CRYPTO 1988.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .constants import COIN_RIS_LENGTH, MERCHANT_VERDICT
from .errors import ConfigurationError, MalformedTranscript
from .merchant import RisElement, Transcript
from .otp import decode_identity

logger = logging.getLogger(__name__)

TranscriptLike = Union[Transcript, Sequence[RisElement]]


# ── verdict data structures ─────────────────────────────────────────────

@dataclass(frozen=True)
class PositionOutcome:
    """What one position of the two transcripts revealed."""

    position: int
    opposite_sides: bool
    identity: Optional[str] = None   # None: nothing decoded here

    @property
    def decoded(self) -> bool:
        return self.identity is not None


@dataclass(frozen=True)
class CheaterVerdict:
    """
    Result of comparing two transcripts of one coin.

    ``identity`` is the double spender, or None when the transcripts
    are indistinguishable and the depositing merchant is at fault.
    ``outcomes`` covers every position examined, in order; the scan stops
    at the first position that names the purchaser.
    """

    guid: str
    identity: Optional[str]
    outcomes: Tuple[PositionOutcome, ...]

    @property
    def merchant_fraud(self) -> bool:
        return self.identity is None

    @property
    def cheater(self) -> str:
        return MERCHANT_VERDICT if self.identity is None else self.identity

    @property
    def failed_positions(self) -> List[int]:
        """Positions that disclosed opposite sides but did not decode."""
        return [
            o.position for o in self.outcomes
            if o.opposite_sides and not o.decoded
        ]


# ── helpers ─────────────────────────────────────────────────────────────

def _elements(
    transcript: TranscriptLike,
    ris_length: int,
    label: str,
) -> Tuple[RisElement, ...]:
    if isinstance(transcript, Transcript):
        elements = transcript.elements
    elif isinstance(transcript, (list, tuple)):
        elements = tuple(transcript)
    else:
        raise MalformedTranscript(
            f"transcript {label} is not a sequence of RIS elements",
            {"type": type(transcript).__name__},
        )

    if len(elements) != ris_length:
        raise MalformedTranscript(
            f"transcript {label} has {len(elements)} elements, "
            f"expected {ris_length}",
        )
    for i, el in enumerate(elements):
        if not isinstance(el, RisElement):
            raise MalformedTranscript(
                f"transcript {label} element {i} is not a RIS element",
            )
        if el.position != i:
            raise MalformedTranscript(
                f"transcript {label} element {i} has position {el.position}",
            )
    return elements


def _examine(a: RisElement, b: RisElement) -> PositionOutcome:
    if a.is_left == b.is_left:
        if a.value != b.value:
            logger.warning(
                f"Position {a.position}: same side disclosed with "
                f"different values"
            )
        return PositionOutcome(position=a.position, opposite_sides=False)

    identity = decode_identity(a.value, b.value)
    if identity is None:
        logger.warning(
            f"Position {a.position}: opposite shares did not decode "
            f"to an identity"
        )
    return PositionOutcome(
        position=a.position, opposite_sides=True, identity=identity,
    )


# ── public API ──────────────────────────────────────────────────────────

def investigate(
    guid: str,
    transcript_a: TranscriptLike,
    transcript_b: TranscriptLike,
    *,
    ris_length: int = COIN_RIS_LENGTH,
) -> CheaterVerdict:
    """
    Compare two acceptance transcripts of coin ``guid``.

    Both transcripts are assumed to belong to the same coin; that is
    checked by whoever collected them.

    Raises
    ------
    ConfigurationError
        If ``ris_length < 1``.
    MalformedTranscript
        If either input is not an ordered sequence of ``ris_length``
        RIS elements.
    """
    if ris_length < 1:
        raise ConfigurationError(
            "ris_length must be at least 1", {"ris_length": ris_length},
        )
    elems_a = _elements(transcript_a, ris_length, "A")
    elems_b = _elements(transcript_b, ris_length, "B")

    outcomes: List[PositionOutcome] = []
    for a, b in zip(elems_a, elems_b):
        outcome = _examine(a, b)
        outcomes.append(outcome)
        if outcome.decoded:
            logger.warning(
                f"Coin {guid} was double-spent by: {outcome.identity}"
            )
            return CheaterVerdict(
                guid=guid, identity=outcome.identity, outcomes=tuple(outcomes),
            )

    logger.warning(f"Attempted double deposit of coin {guid}: merchant fraud")
    return CheaterVerdict(guid=guid, identity=None, outcomes=tuple(outcomes))


def determine_cheater(
    guid: str,
    transcript_a: TranscriptLike,
    transcript_b: TranscriptLike,
    *,
    ris_length: int = COIN_RIS_LENGTH,
) -> str:
    """
    Name the double spender of ``guid``, or ``"merchant"``.

    See ``investigate`` for the full per-position record.
    """
    return investigate(
        guid, transcript_a, transcript_b, ris_length=ris_length,
    ).cheater
