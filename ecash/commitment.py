"""
RIS pairs and their hash commitments.

For each of the ``ris_length`` positions of a coin the purchaser draws an
independent one-time pad of the identity string and commits to both
halves:

    L_i = k_i                      h^L_i = H(L_i)
    R_i = k_i ⊕ IDENT:<identity>   h^R_i = H(R_i)

The hashes go into the signed coin; the shares stay with the purchaser
until a merchant challenges a position.

Security:
- Hiding: a single share is a uniform random string.
- Binding: a share that does not hash to the signed commitment is
  caught by the merchant (collision resistance of SHA-256).
- Disclosure: two opposite shares of one position reveal the identity.

References
----------
- Chaum, Fiat, Naor (1988). "Untraceable Electronic Cash."
  CRYPTO 1988.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .constants import COIN_RIS_LENGTH, SHARE_BYTES
from .errors import ConfigurationError
from .hash import hash_share
from .otp import encode_identity, make_pad


@dataclass(frozen=True)
class RisPair:
    """One position's left/right shares with their commitments."""

    position: int
    left_share: bytes
    right_share: bytes
    left_hash: bytes          # H(left_share)
    right_hash: bytes         # H(right_share)

    @staticmethod
    def commit(position: int, plaintext: bytes) -> RisPair:
        """Pad ``plaintext`` with a fresh key and commit to both halves."""
        left, right = make_pad(plaintext)
        return RisPair(
            position=position,
            left_share=left,
            right_share=right,
            left_hash=hash_share(left),
            right_hash=hash_share(right),
        )

    def verify(self) -> bool:
        """Check that both shares still open their commitments."""
        return (
            hash_share(self.left_share) == self.left_hash
            and hash_share(self.right_share) == self.right_hash
        )


@dataclass(frozen=True)
class RisCommitments:
    """The complete, ordered set of RIS pairs for one coin."""

    pairs: Tuple[RisPair, ...]

    @staticmethod
    def build(
        identity: str,
        ris_length: int = COIN_RIS_LENGTH,
        share_length: int = SHARE_BYTES,
    ) -> RisCommitments:
        """
        Build ``ris_length`` independent RIS pairs for ``identity``.

        Parameters
        ----------
        identity : str
            Purchaser account or pseudonym.
        ris_length : int
            Number of positions; must be at least 1.
        share_length : int
            Byte length of every share.

        Raises
        ------
        ConfigurationError
            If ``ris_length < 1``.
        InvalidIdentity
            If the identity cannot be encoded in ``share_length`` bytes.
        """
        if ris_length < 1:
            raise ConfigurationError(
                "ris_length must be at least 1",
                {"ris_length": ris_length},
            )
        plaintext = encode_identity(identity, share_length)
        return RisCommitments(
            pairs=tuple(
                RisPair.commit(i, plaintext) for i in range(ris_length)
            )
        )

    def __len__(self) -> int:
        return len(self.pairs)

    @property
    def left_hashes(self) -> List[bytes]:
        return [p.left_hash for p in self.pairs]

    @property
    def right_hashes(self) -> List[bytes]:
        return [p.right_hash for p in self.pairs]

    @property
    def left_shares(self) -> List[bytes]:
        return [p.left_share for p in self.pairs]

    @property
    def right_shares(self) -> List[bytes]:
        return [p.right_share for p in self.pairs]
