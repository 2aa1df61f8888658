"""
RSA blind signature tests
"""

import pytest

from ecash.blind import (
    BankPublicKey,
    blind,
    generate_keypair,
    sign_blinded,
    unblind,
    verify,
)
from ecash.errors import KeyGenerationFailure, SigningFailure
from ecash.hash import message_digest


MESSAGE = b"ELECTRONIC_PIGGYBANK-20-abc-00-11"


class TestKeyGeneration:
    """Tests for bank key generation."""

    def test_key_size(self, bank_keypair):
        assert bank_keypair.public.bits == 1024
        assert bank_keypair.public.e == 65537

    def test_too_small(self):
        with pytest.raises(KeyGenerationFailure):
            generate_keypair(512)

    def test_public_key_dict(self, bank_keypair):
        data = bank_keypair.public.to_dict()
        assert BankPublicKey.from_dict(data) == bank_keypair.public

    def test_repr_hides_private_exponent(self, bank_keypair):
        assert str(bank_keypair.d) not in repr(bank_keypair)


class TestBlindSignature:
    """Tests for blind / sign / unblind / verify."""

    def test_full_cycle(self, bank_keypair):
        pk = bank_keypair.public
        blinded, r = blind(MESSAGE, pk)
        signature = unblind(sign_blinded(blinded, bank_keypair), r, pk)
        assert verify(signature, pk, MESSAGE)

    def test_signature_bound_to_message(self, bank_keypair):
        pk = bank_keypair.public
        blinded, r = blind(MESSAGE, pk)
        signature = unblind(sign_blinded(blinded, bank_keypair), r, pk)
        assert not verify(signature, pk, MESSAGE + b"0")

    def test_signature_bound_to_key(self, bank_keypair, other_keypair):
        pk = bank_keypair.public
        blinded, r = blind(MESSAGE, pk)
        signature = unblind(sign_blinded(blinded, bank_keypair), r, pk)
        assert not verify(signature, other_keypair.public, MESSAGE)

    def test_blinded_hides_digest(self, bank_keypair):
        pk = bank_keypair.public
        b1, _ = blind(MESSAGE, pk)
        b2, _ = blind(MESSAGE, pk)
        assert b1 != b2
        assert b1 != message_digest(MESSAGE)

    def test_signing_deterministic(self, bank_keypair):
        blinded, _ = blind(MESSAGE, bank_keypair.public)
        assert sign_blinded(blinded, bank_keypair) == sign_blinded(blinded, bank_keypair)

    @pytest.mark.parametrize("bad", [0, -5, "123", 1.5, True, None])
    def test_sign_rejects_bad_input(self, bank_keypair, bad):
        with pytest.raises(SigningFailure):
            sign_blinded(bad, bank_keypair)

    def test_sign_rejects_out_of_range(self, bank_keypair):
        with pytest.raises(SigningFailure):
            sign_blinded(bank_keypair.public.n, bank_keypair)

    def test_verify_rejects_out_of_range(self, bank_keypair):
        pk = bank_keypair.public
        assert not verify(0, pk, MESSAGE)
        assert not verify(pk.n + 1, pk, MESSAGE)

    @pytest.mark.parametrize("bad", [None, "123", 1.5, True])
    def test_verify_rejects_non_integer(self, bank_keypair, bad):
        assert verify(bad, bank_keypair.public, MESSAGE) is False
