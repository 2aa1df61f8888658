"""
Cheater determination tests
"""

import dataclasses
import logging

import pytest

from ecash.accountability import determine_cheater, investigate
from ecash.constants import COIN_RIS_LENGTH, MERCHANT_VERDICT
from ecash.errors import ConfigurationError, MalformedTranscript
from ecash.merchant import Transcript, accept_coin

from tests.conftest import fixed_challenge, scripted_challenge


def _corrupt(transcript, position):
    elements = list(transcript.elements)
    el = elements[position]
    elements[position] = dataclasses.replace(el, value=bytes(len(el.value)))
    return Transcript(guid=transcript.guid, elements=tuple(elements))


@pytest.fixture
def left_transcript(coin, bank):
    return accept_coin(coin, bank.public_key, challenge=fixed_challenge(True))


@pytest.fixture
def right_transcript(coin, bank):
    return accept_coin(coin, bank.public_key, challenge=fixed_challenge(False))


class TestDoubleSpend:
    """Purchaser shows the coin to two merchants."""

    def test_opposite_sides_name_purchaser(self, coin, left_transcript, right_transcript):
        assert determine_cheater(coin.guid, left_transcript, right_transcript) == "alice"

    def test_single_differing_position(self, coin, bank):
        sides_a = [True] * COIN_RIS_LENGTH
        sides_b = [True] * COIN_RIS_LENGTH
        sides_b[11] = False
        t1 = accept_coin(coin, bank.public_key, challenge=scripted_challenge(sides_a))
        t2 = accept_coin(coin, bank.public_key, challenge=scripted_challenge(sides_b))
        verdict = investigate(coin.guid, t1, t2)
        assert verdict.identity == "alice"
        assert verdict.outcomes[-1].position == 11
        assert not verdict.merchant_fraud

    def test_random_challenges(self, coin, bank):
        for _ in range(5):
            t1 = accept_coin(coin, bank.public_key)
            t2 = accept_coin(coin, bank.public_key)
            assert determine_cheater(coin.guid, t1, t2) == "alice"

    def test_accepts_plain_sequences(self, coin, left_transcript, right_transcript):
        result = determine_cheater(
            coin.guid, list(left_transcript), tuple(right_transcript),
        )
        assert result == "alice"

    def test_logs_double_spend(self, coin, left_transcript, right_transcript, caplog):
        with caplog.at_level(logging.WARNING, logger="ecash.accountability"):
            determine_cheater(coin.guid, left_transcript, right_transcript)
        assert f"Coin {coin.guid} was double-spent by: alice" in caplog.text


class TestMerchantFraud:
    """Same transcript deposited twice."""

    def test_identical_transcript(self, coin, bank):
        t1 = accept_coin(coin, bank.public_key)
        assert determine_cheater(coin.guid, t1, t1) == MERCHANT_VERDICT

    def test_same_sides_everywhere(self, coin, left_transcript, bank):
        again = accept_coin(coin, bank.public_key, challenge=fixed_challenge(True))
        verdict = investigate(coin.guid, left_transcript, again)
        assert verdict.merchant_fraud
        assert verdict.cheater == MERCHANT_VERDICT
        assert len(verdict.outcomes) == COIN_RIS_LENGTH
        assert not any(o.opposite_sides for o in verdict.outcomes)

    def test_logs_merchant_fraud(self, coin, left_transcript, caplog):
        with caplog.at_level(logging.WARNING, logger="ecash.accountability"):
            determine_cheater(coin.guid, left_transcript, left_transcript)
        assert "merchant fraud" in caplog.text


class TestDecodeFailures:
    """Bad positions are skipped, not fatal."""

    def test_bad_position_does_not_mask_identity(self, coin, left_transcript, right_transcript):
        corrupted = _corrupt(right_transcript, 0)
        verdict = investigate(coin.guid, left_transcript, corrupted)
        assert verdict.identity == "alice"
        assert verdict.failed_positions == [0]
        assert verdict.outcomes[1].identity == "alice"

    def test_all_positions_bad(self, coin, left_transcript, right_transcript):
        corrupted = right_transcript
        for i in range(COIN_RIS_LENGTH):
            corrupted = _corrupt(corrupted, i)
        verdict = investigate(coin.guid, left_transcript, corrupted)
        assert verdict.cheater == MERCHANT_VERDICT
        assert verdict.failed_positions == list(range(COIN_RIS_LENGTH))

    def test_sides_compared_by_flag(self, coin, left_transcript):
        flipped = Transcript(
            guid=coin.guid,
            elements=tuple(
                dataclasses.replace(el, is_left=False) for el in left_transcript
            ),
        )
        verdict = investigate(coin.guid, left_transcript, flipped)
        assert verdict.merchant_fraud
        assert all(o.opposite_sides for o in verdict.outcomes)


class TestMalformedTranscript:
    """Integration errors are fatal."""

    def test_wrong_length(self, coin, left_transcript):
        short = list(left_transcript)[:-1]
        with pytest.raises(MalformedTranscript):
            determine_cheater(coin.guid, left_transcript, short)

    @pytest.mark.parametrize("bad", [None, "transcript", {"elements": []}, 42])
    def test_not_a_sequence(self, coin, left_transcript, bad):
        with pytest.raises(MalformedTranscript):
            determine_cheater(coin.guid, bad, left_transcript)

    def test_wrong_element_type(self, coin, left_transcript):
        raw = [el.to_dict() for el in left_transcript]
        with pytest.raises(MalformedTranscript):
            determine_cheater(coin.guid, left_transcript, raw)

    def test_out_of_order(self, coin, left_transcript):
        shuffled = list(reversed(list(left_transcript)))
        with pytest.raises(MalformedTranscript):
            determine_cheater(coin.guid, left_transcript, shuffled)

    def test_zero_ris_length(self, coin):
        with pytest.raises(ConfigurationError):
            determine_cheater(coin.guid, [], [], ris_length=0)
