"""
E-cash test fixtures
"""

from typing import Callable, Iterable

import pytest

from ecash.bank import Bank
from ecash.blind import BankKeyPair, generate_keypair
from ecash.coin import SignedCoin
from ecash.config import ECashConfig
from ecash.protocol import ECashProtocol


TEST_KEY_BITS = 1024


@pytest.fixture(scope="session")
def config() -> ECashConfig:
    """Smallest key pycryptodome accepts, default RIS length."""
    return ECashConfig(key_bits=TEST_KEY_BITS)


@pytest.fixture(scope="session")
def bank_keypair() -> BankKeyPair:
    return generate_keypair(TEST_KEY_BITS)


@pytest.fixture(scope="session")
def other_keypair() -> BankKeyPair:
    """An unrelated bank key."""
    return generate_keypair(TEST_KEY_BITS)


@pytest.fixture
def bank(bank_keypair, config) -> Bank:
    return Bank(bank_keypair, config)


@pytest.fixture
def protocol(bank) -> ECashProtocol:
    return ECashProtocol(bank)


@pytest.fixture
def coin(protocol) -> SignedCoin:
    """A freshly withdrawn coin for alice worth 20."""
    return protocol.withdraw("alice", 20)


def fixed_challenge(select_left: bool) -> Callable[[], bool]:
    """Challenge source that always asks for the same side."""
    return lambda: select_left


def scripted_challenge(sides: Iterable[bool]) -> Callable[[], bool]:
    """Challenge source replaying ``sides`` in order."""
    it = iter(sides)
    return lambda: next(it)
