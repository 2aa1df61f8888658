"""
E-cash configuration.

One ``ECashConfig`` is created at startup and handed to ``Bank.create``;
nothing in the package reads key material or protocol sizes from
module-level state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from .constants import (
    COIN_RIS_LENGTH,
    DEFAULT_KEY_BITS,
    IDENT_DELIMITER,
    IDENT_STR,
    MIN_KEY_BITS,
    SHARE_BYTES,
)

logger = logging.getLogger(__name__)


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ECashConfig:
    """
    Complete protocol configuration.

    Attributes
    ----------
    key_bits : int
        RSA modulus size of the bank key.
    ris_length : int
        Number of RIS positions per coin.
    share_length : int
        Length in bytes of every left/right share.
    """

    key_bits: int = DEFAULT_KEY_BITS
    ris_length: int = COIN_RIS_LENGTH
    share_length: int = SHARE_BYTES
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for name in ("key_bits", "ris_length", "share_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.log.level, str):
            errors.append(f"log level must be a string, got {self.log.level!r}")
        if errors:
            return errors

        if self.key_bits < MIN_KEY_BITS:
            errors.append(f"key_bits must be at least {MIN_KEY_BITS}")

        if self.ris_length < 1:
            errors.append("ris_length must be at least 1")

        # room for the sentinel, the delimiter and a one-byte identity
        min_share = len(IDENT_STR) + len(IDENT_DELIMITER) + 1
        if self.share_length < min_share:
            errors.append(f"share_length must be at least {min_share}")

        if logging.getLevelName(self.log.level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING,
            logging.ERROR, logging.CRITICAL,
        ):
            errors.append(f"Unknown log level: {self.log.level}")

        return errors

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: str) -> "ECashConfig":
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls(
            key_bits=data.get("key_bits", DEFAULT_KEY_BITS),
            ris_length=data.get("ris_length", COIN_RIS_LENGTH),
            share_length=data.get("share_length", SHARE_BYTES),
        )

        if "log" in data:
            config.log = LogConfig(**data["log"])

        logger.info(f"Configuration loaded from {path}")
        return config


def configure_logging(log_config: LogConfig) -> None:
    """Install handlers on the root logger according to ``log_config``."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_config.file:
        handlers.append(logging.FileHandler(log_config.file))

    logging.basicConfig(
        level=log_config.level.upper(),
        format=log_config.format,
        handlers=handlers,
        force=True,
    )
