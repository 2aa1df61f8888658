"""
Configuration and error tests
"""

import json
import logging

import pytest

from ecash.bank import Bank
from ecash.config import ECashConfig, LogConfig, configure_logging
from ecash.constants import COIN_RIS_LENGTH, DEFAULT_KEY_BITS
from ecash.errors import (
    ConfigurationError,
    ErrorCode,
    InvalidSignature,
    RisTamperDetected,
)


class TestECashConfig:
    """Tests for protocol configuration."""

    def test_defaults_valid(self):
        config = ECashConfig()
        assert config.key_bits == DEFAULT_KEY_BITS
        assert config.ris_length == COIN_RIS_LENGTH
        assert config.validate() == []

    @pytest.mark.parametrize("kwargs", [
        {"key_bits": 512},
        {"ris_length": 0},
        {"share_length": 4},
        {"log": LogConfig(level="CHATTY")},
        {"ris_length": "20"},
        {"key_bits": 2048.0},
        {"share_length": True},
        {"log": LogConfig(level=10)},
    ])
    def test_invalid(self, kwargs):
        assert len(ECashConfig(**kwargs).validate()) == 1

    def test_save_load(self, tmp_path):
        path = tmp_path / "ecash.json"
        config = ECashConfig(key_bits=1024, ris_length=8, log=LogConfig(level="DEBUG"))
        config.save(str(path))
        assert json.loads(path.read_text())["ris_length"] == 8
        assert ECashConfig.load(str(path)) == config

    def test_load_partial(self, tmp_path):
        path = tmp_path / "ecash.json"
        path.write_text(json.dumps({"ris_length": 12}))
        config = ECashConfig.load(str(path))
        assert config.ris_length == 12
        assert config.key_bits == DEFAULT_KEY_BITS

    def test_load_wrong_type_reported(self, tmp_path):
        path = tmp_path / "ecash.json"
        path.write_text(json.dumps({"ris_length": "20"}))
        config = ECashConfig.load(str(path))
        errors = config.validate()
        assert len(errors) == 1
        assert "ris_length must be an integer" in errors[0]
        with pytest.raises(ConfigurationError):
            Bank.create(config)

    def test_bank_refuses_invalid_config(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Bank.create(ECashConfig(ris_length=0))
        assert "ris_length must be at least 1" in exc_info.value.details


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_file_handler(self, tmp_path):
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))
        try:
            log_file = tmp_path / "ecash.log"
            configure_logging(LogConfig(level="warning", file=str(log_file)))
            assert root.level == logging.WARNING
            logging.getLogger("ecash.test").warning("written")
            for handler in root.handlers:
                handler.flush()
            assert "written" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = saved[1]
            root.setLevel(saved[0])


class TestErrors:
    """Tests for the error taxonomy."""

    def test_codes_distinguish_rejections(self):
        assert InvalidSignature("g").code != RisTamperDetected(0).code

    def test_to_dict(self):
        err = RisTamperDetected(4, "abc")
        data = err.to_dict()
        assert data["code"] == ErrorCode.RIS_TAMPER_DETECTED.value
        assert data["name"] == "RIS_TAMPER_DETECTED"
        assert data["details"] == {"position": 4, "guid": "abc"}
        assert "position 4" in str(err)
