"""
Environment-driven configuration tests.
"""

from pathlib import Path

import pytest

from aigendao.config import DEFAULT_RPC_URL, DriverConfig
from aigendao.exceptions import ConfigurationError, EnvironmentSetupError
from fakes import HARDHAT_KEY_0

ENV_VARS = [
    "AIGENDAO_RPC_URL",
    "AIGENDAO_PRIVATE_KEY",
    "AIGENDAO_ARTIFACTS_DIR",
    "AIGENDAO_SOURCES_DIR",
    "AIGENDAO_SOLC_VERSION",
    "AIGENDAO_TX_TIMEOUT",
    "AIGENDAO_GAS_LIMIT",
    "AIGENDAO_LOG_LEVEL",
    "AIGENDAO_LOG_FILE",
    "AIGENDAO_ENVIRONMENT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_target_local_hardhat_node():
    config = DriverConfig.from_env()

    assert config.rpc_url == DEFAULT_RPC_URL == "http://127.0.0.1:8545"
    assert config.private_key is None
    assert config.artifacts_dir == Path("artifacts")
    assert config.sources_dir is None
    assert config.tx_timeout == 120
    assert config.gas_limit is None
    assert config.log_level == "INFO"


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("AIGENDAO_RPC_URL", "http://node:8545")
    monkeypatch.setenv("AIGENDAO_PRIVATE_KEY", HARDHAT_KEY_0)
    monkeypatch.setenv("AIGENDAO_SOURCES_DIR", str(tmp_path))
    monkeypatch.setenv("AIGENDAO_TX_TIMEOUT", "45")
    monkeypatch.setenv("AIGENDAO_GAS_LIMIT", "3000000")
    monkeypatch.setenv("AIGENDAO_LOG_LEVEL", "debug")

    config = DriverConfig.from_env()

    assert config.rpc_url == "http://node:8545"
    assert config.private_key == HARDHAT_KEY_0
    assert config.sources_dir == tmp_path
    assert config.tx_timeout == 45
    assert config.gas_limit == 3_000_000
    assert config.log_level == "DEBUG"


def test_private_key_hidden_from_repr():
    config = DriverConfig(private_key=HARDHAT_KEY_0)

    assert HARDHAT_KEY_0 not in repr(config)


@pytest.mark.parametrize("value", ["soon", "0", "-5"])
def test_invalid_timeout(monkeypatch, value):
    monkeypatch.setenv("AIGENDAO_TX_TIMEOUT", value)

    with pytest.raises(ConfigurationError, match="AIGENDAO_TX_TIMEOUT"):
        DriverConfig.from_env()


def test_malformed_private_key(monkeypatch):
    monkeypatch.setenv("AIGENDAO_PRIVATE_KEY", "0x1234")

    with pytest.raises(ConfigurationError) as excinfo:
        DriverConfig.from_env()

    assert "0x1234" not in str(excinfo.value)
    assert isinstance(excinfo.value, EnvironmentSetupError)


def test_unknown_log_level():
    with pytest.raises(ConfigurationError, match="log level"):
        DriverConfig(log_level="LOUD")


def test_overrides_ignore_none():
    config = DriverConfig().with_overrides(rpc_url="http://other:8545", tx_timeout=None)

    assert config.rpc_url == "http://other:8545"
    assert config.tx_timeout == 120
