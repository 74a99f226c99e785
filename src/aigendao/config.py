"""
AIGenDAO Driver Configuration

All settings come from environment variables so the driver can run with no
command-line arguments against whatever node the surrounding environment
provides (a local Hardhat node by default).

SECURITY NOTICE:
- AIGENDAO_PRIVATE_KEY must only ever be supplied via the environment
- Never commit keys to version control
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from eth_utils import is_hexstr, remove_0x_prefix

from aigendao.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_ARTIFACTS_DIR = "artifacts"
DEFAULT_SOLC_VERSION = "0.8.21"
DEFAULT_TX_TIMEOUT = 120  # seconds, same as web3's wait_for_transaction_receipt

REWARD_TOKEN_CONTRACT = "ERC20Mock"
DAO_CONTRACT = "AIGenDAO"


def _get_int(env_var: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be an integer, got {raw!r}",
            details={"env_var": env_var},
        ) from exc
    if value <= 0:
        raise ConfigurationError(
            f"{env_var} must be positive, got {value}",
            details={"env_var": env_var},
        )
    return value


def _get_optional(env_var: str) -> Optional[str]:
    value = os.getenv(env_var, "").strip()
    return value or None


def _validate_private_key(key: Optional[str]) -> Optional[str]:
    if key is None:
        return None
    if not is_hexstr(key) or len(remove_0x_prefix(key)) != 64:
        # Never echo the key itself.
        raise ConfigurationError("AIGENDAO_PRIVATE_KEY must be a 32-byte hex string")
    return key


@dataclass(frozen=True)
class DriverConfig:
    """Settings for one deployment-and-demo run."""

    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = field(default=None, repr=False)
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR)
    sources_dir: Optional[Path] = None
    solc_version: str = DEFAULT_SOLC_VERSION
    tx_timeout: int = DEFAULT_TX_TIMEOUT
    gas_limit: Optional[int] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    environment: str = "development"

    def __post_init__(self) -> None:
        _validate_private_key(self.private_key)
        if not isinstance(getattr(logging, self.log_level.upper(), None), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "DriverConfig":
        """Build the configuration from AIGENDAO_* environment variables."""
        sources_dir = _get_optional("AIGENDAO_SOURCES_DIR")
        config = cls(
            rpc_url=os.getenv("AIGENDAO_RPC_URL", DEFAULT_RPC_URL).strip() or DEFAULT_RPC_URL,
            private_key=_get_optional("AIGENDAO_PRIVATE_KEY"),
            artifacts_dir=Path(os.getenv("AIGENDAO_ARTIFACTS_DIR", DEFAULT_ARTIFACTS_DIR)),
            sources_dir=Path(sources_dir) if sources_dir else None,
            solc_version=os.getenv("AIGENDAO_SOLC_VERSION", DEFAULT_SOLC_VERSION).strip(),
            tx_timeout=_get_int("AIGENDAO_TX_TIMEOUT", DEFAULT_TX_TIMEOUT),
            gas_limit=_get_int("AIGENDAO_GAS_LIMIT", None),
            log_level=os.getenv("AIGENDAO_LOG_LEVEL", "INFO").strip().upper(),
            log_file=_get_optional("AIGENDAO_LOG_FILE"),
            environment=os.getenv("AIGENDAO_ENVIRONMENT", "development").strip(),
        )
        logger.debug(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "rpc_url": config.rpc_url,
                "signer": "local_key" if config.private_key else "node_accounts",
            },
        )
        return config

    def with_overrides(self, **overrides: Any) -> "DriverConfig":
        """Return a copy with every non-None override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)
