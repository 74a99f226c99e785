"""
Exception hierarchy for the AIGenDAO deployment driver.

Every failure the driver can hit falls into one of three kinds:

- environment errors: no signing account, bad configuration
- deployment errors: artifact missing, deployment reverted or not mined
- call errors: a contract call or transaction failed or reverted

None of them is recovered locally. The driver aborts on the first one and
``main`` turns it into exit status 1.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AIGenDAOError(Exception):
    """Base exception for all driver errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ==================== Environment Errors ====================


class EnvironmentSetupError(AIGenDAOError):
    """Raised when the execution environment cannot support a run."""
    pass


class ConfigurationError(EnvironmentSetupError):
    """Raised when required configuration is missing or invalid."""
    pass


class AccountUnavailableError(EnvironmentSetupError):
    """Raised when no signing account can be resolved from the provider."""
    pass


class NodeConnectionError(EnvironmentSetupError):
    """Raised when the RPC endpoint cannot be reached."""
    pass


# ==================== Deployment Errors ====================


class ContractDeploymentError(AIGenDAOError):
    """Raised when a contract deployment fails, reverts or is never mined."""

    def __init__(
        self,
        message: str,
        contract_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.contract_name = contract_name


class ArtifactError(ContractDeploymentError):
    """Raised when a contract's ABI or bytecode cannot be loaded or compiled."""
    pass


# ==================== Call Errors ====================


class ContractCallError(AIGenDAOError):
    """Raised when a contract call or transaction fails or reverts."""

    def __init__(
        self,
        message: str,
        function_name: Optional[str] = None,
        tx_hash: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.function_name = function_name
        self.tx_hash = tx_hash
