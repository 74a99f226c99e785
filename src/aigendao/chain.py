"""
Network and signing context for the driver.

``ChainClient`` wraps a web3 connection and one signer. It deploys contracts
by name and sends contract transactions, and every mutating call blocks until
its receipt is mined. A mined receipt with ``status == 0`` is a revert and is
raised, so a call that returns has been confirmed successfully.

Two signer modes:
- node accounts: the first unlocked account of the node (Hardhat default)
- local key: ``AIGENDAO_PRIVATE_KEY``; transactions are signed locally
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import Web3
from web3.contract import Contract
from web3.contract.contract import ContractFunction
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.types import TxParams

from aigendao.artifacts import ArtifactStore
from aigendao.config import DriverConfig
from aigendao.exceptions import (
    AccountUnavailableError,
    ContractCallError,
    ContractDeploymentError,
    NodeConnectionError,
)

logger = logging.getLogger(__name__)

# Errors web3 raises for RPC failures, reverts and unreachable nodes.
RPC_ERRORS = (Web3Exception, requests.exceptions.RequestException)


@dataclass(frozen=True)
class TransactionResult:
    """A mined, successful transaction."""

    tx_hash: str
    block_number: int
    status: int
    gas_used: int
    contract_address: Optional[str] = None


class ChainClient:
    """Explicit signing context passed into the driver."""

    def __init__(
        self,
        w3: Web3,
        artifacts: ArtifactStore,
        *,
        private_key: Optional[str] = None,
        tx_timeout: int = 120,
        gas_limit: Optional[int] = None,
    ):
        self.w3 = w3
        self.artifacts = artifacts
        self.tx_timeout = tx_timeout
        self.gas_limit = gas_limit
        self._local_account: Optional[LocalAccount] = (
            Account.from_key(private_key) if private_key else None
        )
        self._account: Optional[str] = None

    @classmethod
    def from_config(cls, config: DriverConfig) -> "ChainClient":
        w3 = Web3(Web3.HTTPProvider(config.rpc_url))
        artifacts = ArtifactStore(
            config.artifacts_dir,
            sources_dir=config.sources_dir,
            solc_version=config.solc_version,
        )
        return cls(
            w3,
            artifacts,
            private_key=config.private_key,
            tx_timeout=config.tx_timeout,
            gas_limit=config.gas_limit,
        )

    def is_connected(self) -> bool:
        return bool(self.w3.is_connected())

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    @property
    def account(self) -> str:
        if self._account is None:
            return self.resolve_account()
        return self._account

    def resolve_account(self) -> str:
        """Return the signing address, failing fast when none is available."""
        if self._account is not None:
            return self._account

        if not self.is_connected():
            raise NodeConnectionError(
                f"Node is not reachable at {self.w3.provider}",
                details={"provider": str(self.w3.provider)},
            )

        if self._local_account is not None:
            self._account = to_checksum_address(self._local_account.address)
        else:
            try:
                accounts = self.w3.eth.accounts
            except RPC_ERRORS as exc:
                raise NodeConnectionError(
                    f"Could not list accounts from node: {exc}",
                    details={"provider": str(self.w3.provider)},
                ) from exc
            if not accounts:
                raise AccountUnavailableError(
                    "Node exposes no unlocked accounts; set AIGENDAO_PRIVATE_KEY",
                    details={"provider": str(self.w3.provider)},
                )
            self._account = to_checksum_address(accounts[0])

        logger.info(
            "Signing account resolved",
            extra={
                "event": "chain.account_resolved",
                "account": self._account,
                "signer": "local_key" if self._local_account else "node_account",
            },
        )
        return self._account

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _build_tx_params(self) -> TxParams:
        sender = self.account
        params: TxParams = {
            "from": sender,
            "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
            "chainId": self.w3.eth.chain_id,
        }
        latest_block = self.w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas")
        if base_fee is None:
            # Pre-London chain: legacy pricing.
            params["gasPrice"] = self.w3.eth.gas_price
        else:
            try:
                priority_fee = int(self.w3.eth.max_priority_fee)
            except RPC_ERRORS:
                priority_fee = int(base_fee // 10)
            params["maxPriorityFeePerGas"] = priority_fee
            params["maxFeePerGas"] = base_fee * 2 + priority_fee
        if self.gas_limit is not None:
            params["gas"] = self.gas_limit
        return params

    def _send_and_wait(self, tx: TxParams) -> Any:
        if "gas" not in tx:
            tx["gas"] = self.w3.eth.estimate_gas(tx)
        if self._local_account is not None:
            signed = self._local_account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = self.w3.eth.send_transaction(tx)
        logger.debug("Transaction submitted: %s", Web3.to_hex(tx_hash))
        return self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.tx_timeout)

    @staticmethod
    def _result(receipt: Any) -> TransactionResult:
        return TransactionResult(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=int(receipt["blockNumber"]),
            status=int(receipt["status"]),
            gas_used=int(receipt["gasUsed"]),
            contract_address=receipt.get("contractAddress"),
        )

    def deploy(self, name: str, *constructor_args: Any) -> Contract:
        """Deploy contract ``name`` and return it once the deployment is mined."""
        artifact = self.artifacts.get(name)
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        try:
            tx = factory.constructor(*constructor_args).build_transaction(self._build_tx_params())
            receipt = self._send_and_wait(tx)
        except ContractLogicError as exc:
            raise ContractDeploymentError(
                f"{name} constructor reverted: {exc}", contract_name=name
            ) from exc
        except TimeExhausted as exc:
            raise ContractDeploymentError(
                f"{name} deployment not mined within {self.tx_timeout}s", contract_name=name
            ) from exc
        except RPC_ERRORS as exc:
            raise ContractDeploymentError(
                f"{name} deployment failed: {exc}", contract_name=name
            ) from exc

        result = self._result(receipt)
        if result.status != 1 or not result.contract_address:
            raise ContractDeploymentError(
                f"{name} deployment reverted in tx {result.tx_hash}",
                contract_name=name,
                details={"block": result.block_number},
            )

        logger.info(
            "Contract deployed",
            extra={
                "event": "chain.deployed",
                "contract": name,
                "address": result.contract_address,
                "tx_hash": result.tx_hash,
                "gas_used": result.gas_used,
            },
        )
        return self.w3.eth.contract(address=result.contract_address, abi=artifact.abi)

    def transact(self, function: ContractFunction) -> TransactionResult:
        """Send a state-changing contract call and wait for it to be mined."""
        name = function.fn_name
        try:
            tx = function.build_transaction(self._build_tx_params())
            receipt = self._send_and_wait(tx)
        except ContractLogicError as exc:
            raise ContractCallError(f"{name} reverted: {exc}", function_name=name) from exc
        except TimeExhausted as exc:
            raise ContractCallError(
                f"{name} not mined within {self.tx_timeout}s", function_name=name
            ) from exc
        except RPC_ERRORS as exc:
            raise ContractCallError(f"{name} failed: {exc}", function_name=name) from exc

        result = self._result(receipt)
        if result.status != 1:
            raise ContractCallError(
                f"{name} reverted in tx {result.tx_hash}",
                function_name=name,
                tx_hash=result.tx_hash,
                details={"block": result.block_number},
            )

        logger.info(
            "Transaction confirmed",
            extra={
                "event": "chain.confirmed",
                "function": name,
                "tx_hash": result.tx_hash,
                "block": result.block_number,
                "gas_used": result.gas_used,
            },
        )
        return result

    def call(self, function: ContractFunction) -> Any:
        """Run a read-only contract call (``eth_call``) from the signer."""
        name = function.fn_name
        try:
            return function.call({"from": self.account})
        except ContractLogicError as exc:
            raise ContractCallError(f"{name} call reverted: {exc}", function_name=name) from exc
        except RPC_ERRORS as exc:
            raise ContractCallError(f"{name} call failed: {exc}", function_name=name) from exc
