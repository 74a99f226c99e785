"""
Typed interfaces to the two external contracts.

The contracts themselves (ERC20Mock and AIGenDAO) live outside this package;
only the method set the driver relies on is described here. The driver depends
on the Protocols, the web3-backed classes implement them on top of
``ChainClient``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from web3.contract import Contract

from aigendao.artifacts import abi_function_names
from aigendao.chain import ChainClient, TransactionResult
from aigendao.config import DAO_CONTRACT, REWARD_TOKEN_CONTRACT, DriverConfig
from aigendao.exceptions import ArtifactError
from aigendao.units import TOKEN_DECIMALS

# Functions each artifact must expose before it is worth deploying.
REQUIRED_FUNCTIONS = {
    REWARD_TOKEN_CONTRACT: ("transfer", "balanceOf"),
    DAO_CONTRACT: (
        "createContent",
        "vote",
        "batchVote",
        "getContent",
        "claimReputationRewards",
        "creatorReputation",
    ),
}


@dataclass(frozen=True)
class ContentRecord:
    """One content entry as returned by ``getContent``."""

    prompt: str
    ai_model: str
    ipfs_hash: str
    votes: int

    @classmethod
    def from_tuple(cls, values: Sequence) -> "ContentRecord":
        prompt, ai_model, ipfs_hash, votes = values
        return cls(prompt=prompt, ai_model=ai_model, ipfs_hash=ipfs_hash, votes=int(votes))

    def as_tuple(self) -> tuple:
        return (self.prompt, self.ai_model, self.ipfs_hash, self.votes)


@runtime_checkable
class RewardToken(Protocol):
    """ERC20 reward token: constructor(name, symbol, initialHolder, initialSupply)."""

    @property
    def address(self) -> str:
        ...

    def transfer(self, to: str, amount: int) -> TransactionResult:
        ...

    def balance_of(self, account: str) -> int:
        ...

    def decimals(self) -> int:
        ...


@runtime_checkable
class AIGenDAOContract(Protocol):
    """Content/voting DAO: constructor(rewardTokenAddress)."""

    @property
    def address(self) -> str:
        ...

    def create_content(self, prompt: str, ai_model: str, ipfs_hash: str) -> TransactionResult:
        ...

    def vote(self, content_id: int) -> TransactionResult:
        ...

    def batch_vote(self, content_ids: Sequence[int]) -> TransactionResult:
        ...

    def get_content(self, content_id: int) -> ContentRecord:
        ...

    def claim_reputation_rewards(self) -> TransactionResult:
        ...

    def creator_reputation(self, account: str) -> int:
        ...


class _Web3Bound:
    def __init__(self, client: ChainClient, contract: Contract):
        self.client = client
        self.contract = contract

    @property
    def address(self) -> str:
        return self.contract.address


class Web3RewardToken(_Web3Bound):
    def transfer(self, to: str, amount: int) -> TransactionResult:
        return self.client.transact(self.contract.functions.transfer(to, amount))

    def balance_of(self, account: str) -> int:
        return int(self.client.call(self.contract.functions.balanceOf(account)))

    def decimals(self) -> int:
        # decimals() is optional ERC20 metadata.
        if "decimals" not in abi_function_names(self.contract.abi):
            return TOKEN_DECIMALS
        return int(self.client.call(self.contract.functions.decimals()))


class Web3AIGenDAO(_Web3Bound):
    def create_content(self, prompt: str, ai_model: str, ipfs_hash: str) -> TransactionResult:
        return self.client.transact(
            self.contract.functions.createContent(prompt, ai_model, ipfs_hash)
        )

    def vote(self, content_id: int) -> TransactionResult:
        return self.client.transact(self.contract.functions.vote(content_id))

    def batch_vote(self, content_ids: Sequence[int]) -> TransactionResult:
        return self.client.transact(self.contract.functions.batchVote(list(content_ids)))

    def get_content(self, content_id: int) -> ContentRecord:
        return ContentRecord.from_tuple(
            self.client.call(self.contract.functions.getContent(content_id))
        )

    def claim_reputation_rewards(self) -> TransactionResult:
        return self.client.transact(self.contract.functions.claimReputationRewards())

    def creator_reputation(self, account: str) -> int:
        return int(self.client.call(self.contract.functions.creatorReputation(account)))


@runtime_checkable
class ContractDeployer(Protocol):
    """Provider side of the driver: signer resolution and the two deployments."""

    def resolve_account(self) -> str:
        ...

    def deploy_reward_token(
        self, name: str, symbol: str, initial_holder: str, initial_supply: int
    ) -> RewardToken:
        ...

    def deploy_dao(self, reward_token_address: str) -> AIGenDAOContract:
        ...


class Web3Deployer:
    """Deploys ERC20Mock and AIGenDAO through a ``ChainClient``."""

    def __init__(self, client: ChainClient):
        self.client = client

    @classmethod
    def from_config(cls, config: DriverConfig) -> "Web3Deployer":
        return cls(ChainClient.from_config(config))

    def resolve_account(self) -> str:
        return self.client.resolve_account()

    def _check_interface(self, name: str) -> None:
        exposed = set(self.client.artifacts.get(name).function_names())
        missing = [fn for fn in REQUIRED_FUNCTIONS[name] if fn not in exposed]
        if missing:
            raise ArtifactError(
                f"{name} artifact does not expose: {', '.join(missing)}",
                contract_name=name,
                details={"missing": missing},
            )

    def deploy_reward_token(
        self, name: str, symbol: str, initial_holder: str, initial_supply: int
    ) -> Web3RewardToken:
        self._check_interface(REWARD_TOKEN_CONTRACT)
        contract = self.client.deploy(
            REWARD_TOKEN_CONTRACT, name, symbol, initial_holder, initial_supply
        )
        return Web3RewardToken(self.client, contract)

    def deploy_dao(self, reward_token_address: str) -> Web3AIGenDAO:
        self._check_interface(DAO_CONTRACT)
        return Web3AIGenDAO(self.client, self.client.deploy(DAO_CONTRACT, reward_token_address))
