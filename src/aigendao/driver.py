"""
AIGenDAO deployment and demo driver.

Runs one linear sequence against a test network:

1. resolve the signing account
2. deploy the AIGR reward token
3. deploy AIGenDAO pointing at the token
4. fund AIGenDAO with reward tokens
5. demo: create two content entries, vote, batch vote, read, claim
6. verify reputation and token balance

Each mutating step returns only once its transaction is mined, so later steps
see earlier effects (content ids 0 and 1, the funded balance). The first error
anywhere aborts the run; nothing already mined is rolled back.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from aigendao.config import DriverConfig
from aigendao.contracts import ContentRecord, ContractDeployer, Web3Deployer
from aigendao.logging_config import setup_logging
from aigendao.units import TOKEN_DECIMALS, format_units, parse_ether

logger = logging.getLogger(__name__)

REWARD_TOKEN_NAME = "AIGen Reward"
REWARD_TOKEN_SYMBOL = "AIGR"
INITIAL_SUPPLY = "1000000"
FUND_AMOUNT = "100000"

# (prompt, AI model, IPFS hash)
DEMO_CONTENT = (
    ("A futuristic cityscape at sunset", "Stable Diffusion v2.1", "QmXyZ123...abc"),
    ("Cyberpunk character portrait", "Midjourney v5", "QmAbC456...def"),
)


@dataclass
class DemoResult:
    """Everything the run deployed and read back."""

    deployer: str
    reward_token_address: str
    dao_address: str
    funded_amount: int
    token_decimals: int = TOKEN_DECIMALS
    content_ids: List[int] = field(default_factory=list)
    content: Optional[ContentRecord] = None
    creator_reputation: int = 0
    deployer_balance: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # uint256 values can exceed what JSON consumers parse as numbers.
        data["funded_amount"] = str(self.funded_amount)
        data["deployer_balance"] = str(self.deployer_balance)
        return data


def _stage(console: Console, title: str) -> None:
    console.print(f"\n[bold cyan]==================== {title} ====================[/]")


def run_demo(deployer: ContractDeployer, console: Optional[Console] = None) -> DemoResult:
    """Deploy, fund, run the demo interactions and read back the final state."""
    console = console or Console()

    # ==================== STAGE 1: SETUP ====================
    _stage(console, "STAGE 1: SETUP")
    console.print("🚀 Starting AIGenDAO deployment...")
    account = deployer.resolve_account()
    console.print(f"🔑 Using account: [cyan]{account}[/]")

    # ==================== STAGE 2: DEPLOY REWARD TOKEN ====================
    _stage(console, "STAGE 2: DEPLOY REWARD TOKEN")
    console.print("🪙 Deploying reward token...")
    reward_token = deployer.deploy_reward_token(
        REWARD_TOKEN_NAME, REWARD_TOKEN_SYMBOL, account, parse_ether(INITIAL_SUPPLY)
    )
    console.print(f"[bold green]✅[/] Reward Token deployed to: [cyan]{reward_token.address}[/]")
    token_decimals = reward_token.decimals()

    # ==================== STAGE 3: DEPLOY AIGenDAO ====================
    _stage(console, "STAGE 3: DEPLOY AIGenDAO")
    console.print("🖼️ Deploying AIGenDAO contract...")
    dao = deployer.deploy_dao(reward_token.address)
    console.print(f"[bold green]✅[/] AIGenDAO deployed to: [cyan]{dao.address}[/]")

    result = DemoResult(
        deployer=account,
        reward_token_address=reward_token.address,
        dao_address=dao.address,
        funded_amount=parse_ether(FUND_AMOUNT),
        token_decimals=token_decimals,
    )

    # ==================== STAGE 4: FUND CONTRACT WITH REWARDS ====================
    _stage(console, "STAGE 4: FUND CONTRACT WITH REWARDS")
    console.print("💰 Funding contract with reward tokens...")
    reward_token.transfer(dao.address, result.funded_amount)
    funded = format_units(result.funded_amount, token_decimals)
    console.print(f"[bold green]✅[/] Contract funded with {funded} tokens")
    logger.info(
        "DAO funded",
        extra={"event": "demo.funded", "dao": dao.address, "amount": str(result.funded_amount)},
    )

    # ==================== STAGE 5: DEMO INTERACTIONS ====================
    _stage(console, "STAGE 5: DEMO INTERACTIONS")
    console.print("🎬 Starting demo interactions...")

    console.print("📝 Creating content...")
    for prompt, ai_model, ipfs_hash in DEMO_CONTENT:
        dao.create_content(prompt, ai_model, ipfs_hash)
        # The contract numbers entries sequentially from 0.
        content_id = len(result.content_ids)
        result.content_ids.append(content_id)
        console.print(f"[bold green]✅[/] Content created (Token ID: {content_id})")
        logger.info(
            "Content created",
            extra={"event": "demo.content_created", "content_id": content_id, "model": ai_model},
        )

    first_id = result.content_ids[0]
    console.print("🗳️ Voting on content...")
    dao.vote(first_id)
    console.print(f"[bold green]✅[/] Voted on Token ID {first_id}")

    console.print("🗳️ Batch voting...")
    dao.batch_vote(result.content_ids)
    console.print(f"[bold green]✅[/] Batch voted on Token IDs {result.content_ids}")

    console.print("🔍 Checking content details...")
    content = dao.get_content(first_id)
    result.content = content
    console.print(
        f"📋 Content {first_id} Details:\n"
        f"  Prompt: {content.prompt}\n"
        f"  AI Model: {content.ai_model}\n"
        f"  IPFS Hash: {content.ipfs_hash}\n"
        f"  Votes: {content.votes}",
        markup=False,
    )

    console.print("🏆 Claiming reputation rewards...")
    dao.claim_reputation_rewards()
    console.print("[bold green]✅[/] Reputation rewards claimed")

    # ==================== STAGE 6: VERIFICATION ====================
    _stage(console, "STAGE 6: VERIFICATION")
    console.print("🔎 Verifying contract state...")
    result.creator_reputation = dao.creator_reputation(account)
    console.print(f"🏅 Creator reputation: {result.creator_reputation}")

    result.deployer_balance = reward_token.balance_of(account)
    balance = format_units(result.deployer_balance, token_decimals)
    console.print(f"💰 Deployer token balance: {balance}")

    logger.info(
        "Demo completed",
        extra={
            "event": "demo.completed",
            "reputation": result.creator_reputation,
            "balance": str(result.deployer_balance),
        },
    )
    console.print("\n[bold green]🎉 Deployment and demo completed successfully![/]")
    return result


def write_result(result: DemoResult, output_path: Path) -> Path:
    """Persist the run summary to disk in JSON format."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(result.to_dict(), handle, indent=2, sort_keys=True)
    return output_path


def main(
    config: Optional[DriverConfig] = None,
    *,
    output: Optional[Path] = None,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    deployer_factory: Callable[[DriverConfig], ContractDeployer] = Web3Deployer.from_config,
) -> int:
    """Run the whole sequence once. Returns the process exit status."""
    console = console or Console()
    err_console = err_console or Console(stderr=True)
    try:
        config = config or DriverConfig.from_env()
        setup_logging(
            name="aigendao",
            log_file=config.log_file,
            level=config.log_level,
            environment=config.environment,
        )
        result = run_demo(deployer_factory(config), console)
        if output is not None:
            path = write_result(result, output)
            console.print(f"📄 Deployment record written to: [cyan]{path}[/]")
    except Exception as exc:
        logger.error(
            "Deployment failed: %s",
            exc,
            exc_info=True,
            extra={"event": "demo.failed", "error_type": type(exc).__name__},
        )
        err_console.print(f"[bold red]❌ Deployment failed:[/] {escape(str(exc))}")
        return 1
    return 0
