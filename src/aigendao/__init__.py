"""
AIGenDAO deployment tooling.

Deploys the AIGR reward token and the AIGenDAO content/voting contract to an
EVM test network, funds the DAO and runs a scripted demo against it.
"""

__version__ = "0.1.0"

from aigendao.chain import ChainClient, TransactionResult
from aigendao.config import DriverConfig
from aigendao.contracts import ContentRecord, Web3Deployer
from aigendao.driver import DemoResult, main, run_demo

__all__ = [
    "ChainClient",
    "ContentRecord",
    "DemoResult",
    "DriverConfig",
    "TransactionResult",
    "Web3Deployer",
    "main",
    "run_demo",
]
