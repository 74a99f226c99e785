#!/usr/bin/env python3
"""
AIGenDAO CLI - deploy the reward token and AIGenDAO, then run the demo.

Every option is optional and falls back to the AIGENDAO_* environment
variables, so ``aigendao-deploy`` with no arguments runs the standard
sequence against the configured node.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from aigendao.config import DriverConfig
from aigendao.driver import main as run_driver
from aigendao.exceptions import ConfigurationError

console = Console()
err_console = Console(stderr=True)


@click.command(name="aigendao-deploy")
@click.option("--rpc-url", help="JSON-RPC endpoint of the node (default: AIGENDAO_RPC_URL).")
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Hardhat artifacts directory holding ERC20Mock.json and AIGenDAO.json.",
)
@click.option(
    "--sources-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Compile ERC20Mock.sol / AIGenDAO.sol from here with solc instead.",
)
@click.option("--solc-version", help="solc version used with --sources-dir.")
@click.option("--tx-timeout", type=click.IntRange(min=1), help="Seconds to wait for each receipt.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write JSON logs here.")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the deployed addresses and final state as JSON.",
)
def cli(rpc_url, artifacts_dir, sources_dir, solc_version, tx_timeout, log_level, log_file, output):
    """Deploy AIGR + AIGenDAO, fund it and run the demo interactions."""
    try:
        config = DriverConfig.from_env().with_overrides(
            rpc_url=rpc_url,
            artifacts_dir=artifacts_dir,
            sources_dir=sources_dir,
            solc_version=solc_version,
            tx_timeout=tx_timeout,
            log_level=log_level.upper() if log_level else None,
            log_file=log_file,
        )
    except ConfigurationError as exc:
        err_console.print(f"[bold red]❌ Deployment failed:[/] {escape(str(exc))}")
        sys.exit(1)
    sys.exit(run_driver(config, output=output, console=console, err_console=err_console))


def main():
    """Console-script entry point."""
    cli()


if __name__ == "__main__":
    main()
