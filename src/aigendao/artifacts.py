"""
Contract artifact loading.

The driver deploys contracts by name, the way ``ethers.getContractFactory``
does inside Hardhat. Artifacts are looked up in two places:

1. Hardhat build output: ``<artifacts_dir>/contracts/**/<Name>.json`` with
   ``abi`` and ``bytecode`` keys.
2. Solidity sources: ``<sources_dir>/**/<Name>.sol`` compiled with py-solc-x,
   when a sources directory is configured.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import solcx
from solcx.exceptions import SolcError

from aigendao.exceptions import ArtifactError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """ABI and creation bytecode of one named contract."""

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str

    def function_names(self) -> List[str]:
        return abi_function_names(self.abi)


def abi_function_names(abi: List[Dict[str, Any]]) -> List[str]:
    """Names of the callable functions declared in an ABI."""
    return [item["name"] for item in abi if item.get("type") == "function"]


def _ensure_solc(version: str) -> None:
    """Install solc if missing."""
    if version not in {str(v) for v in solcx.get_installed_solc_versions()}:
        logger.info("Installing solc %s", version, extra={"event": "artifacts.solc_install"})
        solcx.install_solc(version)
    solcx.set_solc_version(version)


def _validate(name: str, abi: Any, bytecode: Any, origin: str) -> ContractArtifact:
    if not isinstance(abi, list):
        raise ArtifactError(f"{origin}: 'abi' is not a list", contract_name=name)
    if not isinstance(bytecode, str) or bytecode in ("", "0x"):
        # Abstract contracts and interfaces compile to empty bytecode.
        raise ArtifactError(f"{origin}: no deployable bytecode", contract_name=name)
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    return ContractArtifact(name=name, abi=abi, bytecode=bytecode)


def load_hardhat_artifact(artifacts_dir: Path, name: str) -> ContractArtifact:
    """Load ``<Name>.json`` from a Hardhat ``artifacts`` directory."""
    root = Path(artifacts_dir)
    candidates = sorted(
        path for path in root.rglob(f"{name}.json")
        if "build-info" not in path.parts
    )
    if not candidates:
        raise ArtifactError(
            f"No artifact for {name} under {root}; run 'npx hardhat compile' first",
            contract_name=name,
            details={"artifacts_dir": str(root)},
        )
    if len(candidates) > 1:
        # Project contracts shadow library ones (e.g. @openzeppelin mocks).
        local = [path for path in candidates if (root / "contracts") in path.parents]
        candidates = local or candidates
    if len(candidates) > 1:
        raise ArtifactError(
            f"Ambiguous artifact for {name}: {', '.join(str(p) for p in candidates)}",
            contract_name=name,
        )

    path = candidates[0]
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ArtifactError(f"Could not read artifact {path}: {exc}", contract_name=name) from exc

    logger.debug("Loaded artifact %s from %s", name, path)
    return _validate(name, data.get("abi"), data.get("bytecode"), str(path))


def compile_contract(sources_dir: Path, name: str, solc_version: str) -> ContractArtifact:
    """Compile ``<Name>.sol`` from ``sources_dir`` and return its artifact."""
    root = Path(sources_dir)
    sources = sorted(root.rglob(f"{name}.sol"))
    if not sources:
        raise ArtifactError(f"No source file {name}.sol under {root}", contract_name=name)

    _ensure_solc(solc_version)
    try:
        compiled = solcx.compile_files(
            [str(sources[0])],
            output_values=["abi", "bin"],
            solc_version=solc_version,
            base_path=str(root),
            allow_paths=[str(root)],
        )
    except SolcError as exc:
        raise ArtifactError(f"Compilation of {name} failed: {exc}", contract_name=name) from exc

    # Keys look like "<path>:<ContractName>"; the file may define several.
    for key, contract_data in compiled.items():
        if key.rsplit(":", 1)[-1] == name:
            return _validate(name, contract_data.get("abi"), contract_data.get("bin"), key)
    raise ArtifactError(f"{sources[0]} does not define contract {name}", contract_name=name)


class ArtifactStore:
    """Resolves contract names to artifacts, caching each one."""

    def __init__(
        self,
        artifacts_dir: Path,
        sources_dir: Optional[Path] = None,
        solc_version: str = "0.8.21",
    ):
        self.artifacts_dir = Path(artifacts_dir)
        self.sources_dir = Path(sources_dir) if sources_dir else None
        self.solc_version = solc_version
        self._cache: Dict[str, ContractArtifact] = {}

    def get(self, name: str) -> ContractArtifact:
        if name not in self._cache:
            if self.sources_dir is not None:
                artifact = compile_contract(self.sources_dir, name, self.solc_version)
            else:
                artifact = load_hardhat_artifact(self.artifacts_dir, name)
            self._cache[name] = artifact
        return self._cache[name]
