"""
Contract artifact loading tests (Hardhat JSON and solc compilation).
"""

import json
from unittest.mock import patch

import pytest

from aigendao.artifacts import ArtifactStore, compile_contract, load_hardhat_artifact
from aigendao.exceptions import ArtifactError, ContractDeploymentError

DAO_ABI = [
    {"type": "constructor", "inputs": [{"name": "rewardToken", "type": "address"}]},
    {"type": "function", "name": "createContent", "inputs": []},
    {"type": "function", "name": "batchVote", "inputs": []},
    {"type": "event", "name": "ContentCreated", "inputs": []},
]


def _write_artifact(root, relative, abi=DAO_ABI, bytecode="0x608060405234801561001057600080fd5b50"):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"contractName": path.stem, "abi": abi, "bytecode": bytecode}))
    return path


class TestHardhatArtifacts:
    def test_loads_abi_and_bytecode(self, tmp_path):
        _write_artifact(tmp_path, "contracts/AIGenDAO.sol/AIGenDAO.json")

        artifact = load_hardhat_artifact(tmp_path, "AIGenDAO")

        assert artifact.name == "AIGenDAO"
        assert artifact.bytecode.startswith("0x6080")
        assert artifact.function_names() == ["createContent", "batchVote"]

    def test_debug_and_build_info_files_ignored(self, tmp_path):
        _write_artifact(tmp_path, "contracts/AIGenDAO.sol/AIGenDAO.json")
        (tmp_path / "contracts/AIGenDAO.sol/AIGenDAO.dbg.json").write_text("{}")
        (tmp_path / "build-info").mkdir()
        (tmp_path / "build-info" / "AIGenDAO.json").write_text("{}")

        assert load_hardhat_artifact(tmp_path, "AIGenDAO").abi == DAO_ABI

    def test_project_contract_shadows_library_copy(self, tmp_path):
        _write_artifact(tmp_path, "@openzeppelin/contracts/mocks/ERC20Mock.sol/ERC20Mock.json", abi=[])
        _write_artifact(tmp_path, "contracts/ERC20Mock.sol/ERC20Mock.json")

        assert load_hardhat_artifact(tmp_path, "ERC20Mock").abi == DAO_ABI

    def test_library_artifact_found_when_only_copy(self, tmp_path):
        _write_artifact(tmp_path, "@openzeppelin/contracts/mocks/ERC20Mock.sol/ERC20Mock.json")

        assert load_hardhat_artifact(tmp_path, "ERC20Mock").name == "ERC20Mock"

    def test_missing_artifact(self, tmp_path):
        with pytest.raises(ArtifactError, match="npx hardhat compile"):
            load_hardhat_artifact(tmp_path, "AIGenDAO")

    def test_ambiguous_artifact(self, tmp_path):
        _write_artifact(tmp_path, "contracts/a/AIGenDAO.sol/AIGenDAO.json")
        _write_artifact(tmp_path, "contracts/b/AIGenDAO.sol/AIGenDAO.json")

        with pytest.raises(ArtifactError, match="Ambiguous"):
            load_hardhat_artifact(tmp_path, "AIGenDAO")

    def test_interface_without_bytecode_rejected(self, tmp_path):
        _write_artifact(tmp_path, "contracts/AIGenDAO.sol/AIGenDAO.json", bytecode="0x")

        with pytest.raises(ArtifactError, match="no deployable bytecode"):
            load_hardhat_artifact(tmp_path, "AIGenDAO")

    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "contracts" / "AIGenDAO.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(ArtifactError, match="Could not read artifact"):
            load_hardhat_artifact(tmp_path, "AIGenDAO")

    def test_artifact_error_is_a_deployment_error(self, tmp_path):
        with pytest.raises(ContractDeploymentError):
            load_hardhat_artifact(tmp_path, "ERC20Mock")


class TestSolcCompilation:
    def test_compiles_named_contract(self, tmp_path):
        source = tmp_path / "AIGenDAO.sol"
        source.write_text("// SPDX-License-Identifier: MIT\npragma solidity ^0.8.21;\n")
        compiled = {
            f"{source}:IAIGenDAO": {"abi": [], "bin": ""},
            f"{source}:AIGenDAO": {"abi": DAO_ABI, "bin": "6080604052"},
        }

        with patch("aigendao.artifacts.solcx") as solcx:
            solcx.get_installed_solc_versions.return_value = []
            solcx.compile_files.return_value = compiled

            artifact = compile_contract(tmp_path, "AIGenDAO", "0.8.21")

        solcx.install_solc.assert_called_once_with("0.8.21")
        solcx.set_solc_version.assert_called_once_with("0.8.21")
        assert artifact.bytecode == "0x6080604052"
        assert artifact.abi == DAO_ABI

    def test_missing_source(self, tmp_path):
        with pytest.raises(ArtifactError, match="No source file"):
            compile_contract(tmp_path, "AIGenDAO", "0.8.21")


class TestArtifactStore:
    def test_caches_artifacts(self, tmp_path):
        _write_artifact(tmp_path, "contracts/AIGenDAO.sol/AIGenDAO.json")
        store = ArtifactStore(tmp_path)

        first = store.get("AIGenDAO")
        (tmp_path / "contracts/AIGenDAO.sol/AIGenDAO.json").unlink()

        assert store.get("AIGenDAO") is first

    def test_sources_dir_switches_to_compilation(self, tmp_path):
        store = ArtifactStore(tmp_path / "artifacts", sources_dir=tmp_path, solc_version="0.8.24")

        with patch("aigendao.artifacts.compile_contract") as compile_mock:
            store.get("ERC20Mock")

        compile_mock.assert_called_once_with(tmp_path, "ERC20Mock", "0.8.24")
