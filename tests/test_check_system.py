"""
System Check Script Tests
"""

import importlib.util
from pathlib import Path

import pytest

from utils.config import DeployConfig

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "check_system.py"


@pytest.fixture(scope="module")
def check_system():
    spec = importlib.util.spec_from_file_location("check_system", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCheckSystem:
    """Test the preflight checks"""

    def test_missing_devnet_binary(self, check_system):
        config = DeployConfig(devnet_binary='definitely-not-a-devnet-binary')
        assert check_system.check_devnet_binary(config) is False

    def test_contract_declared(self, check_system, tmp_path):
        (tmp_path / "Token.sol").write_text("pragma solidity ^0.8.0;\ncontract Token {}\n")
        config = DeployConfig(contracts_dir=str(tmp_path), contract_name='Token')

        assert check_system.check_contract_sources(config) is True

    def test_contract_not_declared(self, check_system, tmp_path):
        (tmp_path / "Token.sol").write_text("pragma solidity ^0.8.0;\ncontract Token {}\n")
        config = DeployConfig(contracts_dir=str(tmp_path), contract_name='SimpleStorage')

        assert check_system.check_contract_sources(config) is False

    def test_qualified_name(self, check_system, tmp_path):
        """`source:Name` is accepted like artifact resolution accepts it"""
        (tmp_path / "SimpleStorage.sol").write_text("contract SimpleStorage {}\n")
        config = DeployConfig(contracts_dir=str(tmp_path),
                              contract_name='SimpleStorage.sol:SimpleStorage')

        assert check_system.check_contract_sources(config) is True

    def test_qualified_name_wrong_source(self, check_system, tmp_path):
        (tmp_path / "SimpleStorage.sol").write_text("contract SimpleStorage {}\n")
        (tmp_path / "Other.sol").write_text("contract Other {}\n")
        config = DeployConfig(contracts_dir=str(tmp_path), contract_name='Other.sol:SimpleStorage')

        assert check_system.check_contract_sources(config) is False

    def test_longer_name_does_not_count(self, check_system, tmp_path):
        """A declaration of SimpleStorageV2 does not declare SimpleStorage"""
        (tmp_path / "SimpleStorageV2.sol").write_text("contract SimpleStorageV2 {}\n")
        config = DeployConfig(contracts_dir=str(tmp_path), contract_name='SimpleStorage')

        assert check_system.check_contract_sources(config) is False

    def test_declares_contract(self, check_system):
        assert check_system.declares_contract("abstract contract Base {}", "Base")
        assert not check_system.declares_contract("// contract Base {}", "Base")
        assert not check_system.declares_contract("interface IBase {}", "Base")

    def test_missing_contracts_dir(self, check_system, tmp_path):
        config = DeployConfig(contracts_dir=str(tmp_path / "missing"))
        assert check_system.check_contract_sources(config) is False

    def test_empty_contracts_dir(self, check_system, tmp_path):
        config = DeployConfig(contracts_dir=str(tmp_path))
        assert check_system.check_contract_sources(config) is False


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
