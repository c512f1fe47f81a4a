"""
Project Compiler Tests
solc itself is mocked; see test_integration.py for real compiler runs
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from packaging.version import Version
from solcx.exceptions import SolcError

from compiler.project import (
    ProjectCompiler,
    collect_sources,
    compile_project,
    resolve_solc_version,
)
from utils.exceptions import (
    CompilationError,
    ConfigError,
    PreconditionError,
    ProjectRootNotFoundError,
)

STORAGE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

contract Answer {
    function answer() external pure returns (uint256) {
        return 42;
    }
}
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A contracts directory with one source file"""
    (tmp_path / "Answer.sol").write_text(STORAGE_SOURCE)
    return tmp_path


@pytest.fixture
def mock_solcx():
    """solcx with one installed compiler"""
    with patch('compiler.project.solcx') as solcx:
        solcx.get_installed_solc_versions.return_value = [Version("0.8.20")]
        solcx.get_installable_solc_versions.return_value = [Version("0.8.21"), Version("0.8.20")]
        yield solcx


class TestCollectSources:
    """Test gathering sources from the project root"""

    def test_relative_posix_keys(self, tmp_path):
        (tmp_path / "access").mkdir()
        (tmp_path / "access" / "Ownable.sol").write_text("contract Ownable {}")
        (tmp_path / "Token.sol").write_text("contract Token {}")

        sources = collect_sources(tmp_path)

        assert list(sources) == ["Token.sol", "access/Ownable.sol"]
        assert sources["Token.sol"] == {"content": "contract Token {}"}

    def test_skips_node_modules(self, tmp_path):
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib" / "Dep.sol").write_text("contract Dep {}")
        (tmp_path / "A.sol").write_text("contract A {}")

        assert list(collect_sources(tmp_path)) == ["A.sol"]

    def test_ignores_other_files(self, tmp_path):
        (tmp_path / "README.md").write_text("# contracts")
        assert collect_sources(tmp_path) == {}


class TestResolveSolcVersion:
    """Test compiler version selection"""

    def test_prefers_installed(self, mock_solcx):
        sources = {"A.sol": {"content": "pragma solidity ^0.8.0;"}}

        assert resolve_solc_version(sources) == Version("0.8.20")
        mock_solcx.install_solc.assert_not_called()

    def test_installs_when_needed(self, mock_solcx):
        """A pragma no installed compiler satisfies triggers an install"""
        sources = {"A.sol": {"content": "pragma solidity >=0.8.21;"}}

        assert resolve_solc_version(sources) == Version("0.8.21")
        mock_solcx.install_solc.assert_called_once_with("0.8.21")

    def test_no_release_fits(self, mock_solcx):
        sources = {"A.sol": {"content": "pragma solidity ^0.4.24;"}}

        with pytest.raises(CompilationError, match="No solc release"):
            resolve_solc_version(sources)

    def test_pinned_version(self, mock_solcx):
        """A pinned version skips pragma detection"""
        sources = {"A.sol": {"content": "pragma solidity ^0.7.0;"}}

        assert resolve_solc_version(sources, pinned="v0.8.20") == Version("0.8.20")
        mock_solcx.install_solc.assert_not_called()

    def test_invalid_pinned_version(self, mock_solcx):
        with pytest.raises(ConfigError):
            resolve_solc_version({}, pinned="latest")


class TestProjectCompiler:
    """Test compiling a project"""

    def test_missing_root_fails_before_compiling(self, tmp_path, mock_solcx):
        """A non-existent root is rejected without invoking solc"""
        missing = tmp_path / "does-not-exist"

        with pytest.raises(ProjectRootNotFoundError, match="does-not-exist"):
            ProjectCompiler(missing).compile()

        mock_solcx.compile_standard.assert_not_called()

    def test_missing_root_error_types(self, tmp_path):
        """The error is both a precondition failure and a FileNotFoundError"""
        with pytest.raises(PreconditionError):
            compile_project(tmp_path / "nope")
        with pytest.raises(FileNotFoundError):
            compile_project(tmp_path / "nope")

    def test_compiles_in_memory(self, project_dir, mock_solcx, standard_output):
        """Output is turned into a project without writing artifacts"""
        mock_solcx.compile_standard.return_value = standard_output

        project = ProjectCompiler(project_dir).compile()

        assert "Answer" in project
        assert project.solc_version == "0.8.20"
        assert sorted(p.name for p in project_dir.iterdir()) == ["Answer.sol"]

        args, kwargs = mock_solcx.compile_standard.call_args
        assert list(args[0]["sources"]) == ["Answer.sol"]
        assert kwargs["solc_version"] == "0.8.20"
        assert kwargs["base_path"] == str(project_dir.resolve())

    def test_standard_input_settings(self, tmp_path):
        compiler = ProjectCompiler(tmp_path, optimize=True, evm_version="paris")
        settings = compiler.standard_input({})["settings"]

        assert settings["optimizer"] == {"enabled": True, "runs": 200}
        assert settings["evmVersion"] == "paris"
        assert "abi" in settings["outputSelection"]["*"]["*"]

    def test_standard_input_defaults(self, tmp_path):
        settings = ProjectCompiler(tmp_path).standard_input({})["settings"]

        assert "optimizer" not in settings
        assert "evmVersion" not in settings

    def test_reports_every_error(self, project_dir, mock_solcx):
        """All compiler errors are carried, warnings are not"""
        mock_solcx.compile_standard.return_value = {
            "errors": [
                {"severity": "error", "formattedMessage": "ParserError: Expected ';'"},
                {"severity": "warning", "formattedMessage": "Warning: unused variable"},
                {"severity": "error", "formattedMessage": "TypeError: Undeclared identifier"},
            ]
        }

        with pytest.raises(CompilationError) as exc_info:
            ProjectCompiler(project_dir).compile()

        assert exc_info.value.errors == [
            "ParserError: Expected ';'",
            "TypeError: Undeclared identifier",
        ]
        assert "Undeclared identifier" in str(exc_info.value)

    def test_solc_failure(self, project_dir, mock_solcx):
        """A failing solc process becomes a CompilationError"""
        mock_solcx.compile_standard.side_effect = SolcError("solc returned a non-zero exit status")

        with pytest.raises(CompilationError) as exc_info:
            ProjectCompiler(project_dir).compile()

        assert exc_info.value.errors == ["solc returned a non-zero exit status"]
        assert isinstance(exc_info.value.__cause__, SolcError)

    def test_empty_project(self, tmp_path, mock_solcx):
        """A root without sources yields an empty project"""
        project = ProjectCompiler(tmp_path).compile()

        assert len(project) == 0
        mock_solcx.compile_standard.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
