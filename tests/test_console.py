"""
Project Listing Tests
"""

import pytest

from compiler.artifacts import CompiledProject, ContractArtifact
from utils.console import format_params, print_project
from utils.exceptions import MissingAbiError


class TestFormatParams:

    def test_named_and_unnamed(self):
        params = [{'type': 'address', 'name': 'owner'}, {'type': 'uint256', 'name': ''}]
        assert format_params(params) == "(address owner, uint256)"

    def test_empty(self):
        assert format_params([]) == "()"


class TestPrintProject:
    """Test the contract listing"""

    def test_lists_every_contract(self, compiled_project):
        lines = print_project(compiled_project)

        assert "CONTRACT: Answer (Answer.sol)" in lines
        assert "CONTRACT: Ownable (access/Ownable.sol)" in lines
        assert "CONTRACT: IOwnable (access/Ownable.sol)" in lines
        assert lines.count("=" * 80) == 3

    def test_constructor_and_functions(self, compiled_project):
        lines = print_project(compiled_project)

        assert "CONSTRUCTOR args: (address initialOwner)" in lines
        assert "FUNCTION transferOwnership (address newOwner)" in lines
        assert "FUNCTION answer ()" in lines

    def test_no_constructor_line_without_constructor(self, compiled_project):
        lines = print_project(compiled_project)
        answer_start = lines.index("CONTRACT: Answer (Answer.sol)")

        assert not lines[answer_start + 1].startswith("CONSTRUCTOR")

    def test_missing_abi(self):
        artifact = ContractArtifact(name='Broken', source='Broken.sol', abi=None, bytecode='0x00')
        project = CompiledProject({artifact.id: artifact})

        with pytest.raises(MissingAbiError, match="Broken"):
            print_project(project)

    def test_empty_project(self):
        assert print_project(CompiledProject()) == []


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
