"""
Compiled Artifacts
Holds solc output and resolves contracts by name
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from loguru import logger

from utils.exceptions import (
    AmbiguousContractError,
    ContractNotFoundError,
    MissingAbiError,
    MissingBytecodeError,
)

LIBRARY_PLACEHOLDER = "__$"


@dataclass(frozen=True, order=True)
class ArtifactId:
    """Identifies one contract by source unit and contract name"""

    source: str
    name: str

    def __str__(self) -> str:
        return f"{self.source}:{self.name}"


@dataclass
class ContractArtifact:
    """One compiled contract"""

    name: str
    source: str
    abi: Optional[List[Dict[str, Any]]] = None
    bytecode: Optional[str] = None
    deployed_bytecode: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> ArtifactId:
        return ArtifactId(self.source, self.name)

    @property
    def constructor(self) -> Optional[Dict[str, Any]]:
        """ABI entry of the constructor, if the contract declares one"""
        for item in self.abi or []:
            if item.get('type') == 'constructor':
                return item
        return None

    @property
    def functions(self) -> List[Dict[str, Any]]:
        """ABI entries of all functions"""
        return [item for item in self.abi or [] if item.get('type') == 'function']

    def into_parts(self) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str], Optional[str]]:
        """Split into (abi, bytecode, deployed_bytecode)"""
        return self.abi, self.bytecode, self.deployed_bytecode


def _normalize_bytecode(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or raw == '0x':
        return ''
    return raw if raw.startswith('0x') else '0x' + raw


class CompiledProject:
    """
    Result of compiling a directory of contract sources

    Maps ArtifactId -> ContractArtifact. Read-only once built.
    """

    def __init__(self, artifacts: Optional[Dict[ArtifactId, ContractArtifact]] = None,
                 solc_version: Optional[str] = None):
        self._artifacts: Dict[ArtifactId, ContractArtifact] = dict(artifacts or {})
        self.solc_version = solc_version

    @classmethod
    def from_standard_output(cls, output: Dict[str, Any],
                             solc_version: Optional[str] = None) -> "CompiledProject":
        """
        Build a project from solc standard-JSON output

        Args:
            output: Parsed standard-JSON compiler output
            solc_version: Compiler version used

        Returns:
            CompiledProject instance
        """
        artifacts: Dict[ArtifactId, ContractArtifact] = {}

        for source, contracts in output.get('contracts', {}).items():
            for name, compiled in contracts.items():
                evm = compiled.get('evm', {})

                metadata = compiled.get('metadata') or {}
                if isinstance(metadata, str):
                    # solc emits metadata as a JSON string
                    metadata = json.loads(metadata) if metadata else {}

                artifact = ContractArtifact(
                    name=name,
                    source=source,
                    abi=compiled.get('abi'),
                    bytecode=_normalize_bytecode(evm.get('bytecode', {}).get('object')),
                    deployed_bytecode=_normalize_bytecode(
                        evm.get('deployedBytecode', {}).get('object')
                    ),
                    metadata=metadata,
                )
                artifacts[artifact.id] = artifact

        return cls(artifacts, solc_version=solc_version)

    def __iter__(self) -> Iterator[Tuple[ArtifactId, ContractArtifact]]:
        return iter(sorted(self._artifacts.items()))

    def __len__(self) -> int:
        return len(self._artifacts)

    def __contains__(self, name: str) -> bool:
        return bool(self._matches(name))

    @property
    def artifacts(self) -> Dict[ArtifactId, ContractArtifact]:
        return dict(self._artifacts)

    def contract_names(self) -> List[str]:
        return sorted({artifact_id.name for artifact_id in self._artifacts})

    def _matches(self, name: str) -> List[ContractArtifact]:
        if ':' in name:
            source, _, contract = name.rpartition(':')
            artifact = self._artifacts.get(ArtifactId(source, contract))
            return [artifact] if artifact else []
        return [a for artifact_id, a in sorted(self._artifacts.items()) if artifact_id.name == name]

    def find(self, name: str) -> Optional[ContractArtifact]:
        """
        Look up a contract by bare name or `source:Name`

        Args:
            name: Contract name

        Returns:
            Matching artifact, or None

        Raises:
            AmbiguousContractError: If a bare name matches several sources
        """
        matches = self._matches(name)
        if len(matches) > 1:
            candidates = ', '.join(str(a.id) for a in matches)
            raise AmbiguousContractError(
                f"Contract name '{name}' is ambiguous, use one of: {candidates}"
            )
        return matches[0] if matches else None


def resolve_artifact(project: CompiledProject, name: str) -> ContractArtifact:
    """
    Resolve one named contract and check it can be deployed

    Args:
        project: Compiled project
        name: Contract name (bare or `source:Name`)

    Returns:
        ContractArtifact with both ABI and bytecode

    Raises:
        ContractNotFoundError: If no contract has that name
        MissingAbiError: If the artifact has no ABI
        MissingBytecodeError: If the artifact has no bytecode (interfaces, abstract contracts)
    """
    artifact = project.find(name)
    if artifact is None:
        raise ContractNotFoundError(f"Contract not found: '{name}'")

    if artifact.abi is None:
        raise MissingAbiError(f"Missing abi from contract '{artifact.id}'")

    if not artifact.bytecode:
        raise MissingBytecodeError(f"Missing bytecode from contract '{artifact.id}'")

    if LIBRARY_PLACEHOLDER in artifact.bytecode:
        logger.warning(f"{artifact.id} has unlinked libraries (placeholders present)")

    logger.debug(f"Resolved {artifact.id} ({(len(artifact.bytecode) - 2) // 2} bytes)")
    return artifact
