"""
Project Compiler
Compiles a directory of Solidity sources with solc (via py-solc-x)
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import solcx
from loguru import logger
from packaging.version import InvalidVersion, Version
from solcx.exceptions import SolcError

from utils.exceptions import CompilationError, ConfigError, ProjectRootNotFoundError
from .artifacts import CompiledProject
from .pragma import extract_pragmas, select_version

OUTPUT_SELECTION = ["abi", "evm.bytecode.object", "evm.deployedBytecode.object", "metadata"]
SKIP_DIRS = {'node_modules', '.git'}


def collect_sources(root: Path) -> Dict[str, Dict[str, str]]:
    """
    Gather every .sol file below root as standard-JSON sources

    Args:
        root: Source root directory

    Returns:
        Dict of relative POSIX path -> {"content": source}
    """
    sources = {}
    for path in sorted(root.rglob('*.sol')):
        relative = path.relative_to(root)
        if SKIP_DIRS.intersection(relative.parts):
            continue
        sources[relative.as_posix()] = {'content': path.read_text(encoding='utf-8')}
    return sources


def resolve_solc_version(sources: Dict[str, Dict[str, str]],
                         pinned: Optional[str] = None) -> Version:
    """
    Pick (and install if needed) the solc version for a set of sources

    Args:
        sources: Standard-JSON sources
        pinned: Explicit version, skips auto-detection

    Returns:
        Compiler version

    Raises:
        CompilationError: If no released compiler satisfies every pragma
    """
    if pinned:
        try:
            version = Version(pinned.lstrip("v"))
        except InvalidVersion as e:
            raise ConfigError(f"Invalid solc version: {pinned!r}") from e
        _ensure_installed(version)
        return version

    pragmas: List[str] = []
    for source in sources.values():
        pragmas.extend(extract_pragmas(source['content']))

    installed = solcx.get_installed_solc_versions()
    version = select_version(pragmas, installed)
    if version is not None:
        logger.debug(f"Using installed solc {version}")
        return version

    version = select_version(pragmas, solcx.get_installable_solc_versions())
    if version is None:
        raise CompilationError(
            "No solc release satisfies the source pragmas", [f"pragma solidity {p}" for p in pragmas]
        )

    _ensure_installed(version)
    return version


def _ensure_installed(version: Version) -> None:
    installed = {Version(str(v)) for v in solcx.get_installed_solc_versions()}
    if version not in installed:
        logger.info(f"Installing solc {version}...")
        solcx.install_solc(str(version))


def _error_messages(errors: List[Dict[str, Any]]) -> List[str]:
    return [
        e.get('formattedMessage') or e.get('message', '')
        for e in errors
        if e.get('severity') == 'error'
    ]


def _solc_error_messages(error: SolcError) -> List[str]:
    error_dict = getattr(error, 'error_dict', None)
    if isinstance(error_dict, list):
        messages = _error_messages(error_dict)
        if messages:
            return messages
    message = getattr(error, 'message', None) or (error.args[0] if error.args else None)
    return [str(message or type(error).__name__)]


class ProjectCompiler:
    """
    Compiles all sources under a root directory in one solc invocation
    Compilation is all-or-nothing; no artifacts are written to disk
    """

    def __init__(
        self,
        root: Union[str, Path],
        solc_version: Optional[str] = None,
        optimize: bool = False,
        evm_version: Optional[str] = None,
    ):
        """
        Initialize Project Compiler

        Args:
            root: Directory holding the contract sources
            solc_version: Pinned compiler version (None = detect from pragmas)
            optimize: Enable the solc optimizer
            evm_version: Target EVM version (None = compiler default)
        """
        self.root = Path(root)
        self.solc_version = solc_version
        self.optimize = optimize
        self.evm_version = evm_version

    def standard_input(self, sources: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
        """Build the standard-JSON input for the given sources"""
        settings: Dict[str, Any] = {
            "outputSelection": {"*": {"*": OUTPUT_SELECTION}},
        }
        if self.optimize:
            settings["optimizer"] = {"enabled": True, "runs": 200}
        if self.evm_version:
            settings["evmVersion"] = self.evm_version

        return {
            "language": "Solidity",
            "sources": sources,
            "settings": settings,
        }

    def compile(self) -> CompiledProject:
        """
        Compile the project

        Returns:
            CompiledProject mapping contract ids to artifacts

        Raises:
            ProjectRootNotFoundError: If the root does not exist
            CompilationError: If solc reports any error
        """
        if not self.root.exists():
            raise ProjectRootNotFoundError(f"Project root: {str(self.root)!r} does not exist!")

        root = self.root.resolve()
        sources = collect_sources(root)

        if not sources:
            logger.warning(f"No Solidity sources found under {root}")
            return CompiledProject()

        version = resolve_solc_version(sources, self.solc_version)
        logger.info(f"Compiling {len(sources)} source file(s) with solc {version}...")

        try:
            output = solcx.compile_standard(
                self.standard_input(sources),
                solc_version=str(version),
                base_path=str(root),
                allow_paths=str(root),
            )
        except SolcError as e:
            raise CompilationError(
                "Compiling solidity project failed", _solc_error_messages(e)
            ) from e

        diagnostics = output.get('errors', [])
        errors = _error_messages(diagnostics)
        if errors:
            raise CompilationError("Compiling solidity project failed", errors)

        for warning in diagnostics:
            if warning.get('severity') == 'warning':
                logger.warning(warning.get('formattedMessage') or warning.get('message'))

        project = CompiledProject.from_standard_output(output, solc_version=str(version))
        logger.info(f"Compiled {len(project)} contract(s)")
        return project


def compile_project(
    root: Union[str, Path],
    solc_version: Optional[str] = None,
    optimize: bool = False,
    evm_version: Optional[str] = None,
) -> CompiledProject:
    """Compile every Solidity source under root"""
    compiler = ProjectCompiler(root, solc_version=solc_version, optimize=optimize,
                               evm_version=evm_version)
    return compiler.compile()
