"""
Compiler Package
Compiles Solidity projects and resolves contract artifacts
"""

from .artifacts import ArtifactId, CompiledProject, ContractArtifact, resolve_artifact
from .project import ProjectCompiler, compile_project

__all__ = [
    'ArtifactId',
    'CompiledProject',
    'ContractArtifact',
    'ProjectCompiler',
    'compile_project',
    'resolve_artifact',
]
