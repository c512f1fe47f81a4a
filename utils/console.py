"""
Console Output
Human-readable listing of a compiled project
"""

from typing import Any, Dict, List

from loguru import logger

from compiler.artifacts import CompiledProject
from utils.exceptions import MissingAbiError


def format_params(params: List[Dict[str, Any]]) -> str:
    """Render ABI inputs as `(type name, ...)`"""
    rendered = []
    for param in params:
        name = param.get('name')
        rendered.append(f"{param['type']} {name}" if name else param['type'])
    return f"({', '.join(rendered)})"


def print_project(project: CompiledProject) -> List[str]:
    """
    Log every contract with its constructor and function signatures

    Args:
        project: Compiled project

    Returns:
        The lines that were logged

    Raises:
        MissingAbiError: If an artifact has no ABI
    """
    lines = []

    for artifact_id, artifact in project:
        if artifact.abi is None:
            raise MissingAbiError(f"No ABI found for artifact {artifact_id.name}")

        lines.append("=" * 80)
        lines.append(f"CONTRACT: {artifact_id.name} ({artifact_id.source})")

        constructor = artifact.constructor
        if constructor is not None:
            lines.append(f"CONSTRUCTOR args: {format_params(constructor.get('inputs', []))}")

        for function in artifact.functions:
            lines.append(f"FUNCTION {function['name']} {format_params(function.get('inputs', []))}")

    for line in lines:
        logger.info(line)

    return lines
