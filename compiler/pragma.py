"""
Solidity Pragma Resolution
Turns `pragma solidity` ranges into compiler version choices
"""

import re
from typing import Iterable, List, Optional

from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);")
COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
COMPARATOR_RE = re.compile(r"(\^|~|>=|<=|>|<|=)?\s*v?(\d+(?:\.(?:\d+|[xX*]))?(?:\.(?:\d+|[xX*]))?)")
HYPHEN_RE = re.compile(r"^\s*v?([\d.]+)\s+-\s+v?([\d.]+)\s*$")


def extract_pragmas(source: str) -> List[str]:
    """
    Find the version expressions of every `pragma solidity` in a source file

    Args:
        source: Solidity source text

    Returns:
        List of raw version expressions, e.g. ["^0.8.0"]
    """
    stripped = COMMENT_RE.sub('', source)
    return [match.strip() for match in PRAGMA_RE.findall(stripped)]


def _parts(version: str) -> List[Optional[int]]:
    parts: List[Optional[int]] = []
    for piece in version.split('.')[:3]:
        parts.append(None if piece in ('x', 'X', '*') else int(piece))
    while len(parts) < 3:
        parts.append(None)
    return parts


def _fmt(major: int, minor: int, patch: int) -> str:
    return f"{major}.{minor}.{patch}"


def _comparator_to_specifiers(operator: str, version: str) -> List[str]:
    major, minor, patch = _parts(version)
    if major is None:
        return []

    lower = _fmt(major, minor or 0, patch or 0)

    if operator == '^':
        if major > 0:
            upper = _fmt(major + 1, 0, 0)
        elif minor is None:
            upper = _fmt(1, 0, 0)
        elif minor > 0 or patch is None:
            upper = _fmt(0, minor + 1, 0)
        else:
            upper = _fmt(0, 0, patch + 1)
        return [f">={lower}", f"<{upper}"]

    if operator == '~':
        if minor is None:
            return [f">={lower}", f"<{_fmt(major + 1, 0, 0)}"]
        return [f">={lower}", f"<{_fmt(major, minor + 1, 0)}"]

    if operator in ('', '='):
        # Partial versions act as ranges ("0.8" == "0.8.x")
        if minor is None:
            return [f">={lower}", f"<{_fmt(major + 1, 0, 0)}"]
        if patch is None:
            return [f">={lower}", f"<{_fmt(major, minor + 1, 0)}"]
        return [f"=={lower}"]

    if operator in ('>', '<=') and patch is None:
        # Partial versions cover the whole range ("<=0.8" == "<0.9.0", ">0.8" == ">=0.9.0")
        if minor is None:
            bound = _fmt(major + 1, 0, 0)
        else:
            bound = _fmt(major, minor + 1, 0)
        return [f">={bound}"] if operator == '>' else [f"<{bound}"]

    return [f"{operator}{lower}"]


def pragma_to_specifiers(expression: str) -> List[SpecifierSet]:
    """
    Convert an npm-style pragma expression into packaging specifier sets

    Each `||` alternative becomes one SpecifierSet; a version satisfies the
    pragma when it is contained in any of them.

    Args:
        expression: Version expression, e.g. ">=0.6.0 <0.9.0 || ^0.4.24"

    Returns:
        List of SpecifierSet alternatives
    """
    alternatives = []
    for alternative in expression.split('||'):
        alternative = alternative.strip()
        specifiers: List[str] = []

        hyphen = HYPHEN_RE.match(alternative)
        if hyphen:
            specifiers = [f">={_fmt(*[p or 0 for p in _parts(hyphen.group(1))])}",
                          f"<={_fmt(*[p or 0 for p in _parts(hyphen.group(2))])}"]
        else:
            for operator, version in COMPARATOR_RE.findall(alternative):
                specifiers.extend(_comparator_to_specifiers(operator, version))

        alternatives.append(SpecifierSet(','.join(specifiers)))

    return alternatives


def satisfies(version: Version, expression: str) -> bool:
    """Check a compiler version against one pragma expression"""
    return any(version in spec for spec in pragma_to_specifiers(expression))


def select_version(pragmas: Iterable[str], candidates: Iterable) -> Optional[Version]:
    """
    Pick the highest compiler version satisfying every pragma

    Args:
        pragmas: Pragma expressions gathered from all sources
        candidates: Available versions (Version objects or strings)

    Returns:
        Highest matching Version, or None if nothing fits
    """
    pragmas = list(pragmas)
    versions = []
    for candidate in candidates:
        try:
            versions.append(Version(str(candidate)))
        except InvalidVersion:
            continue

    for version in sorted(versions, reverse=True):
        if all(satisfies(version, pragma) for pragma in pragmas):
            return version

    return None
