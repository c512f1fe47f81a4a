"""
System Check Script
Verifies the toolchain and contract sources before a deployment run
Run from the repository root: python -m scripts.check_system
"""

import re
import shutil
import sys
from pathlib import Path

import solcx
from loguru import logger

from compiler.pragma import COMMENT_RE
from compiler.project import collect_sources
from utils.config import DeployConfig
from utils.exceptions import ConfigError


def declares_contract(source: str, name: str) -> bool:
    """Check a source declares `contract <name>` (comments ignored)"""
    pattern = rf"\bcontract\s+{re.escape(name)}\b"
    return re.search(pattern, COMMENT_RE.sub('', source)) is not None


def check_devnet_binary(config: DeployConfig) -> bool:
    """Check the devnet executable is on PATH"""
    logger.info("Checking devnet binary...")

    path = shutil.which(config.devnet_binary)
    if path is None:
        logger.error(f"  ✗ {config.devnet_binary} not found on PATH")
        logger.info("  Install ganache (npm i -g ganache) or anvil (foundryup)")
        return False

    logger.success(f"  ✓ {config.devnet_binary}: {path}")
    return True


def check_solc(config: DeployConfig) -> bool:
    """Check which solc versions are installed"""
    logger.info("Checking solc installations...")

    installed = solcx.get_installed_solc_versions()
    if not installed:
        logger.warning("  No solc installed yet (will be installed on first compile)")
        return True

    logger.success(f"  ✓ Installed: {', '.join(str(v) for v in sorted(installed))}")

    if config.solc_version and config.solc_version.lstrip('v') not in {str(v) for v in installed}:
        logger.warning(f"  Pinned solc {config.solc_version} not installed yet")

    return True


def check_contract_sources(config: DeployConfig) -> bool:
    """Check the contracts directory exists and holds sources"""
    logger.info("Checking contract sources...")

    root = Path(config.contracts_dir)
    if not root.is_dir():
        logger.error(f"  ✗ Contracts directory not found: {root}")
        return False

    sources = collect_sources(root.resolve())
    if not sources:
        logger.error(f"  ✗ No .sol files under {root}")
        return False

    for name in sources:
        logger.success(f"  ✓ {name}")

    # `source:Name` only looks in that source
    source_name, _, contract = config.contract_name.rpartition(':')
    if source_name:
        candidates = [sources[source_name]] if source_name in sources else []
    else:
        candidates = list(sources.values())

    declared = any(declares_contract(source['content'], contract) for source in candidates)
    if not declared:
        logger.error(f"  ✗ Contract {config.contract_name} is not declared in any source")
        return False

    logger.success(f"  ✓ Contract {config.contract_name} declared")
    return True


def main():
    """Run all system checks"""
    logger.info("=" * 70)
    logger.info("Devnet Deployer System Check")
    logger.info("=" * 70)

    try:
        config = DeployConfig.from_env()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    checks = [
        ("Devnet Binary", check_devnet_binary),
        ("Solidity Compiler", check_solc),
        ("Contract Sources", check_contract_sources),
    ]

    results = []

    for name, check_func in checks:
        logger.info("")
        results.append((name, check_func(config)))

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy: python main.py")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
