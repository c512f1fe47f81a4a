"""
Deployer Configuration
Reads settings from the environment (and .env when present)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigError

DEFAULT_MNEMONIC = "gas monster ski craft below illegal discover limit dog bundle bus artefact"

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off', ''}


@dataclass(frozen=True)
class DeployConfig:
    """Settings for one devnet deployment run"""

    devnet_binary: str = "ganache"
    mnemonic: str = DEFAULT_MNEMONIC
    devnet_port: Optional[int] = None
    devnet_accounts: int = 10
    devnet_startup_timeout: float = 10.0

    contracts_dir: str = "contracts"
    contract_name: str = "SimpleStorage"
    solc_version: Optional[str] = None
    solc_optimize: bool = False
    evm_version: Optional[str] = None

    rpc_poll_interval: float = 0.01
    receipt_timeout: float = 120.0

    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeployConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ after loading .env)

        Returns:
            DeployConfig instance

        Raises:
            ConfigError: If a numeric or boolean value is malformed
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        defaults = cls()

        return cls(
            devnet_binary=environ.get('DEVNET_BINARY') or defaults.devnet_binary,
            mnemonic=environ.get('DEVNET_MNEMONIC') or defaults.mnemonic,
            devnet_port=_get_int(environ, 'DEVNET_PORT', None),
            devnet_accounts=_get_int(environ, 'DEVNET_ACCOUNTS', defaults.devnet_accounts),
            devnet_startup_timeout=_get_float(
                environ, 'DEVNET_STARTUP_TIMEOUT', defaults.devnet_startup_timeout
            ),
            contracts_dir=environ.get('CONTRACTS_DIR') or defaults.contracts_dir,
            contract_name=environ.get('CONTRACT_NAME') or defaults.contract_name,
            solc_version=environ.get('SOLC_VERSION') or None,
            solc_optimize=_get_bool(environ, 'SOLC_OPTIMIZE', defaults.solc_optimize),
            evm_version=environ.get('EVM_VERSION') or None,
            rpc_poll_interval=_get_float(environ, 'RPC_POLL_INTERVAL', defaults.rpc_poll_interval),
            receipt_timeout=_get_float(environ, 'RECEIPT_TIMEOUT', defaults.receipt_timeout),
            log_level=(environ.get('LOG_LEVEL') or defaults.log_level).upper(),
            log_file=environ.get('LOG_FILE') or None,
        )


def _get_int(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def _get_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _get_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")
