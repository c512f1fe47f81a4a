"""
Exceptions
Every failure in the compile -> resolve -> deploy flow is fatal
"""

from typing import List, Optional


class DeployerError(Exception):
    """Base exception for deployer errors"""
    pass


class ConfigError(DeployerError, ValueError):
    """Raised when an environment setting cannot be parsed"""
    pass


class PreconditionError(DeployerError, ValueError):
    """Raised when an input required by the flow is missing or malformed"""
    pass


class ProjectRootNotFoundError(PreconditionError, FileNotFoundError):
    """Raised when the contract source root does not exist"""
    pass


class ContractNotFoundError(PreconditionError):
    """Raised when no compiled contract matches the requested name"""
    pass


class AmbiguousContractError(PreconditionError):
    """Raised when a bare contract name matches several compiled contracts"""
    pass


class MissingAbiError(PreconditionError):
    """Raised when a compiled artifact has no ABI"""
    pass


class MissingBytecodeError(PreconditionError):
    """Raised when a compiled artifact has no deployable bytecode"""
    pass


class WalletNotBoundError(PreconditionError):
    """Raised when signing with a wallet that is not bound to the target chain"""
    pass


class CompilationError(DeployerError):
    """
    Raised when the Solidity compiler reports errors

    The full list of compiler messages is kept on ``errors``.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = message + ":\n" + "\n".join(self.errors)
        super().__init__(message)


class ChainQueryError(DeployerError, RuntimeError):
    """Raised when a chain query fails or returns nothing"""
    pass


class DevnetError(DeployerError, RuntimeError):
    """Raised when the local development chain cannot be started"""
    pass


class ContractNotDeployedError(DeployerError, RuntimeError):
    """Raised when a deployment receipt carries no contract"""
    pass
