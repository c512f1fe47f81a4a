"""
Blockchain Interaction Package
Handles the chain connection, signing, transaction building and deployment
"""

from .client import ChainClient
from .deployer import ContractDeployer, DeployedContract, DeploymentStage
from .transaction_builder import TransactionBuilder
from .wallet_manager import WalletManager

__all__ = [
    'ChainClient',
    'ContractDeployer',
    'DeployedContract',
    'DeploymentStage',
    'TransactionBuilder',
    'WalletManager',
]
