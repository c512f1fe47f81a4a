"""
Wallet Manager
Holds the deployer account and signs transactions for one chain
"""

from typing import Dict, Optional

from eth_account import Account
from eth_account.datastructures import SignedTransaction
from eth_account.signers.local import LocalAccount
from loguru import logger

from utils.exceptions import WalletNotBoundError


class WalletManager:
    """
    Deployer wallet

    A wallet must be bound to a chain id (with_chain_id) before it can sign,
    so every signed transaction carries EIP-155 replay protection.
    """

    def __init__(self, account: LocalAccount, chain_id: Optional[int] = None):
        """
        Initialize wallet manager

        Args:
            account: Local signing account
            chain_id: Chain the wallet signs for (None = unbound)
        """
        self.account = account
        self.chain_id = chain_id

    @classmethod
    def from_private_key(cls, private_key: str) -> "WalletManager":
        return cls(Account.from_key(private_key))

    @property
    def address(self) -> str:
        return self.account.address

    def with_chain_id(self, chain_id: int) -> "WalletManager":
        """Return a copy of this wallet bound to chain_id"""
        logger.debug(f"Wallet {self.address} bound to chain {chain_id}")
        return WalletManager(self.account, chain_id=int(chain_id))

    def sign_transaction(self, transaction: Dict) -> SignedTransaction:
        """
        Sign a transaction with the wallet key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction

        Raises:
            WalletNotBoundError: If the wallet has no chain id or the tx targets another chain
        """
        if self.chain_id is None:
            raise WalletNotBoundError(f"Wallet {self.address} is not bound to a chain id")

        tx_chain_id = transaction.get('chainId')
        if tx_chain_id is not None and int(tx_chain_id) != self.chain_id:
            raise WalletNotBoundError(
                f"Transaction chain id {tx_chain_id} does not match wallet chain id {self.chain_id}"
            )

        tx = dict(transaction)
        tx['chainId'] = self.chain_id
        return self.account.sign_transaction(tx)
