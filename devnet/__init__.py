"""
Devnet Package
Starts a local development chain with deterministic funded accounts
"""

from .accounts import derive_account, derive_keys
from .ganache import Devnet, DevnetProcess

__all__ = ['Devnet', 'DevnetProcess', 'derive_account', 'derive_keys']
