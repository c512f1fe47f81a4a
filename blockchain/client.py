"""
Chain Client
Thin async JSON-RPC handle on the running chain
"""

from typing import Any, Optional

from web3 import AsyncWeb3, Web3
from web3.exceptions import Web3Exception
from web3.types import BlockData, TxReceipt
from loguru import logger

from utils.exceptions import ChainQueryError


class ChainClient:
    """
    Wraps an AsyncWeb3 instance

    Queries raise ChainQueryError with a fixed description of what failed.
    Transaction submission errors come back from the node untouched.
    """

    def __init__(self, w3: AsyncWeb3, endpoint: Optional[str] = None,
                 poll_interval: float = 0.01, receipt_timeout: float = 120.0):
        """
        Initialize Chain Client

        Args:
            w3: AsyncWeb3 instance
            endpoint: RPC endpoint URL (informational)
            poll_interval: Seconds between receipt polls
            receipt_timeout: Seconds to wait for a receipt
        """
        self.w3 = w3
        self.endpoint = endpoint
        self.poll_interval = poll_interval
        self.receipt_timeout = receipt_timeout
        self._chain_id: Optional[int] = None

    @classmethod
    async def connect(cls, endpoint: str, **kwargs) -> "ChainClient":
        """
        Connect to an HTTP JSON-RPC endpoint

        Raises:
            ChainQueryError: If the endpoint does not answer
        """
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(endpoint))

        if not await w3.is_connected():
            raise ChainQueryError(f"Failed to connect to {endpoint}")

        logger.debug(f"Connected to {endpoint}")
        return cls(w3, endpoint=endpoint, **kwargs)

    async def close(self):
        """Release the provider's HTTP session"""
        await self.w3.provider.disconnect()
        logger.debug(f"Disconnected from {self.endpoint}")

    async def chain_id(self) -> int:
        if self._chain_id is None:
            try:
                self._chain_id = int(await self.w3.eth.chain_id)
            except (Web3Exception, ValueError, OSError) as e:
                raise ChainQueryError("Failed to get chain id") from e
        return self._chain_id

    async def get_balance(self, address: str) -> int:
        try:
            return int(await self.w3.eth.get_balance(address))
        except (Web3Exception, ValueError, OSError) as e:
            raise ChainQueryError(f"Failed to get balance of {address}") from e

    async def get_transaction_count(self, address: str) -> int:
        try:
            return int(await self.w3.eth.get_transaction_count(address))
        except (Web3Exception, ValueError, OSError) as e:
            raise ChainQueryError(f"Failed to get nonce of {address}") from e

    async def latest_block(self) -> BlockData:
        """
        Fetch the chain head

        Raises:
            ChainQueryError: If the block cannot be fetched
        """
        try:
            block = await self.w3.eth.get_block('latest')
        except (Web3Exception, ValueError, OSError) as e:
            raise ChainQueryError("Failed to get block") from e

        if not block:
            raise ChainQueryError("Failed to get block")
        return block

    async def send_raw_transaction(self, raw_transaction: Any) -> bytes:
        # Node rejections (funds, nonce, fee) propagate as-is
        return await self.w3.eth.send_raw_transaction(raw_transaction)

    async def wait_for_receipt(self, tx_hash: bytes) -> TxReceipt:
        try:
            return await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout, poll_latency=self.poll_interval
            )
        except (Web3Exception, ValueError, OSError) as e:
            raise ChainQueryError(f"Failed to get receipt for {Web3.to_hex(tx_hash)}") from e
