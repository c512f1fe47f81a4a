"""
Gas Calculator
Prices deployment transactions at the next block's base fee
"""

from typing import Mapping, Optional
from web3 import Web3
from loguru import logger

from .exceptions import ChainQueryError

# EIP-1559 constants
ELASTICITY_MULTIPLIER = 2
BASE_FEE_MAX_CHANGE_DENOMINATOR = 8


def next_block_base_fee(block: Mapping) -> Optional[int]:
    """
    Derive the base fee of the block following ``block``

    Args:
        block: Block header with gasUsed, gasLimit and baseFeePerGas

    Returns:
        Expected base fee in wei, or None for pre-London blocks
    """
    base_fee = block.get('baseFeePerGas')
    if base_fee is None:
        return None

    base_fee = int(base_fee)
    gas_used = int(block['gasUsed'])
    gas_target = int(block['gasLimit']) // ELASTICITY_MULTIPLIER

    if gas_target == 0 or gas_used == gas_target:
        return base_fee

    if gas_used > gas_target:
        delta = base_fee * (gas_used - gas_target) // gas_target // BASE_FEE_MAX_CHANGE_DENOMINATOR
        return base_fee + max(delta, 1)

    delta = base_fee * (gas_target - gas_used) // gas_target // BASE_FEE_MAX_CHANGE_DENOMINATOR
    return base_fee - delta


class GasCalculator:
    """
    Fetches the chain head and derives the gas price for the next transaction
    """

    def __init__(self, client):
        """
        Initialize Gas Calculator

        Args:
            client: ChainClient used to fetch the latest block
        """
        self.client = client

    async def get_next_base_fee(self) -> int:
        """
        Get the next block's base fee, queried fresh from the chain head

        Returns:
            Base fee in wei

        Raises:
            ChainQueryError: If the latest block is unavailable or has no base fee
        """
        block = await self.client.latest_block()

        base_fee = next_block_base_fee(block)
        if base_fee is None:
            raise ChainQueryError("Failed to get the base fee for the next block")

        logger.debug(
            f"Next base fee after block {block.get('number')}: "
            f"{Web3.from_wei(base_fee, 'gwei')} gwei"
        )
        return base_fee
