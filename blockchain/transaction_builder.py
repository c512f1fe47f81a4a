"""
Transaction Builder
Constructs contract-creation transactions
"""

from typing import Any, Dict, Optional, Sequence
from web3 import AsyncWeb3, Web3
from loguru import logger

from compiler.artifacts import ContractArtifact


class TransactionBuilder:
    """
    Builds legacy (gasPrice) deployment transactions
    """

    def __init__(self, w3: AsyncWeb3):
        """
        Initialize Transaction Builder

        Args:
            w3: AsyncWeb3 instance
        """
        self.w3 = w3

    async def build_deployment_tx(
        self,
        artifact: ContractArtifact,
        sender: str,
        gas_price: int,
        nonce: int,
        chain_id: int,
        constructor_args: Sequence[Any] = (),
        gas: Optional[int] = None,
    ) -> Dict:
        """
        Build a contract-creation transaction

        Args:
            artifact: Resolved contract artifact (ABI + bytecode)
            sender: Deployer address
            gas_price: Gas price in wei
            nonce: Sender nonce
            chain_id: Target chain id
            constructor_args: Constructor arguments
            gas: Gas limit (None = estimated by the node)

        Returns:
            Transaction dict
        """
        contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        params: Dict[str, Any] = {
            'from': sender,
            'nonce': nonce,
            'gasPrice': gas_price,
            'chainId': chain_id,
            'value': 0,
        }
        if gas is not None:
            params['gas'] = gas

        tx = await contract.constructor(*constructor_args).build_transaction(params)

        logger.debug(
            f"Deployment tx for {artifact.name}: nonce={tx['nonce']} gas={tx['gas']} "
            f"gasPrice={Web3.from_wei(tx['gasPrice'], 'gwei')} gwei"
        )
        return tx
