"""
Contract Deployer
Signs and submits contract-creation transactions priced at the next base fee
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from web3 import Web3
from loguru import logger

from compiler.artifacts import ContractArtifact
from utils.exceptions import (
    ContractNotDeployedError,
    MissingAbiError,
    MissingBytecodeError,
    WalletNotBoundError,
)
from utils.gas_calculator import GasCalculator
from .client import ChainClient
from .transaction_builder import TransactionBuilder
from .wallet_manager import WalletManager


class DeploymentStage(Enum):
    """Linear deployment lifecycle; any failure ends the run"""

    UNINITIALIZED = "uninitialized"
    COMPILED = "compiled"
    ARTIFACT_RESOLVED = "artifact_resolved"
    SIGNED = "signed"
    SUBMITTED = "submitted"
    DEPLOYED = "deployed"


@dataclass(frozen=True)
class DeployedContract:
    """A contract committed on-chain"""

    name: str
    address: str
    transaction_hash: str
    block_number: int
    gas_used: int
    gas_price: int

    @property
    def cost_wei(self) -> int:
        return self.gas_used * self.gas_price


class ContractDeployer:
    """
    Deploys one artifact per call from a chain-bound wallet
    """

    def __init__(self, client: ChainClient, wallet: WalletManager,
                 gas_calculator: Optional[GasCalculator] = None):
        """
        Initialize Contract Deployer

        Args:
            client: Chain client
            wallet: Wallet bound to the client's chain id
            gas_calculator: Base fee source (defaults to one over client)
        """
        self.client = client
        self.wallet = wallet
        self.gas_calculator = gas_calculator or GasCalculator(client)
        self.tx_builder = TransactionBuilder(client.w3)
        self.stage = DeploymentStage.UNINITIALIZED

    def _advance(self, stage: DeploymentStage):
        logger.debug(f"Deployment stage: {self.stage.value} -> {stage.value}")
        self.stage = stage

    async def deploy(self, artifact: ContractArtifact,
                     constructor_args: Sequence[Any] = ()) -> DeployedContract:
        """
        Deploy a resolved contract artifact

        Args:
            artifact: Artifact with ABI and bytecode
            constructor_args: Constructor arguments

        Returns:
            DeployedContract with the on-chain address

        Raises:
            MissingAbiError / MissingBytecodeError: If the artifact is incomplete
            WalletNotBoundError: If the wallet has no chain id
            ChainQueryError: If the latest block or its base fee is unavailable
            ContractNotDeployedError: If the receipt carries no contract
        """
        self._advance(DeploymentStage.COMPILED)
        if artifact.abi is None:
            raise MissingAbiError(f"Missing abi from contract '{artifact.id}'")
        if not artifact.bytecode:
            raise MissingBytecodeError(f"Missing bytecode from contract '{artifact.id}'")
        self._advance(DeploymentStage.ARTIFACT_RESOLVED)

        chain_id = self.wallet.chain_id
        if chain_id is None:
            raise WalletNotBoundError(f"Wallet {self.wallet.address} is not bound to a chain id")

        gas_price = await self.gas_calculator.get_next_base_fee()
        nonce = await self.client.get_transaction_count(self.wallet.address)

        tx = await self.tx_builder.build_deployment_tx(
            artifact,
            sender=self.wallet.address,
            gas_price=gas_price,
            nonce=nonce,
            chain_id=chain_id,
            constructor_args=constructor_args,
        )

        signed_tx = self.wallet.sign_transaction(tx)
        self._advance(DeploymentStage.SIGNED)

        logger.info(
            f"Sending {artifact.name} deployment "
            f"(gas price {Web3.from_wei(gas_price, 'gwei')} gwei, gas {tx['gas']})..."
        )
        tx_hash = await self.client.send_raw_transaction(signed_tx.raw_transaction)
        self._advance(DeploymentStage.SUBMITTED)
        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")

        receipt = await self.client.wait_for_receipt(tx_hash)

        contract_address = receipt.get('contractAddress')
        if receipt.get('status') == 0 or not contract_address:
            raise ContractNotDeployedError(
                f"Contract {artifact.name} was not deployed (tx {Web3.to_hex(tx_hash)}, "
                f"status {receipt.get('status')})"
            )

        self._advance(DeploymentStage.DEPLOYED)
        return DeployedContract(
            name=artifact.name,
            address=Web3.to_checksum_address(contract_address),
            transaction_hash=Web3.to_hex(tx_hash),
            block_number=receipt['blockNumber'],
            gas_used=receipt['gasUsed'],
            gas_price=receipt.get('effectiveGasPrice', gas_price),
        )
