"""
Devnet Deployer - Main Entry Point
Starts a local chain, compiles the contracts and deploys one of them
"""

import asyncio
import sys
from typing import Optional

from web3 import Web3
from loguru import logger

from blockchain import ChainClient, ContractDeployer, DeployedContract, WalletManager
from compiler import compile_project, resolve_artifact
from devnet import Devnet
from utils.config import DeployConfig
from utils.console import print_project
from utils.exceptions import DeployerError


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Replace loguru's default sink with the deployer's format"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level
    )
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


async def run(config: DeployConfig) -> DeployedContract:
    """
    Compile, resolve and deploy config.contract_name on a fresh devnet

    Args:
        config: Run configuration

    Returns:
        The deployed contract
    """
    devnet = Devnet(
        binary=config.devnet_binary,
        mnemonic=config.mnemonic,
        port=config.devnet_port,
        accounts=config.devnet_accounts,
        startup_timeout=config.devnet_startup_timeout,
    )

    with devnet.spawn() as node:
        logger.info(f"HTTP Endpoint: {node.endpoint}")

        wallet = WalletManager.from_private_key(node.keys[0])
        logger.info(f"Wallet first address: {wallet.address}")

        client = await ChainClient.connect(
            node.endpoint,
            poll_interval=config.rpc_poll_interval,
            receipt_timeout=config.receipt_timeout,
        )
        try:
            chain_id = await client.chain_id()
            logger.info(f"Devnet started with chain_id: {chain_id}")

            project = compile_project(
                config.contracts_dir,
                solc_version=config.solc_version,
                optimize=config.solc_optimize,
                evm_version=config.evm_version,
            )
            print_project(project)

            balance = await client.get_balance(wallet.address)
            logger.info(f"Wallet first address {wallet.address} balance: {Web3.from_wei(balance, 'ether')} ETH")

            artifact = resolve_artifact(project, config.contract_name)

            deployer = ContractDeployer(client, wallet.with_chain_id(chain_id))
            deployed = await deployer.deploy(artifact)

            logger.success(f"{deployed.name} contract address {deployed.address}")
            logger.info(f"Gas used: {deployed.gas_used} ({Web3.from_wei(deployed.cost_wei, 'ether')} ETH)")

            balance = await client.get_balance(wallet.address)
            logger.info(f"Wallet first address {wallet.address} balance: {Web3.from_wei(balance, 'ether')} ETH")

            return deployed
        finally:
            await client.close()


def main() -> int:
    """Main entry point"""
    try:
        config = DeployConfig.from_env()
    except DeployerError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(config.log_level, config.log_file)

    try:
        asyncio.run(run(config))
    except DeployerError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.opt(exception=e).error(f"Fatal error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
