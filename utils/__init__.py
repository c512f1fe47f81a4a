"""
Utilities Package
Configuration, gas pricing, console output and error types
"""

from .config import DeployConfig
from .gas_calculator import GasCalculator, next_block_base_fee

__all__ = [
    'DeployConfig',
    'GasCalculator',
    'next_block_base_fee',
]
