"""Shared pytest fixtures for deployer tests."""

import json
from typing import Any, Dict

import pytest

from compiler.artifacts import CompiledProject

# Init code that deploys a 10-byte runtime returning 42 for any call
RETURN_42_BYTECODE = "0x600a600c600039600a6000f3602a60005260206000f3"
RETURN_42_RUNTIME = "0x602a60005260206000f3"

ANSWER_ABI = [
    {
        "inputs": [],
        "name": "answer",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]

OWNABLE_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "initialOwner", "type": "address"}],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "address", "name": "newOwner", "type": "address"}],
        "name": "transferOwnership",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"
HARDHAT_KEY_0 = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_ADDRESS_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def standard_output() -> Dict[str, Any]:
    """solc standard-JSON output for a small project"""
    return {
        "contracts": {
            "Answer.sol": {
                "Answer": {
                    "abi": ANSWER_ABI,
                    "evm": {
                        "bytecode": {"object": RETURN_42_BYTECODE[2:]},
                        "deployedBytecode": {"object": RETURN_42_RUNTIME[2:]},
                    },
                    "metadata": json.dumps({"compiler": {"version": "0.8.20+commit.a1b79de6"}}),
                }
            },
            "access/Ownable.sol": {
                "Ownable": {
                    "abi": OWNABLE_ABI,
                    "evm": {
                        "bytecode": {"object": "6080604052"},
                        "deployedBytecode": {"object": "6080604052"},
                    },
                    "metadata": "",
                },
                "IOwnable": {
                    "abi": [],
                    "evm": {
                        "bytecode": {"object": ""},
                        "deployedBytecode": {"object": ""},
                    },
                    "metadata": "",
                },
            },
        },
        "errors": [
            {
                "severity": "warning",
                "message": "SPDX license identifier not provided in source file.",
                "formattedMessage": "Warning: SPDX license identifier not provided in source file.",
            }
        ],
        "sources": {},
    }


@pytest.fixture
def compiled_project(standard_output: Dict[str, Any]) -> CompiledProject:
    return CompiledProject.from_standard_output(standard_output, solc_version="0.8.20")
