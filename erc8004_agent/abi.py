"""ERC-8004 agent registry ABI and event topic helpers."""

from __future__ import annotations

from typing import Any, Dict, List

from hexbytes import HexBytes
from web3 import Web3

_AGENT_ID = {"internalType": "bytes32", "name": "agentId", "type": "bytes32"}

REGISTRY_ABI: List[Dict[str, Any]] = [
    # -------- READ FUNCTIONS --------
    {
        "inputs": [{"internalType": "address", "name": "owner", "type": "address"}],
        "name": "isAgentRegistered",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "address", "name": "owner", "type": "address"}],
        "name": "getAgentByOwner",
        "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [_AGENT_ID],
        "name": "getAgent",
        "outputs": [
            {
                "components": [
                    {"internalType": "address", "name": "owner", "type": "address"},
                    {"internalType": "string", "name": "name", "type": "string"},
                    {"internalType": "string", "name": "version", "type": "string"},
                    {"internalType": "string[]", "name": "capabilities", "type": "string[]"},
                    {"internalType": "uint256", "name": "stake", "type": "uint256"},
                    {"internalType": "uint256", "name": "reputation", "type": "uint256"},
                    {"internalType": "bool", "name": "isActive", "type": "bool"},
                    {"internalType": "uint256", "name": "registeredAt", "type": "uint256"},
                ],
                "internalType": "struct AgentRegistry.Agent",
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    # -------- WRITE FUNCTIONS --------
    {
        "inputs": [
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "string", "name": "version", "type": "string"},
            {"internalType": "string[]", "name": "capabilities", "type": "string[]"},
        ],
        "name": "registerAgent",
        "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            _AGENT_ID,
            {"internalType": "string[]", "name": "capabilities", "type": "string[]"},
        ],
        "name": "updateCapabilities",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_AGENT_ID],
        "name": "stake",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            _AGENT_ID,
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "withdraw",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_AGENT_ID],
        "name": "deactivateAgent",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_AGENT_ID],
        "name": "reactivateAgent",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    # -------- EVENTS --------
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"},
            {"indexed": True, "internalType": "address", "name": "owner", "type": "address"},
            {"indexed": False, "internalType": "string", "name": "name", "type": "string"},
        ],
        "name": "AgentRegistered",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"},
            {"indexed": False, "internalType": "string[]", "name": "capabilities", "type": "string[]"},
        ],
        "name": "CapabilitiesUpdated",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"},
            {"indexed": False, "internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "StakeAdded",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"},
            {"indexed": False, "internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "StakeWithdrawn",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [{"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"}],
        "name": "AgentDeactivated",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [{"indexed": True, "internalType": "bytes32", "name": "agentId", "type": "bytes32"}],
        "name": "AgentReactivated",
        "type": "event",
    },
]


def _canonical_type(param: Dict[str, Any]) -> str:
    """Render an ABI parameter type, expanding tuple components."""
    param_type = param["type"]
    if param_type.startswith("tuple"):
        inner = ",".join(_canonical_type(component) for component in param["components"])
        return f"({inner}){param_type[len('tuple'):]}"
    return param_type


def event_signature(name: str, abi: List[Dict[str, Any]] = REGISTRY_ABI) -> str:
    """
    Build the canonical declaration of an event, e.g. ``AgentRegistered(bytes32,address,string)``.

    Raises:
        KeyError: If the ABI declares no event with that name.
    """
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == name:
            types = ",".join(_canonical_type(param) for param in entry.get("inputs", []))
            return f"{name}({types})"
    raise KeyError(f"Event {name!r} not found in ABI")


def event_topic(name: str, abi: List[Dict[str, Any]] = REGISTRY_ABI) -> HexBytes:
    """Return the 32-byte keccak topic that identifies an event in receipt logs."""
    return HexBytes(Web3.keccak(text=event_signature(name, abi)))


AGENT_REGISTERED_TOPIC = event_topic("AgentRegistered")
