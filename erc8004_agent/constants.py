"""Static network directory and registry defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .abi import REGISTRY_ABI

NULL_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class NetworkConfig:
    """Chain id, registry deployment and default RPC endpoint for one network."""

    name: str
    chain_id: int
    registry_address: str
    rpc_url: str
    abi: List[Dict[str, Any]] = field(default_factory=lambda: REGISTRY_ABI, repr=False)


NETWORKS: Dict[str, NetworkConfig] = {
    "arbitrum": NetworkConfig(
        name="arbitrum",
        chain_id=42161,
        # Registry not deployed on mainnet yet.
        registry_address=NULL_ADDRESS,
        rpc_url="https://arb1.arbitrum.io/rpc",
    ),
    "arbitrum-sepolia": NetworkConfig(
        name="arbitrum-sepolia",
        chain_id=421614,
        registry_address="0x517De4c9Afa737A46Dcba61e1548AB3807963094",
        rpc_url="https://sepolia-rollup.arbitrum.io/rpc",
    ),
}

SUPPORTED_NETWORKS = tuple(NETWORKS)
CHAIN_IDS: Dict[str, int] = {name: config.chain_id for name, config in NETWORKS.items()}
REGISTRY_CONTRACTS: Dict[str, str] = {
    name: config.registry_address for name, config in NETWORKS.items()
}

AGENT_CAPABILITIES = (
    "text-generation",
    "image-generation",
    "code-execution",
    "web-search",
    "data-analysis",
    "custom",
)
DEFAULT_CAPABILITIES = ("text-generation",)

OPENROUTER_MODELS = (
    "openai/gpt-4o",
    "openai/gpt-4o-mini",
    "anthropic/claude-3.5-sonnet",
    "anthropic/claude-3-haiku",
    "google/gemini-pro-1.5",
    "meta-llama/llama-3.1-70b-instruct",
)
DEFAULT_MODEL = "openai/gpt-4o"

# 0.01 ETH in wei
DEFAULT_STAKE_AMOUNT = 10_000_000_000_000_000
