"""Registry address resolution for the supported networks."""

from __future__ import annotations

from typing import Optional

from web3 import Web3

from ..constants import NETWORKS, NetworkConfig
from ..errors import ConfigurationError


def get_network(network: str) -> NetworkConfig:
    """Look up a network by name."""
    try:
        return NETWORKS[network]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unsupported network: {network!r} (expected one of {', '.join(NETWORKS)})"
        ) from exc


def is_null_address(address: str) -> bool:
    return int(address, 16) == 0


def try_resolve_registry(network: str, registry_override: Optional[str] = None) -> Optional[str]:
    """Resolve the registry address, returning None when it is not deployed."""
    address = Web3.to_checksum_address(registry_override or get_network(network).registry_address)
    if is_null_address(address):
        return None
    return address


def resolve_registry(network: str, registry_override: Optional[str] = None) -> str:
    """
    Resolve the registry contract address for a network.

    Args:
        network: Network name from ``NETWORKS``.
        registry_override: Explicit address used instead of the static one.

    Returns:
        Checksum address of the registry contract.

    Raises:
        ConfigurationError: If the network is unknown or the registry is not
            deployed there (the resolved address is the all-zero sentinel).
        ValueError: If the address is malformed.
    """
    address = try_resolve_registry(network, registry_override)
    if address is None:
        raise ConfigurationError(f"Registry contract not deployed on {network}")
    return address
