"""Environment-driven configuration for the registry client."""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings

from .constants import NETWORKS
from .errors import ConfigurationError


class RegistrySettings(BaseSettings):
    """Registry configuration from environment."""

    network: str = "arbitrum-sepolia"
    rpc_url: Optional[str] = None
    registry_address: Optional[str] = None
    private_key: Optional[str] = None
    receipt_timeout: float = 180.0

    class Config:
        env_prefix = "ERC8004_"
        case_sensitive = False

    def effective_rpc_url(self) -> str:
        """Return the configured RPC URL, falling back to the network default."""
        if self.rpc_url:
            return self.rpc_url
        try:
            return NETWORKS[self.network].rpc_url
        except KeyError as exc:
            raise ConfigurationError(f"Unsupported network: {self.network}") from exc


class DatabaseSettings(BaseSettings):
    """Wallet link store configuration from environment."""

    database_url: Optional[str] = None
    database_echo: bool = False

    class Config:
        env_prefix = ""
        case_sensitive = False
