"""Client for ERC-8004 on-chain agent registries."""

from .constants import NETWORKS, SUPPORTED_NETWORKS, NetworkConfig
from .errors import (
    BusyError,
    ConfigurationError,
    DecodeAmbiguityError,
    InvalidSignatureError,
    NotConnectedError,
    NotRegisteredError,
    RegistryError,
    TransactionError,
)
from .models import (
    AgentMetadata,
    AgentRecord,
    RegistrationStatus,
    TransactionResult,
    TransactionState,
    TransactionStatus,
)
from .registry import AgentRegistry, TransactionTracker, check_registration, get_agent_stake
from .settings import RegistrySettings

__version__ = "0.1.0"

__all__ = [
    "AgentMetadata",
    "AgentRecord",
    "AgentRegistry",
    "BusyError",
    "ConfigurationError",
    "DecodeAmbiguityError",
    "InvalidSignatureError",
    "NETWORKS",
    "NetworkConfig",
    "NotConnectedError",
    "NotRegisteredError",
    "RegistrationStatus",
    "RegistryError",
    "RegistrySettings",
    "SUPPORTED_NETWORKS",
    "TransactionError",
    "TransactionResult",
    "TransactionState",
    "TransactionStatus",
    "TransactionTracker",
    "check_registration",
    "get_agent_stake",
]
