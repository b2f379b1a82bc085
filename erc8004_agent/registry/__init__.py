"""Registry helpers for on-chain agent management."""

from .decoding import RecordShape, decode_agent_record, tag_record
from .facade import AgentRegistry
from .networks import get_network, resolve_registry, try_resolve_registry
from .reader import check_registration, get_agent_stake
from .tracker import TransactionTracker
from .writer import (
    add_agent_stake,
    deactivate_agent,
    extract_agent_id,
    reactivate_agent,
    register_agent,
    update_agent_capabilities,
    withdraw_agent_stake,
)

__all__ = [
    "AgentRegistry",
    "RecordShape",
    "TransactionTracker",
    "add_agent_stake",
    "check_registration",
    "deactivate_agent",
    "decode_agent_record",
    "extract_agent_id",
    "get_agent_stake",
    "get_network",
    "reactivate_agent",
    "register_agent",
    "resolve_registry",
    "tag_record",
    "try_resolve_registry",
    "update_agent_capabilities",
    "withdraw_agent_stake",
]
