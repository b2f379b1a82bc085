"""Read path: registration status and stake lookups."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from web3 import Web3

from ..abi import REGISTRY_ABI
from ..errors import DecodeAmbiguityError
from ..models import RegistrationStatus
from .decoding import decode_agent_record, decode_stake
from .networks import try_resolve_registry

logger = logging.getLogger(__name__)

FaultCallback = Callable[[Exception], None]


def _record_fault(on_fault: Optional[FaultCallback], exc: Exception) -> None:
    if on_fault is not None:
        on_fault(exc)


async def check_registration(
    public_client: Any,
    network: str,
    owner_address: str,
    registry_address: Optional[str] = None,
    *,
    on_fault: Optional[FaultCallback] = None,
) -> RegistrationStatus:
    """
    Check whether ``owner_address`` has an agent registered on ``network``.

    Decoding and transport faults are logged, passed to ``on_fault`` and
    reported as an unregistered status. Only programming errors (an unknown
    network or a malformed address) raise.

    Args:
        public_client: Chain client exposing ``read_contract``.
        network: Network name from the static directory.
        owner_address: Account that owns the agent.
        registry_address: Optional registry override.
        on_fault: Called with any absorbed fault.

    Returns:
        RegistrationStatus, with ``agent_info`` populated when registered.
    """
    owner = Web3.to_checksum_address(owner_address)
    registry = try_resolve_registry(network, registry_address)
    if registry is None:
        return RegistrationStatus.unregistered()

    try:
        is_registered = await public_client.read_contract(
            registry, REGISTRY_ABI, "isAgentRegistered", [owner]
        )
        if not is_registered:
            return RegistrationStatus.unregistered()

        agent_id = await public_client.read_contract(
            registry, REGISTRY_ABI, "getAgentByOwner", [owner]
        )
        agent_data = await public_client.read_contract(
            registry, REGISTRY_ABI, "getAgent", [agent_id]
        )
        logger.debug("Raw agent data for %s: %r", owner, agent_data)

        record = decode_agent_record(agent_id, agent_data)
    except DecodeAmbiguityError as exc:
        logger.warning("Could not decode agent record for %s on %s: %s", owner, network, exc)
        _record_fault(on_fault, exc)
        return RegistrationStatus.unregistered()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error checking registration for %s on %s: %s", owner, network, exc)
        _record_fault(on_fault, exc)
        return RegistrationStatus.unregistered()

    return RegistrationStatus.registered(record)


async def get_agent_stake(
    public_client: Any,
    network: str,
    agent_id: Any,
    registry_address: Optional[str] = None,
) -> int:
    """
    Return the stake held for ``agent_id``, in wei.

    Returns 0 when the registry is not deployed or the record cannot be
    decoded. Transport faults propagate to the caller.
    """
    registry = try_resolve_registry(network, registry_address)
    if registry is None:
        return 0

    agent_data = await public_client.read_contract(registry, REGISTRY_ABI, "getAgent", [agent_id])
    try:
        return decode_stake(agent_data)
    except DecodeAmbiguityError as exc:
        logger.warning("Could not decode stake for agent %s: %s", agent_id, exc)
        return 0
