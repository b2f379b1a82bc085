"""Write path: one coroutine per mutating registry action."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from hexbytes import HexBytes

from ..abi import AGENT_REGISTERED_TOPIC, REGISTRY_ABI
from ..errors import NotConnectedError, TransactionError
from ..models import AgentMetadata, TransactionReceipt, TransactionResult, to_hex
from .networks import resolve_registry

logger = logging.getLogger(__name__)


def require_account(wallet_client: Any) -> Any:
    """Return the wallet's account, raising ``NotConnectedError`` if none is attached."""
    account = getattr(wallet_client, "account", None) if wallet_client is not None else None
    if account is None:
        raise NotConnectedError()
    return account


def extract_agent_id(receipt: TransactionReceipt, topic: HexBytes = AGENT_REGISTERED_TOPIC) -> Optional[str]:
    """
    Find the agent id emitted by ``AgentRegistered`` in a receipt.

    The first topic of each log is compared in full against the event's keccak
    signature; the agent id is the first indexed argument (second topic).

    Returns:
        The agent id as a 0x-prefixed hex string, or None if no log matches.
    """
    expected = HexBytes(topic)
    for log in receipt.logs:
        if len(log.topics) < 2:
            continue
        if HexBytes(log.topics[0]) == expected:
            return to_hex(log.topics[1])
    return None


async def _submit(
    public_client: Any,
    wallet_client: Any,
    registry: str,
    function_name: str,
    args: Sequence[Any],
    *,
    value: int = 0,
) -> TransactionReceipt:
    """Send a registry call and wait for it to be mined."""
    tx_hash: Optional[str] = None
    try:
        tx_hash = await wallet_client.write_contract(
            registry, REGISTRY_ABI, function_name, list(args), value=value
        )
        receipt: TransactionReceipt = await public_client.wait_for_transaction_receipt(tx_hash)
    except Exception as exc:  # noqa: BLE001
        raise TransactionError(f"{function_name} transaction failed: {exc}", tx_hash=tx_hash) from exc

    if not receipt.succeeded:
        raise TransactionError(
            f"{function_name} transaction reverted (gas used {receipt.gas_used})",
            tx_hash=receipt.tx_hash,
        )
    logger.info("%s confirmed in block %s: %s", function_name, receipt.block_number, receipt.tx_hash)
    return receipt


async def register_agent(
    public_client: Any,
    wallet_client: Any,
    network: str,
    metadata: AgentMetadata,
    stake_amount: Optional[int] = None,
    registry_address: Optional[str] = None,
) -> TransactionResult:
    """
    Register a new agent, optionally staking ``stake_amount`` wei.

    ``agent_id`` is taken from the ``AgentRegistered`` log. If the receipt has
    no such log the result carries ``agent_id=None``; callers should re-read
    the status to learn the id.
    """
    require_account(wallet_client)
    registry = resolve_registry(network, registry_address)

    receipt = await _submit(
        public_client,
        wallet_client,
        registry,
        "registerAgent",
        [metadata.name, metadata.version, list(metadata.capabilities)],
        value=stake_amount or 0,
    )
    agent_id = extract_agent_id(receipt)
    if agent_id is None:
        logger.warning("No AgentRegistered log in %s; agent id unknown until next read", receipt.tx_hash)
    return TransactionResult(tx_hash=receipt.tx_hash, agent_id=agent_id)


async def _agent_action(
    public_client: Any,
    wallet_client: Any,
    network: str,
    registry_address: Optional[str],
    function_name: str,
    args: Sequence[Any],
    *,
    value: int = 0,
) -> TransactionResult:
    require_account(wallet_client)
    registry = resolve_registry(network, registry_address)
    receipt = await _submit(public_client, wallet_client, registry, function_name, args, value=value)
    return TransactionResult(tx_hash=receipt.tx_hash)


async def update_agent_capabilities(
    public_client: Any,
    wallet_client: Any,
    network: str,
    agent_id: str,
    capabilities: Iterable[str],
    registry_address: Optional[str] = None,
) -> TransactionResult:
    """Replace the agent's capability list."""
    capability_list: List[str] = list(capabilities)
    return await _agent_action(
        public_client, wallet_client, network, registry_address,
        "updateCapabilities", [agent_id, capability_list],
    )


async def add_agent_stake(
    public_client: Any,
    wallet_client: Any,
    network: str,
    agent_id: str,
    amount: int,
    registry_address: Optional[str] = None,
) -> TransactionResult:
    """Send ``amount`` wei to the registry as additional stake."""
    return await _agent_action(
        public_client, wallet_client, network, registry_address,
        "stake", [agent_id], value=amount,
    )


async def withdraw_agent_stake(
    public_client: Any,
    wallet_client: Any,
    network: str,
    agent_id: str,
    amount: int,
    registry_address: Optional[str] = None,
) -> TransactionResult:
    """Withdraw ``amount`` wei of stake back to the owner."""
    return await _agent_action(
        public_client, wallet_client, network, registry_address,
        "withdraw", [agent_id, amount],
    )


async def deactivate_agent(
    public_client: Any,
    wallet_client: Any,
    network: str,
    agent_id: str,
    registry_address: Optional[str] = None,
) -> TransactionResult:
    return await _agent_action(
        public_client, wallet_client, network, registry_address,
        "deactivateAgent", [agent_id],
    )


async def reactivate_agent(
    public_client: Any,
    wallet_client: Any,
    network: str,
    agent_id: str,
    registry_address: Optional[str] = None,
) -> TransactionResult:
    return await _agent_action(
        public_client, wallet_client, network, registry_address,
        "reactivateAgent", [agent_id],
    )
