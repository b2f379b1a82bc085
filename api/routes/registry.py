"""Read-only registry routes: registration status and stake lookups."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from web3 import Web3

from erc8004_agent.chain import PublicClient
from erc8004_agent.constants import NETWORKS
from erc8004_agent.registry import check_registration, get_agent_stake
from erc8004_agent.settings import RegistrySettings

router = APIRouter()

logger = logging.getLogger(__name__)

AGENT_ID_PATTERN = re.compile(r"^0x[a-fA-F0-9]{64}$")


class AgentInfoResponse(BaseModel):
    agentId: str
    owner: str
    name: str
    version: str
    capabilities: List[str]
    stake: str
    reputation: str
    isActive: bool
    registeredAt: int


class RegistrationResponse(BaseModel):
    network: str
    owner: str
    isRegistered: bool
    agentInfo: Optional[AgentInfoResponse] = None
    error: Optional[str] = None


class StakeResponse(BaseModel):
    network: str
    agentId: str
    stake: int


@lru_cache(maxsize=1)
def get_settings() -> RegistrySettings:
    return RegistrySettings()


def get_public_client() -> PublicClient:
    """Build the read client from ``ERC8004_*`` settings."""
    settings = get_settings()
    return PublicClient.from_rpc_url(
        settings.effective_rpc_url(), receipt_timeout=settings.receipt_timeout
    )


def _require_network(network: str) -> None:
    if network not in NETWORKS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unsupported network '{network}'",
        )


@router.get("/{network}/owners/{owner}", response_model=RegistrationResponse)
async def get_registration(
    network: str,
    owner: str,
    registry: Optional[str] = Query(default=None, description="Registry contract override"),
    client: Any = Depends(get_public_client),
) -> RegistrationResponse:
    """Return whether ``owner`` has an agent registered on ``network``."""
    _require_network(network)
    if not Web3.is_address(owner):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid owner address")
    if registry is not None and not Web3.is_address(registry):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid registry address")

    faults: List[Exception] = []
    result = await check_registration(client, network, owner, registry, on_fault=faults.append)

    payload: Dict[str, Any] = result.to_dict()
    return RegistrationResponse(
        network=network,
        owner=Web3.to_checksum_address(owner),
        isRegistered=payload["isRegistered"],
        agentInfo=payload.get("agentInfo"),
        error=str(faults[-1]) if faults else None,
    )


@router.get("/{network}/agents/{agent_id}/stake", response_model=StakeResponse)
async def get_stake(
    network: str,
    agent_id: str,
    registry: Optional[str] = Query(default=None, description="Registry contract override"),
    client: Any = Depends(get_public_client),
) -> StakeResponse:
    """Return the stake, in wei, held by ``agent_id``."""
    _require_network(network)
    if not AGENT_ID_PATTERN.match(agent_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="agent_id must be a 0x-prefixed 32-byte hex string",
        )
    if registry is not None and not Web3.is_address(registry):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid registry address")

    try:
        stake = await get_agent_stake(client, network, agent_id, registry)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Stake lookup failed for %s on %s: %s", agent_id, network, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to read stake from the registry",
        ) from exc

    return StakeResponse(network=network, agentId=agent_id.lower(), stake=stake)
