"""High level registry client holding status and transaction state for one owner."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Iterable, List, Optional, Tuple

from ..errors import NotRegisteredError
from ..models import (
    AgentMetadata,
    RegistrationStatus,
    TransactionResult,
    TransactionState,
)
from .networks import resolve_registry
from .reader import check_registration, get_agent_stake
from .tracker import TransactionTracker
from .writer import (
    add_agent_stake,
    deactivate_agent,
    reactivate_agent,
    register_agent,
    require_account,
    update_agent_capabilities,
    withdraw_agent_stake,
)

logger = logging.getLogger(__name__)

_Key = Tuple[str, Optional[str], Optional[str]]

# Distinguishes "argument not given" from an explicit None in ``update``.
_UNSET: Any = object()


class AgentRegistry:
    """
    Registry client keyed by ``(network, owner_address, registry_address)``.

    Exposes the last known ``status`` (None until the first check), the
    ``tx_state`` of the current write, and ``error``, the last fault seen
    while checking status.

    Write actions are plain methods: they validate preconditions and move the
    tracker to pending before returning, then hand back an ``asyncio.Task``
    that settles the transaction. They must be called from a running loop.

    Example:
        registry = AgentRegistry(public_client, wallet_client,
                                 network="arbitrum-sepolia", owner_address=owner)
        await registry.refresh()
        if not registry.status.is_registered:
            await registry.register(AgentMetadata("MyAgent", "0.1.0", ["text-generation"]))
    """

    def __init__(
        self,
        public_client: Any,
        wallet_client: Any = None,
        *,
        network: str,
        owner_address: Optional[str] = None,
        registry_address: Optional[str] = None,
    ):
        self.public_client = public_client
        self.wallet_client = wallet_client
        self.network = network
        self.owner_address = owner_address
        self.registry_address = registry_address

        self.tracker = TransactionTracker()
        self.status: Optional[RegistrationStatus] = None
        self.error: Optional[Exception] = None
        self._refreshes_in_flight = 0

    @property
    def tx_state(self) -> TransactionState:
        return self.tracker.state

    @property
    def is_loading(self) -> bool:
        return self._refreshes_in_flight > 0

    @property
    def agent_id(self) -> Optional[str]:
        if self.status is None or self.status.agent_info is None:
            return None
        return self.status.agent_info.agent_id

    def _key(self) -> _Key:
        return (self.network, self.owner_address, self.registry_address)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    async def refresh(self) -> Optional[RegistrationStatus]:
        """Re-read the owner's registration status from the chain."""
        if self.public_client is None or not self.owner_address:
            self.status = None
            return None

        key = self._key()
        self._refreshes_in_flight += 1
        self.error = None
        faults: List[Exception] = []
        try:
            status = await check_registration(
                self.public_client,
                self.network,
                self.owner_address,
                self.registry_address,
                on_fault=faults.append,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to check registration for %s: %s", self.owner_address, exc)
            if key == self._key():
                self.error = exc
                self.status = None
            return None
        finally:
            self._refreshes_in_flight -= 1

        if key != self._key():
            # Inputs changed while the read was in flight; that refresh owns the result.
            return self.status
        self.status = status
        if faults:
            self.error = faults[-1]
        return status

    async def update(
        self,
        *,
        network: Optional[str] = None,
        owner_address: Optional[str] = _UNSET,
        registry_address: Optional[str] = _UNSET,
    ) -> Optional[RegistrationStatus]:
        """
        Change identifying inputs; status is re-fetched when any of them changes.

        Omitted arguments keep their current value. ``registry_address=None``
        clears an override and ``owner_address=None`` forgets the owner.
        """
        new_key = (
            network if network is not None else self.network,
            self.owner_address if owner_address is _UNSET else owner_address,
            self.registry_address if registry_address is _UNSET else registry_address,
        )
        if new_key == self._key():
            return self.status
        self.network, self.owner_address, self.registry_address = new_key
        self.status = None
        return await self.refresh()

    def attach_signer(self, wallet_client: Any) -> None:
        self.wallet_client = wallet_client

    async def get_stake(self) -> int:
        """Read the current stake of this owner's agent straight from the chain."""
        agent_id = self._require_agent_id()
        return await get_agent_stake(self.public_client, self.network, agent_id, self.registry_address)

    # ------------------------------------------------------------------
    # Write actions
    # ------------------------------------------------------------------
    def register(
        self, metadata: AgentMetadata, stake_amount: Optional[int] = None
    ) -> "asyncio.Task[TransactionResult]":
        self._check_preconditions(require_agent=False)
        return self._start(
            register_agent(
                self.public_client, self.wallet_client, self.network,
                metadata, stake_amount, self.registry_address,
            )
        )

    def update_capabilities(self, capabilities: Iterable[str]) -> "asyncio.Task[TransactionResult]":
        agent_id = self._check_preconditions()
        return self._start(
            update_agent_capabilities(
                self.public_client, self.wallet_client, self.network,
                agent_id, list(capabilities), self.registry_address,
            )
        )

    def add_stake(self, amount: int) -> "asyncio.Task[TransactionResult]":
        agent_id = self._check_preconditions()
        return self._start(
            add_agent_stake(
                self.public_client, self.wallet_client, self.network,
                agent_id, amount, self.registry_address,
            )
        )

    def withdraw_stake(self, amount: int) -> "asyncio.Task[TransactionResult]":
        agent_id = self._check_preconditions()
        return self._start(
            withdraw_agent_stake(
                self.public_client, self.wallet_client, self.network,
                agent_id, amount, self.registry_address,
            )
        )

    def deactivate(self) -> "asyncio.Task[TransactionResult]":
        agent_id = self._check_preconditions()
        return self._start(
            deactivate_agent(
                self.public_client, self.wallet_client, self.network,
                agent_id, self.registry_address,
            )
        )

    def reactivate(self) -> "asyncio.Task[TransactionResult]":
        agent_id = self._check_preconditions()
        return self._start(
            reactivate_agent(
                self.public_client, self.wallet_client, self.network,
                agent_id, self.registry_address,
            )
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_agent_id(self) -> str:
        agent_id = self.agent_id
        if agent_id is None:
            raise NotRegisteredError()
        return agent_id

    def _check_preconditions(self, *, require_agent: bool = True) -> Optional[str]:
        """Validate a write before any state change or network call."""
        require_account(self.wallet_client)
        agent_id = self._require_agent_id() if require_agent else None
        resolve_registry(self.network, self.registry_address)
        return agent_id

    def _start(self, action: Coroutine[Any, Any, TransactionResult]) -> "asyncio.Task[TransactionResult]":
        """Move the tracker to pending and schedule ``action`` to settle it."""
        try:
            loop = asyncio.get_running_loop()
            self.tracker.begin()
        except BaseException:
            # The coroutine is never scheduled.
            action.close()
            raise
        return loop.create_task(self._settle(action))

    async def _settle(self, action: Coroutine[Any, Any, TransactionResult]) -> TransactionResult:
        try:
            result = await action
        except Exception as exc:
            self.tracker.fail(exc)
            await self.refresh()
            raise
        self.tracker.succeed(result.tx_hash)
        await self.refresh()
        return result
