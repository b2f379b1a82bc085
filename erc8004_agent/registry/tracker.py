"""Single-slot transaction lifecycle tracker."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..errors import BusyError
from ..models import TransactionState, TransactionStatus

logger = logging.getLogger(__name__)

StateListener = Callable[[TransactionState], None]


class TransactionTracker:
    """
    Holds the state of the current registry action: idle, pending, success or error.

    ``begin`` only runs from a non-pending state; ``succeed`` and ``fail`` only
    from pending. Starting a new action while one is pending raises
    ``BusyError`` and leaves the state untouched.
    """

    def __init__(self) -> None:
        self._state = TransactionState.idle()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state.status is TransactionStatus.PENDING

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called after every transition; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin(self, tx_hash: Optional[str] = None) -> None:
        if self.is_pending:
            raise BusyError()
        self._set(TransactionState.pending(tx_hash))

    def succeed(self, tx_hash: str) -> None:
        self._require_pending("success")
        self._set(TransactionState.success(tx_hash))

    def fail(self, error: BaseException) -> None:
        self._require_pending("error")
        self._set(TransactionState.failed(error))

    def _require_pending(self, target: str) -> None:
        if not self.is_pending:
            raise RuntimeError(f"Cannot move from {self._state.status.value} to {target}")

    def _set(self, state: TransactionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:  # noqa: BLE001
                logger.exception("Transaction state listener failed")
