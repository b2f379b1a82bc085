"""Exception hierarchy for the agent registry client."""

from __future__ import annotations


class RegistryError(RuntimeError):
    """Base class for registry client failures."""


class ConfigurationError(RegistryError):
    """Raised when a registry address cannot be resolved or is not deployed."""


class NotConnectedError(RegistryError):
    """Raised when a write is attempted without a signer attached."""

    def __init__(self, message: str = "Wallet not connected"):
        super().__init__(message)


class NotRegisteredError(RegistryError):
    """Raised when an action needs an agent id the owner does not have yet."""

    def __init__(self, message: str = "Agent not registered"):
        super().__init__(message)


class DecodeAmbiguityError(RegistryError):
    """Raised internally when a contract return value has an unknown shape.

    The read path absorbs this and degrades to an unregistered status.
    """


class TransactionError(RegistryError):
    """Raised when submitting or confirming a transaction fails.

    The underlying transport fault is available as ``__cause__``.
    """

    def __init__(self, message: str, *, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class BusyError(RegistryError):
    """Raised when a write is started while another one is still pending."""

    def __init__(self, message: str = "Another registry transaction is still pending"):
        super().__init__(message)


class InvalidSignatureError(RegistryError):
    """Raised when a wallet link signature does not recover to the claimed address."""
