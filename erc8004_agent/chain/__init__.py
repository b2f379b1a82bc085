"""Chain client boundary over web3.py."""

from .client import DEFAULT_RECEIPT_TIMEOUT, PublicClient, WalletClient

__all__ = [
    "DEFAULT_RECEIPT_TIMEOUT",
    "PublicClient",
    "WalletClient",
]
