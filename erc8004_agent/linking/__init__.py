"""Wallet identity linking."""

from .service import build_link_message, get_linked_wallet, link_wallet, verify_signature

__all__ = [
    "build_link_message",
    "get_linked_wallet",
    "link_wallet",
    "verify_signature",
]
