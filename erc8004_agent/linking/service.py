"""Wallet-to-Telegram linking backed by EIP-191 personal signatures."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from sqlalchemy.orm import Session
from web3 import Web3

from ..database.models import LinkNonce, WalletLink
from ..errors import InvalidSignatureError

logger = logging.getLogger(__name__)


def build_link_message(telegram_id: str, nonce: str) -> str:
    """Message the wallet owner signs to prove control of the address."""
    return f"Link Telegram profile {telegram_id} with nonce {nonce}"


def verify_signature(address: str, message: str, signature: str) -> bool:
    """Return True if ``signature`` over ``message`` was produced by ``address``."""
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Signature recovery failed for %s: %s", address, exc)
        return False
    return recovered.lower() == address.lower()


def link_wallet(
    session: Session,
    telegram_id: str,
    address: str,
    signature: str,
    nonce: str,
) -> WalletLink:
    """
    Verify the link signature and store the Telegram-to-wallet binding.

    An existing link for the same Telegram id is replaced. Every nonce is
    single use per Telegram id, so an older signature cannot be replayed to
    restore an earlier wallet.

    Raises:
        InvalidSignatureError: If the signature does not match, or the nonce was already used.
    """
    message = build_link_message(telegram_id, nonce)
    if not verify_signature(address, message, signature):
        raise InvalidSignatureError("Invalid signature")

    wallet_address = Web3.to_checksum_address(address)
    if session.get(LinkNonce, (telegram_id, nonce)) is not None:
        raise InvalidSignatureError("Link nonce has already been used")

    link = session.get(WalletLink, telegram_id)
    if link is None:
        link = WalletLink(telegram_id=telegram_id)
        session.add(link)
    link.wallet_address = wallet_address
    link.nonce = nonce
    link.signature = signature
    link.updated_at = datetime.utcnow()
    session.add(LinkNonce(telegram_id=telegram_id, nonce=nonce, wallet_address=wallet_address))
    session.commit()
    session.refresh(link)

    logger.info("Linked Telegram profile %s to %s", telegram_id, wallet_address)
    return link


def get_linked_wallet(session: Session, telegram_id: str) -> Optional[str]:
    link = session.get(WalletLink, telegram_id)
    return link.wallet_address if link is not None else None
