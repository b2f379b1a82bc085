"""Telegram profile to wallet linking routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from web3 import Web3

from erc8004_agent.database import get_db
from erc8004_agent.errors import InvalidSignatureError
from erc8004_agent.linking import get_linked_wallet, link_wallet

router = APIRouter()

logger = logging.getLogger(__name__)


class LinkRequest(BaseModel):
    telegramId: str = Field(..., min_length=1)
    address: str
    signature: str = Field(..., min_length=1)
    nonce: str = Field(..., min_length=1)


class LinkResponse(BaseModel):
    success: bool
    address: str


class LinkedWalletResponse(BaseModel):
    telegramId: str
    address: str


@router.post("/link", response_model=LinkResponse)
def link_telegram_profile(request: LinkRequest, db: Session = Depends(get_db)) -> LinkResponse:
    """Bind a Telegram profile to the wallet that signed the link message."""
    if not Web3.is_address(request.address):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid wallet address")

    try:
        link = link_wallet(db, request.telegramId, request.address, request.signature, request.nonce)
    except InvalidSignatureError as exc:
        logger.info("Rejected link for Telegram profile %s: %s", request.telegramId, exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    return LinkResponse(success=True, address=link.wallet_address)


@router.get("/{telegram_id}", response_model=LinkedWalletResponse)
def get_telegram_link(telegram_id: str, db: Session = Depends(get_db)) -> LinkedWalletResponse:
    address = get_linked_wallet(db, telegram_id)
    if address is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No wallet linked")
    return LinkedWalletResponse(telegramId=telegram_id, address=address)
