"""SQLAlchemy models for wallet identity links."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String

from .database import Base


class WalletLink(Base):
    """Binding between a Telegram profile and the wallet that signed for it."""

    __tablename__ = "wallet_links"

    telegram_id = Column(String, primary_key=True)
    wallet_address = Column(String, nullable=False, index=True)
    nonce = Column(String, nullable=False)
    signature = Column(String, nullable=False)
    linked_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class LinkNonce(Base):
    """Nonce consumed by a successful link for one Telegram profile."""

    __tablename__ = "link_nonces"

    telegram_id = Column(String, primary_key=True)
    nonce = Column(String, primary_key=True)
    wallet_address = Column(String, nullable=False)
    used_at = Column(DateTime, default=datetime.utcnow)
